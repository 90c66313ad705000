"""Exceptions raised at the configuration and session boundaries.

The scoring core never raises for missing data; these are only used where
a payload coming from outside the engine is malformed.
"""


class DraftCompassError(Exception):
    """Base class for draft_compass errors."""


class InvalidRosterConfig(DraftCompassError):
    """Roster configuration payload failed validation."""


class DraftSessionError(DraftCompassError):
    """A champ-select session update could not be processed."""
