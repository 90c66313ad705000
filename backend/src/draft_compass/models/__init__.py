"""Data models for the draft assistant."""

from draft_compass.models.champion import Champion, CounterSynergyRecord
from draft_compass.models.stats import NEUTRAL_WIN_RATE, WinRateEntry
from draft_compass.models.composition import (
    Archetype,
    CompositionAnalysis,
    CompositionRole,
    SubstitutionSuggestion,
    TeamComposition,
)
from draft_compass.models.recommendations import (
    OpPick,
    RecommendationResponse,
    RecommendationResult,
)
from draft_compass.models.roster import RoleRoster, RosterConfig
from draft_compass.models.draft import AllySlot, DraftContext, DraftUpdate

__all__ = [
    "Champion",
    "CounterSynergyRecord",
    "NEUTRAL_WIN_RATE",
    "WinRateEntry",
    "Archetype",
    "CompositionAnalysis",
    "CompositionRole",
    "SubstitutionSuggestion",
    "TeamComposition",
    "OpPick",
    "RecommendationResponse",
    "RecommendationResult",
    "RoleRoster",
    "RosterConfig",
    "AllySlot",
    "DraftContext",
    "DraftUpdate",
]
