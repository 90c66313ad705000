"""Roster configuration: the team's positions and favorite champions."""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator

from draft_compass.exceptions import InvalidRosterConfig
from draft_compass.utils.role_normalizer import CANONICAL_ROLES

ChampionName = Annotated[str, StringConstraints(max_length=100)]


class RoleRoster(BaseModel):
    """Favorites pool for one position."""

    favorites: list[ChampionName] = Field(max_length=200)
    player: Optional[str] = Field(default=None, max_length=100)


class RosterConfig(BaseModel):
    """Persisted roster settings.

    Payloads use the camelCase keys written by the settings screen
    (``myRole``, ``gameMode``); snake_case names are accepted too.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    my_role: str = Field(default="", alias="myRole", max_length=50)
    game_mode: str = Field(default="solo", alias="gameMode", max_length=50)
    roster: dict[str, RoleRoster]

    @field_validator("roster")
    @classmethod
    def _known_positions_only(cls, roster: dict[str, RoleRoster]) -> dict[str, RoleRoster]:
        unknown = sorted(set(roster) - CANONICAL_ROLES)
        if unknown:
            raise ValueError(f"Unknown roster positions: {', '.join(unknown)}")
        return roster

    @classmethod
    def from_payload(cls, payload) -> "RosterConfig":
        """Validate a raw payload, raising InvalidRosterConfig when malformed."""
        if not isinstance(payload, dict):
            raise InvalidRosterConfig("Roster payload must be an object")
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidRosterConfig(str(e)) from e

    @property
    def is_flex_mode(self) -> bool:
        return self.game_mode == "flex"

    def favorites_for(self, role: Optional[str]) -> list[str]:
        if not role or role not in self.roster:
            return []
        return list(self.roster[role].favorites)
