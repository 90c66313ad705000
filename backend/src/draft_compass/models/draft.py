"""Draft context and session update models."""

from dataclasses import dataclass, field
from typing import Optional, Union

from draft_compass.models.composition import Archetype, CompositionAnalysis
from draft_compass.models.recommendations import RecommendationResult
from draft_compass.models.roster import RosterConfig

# Champions arrive either as numeric ids (live client) or names
ChampionRef = Union[int, str]


@dataclass
class AllySlot:
    """One ally player slot in champion select."""

    role: str  # As reported by the client, e.g. "TOP", "utility"
    champion_id: int = 0  # 0 while the player has not picked
    cell_id: Optional[int] = None
    summoner_name: str = ""
    is_local_player: bool = False

    @property
    def has_picked(self) -> bool:
        return self.champion_id > 0


@dataclass
class DraftContext:
    """Everything the scorer needs for one session update."""

    role: Optional[str] = None
    ally_picks: list[ChampionRef] = field(default_factory=list)
    enemy_picks: list[ChampionRef] = field(default_factory=list)
    banned: list[ChampionRef] = field(default_factory=list)
    target_archetype: Optional[str] = None  # Archetype key or display name
    target_archetype_def: Optional[Archetype] = None  # Custom archetype with typical_comp
    roster_config: Optional[RosterConfig] = None
    allies: list[AllySlot] = field(default_factory=list)
    queue: Optional[str] = None


@dataclass
class DraftUpdate:
    """State pushed to the UI after a session update."""

    phase: str
    local_player: dict
    allies: list[dict]
    enemies: list[dict]
    bans: list[int]
    recommendations: list[RecommendationResult] = field(default_factory=list)
    composition_analysis: Optional[CompositionAnalysis] = None
