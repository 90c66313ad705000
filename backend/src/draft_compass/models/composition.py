"""Team composition models: roles, archetypes and analysis results."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional


class CompositionRole(str, Enum):
    """Tactical function a champion brings to a composition."""

    ENGAGE = "engage"
    FRONTLINE = "frontline"
    DIVE = "dive"
    BRUISER = "bruiser"
    POKE = "poke"
    TEAMFIGHT = "teamfight"
    PICK = "pick"
    HYPERCARRY = "hypercarry"
    DPS = "dps"
    PROTECT = "protect"
    ANTI_ENGAGE = "anti-engage"

    def __str__(self) -> str:
        return self.value


FLEX_MARKER = "*"


@dataclass(frozen=True)
class Archetype:
    """A named composition pattern.

    Built-in archetypes are detected automatically; custom ones are
    user-defined and may describe a planned lineup in ``typical_comp``
    (role -> champion name, a trailing ``*`` marks a flex pick).
    """

    key: str
    name: str
    icon: str = ""
    desc: str = ""
    required_roles: frozenset[CompositionRole] = frozenset()
    bonus_roles: frozenset[CompositionRole] = frozenset()
    typical_comp: dict[str, str] = field(default_factory=dict)
    custom: bool = False

    def planned_pick(self, role: Optional[str]) -> tuple[Optional[str], bool]:
        """Return (champion name, is_flex) planned for a role."""
        if not role:
            return None, False
        planned = (self.typical_comp.get(role) or "").strip()
        if not planned:
            return None, False
        if planned.endswith(FLEX_MARKER):
            return planned[: -len(FLEX_MARKER)].strip(), True
        return planned, False


@dataclass
class TeamComposition:
    """Detector output for a set of champions."""

    archetype: str  # Archetype key, "unknown" or "mixed"
    name: str
    icon: str
    desc: str
    confidence: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SubstitutionSuggestion:
    """Proposed replacement for an under-performing team member."""

    role: str
    out: str
    in_: str
    diff: float  # Win-rate improvement in percentage points

    def to_dict(self) -> dict:
        return {"role": self.role, "out": self.out, "in": self.in_, "diff": self.diff}


@dataclass
class CompositionAnalysis:
    """Composition classification for a (partial) team."""

    archetype: str
    name: str
    icon: str
    desc: str
    confidence: int
    tier: str
    champion_count: int = 0
    meta_score: Optional[int] = None
    avg_win_rate: Optional[float] = None
    is_out_of_meta: bool = False
    suggestions: list[SubstitutionSuggestion] = field(default_factory=list)

    @classmethod
    def from_composition(
        cls, composition: TeamComposition, tier: str, champion_count: int, **extra
    ) -> "CompositionAnalysis":
        return cls(
            archetype=composition.archetype,
            name=composition.name,
            icon=composition.icon,
            desc=composition.desc,
            confidence=composition.confidence,
            tier=tier,
            champion_count=champion_count,
            **extra,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["suggestions"] = [s.to_dict() for s in self.suggestions]
        return data
