"""Recommendation models for draft suggestions."""

from dataclasses import asdict, dataclass, field
from typing import Optional

from draft_compass.models.composition import CompositionAnalysis


@dataclass
class RecommendationResult:
    """A scored candidate champion."""

    name: str
    id: int
    score: float
    win_rate: float = 0.5
    pick_rate: float = 0.0
    ban_rate: float = 0.0
    matches: int = 0
    roles: list[str] = field(default_factory=list)  # Positions it is playable in
    tags: list[str] = field(default_factory=list)  # Class tags, e.g. ["Mage"]
    comp_roles: list[str] = field(default_factory=list)  # e.g. ["poke", "teamfight"]
    tier: str = "D"
    reasons: list[str] = field(default_factory=list)
    # Score breakdown: synergy / counter / archetype subtotals
    analysis: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RecommendationResponse:
    """Scorer output: top candidates plus the ally composition analysis."""

    recommendations: list[RecommendationResult] = field(default_factory=list)
    composition_analysis: Optional[CompositionAnalysis] = None

    def to_dict(self) -> dict:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "composition_analysis": (
                self.composition_analysis.to_dict() if self.composition_analysis else None
            ),
        }


@dataclass
class OpPick:
    """A currently strong (champion, role) pair with no team context."""

    name: str
    role: str
    win_rate: float
    pick_rate: float
    tier: str
    matches: int
    score: float

    def to_dict(self) -> dict:
        return asdict(self)
