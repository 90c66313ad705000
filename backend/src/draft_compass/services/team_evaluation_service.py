"""Full-roster composition evaluation for the team planner."""
import logging
import math
from typing import Optional

from draft_compass.config import Settings, get_settings
from draft_compass.models.composition import CompositionAnalysis
from draft_compass.repositories.knowledge_repository import KnowledgeRepository
from draft_compass.services.archetype_service import ArchetypeService
from draft_compass.services.substitution_advisor import SubstitutionAdvisor
from draft_compass.services.win_rate_provider import WinRateProvider
from draft_compass.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)


class TeamEvaluationService:
    """Rates a planned lineup: archetype, meta score, tier and swaps.

    Uses its own normalization (fit against n*3, win rate scaled x1000)
    rather than the live-draft tier, and its own thresholds.
    """

    OUT_OF_META_WIN_RATE = 0.49
    WIN_RATE_WEIGHT = 0.6
    FIT_WEIGHT = 0.4
    META_TIERS = ((85, "S"), (70, "A"), (55, "B"), (40, "C"))

    def __init__(
        self,
        win_rate_provider: WinRateProvider,
        repository: KnowledgeRepository,
        archetype_service: Optional[ArchetypeService] = None,
        substitution_advisor: Optional[SubstitutionAdvisor] = None,
        settings: Optional[Settings] = None,
    ):
        self.win_rate_provider = win_rate_provider
        self.repository = repository
        self.settings = settings or get_settings()
        self.archetype_service = archetype_service or ArchetypeService()
        self.substitution_advisor = substitution_advisor or SubstitutionAdvisor(
            win_rate_provider, repository, self.settings
        )

    def get_composition_analysis(
        self,
        team: dict[str, Optional[str]],
        queue: Optional[str] = None,
        suggestion_limit: Optional[int] = None,
    ) -> Optional[CompositionAnalysis]:
        """Analyze a position -> champion lineup.

        Returns None when no slot is filled.
        """
        queue = queue or self.settings.default_queue
        snapshot = self.repository.snapshot
        if snapshot is None:
            return None

        champions = []
        for role, name in team.items():
            if not name:
                continue
            stats = self.win_rate_provider.get_stats(name, normalize_role(role) or role, queue)
            champions.append({
                "name": name,
                "role": role,
                "tags": snapshot.catalog.get_tags(name),
                "win_rate": stats.win_rate,
                "tier": stats.tier,
            })

        champion_count = len(champions)
        if champion_count == 0:
            return None

        composition = self.archetype_service.detect_team_composition(champions)

        max_conf = champion_count * 3
        fit_score = _clamp(composition.confidence / max_conf * 100, 0, 100)

        avg_win_rate = sum(c["win_rate"] for c in champions) / champion_count
        wr_score = _clamp((avg_win_rate - 0.45) * 1000, 0, 100)

        # Half-up rounding
        meta_score = math.floor(wr_score * self.WIN_RATE_WEIGHT + fit_score * self.FIT_WEIGHT + 0.5)
        tier = self._meta_tier(meta_score)

        suggestions = self.substitution_advisor.suggest(team, queue, limit=suggestion_limit)
        logger.debug(
            f"Lineup analysis: {composition.archetype} meta={meta_score} tier={tier} "
            f"avg_wr={avg_win_rate:.3f} suggestions={len(suggestions)}"
        )

        return CompositionAnalysis.from_composition(
            composition,
            tier,
            champion_count=champion_count,
            meta_score=meta_score,
            avg_win_rate=round(avg_win_rate, 4),
            is_out_of_meta=avg_win_rate < self.OUT_OF_META_WIN_RATE,
            suggestions=suggestions,
        )

    @classmethod
    def _meta_tier(cls, meta_score: int) -> str:
        for threshold, tier in cls.META_TIERS:
            if meta_score >= threshold:
                return tier
        return "D"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))
