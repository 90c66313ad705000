"""Context-free scan for currently overpowered champion/position pairs."""
from typing import Optional

from draft_compass.config import Settings, get_settings
from draft_compass.models.recommendations import OpPick
from draft_compass.repositories.knowledge_repository import KnowledgeRepository
from draft_compass.services.win_rate_provider import WinRateProvider
from draft_compass.utils.role_normalizer import ROLE_ORDER


class OpPickFinder:
    """Ranks every known champion in every position by tier and win rate."""

    HIGH_TIERS = ("S+", "S")
    OP_WIN_RATE = 0.525
    OP_MIN_MATCHES = 100
    HIGH_TIER_BONUS = 5

    def __init__(
        self,
        win_rate_provider: WinRateProvider,
        repository: KnowledgeRepository,
        settings: Optional[Settings] = None,
    ):
        self.win_rate_provider = win_rate_provider
        self.repository = repository
        self.settings = settings or get_settings()

    def find(self, queue: Optional[str] = None, limit: Optional[int] = None) -> list[OpPick]:
        """Top OP picks, one entry per champion (its best position)."""
        queue = queue or self.settings.default_queue
        limit = limit if limit is not None else self.settings.op_pick_limit
        snapshot = self.repository.snapshot
        if snapshot is None:
            return []

        candidates: list[OpPick] = []
        for name in snapshot.catalog.names():
            for role in ROLE_ORDER:
                pick = self._evaluate(name, role, queue)
                if pick is not None:
                    candidates.append(pick)

        candidates.sort(key=lambda p: -p.score)

        seen: set[str] = set()
        op_picks = []
        for pick in candidates:
            if pick.name in seen:
                continue
            seen.add(pick.name)
            op_picks.append(pick)
        return op_picks[:limit]

    def _evaluate(self, name: str, role: str, queue: str) -> Optional[OpPick]:
        stats = self.win_rate_provider.get_stats(name, role, queue)
        if not stats.has_data:
            return None

        high_tier = stats.tier in self.HIGH_TIERS
        strong = stats.win_rate > self.OP_WIN_RATE and stats.matches > self.OP_MIN_MATCHES
        if not (high_tier or strong):
            return None

        score = stats.win_rate * 100 + stats.pick_rate * 10 + (self.HIGH_TIER_BONUS if high_tier else 0)
        return OpPick(
            name=name,
            role=role,
            win_rate=stats.win_rate,
            pick_rate=stats.pick_rate,
            tier=stats.tier,
            matches=stats.matches,
            score=round(score, 3),
        )
