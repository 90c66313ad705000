"""Replacement suggestions for weak members of a planned team."""
import logging
from typing import Optional

from draft_compass.config import Settings, get_settings
from draft_compass.models.composition import SubstitutionSuggestion
from draft_compass.repositories.knowledge_repository import KnowledgeRepository
from draft_compass.services.win_rate_provider import WinRateProvider
from draft_compass.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)


class SubstitutionAdvisor:
    """Proposes higher win-rate, same-class swaps for weak picks."""

    STRONG_WIN_RATE = 0.52  # Members above this are left alone
    MIN_MATCHES = 50
    MIN_IMPROVEMENT = 0.015  # 1.5 percentage points

    def __init__(
        self,
        win_rate_provider: WinRateProvider,
        repository: KnowledgeRepository,
        settings: Optional[Settings] = None,
    ):
        self.win_rate_provider = win_rate_provider
        self.repository = repository
        self.settings = settings or get_settings()

    def suggest(
        self,
        team: dict[str, Optional[str]],
        queue: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[SubstitutionSuggestion]:
        """Suggest up to ``limit`` swaps, largest improvement first.

        Args:
            team: Position -> champion name (empty slots may be None)
            queue: Queue whose stats are compared
            limit: Maximum suggestions across the whole team
        """
        queue = queue or self.settings.default_queue
        limit = limit if limit is not None else self.settings.substitution_limit
        snapshot = self.repository.snapshot
        if snapshot is None:
            return []

        catalog = snapshot.catalog
        members = {
            normalize_role(role) or role: name
            for role, name in team.items()
            if name
        }
        in_team = set(members.values())

        per_member: list[tuple[float, SubstitutionSuggestion]] = []
        for role, name in members.items():
            current = self.win_rate_provider.get_stats(name, role, queue)
            if current.win_rate > self.STRONG_WIN_RATE:
                continue

            current_tags = catalog.get_tags(name)
            if not current_tags:
                continue
            primary_tag = current_tags[0]

            best: Optional[SubstitutionSuggestion] = None
            best_improvement = 0.0
            for candidate in catalog.names():
                if candidate in in_team:
                    continue
                if primary_tag not in catalog.get_tags(candidate):
                    continue

                stats = self.win_rate_provider.get_stats(candidate, role, queue)
                if stats.matches < self.MIN_MATCHES:
                    continue

                improvement = round(stats.win_rate - current.win_rate, 6)
                if improvement <= self.MIN_IMPROVEMENT or improvement <= best_improvement:
                    continue

                best_improvement = improvement
                best = SubstitutionSuggestion(
                    role=role,
                    out=name,
                    in_=candidate,
                    diff=round(improvement * 100, 1),
                )

            if best is not None:
                per_member.append((best_improvement, best))

        per_member.sort(key=lambda item: -item[0])
        if per_member:
            logger.debug(f"{len(per_member)} substitution candidates for {len(members)} members")
        return [suggestion for _, suggestion in per_member[:limit]]
