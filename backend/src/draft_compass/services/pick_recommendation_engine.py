"""Pick recommendation engine combining all scoring components."""
import logging
from typing import Iterable, Optional

from draft_compass.config import Settings, get_settings
from draft_compass.models.champion import CounterSynergyRecord
from draft_compass.models.composition import Archetype, CompositionAnalysis
from draft_compass.models.draft import AllySlot, ChampionRef, DraftContext
from draft_compass.models.recommendations import RecommendationResponse, RecommendationResult
from draft_compass.models.roster import RosterConfig
from draft_compass.models.stats import WinRateEntry
from draft_compass.repositories.knowledge_repository import (
    ChampionCatalog,
    CounterSynergyTable,
    EngineSnapshot,
    KnowledgeRepository,
)
from draft_compass.services.archetype_service import AUTO_ARCHETYPE, ArchetypeService, get_composition_roles
from draft_compass.services.win_rate_provider import WinRateProvider
from draft_compass.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)


class PickRecommendationEngine:
    """Ranks available champions for a position using additive scoring.

    Every component is an independent bonus added to the score:
    counters vs enemy picks, synergies with ally picks, win rate, tier,
    pick rate, archetype fit, planned/flex picks from a custom archetype,
    position match and roster favorites.
    """

    # Points per 1.0 of win-rate delta from 50%
    COUNTER_SCALE = 100
    SYNERGY_SCALE = 100
    WIN_RATE_SCALE = 50
    PICK_RATE_SCALE = 10

    TIER_BONUS = {"S+": 10, "S": 8, "A": 5, "B": 2}
    HIGH_TIERS = ("S+", "S", "A")
    HIGH_WIN_RATE = 0.52

    PLANNED_PICK_BONUS = 20
    # Large enough to lock a multi-role champion before the enemy can take it
    FLEX_PRIORITY_BONUS = 50
    EARLY_DRAFT_MAX_PICKS = 2

    ROLE_MATCH_BONUS = 1

    MAIN_FAVORITE_BONUS = 15
    TEAMMATE_FAVORITE_BONUS = 5
    POOL_SYNERGY_THRESHOLD = 0.52
    POOL_SYNERGY_SCALE = 20

    # Synthetic tier thresholds (display only)
    SCORE_TIERS = ((25, "S+"), (20, "S"), (15, "A"), (10, "B"), (5, "C"))

    def __init__(
        self,
        win_rate_provider: WinRateProvider,
        repository: Optional[KnowledgeRepository] = None,
        archetype_service: Optional[ArchetypeService] = None,
        settings: Optional[Settings] = None,
    ):
        self.win_rate_provider = win_rate_provider
        self.repository = repository or KnowledgeRepository()
        self.archetype_service = archetype_service or ArchetypeService()
        self.settings = settings or get_settings()

    def initialize(
        self,
        catalog: ChampionCatalog,
        counters: Optional[CounterSynergyTable] = None,
    ) -> EngineSnapshot:
        """Install champion metadata (and optionally counter data)."""
        snapshot = self.repository.initialize(catalog, counters)
        logger.info(f"Engine initialized with {len(catalog)} champions")
        return snapshot

    @property
    def is_initialized(self) -> bool:
        return self.repository.is_initialized

    def get_recommendations(self, context: DraftContext) -> RecommendationResponse:
        """Score every available champion for the context's position.

        Returns the top candidates (score descending, ties keep catalog
        order) together with the ally composition analysis.
        """
        snapshot = self.repository.snapshot
        if snapshot is None:
            logger.warning("Recommendations requested before engine initialization")
            return RecommendationResponse(
                recommendations=[],
                composition_analysis=self._analyze(None, [], context.queue),
            )

        catalog = snapshot.catalog
        queue = context.queue or self.settings.default_queue
        role = normalize_role(context.role)

        ally_names = self._resolve_names(catalog, context.ally_picks)
        enemy_names = self._resolve_names(catalog, context.enemy_picks)
        banned_names = self._resolve_names(catalog, context.banned)
        unavailable = set(ally_names) | set(enemy_names) | set(banned_names)

        composition = self._analyze(snapshot, ally_names, queue)
        target = self._resolve_target(context)
        target_requested = self._target_requested(context)
        planned_def = target if target is not None and target.typical_comp else None

        results = []
        for champ_name in catalog.names():
            if champ_name in unavailable:
                continue

            record = snapshot.counters.get(champ_name)
            if record is None:
                continue

            if role and not record.plays_role(role):
                continue

            # role=None falls back to the aggregate lookup
            stats = self.win_rate_provider.get_stats(champ_name, role, queue)
            if role and not stats.has_data:
                continue

            results.append(
                self._calculate_score(
                    champ_name,
                    record,
                    stats,
                    snapshot,
                    role=role,
                    ally_names=ally_names,
                    enemy_names=enemy_names,
                    composition=composition,
                    target=target,
                    target_requested=target_requested,
                    planned_def=planned_def,
                    roster_config=context.roster_config,
                    allies=context.allies,
                )
            )

        results.sort(key=lambda r: -r.score)
        return RecommendationResponse(
            recommendations=results[: self.settings.recommendation_limit],
            composition_analysis=composition,
        )

    def analyze_team_composition(
        self, ally_picks: Iterable[ChampionRef], queue: Optional[str] = None
    ) -> CompositionAnalysis:
        """Archetype + tier for the current ally picks."""
        snapshot = self.repository.snapshot
        if snapshot is None:
            return self._analyze(None, [], queue)
        return self._analyze(snapshot, self._resolve_names(snapshot.catalog, ally_picks), queue)

    def _analyze(
        self, snapshot: Optional[EngineSnapshot], ally_names: list[str], queue: Optional[str]
    ) -> CompositionAnalysis:
        queue = queue or self.settings.default_queue
        team = []
        if snapshot is not None:
            for name in ally_names:
                team.append({
                    "name": name,
                    "tags": snapshot.catalog.get_tags(name),
                    "win_rate": self.win_rate_provider.get_stats(name, None, queue).win_rate,
                })

        composition = self.archetype_service.detect_team_composition(team)
        tier = self.archetype_service.get_composition_tier(team)
        return CompositionAnalysis.from_composition(composition, tier, champion_count=len(team))

    @staticmethod
    def _resolve_names(catalog: ChampionCatalog, refs: Iterable[ChampionRef]) -> list[str]:
        names = []
        for ref in refs or []:
            name = catalog.resolve_name(ref)
            if name:
                names.append(name)
        return names

    @staticmethod
    def _target_requested(context: DraftContext) -> bool:
        if context.target_archetype_def is not None:
            return True
        return bool(context.target_archetype) and context.target_archetype != AUTO_ARCHETYPE

    def _resolve_target(self, context: DraftContext) -> Optional[Archetype]:
        """Explicitly requested archetype, if any (None when unknown)."""
        if context.target_archetype_def is not None:
            return context.target_archetype_def
        return self.archetype_service.resolve_archetype(context.target_archetype)

    def _calculate_score(
        self,
        champ_name: str,
        record: CounterSynergyRecord,
        stats: WinRateEntry,
        snapshot: EngineSnapshot,
        role: Optional[str],
        ally_names: list[str],
        enemy_names: list[str],
        composition: CompositionAnalysis,
        target: Optional[Archetype],
        target_requested: bool,
        planned_def: Optional[Archetype],
        roster_config: Optional[RosterConfig],
        allies: list[AllySlot],
    ) -> RecommendationResult:
        score = 0.0
        reasons: list[str] = []
        counter_score = 0.0
        synergy_score = 0.0

        # Counters: scraped matchups override the curated table
        for enemy in enemy_names:
            win_rate = snapshot.counters.get_counter(champ_name, enemy, stats.counters)
            if win_rate is None:
                continue
            bonus = (win_rate - 0.5) * self.COUNTER_SCALE
            score += bonus
            counter_score += bonus
            if bonus > 0:
                reasons.append(f"Counters {enemy} ({win_rate * 100:.0f}% WR)")
            elif bonus < 0:
                reasons.append(f"Countered by {enemy} ({win_rate * 100:.0f}% WR)")

        for ally in ally_names:
            win_rate = record.synergies.get(ally)
            if win_rate is None:
                continue
            bonus = (win_rate - 0.5) * self.SYNERGY_SCALE
            score += bonus
            synergy_score += bonus
            reasons.append(f"Synergy with {ally} ({win_rate * 100:.0f}% WR)")

        # Win rate, tier and pick rate
        score += (stats.win_rate - 0.5) * self.WIN_RATE_SCALE
        score += self.TIER_BONUS.get(stats.tier, 0)
        score += stats.pick_rate * self.PICK_RATE_SCALE

        if stats.win_rate > self.HIGH_WIN_RATE:
            reasons.append(f"High Win Rate ({stats.win_rate * 100:.1f}%)")
        if stats.tier in self.HIGH_TIERS:
            reasons.append(f"High Tier ({stats.tier})")

        # Archetype fit: requested target wins over the detected composition
        tags = snapshot.catalog.get_tags(champ_name)
        if target_requested:
            fit_bonus = ArchetypeService.fit_bonus_for(tags, target)
            if fit_bonus > 0:
                reasons.append(f"Fits target {target.name} comp")
        elif composition.archetype != "unknown":
            fit_bonus = self.archetype_service.get_archetype_fit_bonus(tags, composition.archetype)
            if fit_bonus > 0:
                reasons.append(f"Fits {composition.name} comp")
        else:
            fit_bonus = 0
        score += fit_bonus

        # Planned lineup from a custom archetype
        if planned_def is not None:
            planned, is_flex = planned_def.planned_pick(role)
            if planned and planned == champ_name:
                score += self.PLANNED_PICK_BONUS
                reasons.append("Planned Pick")
                if is_flex and len(ally_names) <= self.EARLY_DRAFT_MAX_PICKS:
                    score += self.FLEX_PRIORITY_BONUS
                    reasons.append("★ FLEX PRIORITY")

        if role and record.plays_role(role):
            score += self.ROLE_MATCH_BONUS

        if roster_config is not None:
            score += self._roster_bonus(champ_name, record, role, roster_config, allies, reasons)

        return RecommendationResult(
            name=champ_name,
            id=snapshot.catalog.resolve_id(champ_name),
            score=score,
            win_rate=stats.win_rate,
            pick_rate=stats.pick_rate,
            ban_rate=stats.ban_rate,
            matches=stats.matches,
            roles=list(record.roles),
            tags=tags,
            comp_roles=[r.value for r in get_composition_roles(tags)],
            tier=stats.tier or self.calculate_tier(score),
            reasons=reasons,
            analysis={
                "synergy": synergy_score,
                "counter": counter_score,
                "archetype": float(fit_bonus),
            },
        )

    def _roster_bonus(
        self,
        champ_name: str,
        record: CounterSynergyRecord,
        role: Optional[str],
        roster_config: RosterConfig,
        allies: list[AllySlot],
        reasons: list[str],
    ) -> float:
        """Favorites bonus, plus team-pool synergy in flex mode."""
        bonus = 0.0
        if champ_name in roster_config.favorites_for(role):
            if roster_config.my_role == role:
                bonus += self.MAIN_FAVORITE_BONUS
                reasons.append("Your Main")
            else:
                bonus += self.TEAMMATE_FAVORITE_BONUS
                reasons.append("Teammate Favorite")

        if not roster_config.is_flex_mode:
            return bonus

        # Reward synergy with what still-open teammates are likely to pick
        pool_hits = 0
        for other_role in roster_config.roster:
            if other_role == role or not self._role_still_open(other_role, allies):
                continue
            for favorite in roster_config.favorites_for(other_role):
                synergy = record.synergies.get(favorite)
                if synergy is not None and synergy > self.POOL_SYNERGY_THRESHOLD:
                    pool_hits += 1
                    bonus += (synergy - 0.5) * self.POOL_SYNERGY_SCALE

        if pool_hits:
            reasons.append("Synergy with team pool")
        return bonus

    @staticmethod
    def _role_still_open(role: str, allies: list[AllySlot]) -> bool:
        for ally in allies:
            if normalize_role(ally.role) == role:
                return not ally.has_picked
        return False

    @classmethod
    def calculate_tier(cls, score: float) -> str:
        """Display tier derived from a score when the provider has none."""
        for threshold, tier in cls.SCORE_TIERS:
            if score >= threshold:
                return tier
        return "D"
