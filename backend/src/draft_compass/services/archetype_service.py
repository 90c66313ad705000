"""Archetype analysis for team compositions.

Champion class tags map to composition roles; teams are classified by how
many required/bonus roles of each archetype they cover.
"""
import logging
from collections import Counter
from typing import Iterable, Optional, Sequence

from draft_compass.models.composition import Archetype, CompositionRole, TeamComposition
from draft_compass.models.stats import NEUTRAL_WIN_RATE

logger = logging.getLogger(__name__)

R = CompositionRole

# Class tag -> composition roles
TAG_TO_COMP_ROLES: dict[str, tuple[CompositionRole, ...]] = {
    "Tank": (R.ENGAGE, R.FRONTLINE),
    "Fighter": (R.DIVE, R.BRUISER),
    "Mage": (R.POKE, R.TEAMFIGHT),
    "Assassin": (R.DIVE, R.PICK),
    "Marksman": (R.HYPERCARRY, R.DPS),
    "Support": (R.PROTECT, R.ANTI_ENGAGE),
}

# Declaration order is the tie-break order for detection
BUILTIN_ARCHETYPES: tuple[Archetype, ...] = (
    Archetype(
        key="hardEngage",
        name="Hard Engage",
        icon="⚔️",
        desc="Strong initiation with heavy CC and frontline",
        required_roles=frozenset({R.ENGAGE, R.FRONTLINE}),
        bonus_roles=frozenset({R.TEAMFIGHT, R.DPS}),
    ),
    Archetype(
        key="protect",
        name="Protect the Carry",
        icon="🛡️",
        desc="Peel-heavy comp focused on keeping the hypercarry alive",
        required_roles=frozenset({R.PROTECT, R.HYPERCARRY}),
        bonus_roles=frozenset({R.ANTI_ENGAGE, R.FRONTLINE}),
    ),
    Archetype(
        key="dive",
        name="Dive / Pick",
        icon="🗡️",
        desc="Aggressive comp that dives the backline",
        required_roles=frozenset({R.DIVE}),
        bonus_roles=frozenset({R.PICK, R.BRUISER}),
    ),
    Archetype(
        key="poke",
        name="Poke / Siege",
        icon="🏹",
        desc="Long-range poke to win fights before they start",
        required_roles=frozenset({R.POKE, R.DPS}),
        bonus_roles=frozenset({R.ANTI_ENGAGE}),
    ),
    Archetype(
        key="splitpush",
        name="Splitpush",
        icon="🔱",
        desc="Strong sidelaners that create map pressure",
        required_roles=frozenset({R.BRUISER}),
        bonus_roles=frozenset({R.DIVE, R.DPS}),
    ),
    Archetype(
        key="teamfight",
        name="Teamfight / Wombo Combo",
        icon="💥",
        desc="AoE-heavy composition for devastating 5v5 fights",
        required_roles=frozenset({R.TEAMFIGHT, R.ENGAGE}),
        bonus_roles=frozenset({R.FRONTLINE, R.DPS}),
    ),
)

UNKNOWN = TeamComposition(archetype="unknown", name="Unknown", icon="❓", desc="Not enough data", confidence=0)
MIXED = TeamComposition(
    archetype="mixed", name="Mixed", icon="🔀", desc="A balanced but unfocused composition", confidence=0
)

# "auto" is what the archetype picker sends when nothing is forced
AUTO_ARCHETYPE = "auto"

REQUIRED_ROLE_WEIGHT = 3
BONUS_ROLE_WEIGHT = 1
MAX_FIT_BONUS = 5


def get_composition_roles(tags: Optional[Iterable[str]]) -> list[CompositionRole]:
    """Composition roles implied by class tags, in first-seen order."""
    if not tags or isinstance(tags, str):
        return []

    roles: dict[CompositionRole, None] = {}
    for tag in tags:
        for role in TAG_TO_COMP_ROLES.get(tag, ()):
            roles.setdefault(role)
    return list(roles)


def archetype_from_payload(payload: dict) -> Archetype:
    """Build a user-defined archetype from the compositions editor format."""
    name = payload.get("name") or payload.get("key") or "Custom"
    return Archetype(
        key=payload.get("key") or name,
        name=name,
        icon=payload.get("icon") or "",
        desc=payload.get("description") or payload.get("desc") or "",
        required_roles=_parse_roles(payload.get("required_roles")),
        bonus_roles=_parse_roles(payload.get("bonus_roles")),
        typical_comp={k.lower(): v for k, v in (payload.get("typical_comp") or {}).items() if v},
        custom=True,
    )


def _parse_roles(values: Optional[Iterable[str]]) -> frozenset[CompositionRole]:
    roles = set()
    for value in values or []:
        try:
            roles.add(CompositionRole(value))
        except ValueError:
            logger.warning(f"Ignoring unknown composition role {value!r}")
    return frozenset(roles)


class ArchetypeService:
    """Detects composition archetypes and rates how champions fit them."""

    def __init__(self, custom_archetypes: Optional[Iterable[Archetype]] = None):
        self._builtin: dict[str, Archetype] = {a.key: a for a in BUILTIN_ARCHETYPES}
        self._custom: dict[str, Archetype] = {}
        self.set_custom_archetypes(custom_archetypes or [])

    @property
    def builtin_archetypes(self) -> list[Archetype]:
        return list(self._builtin.values())

    @property
    def custom_archetypes(self) -> list[Archetype]:
        return list(self._custom.values())

    def set_custom_archetypes(self, archetypes: Iterable[Archetype]) -> None:
        """Replace the user-defined archetype set."""
        self._custom = {a.key: a for a in archetypes}

    def resolve_archetype(self, key_or_name: Optional[str]) -> Optional[Archetype]:
        """Find an archetype by key or display name (case-insensitive)."""
        if not key_or_name or key_or_name == AUTO_ARCHETYPE:
            return None

        if key_or_name in self._builtin:
            return self._builtin[key_or_name]
        if key_or_name in self._custom:
            return self._custom[key_or_name]

        wanted = key_or_name.strip().lower()
        for archetype in (*self._builtin.values(), *self._custom.values()):
            if archetype.key.lower() == wanted or archetype.name.lower() == wanted:
                return archetype
        return None

    def get_composition_roles(self, tags: Optional[Iterable[str]]) -> list[CompositionRole]:
        return get_composition_roles(tags)

    def detect_team_composition(self, champions: Optional[Sequence[dict]]) -> TeamComposition:
        """Classify a set of champions (dicts with a "tags" list).

        Each built-in archetype scores 3 per required-role occurrence and 1
        per bonus-role occurrence. A later archetype must beat the current
        best strictly, so the first-declared one wins ties.
        """
        if not champions:
            return _copy(UNKNOWN)

        role_counts: Counter = Counter()
        for champ in champions:
            role_counts.update(get_composition_roles(champ.get("tags") or []))

        best: Optional[Archetype] = None
        best_score = 0
        for archetype in self._builtin.values():
            score = self._archetype_score(archetype, role_counts)
            if score > best_score:
                best_score = score
                best = archetype

        if best is None:
            return _copy(MIXED)

        return TeamComposition(
            archetype=best.key,
            name=best.name,
            icon=best.icon,
            desc=best.desc,
            confidence=best_score,
        )

    @staticmethod
    def _archetype_score(archetype: Archetype, role_counts: Counter) -> int:
        score = 0
        for role in archetype.required_roles:
            score += role_counts[role] * REQUIRED_ROLE_WEIGHT
        for role in archetype.bonus_roles:
            score += role_counts[role] * BONUS_ROLE_WEIGHT
        return score

    def get_archetype_fit_bonus(self, tags: Optional[Iterable[str]], archetype_key: Optional[str]) -> int:
        """How well a champion's tags fit an archetype (0-5)."""
        archetype = self.resolve_archetype(archetype_key)
        return self.fit_bonus_for(tags, archetype)

    @staticmethod
    def fit_bonus_for(tags: Optional[Iterable[str]], archetype: Optional[Archetype]) -> int:
        if archetype is None or not tags:
            return 0

        champ_roles = set(get_composition_roles(tags))
        bonus = REQUIRED_ROLE_WEIGHT * len(champ_roles & archetype.required_roles)
        bonus += BONUS_ROLE_WEIGHT * len(champ_roles & archetype.bonus_roles)
        return min(bonus, MAX_FIT_BONUS)

    def get_composition_tier(self, champions: Optional[Sequence[dict]]) -> str:
        """Letter tier for a (partial) team from archetype fit and win rate.

        Champions are dicts with "tags" and an optional "win_rate"; a
        missing or zero win rate counts as 0.50.
        """
        if not champions:
            return "D"

        comp = self.detect_team_composition(champions)
        max_possible_confidence = len(champions) * 3 * 2

        win_rates = [c.get("win_rate") or NEUTRAL_WIN_RATE for c in champions]
        avg_win_rate = sum(win_rates) / len(win_rates)

        comp_fit = min(comp.confidence / max_possible_confidence, 1.0)
        wr_score = (avg_win_rate - 0.45) / 0.10  # 0.45 -> 0, 0.55 -> 1
        combined = comp_fit * 50 + max(0.0, min(wr_score, 1.0)) * 50

        if combined >= 80:
            return "S"
        if combined >= 60:
            return "A"
        if combined >= 40:
            return "B"
        if combined >= 20:
            return "C"
        return "D"


def _copy(composition: TeamComposition) -> TeamComposition:
    return TeamComposition(**composition.to_dict())
