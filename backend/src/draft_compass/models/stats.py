"""Win-rate statistics models."""
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

NEUTRAL_WIN_RATE = 0.50


def _coerce(value, convert, default, key: str):
    """Convert an imported field, falling back to ``default`` when malformed."""
    if value is None or value == "":
        return default
    try:
        return convert(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed {key} value {value!r}")
        return default


@dataclass(frozen=True)
class WinRateEntry:
    """Stats for a (champion, role, queue) triple.

    ``has_data`` is False when the provider had no entry and the neutral
    default was substituted; "no data" is not an error.
    """

    win_rate: float = NEUTRAL_WIN_RATE
    pick_rate: float = 0.0
    ban_rate: float = 0.0
    tier: str = ""
    matches: int = 0
    has_data: bool = False
    # Scraped matchup data: enemy name -> win rate vs that enemy
    counters: dict[str, float] = field(default_factory=dict)

    @classmethod
    def neutral(cls) -> "WinRateEntry":
        return cls()

    @classmethod
    def from_raw(cls, entry, has_data: bool = True) -> "WinRateEntry":
        """Build from an imported entry - either a bare win rate or a stats dict.

        Anything else counts as no data; malformed fields fall back to
        their neutral defaults.
        """
        if isinstance(entry, (int, float)) and not isinstance(entry, bool):
            return cls(win_rate=float(entry), has_data=has_data)
        if not isinstance(entry, dict):
            logger.warning(f"Ignoring malformed win rate entry {entry!r}")
            return cls.neutral()

        tier = entry.get("tier")
        return cls(
            win_rate=_coerce(entry.get("winRate"), float, 0.0, "winRate") or NEUTRAL_WIN_RATE,
            pick_rate=_coerce(entry.get("pickRate"), float, 0.0, "pickRate"),
            ban_rate=_coerce(entry.get("banRate"), float, 0.0, "banRate"),
            tier=tier if isinstance(tier, str) else "",
            matches=_coerce(entry.get("matches"), int, 0, "matches"),
            has_data=has_data,
            counters=_parse_counters(entry.get("counters")),
        )

    def to_dict(self) -> dict:
        return {
            "winRate": self.win_rate,
            "pickRate": self.pick_rate,
            "banRate": self.ban_rate,
            "tier": self.tier,
            "matches": self.matches,
            "hasData": self.has_data,
        }


def _parse_counters(raw) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    counters = {}
    for enemy, win_rate in raw.items():
        value = _coerce(win_rate, float, None, f"counters[{enemy}]")
        if value is not None:
            counters[enemy] = value
    return counters
