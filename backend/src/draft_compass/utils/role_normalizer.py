"""Centralized position normalization utility.

Win-rate tables, counter records and roster configs all key positions the
same way: top, jungle, mid, adc, support. The live client reports
"middle", "bottom" and "utility", so every role entering the engine goes
through this module first.
"""

from typing import Optional

# Canonical positions - the standard format used throughout the engine
CANONICAL_ROLES = frozenset({"top", "jungle", "mid", "adc", "support"})

# Mapping from any known position format to canonical lowercase
ROLE_ALIASES: dict[str, str] = {
    # Top lane variations
    "top": "top",
    "top laner": "top",
    "toplane": "top",

    # Jungle variations
    "jungle": "jungle",
    "jungler": "jungle",
    "jng": "jungle",
    "jg": "jungle",

    # Mid lane variations (live client sends "middle")
    "mid": "mid",
    "middle": "mid",
    "mid laner": "mid",
    "midlane": "mid",

    # Bot carry variations (live client sends "bottom")
    "adc": "adc",
    "bot": "adc",
    "bottom": "adc",
    "ad carry": "adc",
    "marksman": "adc",

    # Support variations (live client sends "utility")
    "support": "support",
    "utility": "support",
    "sup": "support",
    "supp": "support",
}

# Role ordering for consistent display/iteration
ROLE_ORDER = ["top", "jungle", "mid", "adc", "support"]


def normalize_role(role: Optional[str]) -> Optional[str]:
    """Normalize a position string to canonical lowercase format.

    Args:
        role: Position string in any known format (e.g., "MIDDLE", "utility", "ADC")

    Returns:
        Normalized position (top/jungle/mid/adc/support) or None if invalid/None

    Examples:
        >>> normalize_role("middle")
        'mid'
        >>> normalize_role("UTILITY")
        'support'
        >>> normalize_role("")
        None
    """
    if not role:
        return None

    return ROLE_ALIASES.get(role.strip().lower())


def normalize_role_strict(role: str) -> str:
    """Normalize a position string, raising ValueError if unknown."""
    normalized = normalize_role(role)
    if normalized is None:
        raise ValueError(f"Unknown role: {role}")
    return normalized


def is_valid_role(role: Optional[str]) -> bool:
    """Check if a position string can be normalized."""
    return normalize_role(role) is not None


def sort_by_role(players: list[dict], role_key: str = "role") -> list[dict]:
    """Sort a list of player dicts by position in standard order.

    Unknown or missing positions sort last.
    """
    def role_sort_key(player: dict) -> int:
        role = normalize_role(player.get(role_key))
        return ROLE_ORDER.index(role) if role else 99

    return sorted(players, key=role_sort_key)
