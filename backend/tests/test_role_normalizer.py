"""Tests for position normalization."""
import pytest

from draft_compass.utils.role_normalizer import (
    ROLE_ORDER,
    is_valid_role,
    normalize_role,
    normalize_role_strict,
    sort_by_role,
)


def test_normalize_live_client_positions():
    """Client positions map onto the canonical keys."""
    assert normalize_role("TOP") == "top"
    assert normalize_role("JUNGLE") == "jungle"
    assert normalize_role("MIDDLE") == "mid"
    assert normalize_role("BOTTOM") == "adc"
    assert normalize_role("UTILITY") == "support"


def test_normalize_aliases():
    assert normalize_role("jng") == "jungle"
    assert normalize_role("JG") == "jungle"
    assert normalize_role(" Bot ") == "adc"
    assert normalize_role("supp") == "support"


def test_normalize_empty_or_unknown():
    """Empty and unrecognized input yield None."""
    assert normalize_role(None) is None
    assert normalize_role("") is None
    assert normalize_role("unknown") is None
    assert normalize_role("roam") is None


def test_normalize_strict_raises():
    assert normalize_role_strict("middle") == "mid"
    with pytest.raises(ValueError):
        normalize_role_strict("roam")


def test_is_valid_role():
    assert is_valid_role("utility")
    assert not is_valid_role("")
    assert not is_valid_role(None)


def test_sort_by_role():
    """Players sort in lane order with unknown positions last."""
    players = [
        {"name": "a", "role": "utility"},
        {"name": "b", "role": "???"},
        {"name": "c", "role": "TOP"},
        {"name": "d", "role": "middle"},
    ]
    result = sort_by_role(players)
    assert [p["name"] for p in result] == ["c", "d", "a", "b"]


def test_role_order_is_canonical():
    assert ROLE_ORDER == ["top", "jungle", "mid", "adc", "support"]
