"""Shared fixtures: a small champion pool with curated and imported data."""
import pytest

from draft_compass.config import Settings
from draft_compass.repositories.knowledge_repository import (
    ChampionCatalog,
    CounterSynergyTable,
    KnowledgeRepository,
)
from draft_compass.services.win_rate_provider import ImportedWinRateProvider

CHAMPIONS = {
    1: ("Annie", ["Mage"]),
    2: ("Garen", ["Fighter", "Tank"]),
    3: ("Darius", ["Fighter", "Tank"]),
    4: ("Malphite", ["Tank", "Fighter"]),
    5: ("Lux", ["Mage", "Support"]),
    6: ("Jinx", ["Marksman"]),
    7: ("Lulu", ["Support", "Mage"]),
    8: ("Zed", ["Assassin"]),
    9: ("Gragas", ["Fighter", "Mage"]),
    10: ("Ornn", ["Tank"]),
}


@pytest.fixture
def catalog():
    return ChampionCatalog(
        id_to_name={champ_id: name for champ_id, (name, _) in CHAMPIONS.items()},
        tags_map={name: tags for name, tags in CHAMPIONS.values()},
    )


@pytest.fixture
def counters():
    return CounterSynergyTable.from_dict({
        "Annie": {"roles": ["mid", "support"], "counters": {"Zed": 0.45}, "synergies": {"Lulu": 0.54}},
        "Lux": {"roles": ["Mid", "Support"], "counters": {"Zed": 0.55}, "synergies": {"Jinx": 0.53}},
        "Zed": {"roles": ["mid"], "counters": {"Lux": 0.45, "Annie": 0.55}},
        "Garen": {"roles": ["top"], "counters": {"Darius": 0.46}},
        "Darius": {"roles": ["top"], "counters": {"Garen": 0.54}},
        "Malphite": {"roles": ["top", "mid"]},
        "Gragas": {"roles": ["top", "jungle", "mid"]},
        "Jinx": {"roles": ["adc"], "synergies": {"Lulu": 0.55}},
        "Lulu": {"roles": ["support"], "synergies": {"Jinx": 0.55}},
        "Ornn": {"roles": ["top"]},
    })


@pytest.fixture
def win_rates():
    return {
        "soloq": {
            "mid": {
                "Annie": {"winRate": 0.51, "pickRate": 0.05, "tier": "B", "matches": 900},
                "Lux": {"winRate": 0.53, "pickRate": 0.10, "tier": "A", "matches": 1200},
                "Zed": {"winRate": 0.50, "pickRate": 0.12, "tier": "S", "matches": 1500},
                "Malphite": {"winRate": 0.49, "pickRate": 0.01, "tier": "C", "matches": 120},
                "Gragas": {"winRate": 0.50, "pickRate": 0.02, "matches": 300},
            },
            "top": {
                "Garen": {"winRate": 0.48, "pickRate": 0.06, "matches": 800},
                "Darius": {"winRate": 0.53, "pickRate": 0.07, "tier": "A", "matches": 700},
                "Malphite": {"winRate": 0.52, "pickRate": 0.08, "matches": 650},
                "Ornn": {"winRate": 0.51, "pickRate": 0.03, "matches": 400},
                "Gragas": {"winRate": 0.47, "pickRate": 0.01, "matches": 90},
            },
            "jungle": {
                "Gragas": {"winRate": 0.50, "pickRate": 0.04, "matches": 500},
            },
            "adc": {
                "Jinx": {"winRate": 0.54, "pickRate": 0.20, "tier": "S+", "matches": 3000},
            },
            "support": {
                "Lulu": {"winRate": 0.52, "pickRate": 0.09, "tier": "A", "matches": 1100},
                "Lux": {"winRate": 0.50, "pickRate": 0.05, "matches": 600},
                "Annie": {"winRate": 0.49, "pickRate": 0.01, "matches": 80},
            },
        },
    }


@pytest.fixture
def provider(win_rates):
    return ImportedWinRateProvider(win_rates)


@pytest.fixture
def repository(catalog, counters):
    repo = KnowledgeRepository()
    repo.initialize(catalog, counters)
    return repo


@pytest.fixture
def settings():
    return Settings(recommendation_limit=5, default_queue="soloq")
