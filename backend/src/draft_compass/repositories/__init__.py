"""Knowledge repositories."""

from draft_compass.repositories.knowledge_repository import (
    ChampionCatalog,
    CounterSynergyTable,
    EngineSnapshot,
    KnowledgeRepository,
)

__all__ = [
    "ChampionCatalog",
    "CounterSynergyTable",
    "EngineSnapshot",
    "KnowledgeRepository",
]
