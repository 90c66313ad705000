"""Read-only knowledge snapshots consumed by the engine.

A snapshot bundles the champion catalog (id <-> name, class tags) and the
curated counter/synergy table. Snapshots are never edited in place: new
data produces a new snapshot and the repository swaps its reference.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

from draft_compass.models.champion import Champion, CounterSynergyRecord

logger = logging.getLogger(__name__)


class ChampionCatalog:
    """Champion id <-> name mapping and class tags for one patch."""

    def __init__(
        self,
        id_to_name: Optional[Mapping[int, str]] = None,
        tags_map: Optional[Mapping[str, list[str]]] = None,
        name_to_id: Optional[Mapping[str, int]] = None,
    ):
        id_to_name = {int(k): v for k, v in (id_to_name or {}).items()}
        if name_to_id is None:
            name_to_id = {name: champ_id for champ_id, name in id_to_name.items()}
        self._id_to_name: Mapping[int, str] = MappingProxyType(id_to_name)
        self._name_to_id: Mapping[str, int] = MappingProxyType(dict(name_to_id))
        self._tags_map: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {name: tuple(tags or []) for name, tags in (tags_map or {}).items()}
        )

    @classmethod
    def from_ddragon(cls, payload: dict) -> "ChampionCatalog":
        """Build from a Data Dragon ``champion.json`` payload.

        Expects ``{"data": {name: {"key": "266", "tags": [...]}}}``.
        """
        id_to_name: dict[int, str] = {}
        tags_map: dict[str, list[str]] = {}
        for name, info in (payload.get("data") or {}).items():
            try:
                champ_id = int(info.get("key"))
            except (TypeError, ValueError):
                logger.warning(f"Skipping champion {name} with invalid key {info.get('key')!r}")
                continue
            id_to_name[champ_id] = name
            tags_map[name] = info.get("tags") or []
        return cls(id_to_name=id_to_name, tags_map=tags_map)

    def __len__(self) -> int:
        return len(self._id_to_name)

    @property
    def id_to_name(self) -> Mapping[int, str]:
        return self._id_to_name

    @property
    def name_to_id(self) -> Mapping[str, int]:
        return self._name_to_id

    @property
    def tags_map(self) -> Mapping[str, tuple[str, ...]]:
        return self._tags_map

    def names(self) -> list[str]:
        """All champion names in catalog order."""
        return list(self._id_to_name.values())

    def resolve_name(self, champion_id: Union[int, str, None]) -> Optional[str]:
        """Resolve an id to a name; names pass through when known."""
        if champion_id is None:
            return None
        if isinstance(champion_id, str) and not champion_id.isdigit():
            return champion_id if champion_id in self._name_to_id else None
        return self._id_to_name.get(int(champion_id))

    def resolve_id(self, name: str) -> int:
        """Resolve a name to its id, 0 when unknown."""
        return self._name_to_id.get(name, 0)

    def get_tags(self, name_or_id: Union[int, str, None]) -> list[str]:
        name = self.resolve_name(name_or_id) if isinstance(name_or_id, int) else name_or_id
        if not name:
            return []
        return list(self._tags_map.get(name, ()))

    def get_champion(self, name_or_id: Union[int, str]) -> Optional[Champion]:
        name = self.resolve_name(name_or_id)
        if name is None:
            return None
        return Champion(id=self.resolve_id(name), name=name, tags=tuple(self.get_tags(name)))

    def normalized_name_map(self) -> dict[str, str]:
        """Lookup of loose spellings -> catalog name (e.g. "twistedfate")."""
        mapping: dict[str, str] = {}
        for name in self._name_to_id:
            mapping[name.lower()] = name
            mapping[re.sub(r"[^a-zA-Z0-9]", "", name).lower()] = name
        if "MonkeyKing" in self._name_to_id:
            mapping["wukong"] = "MonkeyKing"
        return mapping


class CounterSynergyTable:
    """Curated counters/synergies keyed by champion name."""

    def __init__(self, records: Optional[Mapping[str, CounterSynergyRecord]] = None):
        self._records: Mapping[str, CounterSynergyRecord] = MappingProxyType(dict(records or {}))

    @classmethod
    def from_dict(cls, data: dict) -> "CounterSynergyTable":
        records = {
            name: CounterSynergyRecord.from_dict(entry)
            for name, entry in data.items()
            if isinstance(entry, dict)
        }
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, champion: str) -> bool:
        return champion in self._records

    def get(self, champion: str) -> Optional[CounterSynergyRecord]:
        return self._records.get(champion)

    def get_counter(
        self,
        champion: str,
        enemy: str,
        dynamic_counters: Optional[Mapping[str, float]] = None,
    ) -> Optional[float]:
        """Win rate of ``champion`` vs ``enemy``.

        Scraped counters take precedence over the curated table.
        """
        if dynamic_counters and enemy in dynamic_counters:
            return dynamic_counters[enemy]
        record = self._records.get(champion)
        if record is None:
            return None
        return record.counters.get(enemy)

    def get_synergy(self, champion: str, ally: str) -> Optional[float]:
        record = self._records.get(champion)
        if record is None:
            return None
        return record.synergies.get(ally)


@dataclass(frozen=True)
class EngineSnapshot:
    """Immutable bundle of everything the engine reads."""

    catalog: ChampionCatalog = field(default_factory=ChampionCatalog)
    counters: CounterSynergyTable = field(default_factory=CounterSynergyTable)
    version: int = 0


class KnowledgeRepository:
    """Holds the current snapshot; replacement is a single reference swap."""

    CHAMPIONS_FILE = "champions.json"
    COUNTERS_FILE = "counters.json"

    def __init__(self, snapshot: Optional[EngineSnapshot] = None):
        self._snapshot: Optional[EngineSnapshot] = snapshot

    @property
    def snapshot(self) -> Optional[EngineSnapshot]:
        return self._snapshot

    @property
    def is_initialized(self) -> bool:
        return self._snapshot is not None

    def initialize(
        self,
        catalog: ChampionCatalog,
        counters: Optional[CounterSynergyTable] = None,
    ) -> EngineSnapshot:
        """Install a new snapshot built from fresh catalog/counter data."""
        current_counters = self._snapshot.counters if self._snapshot else CounterSynergyTable()
        return self.replace(
            EngineSnapshot(catalog=catalog, counters=counters if counters is not None else current_counters)
        )

    def replace(self, snapshot: EngineSnapshot) -> EngineSnapshot:
        version = (self._snapshot.version if self._snapshot else 0) + 1
        new_snapshot = EngineSnapshot(catalog=snapshot.catalog, counters=snapshot.counters, version=version)
        self._snapshot = new_snapshot
        logger.info(
            f"Knowledge snapshot v{version} installed: "
            f"{len(snapshot.catalog)} champions, {len(snapshot.counters)} counter records"
        )
        return new_snapshot

    def load_from_dir(self, knowledge_dir: Path) -> EngineSnapshot:
        """Load champions.json and counters.json from a knowledge directory.

        Missing files yield empty tables.
        """
        catalog = ChampionCatalog()
        champions_path = knowledge_dir / self.CHAMPIONS_FILE
        if champions_path.exists():
            with open(champions_path) as f:
                catalog = ChampionCatalog.from_ddragon(json.load(f))
        else:
            logger.warning(f"{self.CHAMPIONS_FILE} not found at {champions_path}")

        counters = CounterSynergyTable()
        counters_path = knowledge_dir / self.COUNTERS_FILE
        if counters_path.exists():
            with open(counters_path) as f:
                counters = CounterSynergyTable.from_dict(json.load(f))
        else:
            logger.warning(f"{self.COUNTERS_FILE} not found at {counters_path}")

        return self.replace(EngineSnapshot(catalog=catalog, counters=counters))
