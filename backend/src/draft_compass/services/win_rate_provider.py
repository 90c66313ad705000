"""Champion win-rate statistics per queue and role.

Imported data is keyed ``{queue: {role: {champion: entry}}}`` where queue
is "soloq" or "flex". An older role-only layout (``{role: {champion:
entry}}``) is still accepted and treated as soloq data.
"""
import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from draft_compass.models.stats import WinRateEntry

logger = logging.getLogger(__name__)

VALID_QUEUES = ("soloq", "flex")
# Keys that identify the older role-only layout; an "all" table alone does not
POSITION_KEYS = ("top", "jungle", "mid", "adc", "support")
AGGREGATE_ROLE = "all"


class WinRateProvider(Protocol):
    """What the engine needs from a statistics source."""

    def get_stats(self, champion_name: str, role: Optional[str] = None, queue: str = "soloq") -> WinRateEntry:
        ...


class ImportedWinRateProvider:
    """In-memory provider over imported/scraped win-rate tables."""

    def __init__(self, data: Optional[dict] = None):
        self._queue_data: dict[str, dict[str, dict]] = {}
        self._data_source = "static"
        self.load(data)

    @property
    def data_source(self) -> str:
        """"imported" when real data is loaded, "static" otherwise."""
        return self._data_source

    def load(self, data: Optional[dict] = None) -> None:
        """Replace all loaded data."""
        if not data:
            self._queue_data = {}
            self._data_source = "static"
            logger.info("No win rate data loaded (source: static)")
            return

        keys = list(data.keys())
        if any(k in VALID_QUEUES for k in keys):
            self._queue_data = {
                q: {role.lower(): table for role, table in (data[q] or {}).items() if isinstance(table, dict)}
                for q in keys
                if q in VALID_QUEUES and isinstance(data[q], dict)
            }
            self._data_source = "imported"
            total = sum(len(table) for tables in self._queue_data.values() for table in tables.values())
            logger.info(f"Loaded queue-based win rates for {', '.join(self._queue_data)} ({total} total entries)")
        elif any(k.lower() in POSITION_KEYS for k in keys):
            self._queue_data = {
                "soloq": {
                    role.lower(): table for role, table in data.items() if isinstance(table, dict)
                }
            }
            self._data_source = "imported"
            total = sum(len(table) for table in self._queue_data["soloq"].values())
            logger.info(f"Migrated role-based win rate data to soloq ({total} entries)")
        else:
            logger.warning("Unknown win rate data format provided. Ignoring.")
            self._queue_data = {}
            self._data_source = "static"

    def load_file(self, path: Path) -> None:
        """Load a winrates.json file; a missing file leaves no data."""
        if not path.exists():
            logger.warning(f"Win rate file not found at {path}")
            self.load(None)
            return
        with open(path) as f:
            self.load(json.load(f))

    def _role_table(self, queue: str, role: str) -> Optional[dict]:
        tables = self._queue_data.get(queue or "soloq")
        if not tables:
            return None
        return tables.get(role.lower())

    def get_stats(self, champion_name: str, role: Optional[str] = None, queue: str = "soloq") -> WinRateEntry:
        """Get stats for a champion.

        With a role, only that role's table is consulted. Without one, the
        explicit "all" table is used, falling back to the role in which the
        champion has the most matches.
        """
        if self._data_source != "imported":
            return WinRateEntry.neutral()

        entry = None
        if role:
            table = self._role_table(queue, role)
            if table:
                entry = table.get(champion_name)
        else:
            entry = self._aggregate_entry(champion_name, queue or "soloq")

        if not entry:
            return WinRateEntry.neutral()
        return WinRateEntry.from_raw(entry)

    def _aggregate_entry(self, champion_name: str, queue: str):
        tables = self._queue_data.get(queue) or {}
        aggregate = tables.get(AGGREGATE_ROLE) or {}
        if champion_name in aggregate:
            return aggregate[champion_name]

        best_entry = None
        best_matches = -1
        for role, table in tables.items():
            if role == AGGREGATE_ROLE or champion_name not in table:
                continue
            candidate = table[champion_name]
            matches = WinRateEntry.from_raw(candidate).matches
            if matches > best_matches:
                best_matches = matches
                best_entry = candidate
        return best_entry

    def get_win_rate(self, champion_name: str, role: Optional[str] = None, queue: str = "soloq") -> float:
        """Win rate for a role-scoped entry, 0.0 when there is none."""
        if not role:
            return 0.0
        stats = self.get_stats(champion_name, role, queue)
        return stats.win_rate if stats.has_data else 0.0

    def get_imported_champion_names(self, queue: str = "soloq", role: Optional[str] = None) -> list[str]:
        """Champion names with imported data for a queue (and role)."""
        if self._data_source != "imported":
            return []
        tables = self._queue_data.get(queue) or {}
        if role:
            return list((tables.get(role.lower()) or {}).keys())

        names: dict[str, None] = {}
        for table in tables.values():
            for name in table:
                names.setdefault(name)
        return list(names)

    def available_queues(self) -> list[str]:
        if self._data_source != "imported":
            return []
        return [q for q in self._queue_data if q in VALID_QUEUES]
