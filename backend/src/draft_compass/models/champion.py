"""Champion metadata and static counter/synergy records."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Champion:
    """A champion as known to the metadata provider."""

    id: int
    name: str
    tags: tuple[str, ...] = ()  # First tag is the primary class

    @property
    def primary_tag(self) -> str | None:
        return self.tags[0] if self.tags else None


@dataclass(frozen=True)
class CounterSynergyRecord:
    """Curated matchup knowledge for one champion.

    counters: enemy name -> this champion's win rate against it
    synergies: ally name -> this champion's win rate alongside it
    """

    roles: tuple[str, ...] = ()
    counters: dict[str, float] = field(default_factory=dict)
    synergies: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "CounterSynergyRecord":
        return cls(
            roles=tuple(r.lower() for r in data.get("roles") or []),
            counters=dict(data.get("counters") or {}),
            synergies=dict(data.get("synergies") or {}),
        )

    def plays_role(self, role: str) -> bool:
        return role in self.roles
