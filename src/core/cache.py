"""Core cache model

This file provides the immutable set-associative cache model used by the simulator.
Behavior:
- Cache is composed of sets; each set has `associativity` ways.
  line_index = address // line_size
  set_index = line_index % num_sets
  tag = line_index // num_sets
- Nothing here mutates in place. Every access builds a new CacheSet and a new
  CacheStore; untouched sets are shared between snapshots, which is safe
  because they are frozen.
- Replacement is LRU by logical timestamp: the way with the smallest
  `last_used` is evicted, ties go to the lowest way index.
"""

import logging
from dataclasses import dataclass, field, replace, asdict
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple

from src.core.errors import InvalidAddress, InvalidConfiguration

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class CacheConfig:
    """Geometry of the simulated cache.

    Fields:
    - array_size: number of addressable elements
    - line_size: elements per cache line
    - cache_lines: total number of lines across the whole cache
    - associativity: lines per set (1 = direct-mapped)
    """

    array_size: int = 64
    line_size: int = 4
    cache_lines: int = 8
    associativity: int = 1

    # keys used by the browser version of the tool
    _ALIASES = {
        "arraySize": "array_size",
        "lineSize": "line_size",
        "cacheLines": "cache_lines",
    }

    @property
    def num_sets(self) -> int:
        return self.cache_lines // self.associativity

    def validate(self) -> "CacheConfig":
        """Raise InvalidConfiguration unless every dimension is a positive int
        and associativity divides cache_lines evenly. Returns self."""
        for name in ("array_size", "line_size", "cache_lines", "associativity"):
            value = getattr(self, name)
            if not _is_int(value):
                raise InvalidConfiguration(f"{name} must be an int, got {type(value).__name__}", name, value)
            if value <= 0:
                raise InvalidConfiguration(f"{name} must be > 0, got {value}", name, value)
        if self.cache_lines % self.associativity != 0:
            raise InvalidConfiguration(
                f"associativity {self.associativity} does not divide cache_lines {self.cache_lines}",
                "associativity",
                self.associativity,
            )
        return self

    def with_changes(self, **changes) -> "CacheConfig":
        return replace(self, **changes).validate()

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, values: Mapping[str, int]) -> "CacheConfig":
        kwargs = {}
        for key, value in values.items():
            name = cls._ALIASES.get(key, key)
            if name not in ("array_size", "line_size", "cache_lines", "associativity"):
                raise InvalidConfiguration(f"unknown configuration key {key!r}", key, value)
            kwargs[name] = value
        return cls(**kwargs).validate()


class Decomposition(NamedTuple):
    line_index: int
    set_index: int
    tag: int
    offset: int


def decompose(address: int, config: CacheConfig) -> Decomposition:
    """Split an element index into (line_index, set_index, tag, offset)."""
    if config.line_size <= 0 or config.associativity <= 0 or config.cache_lines < config.associativity:
        # a geometry like this always fails validate(), which names the field
        config.validate()
    if not _is_int(address) or address < 0 or address >= config.array_size:
        raise InvalidAddress(address, config.array_size)
    line_index = address // config.line_size
    num_sets = config.num_sets
    return Decomposition(line_index, line_index % num_sets, line_index // num_sets, address % config.line_size)


@dataclass(frozen=True)
class CacheLine:
    """One way of a set. `tag` and `data` mean nothing while `valid` is False."""

    valid: bool = False
    tag: int = -1
    last_used: int = -1
    # element indices held by this line
    data: Tuple[int, ...] = ()

    @classmethod
    def filled(cls, tag: int, line_index: int, line_size: int, t: int) -> "CacheLine":
        start = line_index * line_size
        return cls(valid=True, tag=tag, last_used=t, data=tuple(range(start, start + line_size)))

    def touched(self, t: int) -> "CacheLine":
        return replace(self, last_used=t)


class SetAccess(NamedTuple):
    hit: bool
    evicted: bool
    way_index: int
    victim: Optional[CacheLine]


@dataclass(frozen=True)
class CacheSet:
    lines: Tuple[CacheLine, ...]

    @classmethod
    def empty(cls, associativity: int) -> "CacheSet":
        return cls(tuple(CacheLine() for _ in range(associativity)))

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, way: int) -> CacheLine:
        return self.lines[way]

    def __iter__(self):
        return iter(self.lines)

    @property
    def valid_count(self) -> int:
        return sum(1 for line in self.lines if line.valid)

    def tags(self) -> List[int]:
        return [line.tag for line in self.lines if line.valid]

    def find(self, tag: int) -> Optional[int]:
        for wi, line in enumerate(self.lines):
            if line.valid and line.tag == tag:
                return wi
        return None

    def free_way(self) -> Optional[int]:
        for wi, line in enumerate(self.lines):
            if not line.valid:
                return wi
        return None

    def lru_way(self) -> int:
        """Way with the smallest last_used; the first one wins on ties."""
        victim = 0
        for wi in range(1, len(self.lines)):
            if self.lines[wi].last_used < self.lines[victim].last_used:
                victim = wi
        return victim

    def _with_line(self, way: int, line: CacheLine) -> "CacheSet":
        lines = list(self.lines)
        lines[way] = line
        return CacheSet(tuple(lines))

    def access(self, tag: int, line_index: int, line_size: int, t: int) -> Tuple["CacheSet", SetAccess]:
        """Look up `tag` at logical time `t`.

        Returns the new set and a SetAccess describing what happened:
        hit (touch the line), fill of a free way, or eviction of the LRU way.
        """
        wi = self.find(tag)
        if wi is not None:
            return self._with_line(wi, self.lines[wi].touched(t)), SetAccess(True, False, wi, None)

        new_line = CacheLine.filled(tag, line_index, line_size, t)
        wi = self.free_way()
        if wi is not None:
            return self._with_line(wi, new_line), SetAccess(False, False, wi, None)

        wi = self.lru_way()
        return self._with_line(wi, new_line), SetAccess(False, True, wi, self.lines[wi])


@dataclass(frozen=True)
class CacheStore:
    """Complete snapshot of the cache at one logical time."""

    sets: Tuple[CacheSet, ...] = field(default_factory=tuple)

    @property
    def num_sets(self) -> int:
        return len(self.sets)

    @property
    def associativity(self) -> int:
        return len(self.sets[0]) if self.sets else 0

    def __getitem__(self, set_index: int) -> CacheSet:
        return self.sets[set_index]

    def __iter__(self):
        return iter(self.sets)

    def replace_set(self, set_index: int, new_set: CacheSet) -> "CacheStore":
        sets = list(self.sets)
        sets[set_index] = new_set
        return CacheStore(tuple(sets))

    def contains(self, address: int) -> bool:
        """Whether the element `address` currently sits in a valid line."""
        return any(line.valid and address in line.data for s in self.sets for line in s)

    def cached_addresses(self) -> List[int]:
        return sorted(a for s in self.sets for line in s if line.valid for a in line.data)

    def occupancy(self) -> float:
        total = sum(len(s) for s in self.sets)
        used = sum(s.valid_count for s in self.sets)
        return (used / total) if total else 0.0


def create_store(config: CacheConfig) -> CacheStore:
    """Build an all-invalid store for `config`. Raises InvalidConfiguration."""
    config.validate()
    store = CacheStore(tuple(CacheSet.empty(config.associativity) for _ in range(config.num_sets)))
    logger.debug("created store: %d sets x %d ways, line_size=%d",
                 config.num_sets, config.associativity, config.line_size)
    return store


__all__ = [
    "CacheConfig",
    "Decomposition",
    "decompose",
    "CacheLine",
    "SetAccess",
    "CacheSet",
    "CacheStore",
    "create_store",
]
