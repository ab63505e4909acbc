"""Access log and the statistics derived from it.

Nothing here keeps running counters: hits, misses and hit rate are always
recomputed from the outcomes, so truncating the log (step back) or replaying
it can never leave the numbers out of sync.
"""
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence


@dataclass(frozen=True)
class AccessOutcome:
    step: int
    address: int
    hit: bool
    set_index: int
    evicted: bool


@dataclass(frozen=True)
class Statistics:
    hits: int = 0
    misses: int = 0
    hit_rate: float = 0.0

    @property
    def accesses(self) -> int:
        return self.hits + self.misses

    @property
    def miss_rate(self) -> float:
        return (self.misses / self.accesses) if self.accesses else 0.0

    def as_dict(self) -> dict:
        return {
            'accesses': self.accesses,
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': self.hit_rate,
            'miss_rate': self.miss_rate,
        }


def compute_statistics(log: Iterable[AccessOutcome]) -> Statistics:
    outcomes = list(log)
    hits = sum(1 for o in outcomes if o.hit)
    total = len(outcomes)
    return Statistics(hits=hits, misses=total - hits, hit_rate=(hits / total) if total else 0.0)


def hit_rate_history(log: Iterable[AccessOutcome]) -> List[float]:
    """Running hit rate after each access, e.g. [0.0, 0.5, 0.667, ...]."""
    rates = []
    hits = 0
    for i, o in enumerate(log, start=1):
        if o.hit:
            hits += 1
        rates.append(hits / i)
    return rates


class AccessLog:
    """Append-only, temporally ordered list of AccessOutcome records.

    Alongside the outcomes it keeps prefix counts (hits and evictions in the
    first i+1 records) so statistics stay O(1) per append; they are rebuilt
    from the outcomes whenever a log is constructed or truncated.
    """

    def __init__(self, outcomes: Sequence[AccessOutcome] = ()):
        self._outcomes: List[AccessOutcome] = []
        self._hit_prefix: List[int] = []
        self._evict_prefix: List[int] = []
        for o in outcomes:
            self.append(o)

    def append(self, outcome: AccessOutcome):
        hits = self._hit_prefix[-1] if self._hit_prefix else 0
        evictions = self._evict_prefix[-1] if self._evict_prefix else 0
        self._outcomes.append(outcome)
        self._hit_prefix.append(hits + (1 if outcome.hit else 0))
        self._evict_prefix.append(evictions + (1 if outcome.evicted else 0))

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self) -> Iterator[AccessOutcome]:
        return iter(self._outcomes)

    def __getitem__(self, index):
        return self._outcomes[index]

    def truncate(self, length: int) -> "AccessLog":
        """New log holding only the first `length` outcomes."""
        return AccessLog(self._outcomes[:length])

    @property
    def statistics(self) -> Statistics:
        """Same value as compute_statistics(self), read off the prefix counts."""
        total = len(self._outcomes)
        hits = self._hit_prefix[-1] if total else 0
        return Statistics(hits=hits, misses=total - hits, hit_rate=(hits / total) if total else 0.0)

    @property
    def evictions(self) -> int:
        return self._evict_prefix[-1] if self._evict_prefix else 0

    def hit_rate_history(self) -> List[float]:
        return [h / i for i, h in enumerate(self._hit_prefix, start=1)]


__all__ = ["AccessOutcome", "Statistics", "compute_statistics", "hit_rate_history", "AccessLog"]
