"""Access simulation: the pure step function and a pull-based driver.

simulate_access(store, address, config, t) never touches `store`; it returns
an AccessResult carrying the new snapshot. CacheSimulator feeds a trace into
it one address at a time, keeps every snapshot so a step can be undone, and
records an AccessOutcome per access.
"""
import logging
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from src.core.cache import CacheConfig, CacheLine, CacheStore, create_store, decompose
from src.core.errors import InvalidConfiguration
from src.data.access_log import AccessLog, AccessOutcome, Statistics

logger = logging.getLogger(__name__)


class AccessResult(NamedTuple):
    hit: bool
    set_index: int
    evicted: bool
    store: CacheStore
    way_index: int
    tag: int
    # line that was overwritten, only set when evicted
    victim: Optional[CacheLine] = None


def _check_shape(store: CacheStore, config: CacheConfig):
    if store.num_sets != config.num_sets or store.associativity != config.associativity:
        raise InvalidConfiguration(
            f"store shape {store.num_sets}x{store.associativity} does not match "
            f"config {config.num_sets}x{config.associativity}"
        )


def simulate_access(store: CacheStore, address: int, config: CacheConfig, t: int) -> AccessResult:
    """Simulate one read of `address` at logical time `t`.

    Raises InvalidAddress for an address outside [0, array_size) and
    InvalidConfiguration when `store` was not built from `config`.
    """
    line_index, set_index, tag, _ = decompose(address, config)
    _check_shape(store, config)

    new_set, outcome = store[set_index].access(tag, line_index, config.line_size, t)
    if outcome.evicted:
        logger.debug("t=%d addr=%d: evicted tag %d from set %d way %d",
                     t, address, outcome.victim.tag, set_index, outcome.way_index)
    return AccessResult(
        hit=outcome.hit,
        set_index=set_index,
        evicted=outcome.evicted,
        store=store.replace_set(set_index, new_set),
        way_index=outcome.way_index,
        tag=tag,
        victim=outcome.victim,
    )


class CacheSimulator:
    def __init__(self, config: Optional[CacheConfig] = None):
        self.config = (config or CacheConfig()).validate()
        self.sequence: List[int] = []
        self.reset()

    def reset(self):
        # empty cache, empty log, rewind the sequence pointer
        self.store = create_store(self.config)
        self.log = AccessLog()
        self.index = 0
        self._snapshots: List[CacheStore] = [self.store]

    def reconfigure(self, config: CacheConfig):
        """Switch geometry. The cache starts over empty; the trace is kept."""
        self.config = config.validate()
        self.reset()

    def load_sequence(self, addresses: Sequence[int]):
        self.sequence = list(addresses)
        self.reset()

    def extend_sequence(self, addresses: Sequence[int]):
        # unlike load_sequence this keeps the cache warm
        self.sequence.extend(addresses)

    def has_next(self) -> bool:
        return self.index < len(self.sequence)

    @property
    def history(self) -> Tuple[CacheStore, ...]:
        """Snapshot before the first access followed by one per simulated access."""
        return tuple(self._snapshots)

    @property
    def statistics(self) -> Statistics:
        return self.log.statistics

    def step(self) -> Optional[dict]:
        if not self.has_next():
            return None
        address = self.sequence[self.index]
        # raises before any state changes, so a bad address leaves us where we were
        result = simulate_access(self.store, address, self.config, self.index)

        self.log.append(AccessOutcome(
            step=self.index,
            address=address,
            hit=result.hit,
            set_index=result.set_index,
            evicted=result.evicted,
        ))
        self.store = result.store
        self._snapshots.append(result.store)
        self.index += 1

        stats = self.statistics
        return {
            'step': self.index - 1,
            'address': address,
            'hit': result.hit,
            'set_index': result.set_index,
            'way_index': result.way_index,
            'tag': result.tag,
            'evicted': result.evicted,
            'victim_tag': result.victim.tag if result.victim is not None else None,
            'stats': {
                'accesses': stats.accesses,
                'hits': stats.hits,
                'misses': stats.misses,
                'hit_rate': stats.hit_rate,
                'miss_rate': stats.miss_rate,
            },
        }

    def step_back(self) -> bool:
        """Undo the last access. Returns False when already at the start."""
        if self.index == 0:
            return False
        self._snapshots.pop()
        self.store = self._snapshots[-1]
        self.index -= 1
        self.log = self.log.truncate(self.index)
        return True

    def run_all(self, callback: Optional[Callable[[dict], None]] = None):
        while self.has_next():
            info = self.step()
            if callback:
                callback(info)


__all__ = ["AccessResult", "simulate_access", "CacheSimulator"]
