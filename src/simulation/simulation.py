"""Simulation wrapper

Turns a configuration plus a named access pattern (or an explicit address
list) into a trace and drives it through CacheSimulator.
"""
import logging
from typing import List, Optional, Sequence

from src.core.cache import CacheConfig, decompose
from src.core.simulator import CacheSimulator
from src.simulation.patterns import generate

logger = logging.getLogger(__name__)


class Simulation:
    def __init__(self, config: Optional[CacheConfig] = None, pattern: str = 'sequential',
                 addresses: Optional[Sequence[int]] = None):
        self.config = (config or CacheConfig()).validate()
        self.pattern = pattern
        self.addresses = list(addresses) if addresses is not None else None
        self.simulator = None

    def trace(self) -> List[int]:
        # an explicit address list wins over the named pattern
        if self.addresses is not None:
            return list(self.addresses)
        return generate(self.pattern, self.config)

    def _create_simulator(self):
        # Only create a simulator if one does not already exist, so repeated
        # runs see a warm cache.
        if self.simulator is None:
            self.simulator = CacheSimulator(self.config)

    def run_simulation(self, num_passes: int = 1) -> List[dict]:
        self._create_simulator()
        items = self.trace()
        # reject the whole trace up front so a bad address never gets queued
        for a in items:
            decompose(a, self.config)
        logger.info("running %s: %d accesses x %d passes (%d sets x %d ways)",
                    'custom trace' if self.addresses is not None else self.pattern,
                    len(items), num_passes, self.config.num_sets, self.config.associativity)
        results = []
        for p in range(num_passes):
            start = len(results)
            self.simulator.extend_sequence(items)
            self.simulator.run_all(results.append)
            for idx, info in enumerate(results[start:]):
                info['_pass'] = p
                info['_idx'] = idx
        stats = self.simulator.statistics
        logger.info("done: %d hits, %d misses, hit rate %.3f", stats.hits, stats.misses, stats.hit_rate)
        return results

    def summary(self) -> dict:
        self._create_simulator()
        data = self.config.to_dict()
        data['num_sets'] = self.config.num_sets
        data['pattern'] = self.pattern if self.addresses is None else None
        data.update(self.simulator.statistics.as_dict())
        data['evictions'] = self.simulator.log.evictions
        return data
