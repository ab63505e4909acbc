"""Access-pattern generators.

Each generator takes a CacheConfig and returns a finite list of element
indices in [0, array_size). They know nothing about cache state.
"""
import math
from typing import Callable, Dict, Iterable, List, NamedTuple

from src.core.cache import CacheConfig


class Pattern(NamedTuple):
    label: str
    description: str
    generate: Callable[[CacheConfig], List[int]]


def sequential(config: CacheConfig) -> List[int]:
    return list(range(config.array_size))


def stride(step: int) -> Callable[[CacheConfig], List[int]]:
    if step <= 0:
        raise ValueError("stride must be >= 1")

    def generate(config: CacheConfig) -> List[int]:
        return list(range(0, config.array_size, step))
    return generate


def row_major(config: CacheConfig) -> List[int]:
    dim = math.isqrt(config.array_size)
    return [row * dim + col for row in range(dim) for col in range(dim)]


def col_major(config: CacheConfig) -> List[int]:
    dim = math.isqrt(config.array_size)
    return [row * dim + col for col in range(dim) for row in range(dim)]


def thrashing(config: CacheConfig, reps: int = 4) -> List[int]:
    # associativity + 2 lines that all land in set 0
    step = config.num_sets * config.line_size
    return [(i * step) % config.array_size
            for _ in range(reps)
            for i in range(config.associativity + 2)]


def cycle(addresses: Iterable[int], reps: int) -> List[int]:
    addresses = list(addresses)
    return [a for _ in range(reps) for a in addresses]


PATTERNS: Dict[str, Pattern] = {
    'sequential': Pattern('Sequential Access', 'A[0], A[1], A[2], ... best case for spatial locality', sequential),
    'stride2': Pattern('Stride-2', 'A[0], A[2], A[4], ... every other element', stride(2)),
    'stride4': Pattern('Stride-4', 'A[0], A[4], A[8], ... skips cache line elements', stride(4)),
    'stride8': Pattern('Stride-8', 'A[0], A[8], A[16], ... poor spatial locality', stride(8)),
    'row_major': Pattern('Row-Major (Good)', '2D array traversal row by row, cache-friendly', row_major),
    'col_major': Pattern('Column-Major (Bad)', '2D array traversal column by column, cache-unfriendly', col_major),
    'thrashing': Pattern('Thrashing', 'Repeated access to addresses that map to the same set, worst case', thrashing),
}


def generate(name: str, config: CacheConfig) -> List[int]:
    try:
        pattern = PATTERNS[name]
    except KeyError:
        raise KeyError(f"unknown pattern {name!r}; choose from {', '.join(PATTERNS)}") from None
    return pattern.generate(config)


__all__ = ["Pattern", "PATTERNS", "generate", "sequential", "stride", "row_major", "col_major", "thrashing", "cycle"]
