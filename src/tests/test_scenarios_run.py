import pytest
from src.core.cache import CacheConfig
from src.simulation import PATTERNS, Simulation, generate
from src.simulation.patterns import col_major, cycle, row_major, stride, thrashing


@pytest.mark.parametrize('config', [
    CacheConfig(),
    CacheConfig(array_size=32, line_size=2, cache_lines=4, associativity=2),
    CacheConfig(array_size=256, line_size=8, cache_lines=32, associativity=4),
    CacheConfig(array_size=50, line_size=4, cache_lines=8, associativity=8),
])
def test_every_pattern_stays_in_range(config):
    for name in PATTERNS:
        seq = generate(name, config)
        assert len(seq) > 0, f"Pattern {name} produced no accesses"
        assert all(0 <= a < config.array_size for a in seq)


def test_pattern_shapes():
    c = CacheConfig()
    assert generate('sequential', c) == list(range(64))
    assert generate('stride4', c) == list(range(0, 64, 4))
    assert row_major(CacheConfig(array_size=10)) == list(range(9))
    assert col_major(CacheConfig(array_size=9)) == [0, 3, 6, 1, 4, 7, 2, 5, 8]
    # direct-mapped, 8 sets of 4 elements: stride 32 wraps back to 0
    assert thrashing(c) == [0, 32, 0] * 4
    assert cycle([1, 2], 3) == [1, 2, 1, 2, 1, 2]
    with pytest.raises(ValueError):
        stride(0)


def test_unknown_pattern():
    with pytest.raises(KeyError) as exc:
        generate('diagonal', CacheConfig())
    assert 'sequential' in str(exc.value)


@pytest.mark.parametrize('name,hits,misses', [
    ('sequential', 48, 16),
    ('stride2', 16, 16),
    ('stride4', 0, 16),
    ('stride8', 0, 8),
    ('row_major', 48, 16),
    ('col_major', 0, 64),
    # rep boundaries repeat address 0 back to back: 3 hits
    ('thrashing', 3, 9),
])
def test_builtin_scenarios_default_cache(name, hits, misses):
    sim = Simulation(CacheConfig(), pattern=name)
    results = sim.run_simulation(num_passes=1)
    assert len(results) == hits + misses
    stats = sim.simulator.statistics
    assert (stats.hits, stats.misses) == (hits, misses)


def test_thrashing_pattern_defeats_associativity():
    config = CacheConfig(array_size=64, line_size=4, cache_lines=8, associativity=2)
    sim = Simulation(config, pattern='thrashing')
    sim.run_simulation()
    assert sim.simulator.statistics.hit_rate == 0.0
    assert sim.simulator.log.evictions == 16 - 2
