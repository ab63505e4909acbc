import pytest
from src.data.access_log import AccessLog, AccessOutcome, Statistics, compute_statistics, hit_rate_history


def _log(hits):
    return AccessLog([
        AccessOutcome(step=i, address=i, hit=h, set_index=0, evicted=False)
        for i, h in enumerate(hits)
    ])


def test_empty_log_statistics_are_zero():
    s = compute_statistics([])
    assert s == Statistics(hits=0, misses=0, hit_rate=0.0)
    assert s.accesses == 0
    assert s.miss_rate == 0.0
    assert AccessLog().statistics == s
    assert hit_rate_history([]) == []


def test_statistics_consistency():
    log = _log([False, True, True, False, True])
    s = log.statistics
    assert s.hits == 3
    assert s.misses == 2
    assert s.hits + s.misses == len(log)
    assert s.hit_rate == pytest.approx(0.6)
    assert s.miss_rate == pytest.approx(0.4)
    assert s.as_dict()['accesses'] == 5


def test_hit_rate_history_is_running_rate():
    log = _log([False, True, True])
    assert log.hit_rate_history() == pytest.approx([0.0, 0.5, 2 / 3])


def test_truncate_returns_new_log():
    log = _log([False, True, True, True])
    short = log.truncate(2)
    assert len(short) == 2
    assert len(log) == 4
    assert short.statistics.hits == 1
    assert short[-1] == log[1]


def test_evictions_and_immutable_outcomes():
    log = AccessLog()
    log.append(AccessOutcome(0, 0, False, 0, False))
    log.append(AccessOutcome(1, 32, False, 0, True))
    assert log.evictions == 1
    assert [o.address for o in log] == [0, 32]
    with pytest.raises(AttributeError):
        log[0].hit = True
