import csv
import json

from src.data.access_log import AccessLog, AccessOutcome
from src.data.stats_export import Exporter, export_chart_json, export_chart_pdf


def _log():
    return AccessLog([
        AccessOutcome(0, 0, False, 0, False),
        AccessOutcome(1, 1, True, 0, False),
        AccessOutcome(2, 32, False, 0, True),
        AccessOutcome(3, 33, True, 0, False),
    ])


def test_export_stats_csv(tmp_path):
    path = tmp_path / 'stats.csv'
    Exporter.export_stats_csv(str(path), _log().statistics)
    with open(path, newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0] == ['accesses', 'hits', 'misses', 'hit_rate', 'miss_rate']
    assert rows[1] == ['4', '2', '2', '0.5', '0.5']


def test_export_log_csv(tmp_path):
    path = tmp_path / 'log.csv'
    Exporter.export_log_csv(str(path), _log())
    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 4
    assert rows[2] == {'step': '2', 'address': '32', 'hit': '0', 'set_index': '0', 'evicted': '1'}


def test_export_chart_json(tmp_path):
    log = _log()
    path = export_chart_json(log.hit_rate_history(), log.statistics.as_dict(), str(tmp_path / 'chart.json'))
    with open(path, encoding='utf-8') as fh:
        data = json.load(fh)
    assert data['hit_rate_history'] == [0.0, 0.5, 1 / 3, 0.5]
    assert data['stats']['hits'] == 2


def test_export_chart_pdf(tmp_path):
    path = export_chart_pdf(_log().hit_rate_history(), str(tmp_path / 'chart.pdf'))
    with open(path, 'rb') as fh:
        assert fh.read(4) == b'%PDF'
