# tests/test_report.py
import json
import io

from rich.console import Console

from fuzzy_counter.analytics.report import render_table, sort_counts, summary, write_json


def test_sort_counts_by_weight_then_key():
    counts = {"b": 2, "a": 2, "c": 5, "d": 1}
    assert sort_counts(counts) == [("c", 5), ("a", 2), ("b", 2), ("d", 1)]


def test_summary():
    assert summary(14, {"x": 3, "y": 10}) == {"data_count": 14, "result_count": 13, "groups": 2}


def test_render_table_limit():
    buf = io.StringIO()
    table = render_table({"alpha": 3, "beta": 1, "gamma": 2}, limit=2, console=Console(file=buf, width=120))
    assert table.row_count == 2
    out = buf.getvalue()
    assert "alpha" in out and "gamma" in out
    assert "beta" not in out


def test_write_json(tmp_path):
    p = tmp_path / "out.json"
    write_json(p, {"b": 1, "a": 4}, data_count=6)
    payload = json.loads(p.read_text(encoding="utf-8"))
    assert payload["summary"] == {"data_count": 6, "result_count": 5, "groups": 2}
    assert payload["groups"][0] == {"representative": "a", "count": 4}
