"""
report.py - ordering and rendering of counter results.

Functions:
 - sort_counts(counts): (key, weight) pairs, heaviest first, ties by key.
 - summary(data_count, counts): input vs. counted totals.
 - render_table(counts, limit): rich table of the top groups.
 - write_json(path, counts, data_count): machine-readable dump.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from rich import box
from rich.console import Console
from rich.table import Table


def sort_counts(counts: Mapping[str, int]) -> List[Tuple[str, int]]:
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def summary(data_count: int, counts: Mapping[str, int]) -> Dict[str, int]:
    """
    data_count: inputs read; result_count: weight that made it into a group
    (smaller when rejection patterns dropped inputs).
    """
    return {
        "data_count": data_count,
        "result_count": sum(counts.values()),
        "groups": len(counts),
    }


def render_table(
    counts: Mapping[str, int],
    limit: Optional[int] = None,
    console: Optional[Console] = None,
    title: str = "Groups",
) -> Table:
    """Print the heaviest groups and return the table (handy for tests)."""
    rows = sort_counts(counts)
    if limit:
        rows = rows[:limit]
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Count", justify="right", style="bold cyan")
    table.add_column("Representative", overflow="fold")
    for i, (key, weight) in enumerate(rows, 1):
        table.add_row(str(i), str(weight), key)
    (console or Console()).print(table)
    return table


def write_json(path: Path, counts: Mapping[str, int], data_count: int) -> None:
    payload = {
        "summary": summary(data_count, counts),
        "groups": [{"representative": k, "count": v} for k, v in sort_counts(counts)],
    }
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
