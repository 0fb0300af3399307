# fuzzy_counter/analytics/__init__.py
# reporting helpers for counter results

from .report import render_table, sort_counts, summary, write_json

__all__ = ["render_table", "sort_counts", "summary", "write_json"]
