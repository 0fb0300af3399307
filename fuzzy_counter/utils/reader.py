# reader.py - row/line ingestion feeding strings to a counter

import csv
from pathlib import Path
from typing import Iterator, Union

PathLike = Union[str, Path]


def read_column(path: PathLike, column: str, encoding: str = "utf-8") -> Iterator[str]:
    """Yield one field per CSV row. A header without `column` raises KeyError."""
    with open(path, "r", encoding=encoding, newline="") as fh:
        reader = csv.DictReader(fh)
        if reader.fieldnames is None or column not in reader.fieldnames:
            raise KeyError(f"column {column!r} not found in {path} (have: {reader.fieldnames})")
        for row in reader:
            value = row.get(column)
            if value is not None:
                yield value


def read_lines(path: PathLike, encoding: str = "utf-8") -> Iterator[str]:
    """Yield stripped, non-empty lines (log files, one sentence per line)."""
    with open(path, "r", encoding=encoding) as fh:
        for ln in fh:
            ln = ln.strip()
            if ln:
                yield ln
