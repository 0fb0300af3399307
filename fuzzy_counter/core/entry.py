# entry.py
# A single stored string: the raw input plus its masked (canonical) form.

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Entry:
    """
    original: the first raw input that created the group (used for reporting)
    masked: canonical form used for indexing, scoring and counting
    """

    original: str
    masked: str
