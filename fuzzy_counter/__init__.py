"""
fuzzy_counter

Near-duplicate string counting: strings that differ only by timestamps, ids
or small edits collapse into one weighted group.

    from fuzzy_counter import FuzzyCounter

    c = FuzzyCounter(step=2, score_threshold=0.70).with_ignore(r"[.!]$")
    for line in lines:
        c.assign(line)
    c.counts()  # {first original of each group: weight}
"""

from .core import (
    AssignDebug,
    AssignResult,
    CounterConfig,
    DebugChannel,
    Entry,
    FuzzyCounter,
    LoggingDebugSink,
    PrefixTree,
    similarity,
)
from .context import Preprocessor
from .errors import ConfigurationError

__all__ = [
    "AssignDebug",
    "AssignResult",
    "CounterConfig",
    "DebugChannel",
    "Entry",
    "FuzzyCounter",
    "LoggingDebugSink",
    "PrefixTree",
    "Preprocessor",
    "ConfigurationError",
    "similarity",
]

__version__ = "0.1.0"
