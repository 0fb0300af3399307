"""
fuzzy_counter.core

The matching engine:
 - Entry: (original, masked) pair stored in the tree
 - PrefixTree: chunk-keyed trie that narrows the candidate set
 - matcher: normalized edit-distance scoring and best-candidate selection
 - FuzzyCounter: preprocess -> descend -> match -> count
 - telemetry: optional per-assignment debug records
"""

from .entry import Entry
from .prefix_tree import PrefixNode, PrefixTree, chunk_at
from .matcher import Match, best_match, levenshtein, osa_distance, similarity
from .counter import AssignResult, CounterConfig, FuzzyCounter
from .telemetry import AssignDebug, DebugChannel, LoggingDebugSink

__all__ = [
    "Entry",
    "PrefixNode",
    "PrefixTree",
    "chunk_at",
    "Match",
    "best_match",
    "levenshtein",
    "osa_distance",
    "similarity",
    "AssignResult",
    "CounterConfig",
    "FuzzyCounter",
    "AssignDebug",
    "DebugChannel",
    "LoggingDebugSink",
]
