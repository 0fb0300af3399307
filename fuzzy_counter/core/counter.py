# counter.py
"""
FuzzyCounter - groups near-duplicate strings and keeps a weighted count per group.

Flow per input:
 preprocess (mask, reject) -> tree descent -> best match under the terminal
 node -> either bump the matched group or insert a new entry/group.

Public API:
  - assign(text, weight=1) -> AssignResult
  - weighted_assign(text, weight) -> AssignResult
  - assign_many(texts) -> int (number of accepted-or-new assignments)
  - merge(counts) -> None   (feed another counter's counts() back in)
  - counts() -> Dict[original, weight]
  - masked_counts() -> Dict[masked, weight]
  - close() -> None         (closes the debug channel, if any)

Not thread-safe: one instance per thread, merge results afterwards
(see utils.threaded_runner.run_sharded).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional

from fuzzy_counter.context.preprocessor import PatternLike, Preprocessor
from fuzzy_counter.core.entry import Entry
from fuzzy_counter.core.matcher import accepts, best_match, get_algorithm
from fuzzy_counter.core.prefix_tree import PrefixTree
from fuzzy_counter.core.telemetry import AssignDebug, DebugChannel
from fuzzy_counter.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_STEP = 10
DEFAULT_THRESHOLD = 0.70


@dataclass
class CounterConfig:
    """Everything fixed for the lifetime of a counter."""

    step: int = DEFAULT_STEP
    score_threshold: float = DEFAULT_THRESHOLD
    ignore: List[PatternLike] = field(default_factory=list)
    reject: List[PatternLike] = field(default_factory=list)
    leaf_limit: int = 0
    algorithm: str = "levenshtein"

    def validate(self) -> "CounterConfig":
        if isinstance(self.step, bool) or not isinstance(self.step, int) or self.step < 1:
            raise ConfigurationError(f"step must be an integer >= 1, got {self.step!r}")
        if isinstance(self.score_threshold, bool) or not isinstance(self.score_threshold, (int, float)):
            raise ConfigurationError(f"score_threshold must be a number, got {self.score_threshold!r}")
        if not 0.0 <= self.score_threshold <= 1.0:
            raise ConfigurationError(f"score_threshold must be within [0, 1], got {self.score_threshold}")
        if isinstance(self.leaf_limit, bool) or not isinstance(self.leaf_limit, int) or self.leaf_limit < 0:
            raise ConfigurationError(f"leaf_limit must be an integer >= 0, got {self.leaf_limit!r}")
        get_algorithm(self.algorithm)
        return self


class AssignResult(NamedTuple):
    masked: str
    rejected: bool
    accepted: bool  # joined an existing group
    group: Optional[str]  # masked key that received the weight, None when rejected
    score: float


class FuzzyCounter:
    """
    Weighted near-duplicate counter.

    Args:
    step: chunk width of the prefix tree (>= 1)
    score_threshold: a candidate joins a group only if its score is strictly above this
    ignore: ordered removal patterns (masking)
    reject: patterns that drop an input when they match the masked form
    leaf_limit: 0 splits tree nodes on every insert, > 0 lets a node hold that many entries first
    algorithm: "levenshtein" (default) or "osa"
    debug: optional DebugChannel receiving one AssignDebug per assign() call
    """

    def __init__(
        self,
        step: int = DEFAULT_STEP,
        score_threshold: float = DEFAULT_THRESHOLD,
        ignore: Optional[Iterable[PatternLike]] = None,
        reject: Optional[Iterable[PatternLike]] = None,
        leaf_limit: int = 0,
        algorithm: str = "levenshtein",
        debug: Optional[DebugChannel] = None,
    ) -> None:
        self.config = CounterConfig(
            step=step,
            score_threshold=score_threshold,
            ignore=list(ignore or []),
            reject=list(reject or []),
            leaf_limit=leaf_limit,
            algorithm=algorithm,
        ).validate()
        self.id = uuid.uuid4().hex
        self.pre = Preprocessor(self.config.ignore, self.config.reject)
        self.tree = PrefixTree(step, leaf_limit)
        self.debug = debug
        self._counts: Dict[str, int] = {}
        logger.debug(
            "counter %s created (step=%d, threshold=%.2f, leaf_limit=%d, algorithm=%s)",
            self.id, step, score_threshold, leaf_limit, algorithm,
        )

    @classmethod
    def from_config(cls, config: CounterConfig, debug: Optional[DebugChannel] = None) -> "FuzzyCounter":
        return cls(
            step=config.step,
            score_threshold=config.score_threshold,
            ignore=config.ignore,
            reject=config.reject,
            leaf_limit=config.leaf_limit,
            algorithm=config.algorithm,
            debug=debug,
        )

    # builders ----------------------------------------------------------------
    def with_ignore(self, *patterns: PatternLike) -> "FuzzyCounter":
        """Append removal patterns. Only allowed before the first assignment."""
        self._ensure_empty("with_ignore")
        self.pre = self.pre.with_ignore(*patterns)
        self.config.ignore.extend(patterns)
        return self

    def with_reject(self, *patterns: PatternLike) -> "FuzzyCounter":
        """Append rejection patterns. Only allowed before the first assignment."""
        self._ensure_empty("with_reject")
        self.pre = self.pre.with_reject(*patterns)
        self.config.reject.extend(patterns)
        return self

    def _ensure_empty(self, what: str) -> None:
        if self._counts:
            raise ConfigurationError(f"{what}() called after strings were assigned")

    # assignment ----------------------------------------------------------------
    def assign(self, text: str, weight: int = 1) -> AssignResult:
        masked, rejected = self.pre.process(text)
        if rejected:
            self._emit(AssignDebug(self.id, text, masked, rejected=True))
            return AssignResult(masked, True, False, None, 0.0)

        node = self.tree.descend(masked)
        match = best_match(masked, node.start, self.tree.collect(node), self.config.algorithm)

        accepted = False
        score = 0.0
        if match is not None:
            score = match.score
            # an identical canonical form is the same group even at threshold 1.0
            accepted = accepts(score, self.config.score_threshold) or match.entry.masked == masked

        if accepted:
            group = match.entry.masked
        else:
            self.tree.insert(node, Entry(original=text, masked=masked))
            group = masked
        self._counts[group] = self._counts.get(group, 0) + weight

        if self.debug is not None:
            self._emit(
                AssignDebug(
                    self.id,
                    text,
                    masked,
                    best_match=match.entry.original if match else None,
                    best_match_masked=match.entry.masked if match else None,
                    best_match_score=score,
                    best_match_accepted=accepted,
                )
            )
        return AssignResult(masked, False, accepted, group, score)

    def weighted_assign(self, text: str, weight: int) -> AssignResult:
        return self.assign(text, weight)

    def assign_many(self, texts: Iterable[str]) -> int:
        """Assign every string with weight 1, return how many were not rejected."""
        kept = 0
        for t in texts:
            if not self.assign(t).rejected:
                kept += 1
        return kept

    def merge(self, counts: Mapping[str, int]) -> None:
        """Feed partial results (original -> weight) from another counter."""
        for original, weight in counts.items():
            self.assign(original, weight)

    def _emit(self, record: AssignDebug) -> None:
        if self.debug is not None:
            self.debug.emit(record)

    # results --------------------------------------------------------------------
    def counts(self) -> Dict[str, int]:
        """
        Group weights keyed by the original string that created each group
        (the first one seen, not necessarily the most frequent variant).
        """
        out: Dict[str, int] = {}
        seen = set()
        for e in self.tree.entries():
            if e.masked in seen:
                continue
            seen.add(e.masked)
            out[e.original] = self._counts.get(e.masked, 0)
        return out

    def masked_counts(self) -> Dict[str, int]:
        return dict(self._counts)

    def total(self) -> int:
        return sum(self._counts.values())

    def __len__(self) -> int:
        return len(self._counts)

    # lifecycle ------------------------------------------------------------------
    def close(self) -> None:
        if self.debug is not None:
            self.debug.close()
            if self.debug.dropped:
                logger.warning("counter %s: %d debug records dropped", self.id, self.debug.dropped)
        logger.debug("counter %s closed: %d groups, total %d", self.id, len(self), self.total())

    def __enter__(self) -> "FuzzyCounter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
