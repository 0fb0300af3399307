# matcher.py
# Normalized edit-distance scoring and best-candidate selection.
# - distances work on code points (python str indexing), unit costs
# - levenshtein keeps an early-exit cutoff so candidates that cannot beat the
#   current best are abandoned part way through the DP table
# - the search stops as soon as a perfect score is seen

from __future__ import annotations

from typing import Callable, Dict, Iterable, NamedTuple, Optional

from fuzzy_counter.core.entry import Entry
from fuzzy_counter.errors import ConfigurationError

DistanceFn = Callable[[str, str, Optional[int]], int]


def levenshtein(a: str, b: str, max_dist: Optional[int] = None) -> int:
    """
    Levenshtein distance (insert/delete/substitute, cost 1) between two
    masked suffixes.
    best_match passes max_dist = the largest distance that could still beat
    the current best score, so candidates that lose are abandoned after a few
    rows; any distance above max_dist is reported as max_dist + 1.
    Without max_dist the exact distance is returned.
    """
    if a == b:
        return 0

    # rows walk the longer suffix, columns the shorter one
    if len(a) < len(b):
        a, b = b, a

    la, lb = len(a), len(b)
    if max_dist is not None and la - lb > max_dist:
        return max_dist + 1
    if lb == 0:
        return la

    prev = list(range(lb + 1))
    for i in range(1, la + 1):
        ca = a[i - 1]
        curr = [i]
        row_min = i
        for j in range(1, lb + 1):
            ins = curr[j - 1] + 1
            delete = prev[j] + 1
            replace = prev[j - 1] + (0 if ca == b[j - 1] else 1)
            val = ins if ins < delete else delete
            if replace < val:
                val = replace
            curr.append(val)
            if val < row_min:
                row_min = val

        # later rows never drop below this minimum, so the candidate is already out
        if max_dist is not None and row_min > max_dist:
            return max_dist + 1
        prev = curr
    if max_dist is not None and prev[-1] > max_dist:
        return max_dist + 1
    return prev[-1]


def osa_distance(a: str, b: str, max_dist: Optional[int] = None) -> int:
    """
    Optimal string alignment distance: Levenshtein plus transposition of two
    adjacent characters (each substring edited at most once).
    max_dist is accepted for signature compatibility and only used for the
    length bound.
    """
    if a == b:
        return 0
    la, lb = len(a), len(b)
    if max_dist is not None and abs(la - lb) > max_dist:
        return max_dist + 1
    if la == 0 or lb == 0:
        return la or lb

    prev2: list = []
    prev = list(range(lb + 1))
    for i in range(1, la + 1):
        curr = [i] + [0] * lb
        for j in range(1, lb + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            val = min(prev[j] + 1, curr[j - 1] + 1, prev[j - 1] + cost)
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                val = min(val, prev2[j - 2] + 1)
            curr[j] = val
        prev2, prev = prev, curr
    return prev[-1]


ALGORITHMS: Dict[str, DistanceFn] = {
    "levenshtein": levenshtein,
    "osa": osa_distance,
}


def get_algorithm(name: str) -> DistanceFn:
    try:
        return ALGORITHMS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown algorithm {name!r}, expected one of {sorted(ALGORITHMS)}"
        ) from None


def similarity(a: str, b: str, algorithm: str = "levenshtein") -> float:
    """1 - distance / max(len(a), len(b)); two empty strings score 1.0."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - get_algorithm(algorithm)(a, b, None) / longest


class Match(NamedTuple):
    entry: Entry
    score: float


def best_match(
    masked: str,
    start: int,
    candidates: Iterable[Entry],
    algorithm: str = "levenshtein",
) -> Optional[Match]:
    """
    Score every candidate against the query on the suffix after `start`
    (everything before it is identical by construction of the tree).

    Keeps the first candidate with the strictly highest score; a candidate
    scoring 0 never becomes the best. Ties follow candidate order, which the
    tree does not guarantee, so callers must not depend on which of two
    equal-scoring candidates wins. Stops early on a perfect score.
    """
    distance = get_algorithm(algorithm)
    query = masked[start:]
    best: Optional[Entry] = None
    best_score = 0.0

    for cand in candidates:
        suffix = cand.masked[start:]
        longest = max(len(query), len(suffix))
        if longest == 0:
            score = 1.0
        else:
            # anything above this distance scores <= best_score and cannot win
            cutoff = int(longest * (1.0 - best_score))
            d = distance(query, suffix, cutoff)
            if d > cutoff:
                continue
            score = 1.0 - d / longest

        if score > best_score:
            best, best_score = cand, score
            if score == 1.0:
                break

    if best is None:
        return None
    return Match(best, best_score)


def accepts(score: float, threshold: float) -> bool:
    """Acceptance is strict: a score equal to the threshold starts a new group."""
    return score > threshold
