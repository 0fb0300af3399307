# tests/test_matcher.py
# distance functions, similarity normalization and best-candidate selection

import pytest

from fuzzy_counter.core.entry import Entry
from fuzzy_counter.core.matcher import (
    accepts,
    best_match,
    get_algorithm,
    levenshtein,
    osa_distance,
    similarity,
)
from fuzzy_counter.errors import ConfigurationError


@pytest.mark.parametrize(
    "a, b, d",
    [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("boot", "snake", 5),
        ("same", "same", 0),
        ("naïve", "naive", 1),  # code points, not bytes
        ("日本語", "日本", 1),
    ],
)
def test_levenshtein(a, b, d):
    assert levenshtein(a, b) == d
    assert levenshtein(b, a) == d


def test_levenshtein_cutoff():
    # real distance 3, anything above the cutoff is reported as cutoff + 1
    assert levenshtein("kitten", "sitting", max_dist=1) == 2
    assert levenshtein("kitten", "sitting", max_dist=3) == 3
    assert levenshtein("a", "abcdef", max_dist=2) == 3


def test_osa_counts_transposition_once():
    assert osa_distance("ab", "ba") == 1
    assert levenshtein("ab", "ba") == 2
    assert osa_distance("ca", "abc") == 3
    assert osa_distance("kitten", "sitting") == 3


def test_similarity_bounds():
    assert similarity("", "") == 1.0
    assert similarity("abc", "abc") == 1.0
    assert similarity("abc", "") == 0.0
    assert similarity("abcd", "abcx") == pytest.approx(0.75)
    assert similarity("ab", "ba", algorithm="osa") == pytest.approx(0.5)


def test_unknown_algorithm():
    with pytest.raises(ConfigurationError):
        get_algorithm("soundex")
    with pytest.raises(ConfigurationError):
        similarity("a", "b", algorithm="soundex")


def test_accepts_is_strict():
    assert not accepts(0.7, 0.7)
    assert accepts(0.71, 0.7)
    assert not accepts(1.0, 1.0)
    assert accepts(0.01, 0.0)


def _entries(*words):
    return [Entry(w, w) for w in words]


def test_best_match_picks_highest():
    cands = _entries("hello world", "hello word", "goodbye")
    m = best_match("hello wordl", 0, cands)
    assert m is not None
    # "wordl" -> "word" is one deletion, "wordl" -> "world" two edits
    assert m.entry.masked == "hello word"
    assert m.score == pytest.approx(1 - 1 / 11)


def test_best_match_uses_suffix_after_start():
    cands = _entries("prefix-abcd")
    # only "abcx" vs "abcd" is compared
    m = best_match("prefix-abcx", 7, cands)
    assert m.score == pytest.approx(0.75)
    assert best_match("prefix-abcx", 0, cands).score == pytest.approx(1 - 1 / 11)


def test_best_match_short_circuits_on_perfect_score():
    seen = []

    class Spy:
        def __init__(self, word):
            self.word = word

        @property
        def masked(self):
            seen.append(self.word)
            return self.word

    cands = [Spy("abc"), Spy("abd"), Spy("zzz")]
    m = best_match("abc", 0, cands)
    assert m.score == 1.0
    assert seen == ["abc"]


def test_best_match_first_seen_wins_ties():
    cands = _entries("abx", "aby")
    assert best_match("abz", 0, cands).entry.masked == "abx"


def test_best_match_empty_and_zero_scores():
    assert best_match("abc", 0, []) is None
    # score 0 never becomes the best match
    assert best_match("abc", 0, _entries("xyz")) is None
    # both suffixes empty -> perfect match
    m = best_match("ab", 2, _entries("ab"))
    assert m.score == 1.0
