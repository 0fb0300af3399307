# tests/test_telemetry.py
# the debug channel observes assignments without changing them

import logging
import threading

import pytest

from fuzzy_counter import ConfigurationError, DebugChannel, FuzzyCounter, LoggingDebugSink
from fuzzy_counter.core.telemetry import AssignDebug


def _new_counter(debug=None):
    return (
        FuzzyCounter(step=2, score_threshold=0.70, debug=debug)
        .with_ignore(r"[.!]$", r"[,']")
        .with_reject(r"\d{4}")
    )


def test_one_record_per_assign(sentences):
    ch = DebugChannel(maxsize=100)
    c = _new_counter(ch)
    for s in sentences:
        c.assign(s)
    c.close()
    records = list(ch)
    assert len(records) == len(sentences)
    assert all(r.counter_id == c.id for r in records)

    rejected = [r for r in records if r.rejected]
    assert [r.input for r in rejected] == ["2024-09-08T23:30:03.333"]

    snail = next(r for r in records if r.input == "There's a snail in my boot.")
    assert snail.masked_input == "Theres a snail in my boot"
    assert snail.best_match == "There's a snake in my boot."
    assert snail.best_match_masked == "Theres a snake in my boot"
    assert snail.best_match_accepted
    assert snail.best_match_score > 0.9

    first = records[0]
    assert first.best_match is None
    assert first.best_match_accepted is False


def test_debug_channel_does_not_change_counts(sentences, expected_counts):
    ch = DebugChannel(maxsize=2, policy="drop")
    c = _new_counter(ch)
    for s in sentences:
        c.assign(s)
    assert c.counts() == expected_counts
    # nobody consumed, so everything past the first two records was dropped
    assert ch.dropped == len(sentences) - 2


def test_close_on_full_channel_does_not_block():
    ch = DebugChannel(maxsize=1)
    ch.emit(AssignDebug("id", "a", "a"))
    ch.close()
    assert list(ch) == []
    assert ch.dropped == 1
    # emitting after close is a no-op
    ch.emit(AssignDebug("id", "b", "b"))
    assert ch.dropped == 2


def test_drops_counted_across_threads():
    ch = DebugChannel(maxsize=1)
    ch.emit(AssignDebug("id", "full", "full"))
    rec = AssignDebug("id", "x", "x")

    def spam():
        for _ in range(2000):
            ch.emit(rec)

    threads = [threading.Thread(target=spam) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert ch.dropped == 8 * 2000
    assert ch.qsize() == 1


def test_unknown_policy():
    with pytest.raises(ConfigurationError):
        DebugChannel(policy="spill")


def test_logging_sink(caplog):
    log = logging.getLogger("tests.debug_sink")
    caplog.set_level(logging.DEBUG, logger="tests.debug_sink")
    ch = DebugChannel(maxsize=10, policy="block")
    sink = LoggingDebugSink(ch, log=log).start()
    with _new_counter(ch) as c:
        c.assign("There's a snake in my boot.")
        c.assign("There's a snail in my boot.")
    sink.join(timeout=5)
    assert sink.seen == 2
    lines = [r.getMessage() for r in caplog.records if r.name == "tests.debug_sink"]
    assert len(lines) == 2
    assert "Match Accepted: True" in lines[1]
