# telemetry.py
# Optional, fire-and-forget debug records for every assignment.
# The counting path only ever calls DebugChannel.emit(), which never blocks
# under the default "drop" policy and never raises.

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Iterator, Optional

from fuzzy_counter.errors import ConfigurationError

logger = logging.getLogger(__name__)

POLICIES = ("drop", "block")
_CLOSED = object()


@dataclass(frozen=True)
class AssignDebug:
    """One record per assign() call, whatever the outcome."""

    counter_id: str
    input: str
    masked_input: str
    rejected: bool = False
    best_match: Optional[str] = None
    best_match_masked: Optional[str] = None
    best_match_score: float = 0.0
    best_match_accepted: bool = False

    def describe(self) -> str:
        return (
            f"Counter ID: {self.counter_id}, Input: {self.input}, "
            f"Masked Input: {self.masked_input}, Rejected: {self.rejected}, "
            f"Best Match: {self.best_match}, Best Match Masked: {self.best_match_masked}, "
            f"Best Match Score: {self.best_match_score:.2f}, "
            f"Match Accepted: {self.best_match_accepted}"
        )


class DebugChannel:
    """
    Bounded queue of AssignDebug records.
     - policy="drop": a full queue drops the record and bumps `dropped`
     - policy="block": emit waits for the consumer (caller's choice)
    Iterating the channel yields records until close() is called.
    """

    def __init__(self, maxsize: int = 1000, policy: str = "drop") -> None:
        if policy not in POLICIES:
            raise ConfigurationError(f"unknown debug policy {policy!r}, expected one of {POLICIES}")
        self._q: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self.policy = policy
        self.dropped = 0
        self.closed = False
        # emit() is called from every shard worker
        self._lock = threading.Lock()

    def emit(self, record: AssignDebug) -> None:
        if self.closed:
            self._drop()
            return
        if self.policy == "block":
            self._q.put(record)
            return
        try:
            self._q.put_nowait(record)
        except queue.Full:
            self._drop()

    def close(self) -> None:
        """Mark the end of the stream. On a full queue the oldest record makes room for the marker."""
        if self.closed:
            return
        self.closed = True
        while True:
            try:
                self._q.put_nowait(_CLOSED)
                return
            except queue.Full:
                try:
                    self._q.get_nowait()
                    self._drop()
                except queue.Empty:
                    pass

    def _drop(self) -> None:
        with self._lock:
            self.dropped += 1

    def get(self, timeout: Optional[float] = None) -> Optional[AssignDebug]:
        """Next record, or None once the channel is closed."""
        item = self._q.get(timeout=timeout)
        if item is _CLOSED:
            # leave the marker for any other consumer
            self._q.put_nowait(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def __iter__(self) -> Iterator[AssignDebug]:
        while True:
            rec = self.get()
            if rec is None:
                return
            yield rec

    def qsize(self) -> int:
        return self._q.qsize()


class LoggingDebugSink:
    """Background consumer that logs every record of a channel at DEBUG level."""

    def __init__(self, channel: DebugChannel, log: Optional[logging.Logger] = None) -> None:
        self.channel = channel
        self.log = log or logger
        self.seen = 0
        self._thread = threading.Thread(target=self._run, name="debug-sink", daemon=True)

    def start(self) -> "LoggingDebugSink":
        self._thread.start()
        return self

    def _run(self) -> None:
        for rec in self.channel:
            self.seen += 1
            self.log.debug("DEBUG - %s", rec.describe())

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)
