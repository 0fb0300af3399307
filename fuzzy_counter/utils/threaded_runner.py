# threaded_runner.py - shard-and-merge: one counter per worker, merged sequentially afterwards.

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional

from fuzzy_counter.core.counter import CounterConfig, FuzzyCounter
from fuzzy_counter.core.telemetry import DebugChannel

logger = logging.getLogger(__name__)


def run_parallel(tasks: Iterable[Callable], max_workers: int = 4) -> List:
    """
    Run zero-argument callables on a thread pool; results come back in task
    order so the shard partials are always merged in the same sequence.
    An exception raised by any task propagates to the caller.
    """
    with ThreadPoolExecutor(max_workers=max_workers) as ex:
        futs = [ex.submit(t) for t in tasks]
        return [f.result() for f in futs]


def shard(texts: Iterable[str], n: int) -> List[List[str]]:
    """Round-robin split; keeps the relative order of inputs inside each shard."""
    shards: List[List[str]] = [[] for _ in range(max(1, n))]
    for i, t in enumerate(texts):
        shards[i % len(shards)].append(t)
    return shards


def _count_shard(texts: List[str], config: CounterConfig, debug: Optional[DebugChannel]) -> Dict[str, int]:
    c = FuzzyCounter.from_config(config, debug=debug)
    for t in texts:
        c.assign(t)
    return c.counts()


def run_sharded(
    texts: Iterable[str],
    config: CounterConfig,
    workers: int = 5,
    debug: Optional[DebugChannel] = None,
) -> FuzzyCounter:
    """
    Count texts with `workers` independent counters, then fold every partial
    counts() into one counter through weighted assigns.
    Totals per group do not depend on the sharding; which original ends up as
    a group's key can.
    The debug channel (if any) is shared by the workers and the merge
    counter; it is not closed here.
    """
    config.validate()
    shards = [s for s in shard(texts, workers) if s]
    logger.debug("counting %d shard(s) with %d worker(s)", len(shards), workers)

    partials = run_parallel(
        [lambda s=s: _count_shard(s, config, debug) for s in shards],
        max_workers=max(1, workers),
    )

    merged = FuzzyCounter.from_config(config, debug=debug)
    for counts in partials:
        merged.merge(counts)
    return merged
