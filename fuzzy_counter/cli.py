"""
cli.py - count near-duplicate lines of a CSV column or a plain text/log file.

Usage:
    fuzzy-counter data/sample.csv --column sentence --step 2 --threshold 0.7 \
        --ignore "[.!]$" --ignore "[,']" --reject "\\d{4}"
    fuzzy-counter app.log --workers 8 --limit 20 --json groups.json
    fuzzy-counter --config data/config.example.json --show-config

Settings come from --config (JSON, see utils.config_manager.DEFAULTS);
flags given on the command line override the file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from fuzzy_counter import __version__
from fuzzy_counter.analytics.report import render_table, summary, write_json
from fuzzy_counter.core.matcher import ALGORITHMS
from fuzzy_counter.core.telemetry import DebugChannel, LoggingDebugSink
from fuzzy_counter.errors import ConfigurationError
from fuzzy_counter.utils.config_manager import Config
from fuzzy_counter.utils.logger_utils import DEFAULT_LOG_PATH, setup_logging, time_block
from fuzzy_counter.utils.reader import read_column, read_lines
from fuzzy_counter.utils.threaded_runner import run_sharded

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _non_negative(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"expected a number >= 0, got {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fuzzy-counter", description="Group and count near-duplicate strings.")
    p.add_argument("path", type=Path, nargs="?", help="CSV file or text/log file (one string per line)")
    p.add_argument("--format", choices=("auto", "csv", "lines"), default="auto",
                   help="input format; auto picks csv for *.csv")
    p.add_argument("--column", help="CSV column to read (default: sentence)")
    p.add_argument("--config", help="JSON settings file")
    p.add_argument("--step", type=int, help="chunk width of the prefix tree")
    p.add_argument("--threshold", type=float, dest="score_threshold",
                   help="similarity a match must exceed to join a group")
    p.add_argument("--ignore", action="append", metavar="REGEX", help="removal pattern (repeatable, ordered)")
    p.add_argument("--reject", action="append", metavar="REGEX", help="rejection pattern (repeatable)")
    p.add_argument("--leaf-limit", type=int, dest="leaf_limit", help="pending entries per node before splitting")
    p.add_argument("--algorithm", choices=sorted(ALGORITHMS))
    p.add_argument("--workers", type=int, help="number of parallel counters")
    p.add_argument("--limit", type=_non_negative, default=0, help="show only the N largest groups (0 = all)")
    p.add_argument("--json", type=Path, dest="json_out", help="also write results to this file")
    p.add_argument("--debug", action="store_true", help="log one debug line per assignment")
    p.add_argument("--log-level", default="INFO", type=str.upper, choices=LOG_LEVELS)
    p.add_argument("--log-file", nargs="?", const=DEFAULT_LOG_PATH,
                   help=f"append logs to this file as well (default: {DEFAULT_LOG_PATH})")
    p.add_argument("--no-color", action="store_true")
    p.add_argument("--show-config", action="store_true", help="print the effective settings and exit")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _load_settings(args: argparse.Namespace) -> Config:
    cfg = Config(args.config)
    cfg.update(
        step=args.step,
        score_threshold=args.score_threshold,
        ignore=args.ignore,
        reject=args.reject,
        leaf_limit=args.leaf_limit,
        algorithm=args.algorithm,
        workers=args.workers,
        column=args.column,
    )
    return cfg


def _read(args: argparse.Namespace, column: str) -> List[str]:
    fmt = args.format
    if fmt == "auto":
        fmt = "csv" if args.path.suffix.lower() == ".csv" else "lines"
    if fmt == "csv":
        return list(read_column(args.path, column))
    return list(read_lines(args.path))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = "DEBUG" if args.debug else args.log_level
    setup_logging(level, args.log_file, use_color=not args.no_color)
    console = Console(no_color=args.no_color)

    try:
        cfg = _load_settings(args)
        counter_cfg = cfg.to_counter_config()
    except ConfigurationError as e:
        parser.error(str(e))  # exits with status 2

    if args.show_config:
        cfg.show()
        return 0
    if args.path is None:
        parser.error("the following arguments are required: path")

    try:
        texts = _read(args, cfg.data["column"])
    except (OSError, KeyError, UnicodeDecodeError) as e:
        logger.error("cannot read %s: %s", args.path, e)
        return 1

    channel = sink = None
    if args.debug:
        channel = DebugChannel(maxsize=1000, policy="block")
        sink = LoggingDebugSink(channel).start()

    with time_block("counting") as timer:
        counter = run_sharded(texts, counter_cfg, workers=cfg.data["workers"], debug=channel)
    counter.close()
    if sink is not None:
        sink.join()

    counts = counter.counts()
    render_table(counts, limit=args.limit or None, console=console)
    stats = summary(len(texts), counts)
    console.print(
        f"Data Count: {stats['data_count']}  Result Count: {stats['result_count']}  "
        f"Groups: {stats['groups']}  Time: {timer.elapsed:.3f}s"
    )
    if args.json_out:
        write_json(args.json_out, counts, len(texts))
        logger.info("results written to %s", args.json_out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
