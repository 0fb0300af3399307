# fuzzy_counter/utils/__init__.py
# thin callers around the core: config, logging, ingestion, shard-and-merge

from .config_manager import Config
from .logger_utils import setup_logging, time_block
from .reader import read_column, read_lines
from .threaded_runner import run_parallel, run_sharded, shard

__all__ = [
    "Config",
    "setup_logging",
    "time_block",
    "read_column",
    "read_lines",
    "run_parallel",
    "run_sharded",
    "shard",
]
