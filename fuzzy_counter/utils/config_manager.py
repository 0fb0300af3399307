# config_manager.py - JSON config manager for counter settings

import json
import os
from typing import Any, Dict, Optional

from fuzzy_counter.core.counter import DEFAULT_STEP, DEFAULT_THRESHOLD, CounterConfig
from fuzzy_counter.errors import ConfigurationError

DEFAULTS: Dict[str, Any] = {
    "step": DEFAULT_STEP,  # chunk width of the prefix tree
    "score_threshold": DEFAULT_THRESHOLD,  # strict lower bound for joining a group
    "ignore": [],  # removal patterns, applied in order
    "reject": [],  # inputs matching any of these (after masking) are dropped
    "leaf_limit": 0,  # 0 = split on insert
    "algorithm": "levenshtein",
    "workers": 5,
    "column": "sentence",
}


class Config:
    """
    Settings loaded from a JSON file on top of DEFAULTS.
    A missing file just means defaults; a malformed one is an error since a
    silently ignored threshold would change the counts.
    """

    def __init__(self, path: Optional[str] = "config.json"):
        self.path = path
        self.data: Dict[str, Any] = json.loads(json.dumps(DEFAULTS))
        self._load()

    def _load(self):
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{self.path}: invalid JSON ({e})") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{self.path}: expected a JSON object")
        unknown = sorted(set(raw) - set(DEFAULTS))
        if unknown:
            raise ConfigurationError(f"{self.path}: unknown option(s) {', '.join(unknown)}")
        self.data.update(raw)
        self.validate()

    def save(self):
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def show(self):
        for k, v in self.data.items():
            print(f"{k:15} = {v}")

    def set(self, key, val):
        if key not in self.data:
            raise ConfigurationError(f"No such option: {key}")
        current = self.data[key]
        if isinstance(current, list):
            val = json.loads(val) if isinstance(val, str) and val.startswith("[") else [val]
        elif isinstance(val, str):
            val = type(current)(val)
        self.data[key] = val

    def update(self, **overrides):
        """Apply non-None overrides (CLI flags win over the file)."""
        for k, v in overrides.items():
            if v is None:
                continue
            if k not in self.data:
                raise ConfigurationError(f"No such option: {k}")
            self.data[k] = v

    def validate(self) -> None:
        """Runner settings that CounterConfig does not cover (workers, column)."""
        workers = self.data["workers"]
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ConfigurationError(f"workers must be an integer >= 1, got {workers!r}")
        column = self.data["column"]
        if not isinstance(column, str) or not column:
            raise ConfigurationError(f"column must be a non-empty string, got {column!r}")
        for key in ("ignore", "reject"):
            if not isinstance(self.data[key], list):
                raise ConfigurationError(f"{key} must be a list of patterns, got {self.data[key]!r}")

    def to_counter_config(self) -> CounterConfig:
        self.validate()
        d = self.data
        return CounterConfig(
            step=d["step"],
            score_threshold=d["score_threshold"],
            ignore=list(d["ignore"]),
            reject=list(d["reject"]),
            leaf_limit=d["leaf_limit"],
            algorithm=d["algorithm"],
        ).validate()
