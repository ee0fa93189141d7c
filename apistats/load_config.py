"""Logic for loading and merging configuration files."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from apistats.deep_merge import deep_merge

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "path_separator": "::",
    "exclude_paths": [],
    "stability": {
        "unstable_markers": ["#[unstable"],
    },
    "generics": {
        "count_lifetimes": False,
        "count_synthetic": False,
    },
    "output": {
        "table_format": "simple",
        "ratio_precision": 4,
    },
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if not p.exists():
            logger.warning("Config file %s not found; using defaults", p)
            return config
        user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(user_config, dict):
            msg = f"config file {p} must contain a mapping at the top level"
            raise ValueError(msg)
        config = deep_merge(config, user_config)
    return config
