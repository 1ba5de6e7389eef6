from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML file from disk and return it as a dictionary."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration at {config_path} must be a mapping.")

    return data


def load_metric_config(path: str | Path) -> dict[str, Any]:
    """Load a metric enable/disable mapping, optionally nested under ``metrics``."""
    data = load_yaml(path)
    section = data.get("metrics", data)
    if section == "all":
        return {"all": True}
    if not isinstance(section, dict):
        raise ValueError(f"'metrics' section in {path} must be a mapping or 'all'.")
    return section
