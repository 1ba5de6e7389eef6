"""Configuration loading utilities."""

from __future__ import annotations

from .config import load_metric_config, load_yaml

__all__ = ["load_metric_config", "load_yaml"]
