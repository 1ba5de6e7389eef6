"""Evaluation pipeline entrypoints."""

from __future__ import annotations

from .evaluate import EvaluateArgs, run_evaluate

__all__ = ["EvaluateArgs", "run_evaluate"]
