"""Regression residual metrics for plain and grouped pandas data frames."""

from __future__ import annotations

from .errors import InvalidConfiguration, LengthMismatch
from .evaluation import (
    METRIC_NAMES,
    call_evaluate_residuals,
    evaluate_residuals,
    gaussian_metrics,
    residual_metrics,
    resolve,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidConfiguration",
    "LengthMismatch",
    "METRIC_NAMES",
    "call_evaluate_residuals",
    "evaluate_residuals",
    "gaussian_metrics",
    "residual_metrics",
    "resolve",
]
