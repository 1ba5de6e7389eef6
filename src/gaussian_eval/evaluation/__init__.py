"""Residual metric selection, computation and group-wise evaluation."""

from __future__ import annotations

from .grouped import GroupSlice, call_evaluate_residuals, evaluate_residuals, partition_groups
from .metrics import TargetDescriptors, residual_metrics, target_descriptors
from .selection import (
    METRIC_NAMES,
    METRICS,
    Metric,
    MetricInfo,
    available_metrics,
    default_metrics,
    gaussian_metrics,
    resolve,
)

__all__ = [
    "GroupSlice",
    "METRICS",
    "METRIC_NAMES",
    "Metric",
    "MetricInfo",
    "TargetDescriptors",
    "available_metrics",
    "call_evaluate_residuals",
    "default_metrics",
    "evaluate_residuals",
    "gaussian_metrics",
    "partition_groups",
    "residual_metrics",
    "resolve",
    "target_descriptors",
]
