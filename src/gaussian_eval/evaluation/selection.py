"""Metric name universe and enable/disable resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping

import numpy as np

from gaussian_eval.errors import InvalidConfiguration

ALL_KEY = "all"


class Metric(str, Enum):
    MAE = "MAE"
    RMSE = "RMSE"
    NRMSE_RNG = "NRMSE(RNG)"
    NRMSE_IQR = "NRMSE(IQR)"
    NRMSE_STD = "NRMSE(STD)"
    NRMSE_AVG = "NRMSE(AVG)"
    RSE = "RSE"
    RRSE = "RRSE"
    RAE = "RAE"
    RMSLE = "RMSLE"
    MALE = "MALE"
    MAPE = "MAPE"
    MSE = "MSE"
    TAE = "TAE"
    TSE = "TSE"


@dataclass(frozen=True)
class MetricInfo:
    """Metadata describing one metric in the universe."""

    metric: Metric
    description: str
    default: bool

    @property
    def name(self) -> str:
        return self.metric.value


_INFOS: tuple[MetricInfo, ...] = (
    MetricInfo(Metric.MAE, "Mean Absolute Error", True),
    MetricInfo(Metric.RMSE, "Root Mean Square Error", True),
    MetricInfo(Metric.NRMSE_RNG, "Normalized RMSE (by target range)", False),
    MetricInfo(Metric.NRMSE_IQR, "Normalized RMSE (by target IQR)", True),
    MetricInfo(Metric.NRMSE_STD, "Normalized RMSE (by target STD)", False),
    MetricInfo(Metric.NRMSE_AVG, "Normalized RMSE (by target mean)", False),
    MetricInfo(Metric.RSE, "Relative Squared Error", False),
    MetricInfo(Metric.RRSE, "Root Relative Squared Error", True),
    MetricInfo(Metric.RAE, "Relative Absolute Error", True),
    MetricInfo(Metric.RMSLE, "Root Mean Squared Log Error", True),
    MetricInfo(Metric.MALE, "Mean Absolute Log Error", False),
    MetricInfo(Metric.MAPE, "Mean Absolute Percentage Error", False),
    MetricInfo(Metric.MSE, "Mean Squared Error", False),
    MetricInfo(Metric.TAE, "Total Absolute Error", False),
    MetricInfo(Metric.TSE, "Total Squared Error", False),
)

METRICS: Mapping[str, MetricInfo] = MappingProxyType({info.name: info for info in _INFOS})
METRIC_NAMES: tuple[str, ...] = tuple(METRICS)

# Keyword spelling used by gaussian_metrics(), e.g. "NRMSE(IQR)" -> "nrmse_iqr".
_KEYWORDS: Mapping[str, str] = MappingProxyType(
    {member.name.lower(): member.value for member in Metric}
)


def available_metrics() -> Iterable[MetricInfo]:
    """Iterate over metadata for every metric, in output order."""
    yield from _INFOS


def default_metrics() -> list[str]:
    """Names of the metrics enabled when no configuration is given."""
    return [info.name for info in _INFOS if info.default]


def _is_flag(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def _normalize(config: Any) -> Mapping[str, Any]:
    if config is None:
        return {}
    if isinstance(config, str):
        if config == ALL_KEY:
            return {ALL_KEY: True}
        raise InvalidConfiguration(
            f"Metric configuration string must be '{ALL_KEY}', got '{config}'."
        )
    if not isinstance(config, Mapping):
        raise InvalidConfiguration(
            "Metric configuration must be a mapping of metric names to booleans, "
            f"got {type(config).__name__}."
        )
    return config


def validate_config(config: Any) -> Dict[str, bool]:
    """Check a metric configuration and return it as a plain dict."""
    mapping = _normalize(config)
    validated: Dict[str, bool] = {}
    for key, value in mapping.items():
        if not isinstance(key, str) or not key:
            raise InvalidConfiguration(f"Metric configuration contains an unnamed entry: {key!r}.")
        if key != ALL_KEY and key not in METRICS:
            raise InvalidConfiguration(
                f"'{key}' is not a known metric. Available: {', '.join(METRIC_NAMES)}."
            )
        if not _is_flag(value):
            raise InvalidConfiguration(
                f"Value for metric '{key}' must be a boolean, got {type(value).__name__}."
            )
        validated[key] = bool(value)
    return validated


def resolve(config: Any = None) -> list[str]:
    """Resolve a sparse enable/disable configuration into ordered metric names.

    ``"all"`` is applied before the individual toggles, so
    ``{"all": False, "RMSE": True}`` yields only ``["RMSE"]``.
    """
    toggles = validate_config(config)

    enabled = {info.name: info.default for info in _INFOS}
    if ALL_KEY in toggles:
        enabled = dict.fromkeys(enabled, toggles[ALL_KEY])
    for key, value in toggles.items():
        if key != ALL_KEY:
            enabled[key] = value

    return [name for name in METRIC_NAMES if enabled[name]]


def gaussian_metrics(all: bool | None = None, **toggles: bool | None) -> Dict[str, bool]:
    """Build a metric configuration from keyword toggles.

    Keywords are the lower-case metric names with parentheses replaced,
    e.g. ``nrmse_iqr=False`` for ``"NRMSE(IQR)"``. Toggles left as ``None``
    are omitted so the defaults apply.

    >>> gaussian_metrics(all=False, rmse=True)
    {'all': False, 'RMSE': True}
    """
    config: Dict[str, bool] = {}
    if all is not None:
        config[ALL_KEY] = all
    for keyword, value in toggles.items():
        if keyword not in _KEYWORDS:
            raise InvalidConfiguration(
                f"'{keyword}' is not a known metric keyword. Available: {', '.join(_KEYWORDS)}."
            )
        if value is not None:
            config[_KEYWORDS[keyword]] = value
    return validate_config(config)
