from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from gaussian_eval.errors import LengthMismatch
from gaussian_eval.evaluation.selection import METRIC_NAMES


@dataclass(frozen=True)
class TargetDescriptors:
    """Scale statistics of the targets, computed over non-missing values."""

    mean: float
    range: float
    iqr: float
    std: float


def as_numeric_array(values: Iterable[float], name: str) -> np.ndarray:
    """Return ``values`` as a float array, rejecting non-numeric input."""
    series = values if isinstance(values, pd.Series) else pd.Series(values)
    if series.empty:
        series = series.astype(float)
    elif series.dtype == object:
        # Infers nullable dtypes, e.g. Float64 for a list holding pd.NA.
        series = series.convert_dtypes()
    if is_bool_dtype(series.dtype) or not is_numeric_dtype(series.dtype):
        raise TypeError(f"'{name}' must be numeric, got dtype '{series.dtype}'.")
    return series.to_numpy(dtype=float, na_value=np.nan)


def target_descriptors(targets: Iterable[float]) -> TargetDescriptors:
    """Mean, range, interquartile range and sample standard deviation of the targets."""
    series = pd.Series(as_numeric_array(targets, "targets"))
    q25, q75 = series.quantile([0.25, 0.75])
    return TargetDescriptors(
        mean=float(series.mean()),
        range=float(series.max() - series.min()),
        iqr=float(q75 - q25),
        std=float(series.std(ddof=1)),
    )


def placeholder_metrics() -> Dict[str, Any]:
    """Metrics record with every value set to the NA sentinel."""
    return dict.fromkeys(METRIC_NAMES, pd.NA)


def log_error(predictions: np.ndarray, targets: np.ndarray) -> np.ndarray:
    """Elementwise ``log(1 + prediction) - log(1 + target)``.

    Collapses to a single NaN when any logarithm is undefined.
    """
    if np.any(predictions <= -1) or np.any(targets <= -1):
        return np.array([np.nan])
    return np.log1p(predictions) - np.log1p(targets)


def residual_metrics(
    predictions: Iterable[float],
    targets: Iterable[float],
    return_placeholder: bool = False,
) -> Dict[str, Any]:
    """Compute every residual metric for one pair of prediction/target vectors.

    Missing values are skipped by the sums, means and target descriptors.
    MAPE, RMSLE and MALE do not skip them, so a single missing pair turns
    those three into NaN. Zero denominators give inf/NaN rather than errors.
    """
    if return_placeholder:
        return placeholder_metrics()

    pred = as_numeric_array(predictions, "predictions")
    true = as_numeric_array(targets, "targets")
    if pred.shape[0] != true.shape[0]:
        raise LengthMismatch(
            f"predictions and targets must have same length ({pred.shape[0]} != {true.shape[0]})."
        )

    scale = target_descriptors(true)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        residuals = true - pred
        abs_residuals = pd.Series(np.abs(residuals))
        squared_residuals = pd.Series(residuals**2)

        centered = true - scale.mean
        abs_centered = pd.Series(np.abs(centered))
        squared_centered = pd.Series(centered**2)

        tae = np.float64(abs_residuals.sum())
        tse = np.float64(squared_residuals.sum())
        mae = np.float64(abs_residuals.mean())
        mse = np.float64(squared_residuals.mean())
        rmse = np.sqrt(mse)

        nrmse_iqr = rmse / np.float64(scale.iqr)
        nrmse_rng = rmse / np.float64(scale.range)
        nrmse_std = rmse / np.float64(scale.std)
        nrmse_avg = rmse / np.float64(scale.mean)

        rae = tae / np.float64(abs_centered.sum())
        rse = tse / np.float64(squared_centered.sum())
        rrse = np.sqrt(rse)

        # Note: sign of the residual does not matter once the absolute value is taken.
        ape = pd.Series(np.abs(residuals / true))
        mape = ape.mean(skipna=False)

        le = pd.Series(log_error(pred, true))
        rmsle = np.sqrt((le**2).mean(skipna=False))
        male = le.abs().mean(skipna=False)

    values = {
        "MAE": mae,
        "RMSE": rmse,
        "NRMSE(RNG)": nrmse_rng,
        "NRMSE(IQR)": nrmse_iqr,
        "NRMSE(STD)": nrmse_std,
        "NRMSE(AVG)": nrmse_avg,
        "RSE": rse,
        "RRSE": rrse,
        "RAE": rae,
        "RMSLE": rmsle,
        "MALE": male,
        "MAPE": mape,
        "MSE": mse,
        "TAE": tae,
        "TSE": tse,
    }
    return {name: float(values[name]) for name in METRIC_NAMES}
