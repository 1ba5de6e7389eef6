"""Group-wise residual evaluation on pandas data frames."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Sequence, Tuple

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_list_like, is_numeric_dtype
from pandas.api.typing import DataFrameGroupBy

from gaussian_eval.errors import InvalidConfiguration
from gaussian_eval.evaluation.metrics import residual_metrics
from gaussian_eval.evaluation.selection import METRIC_NAMES, resolve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupSlice:
    """Rows ``start:stop`` of the canonically ordered frame, sharing ``key``."""

    key: Tuple[Hashable, ...]
    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start


def unpack_grouped(
    data: pd.DataFrame | DataFrameGroupBy,
    group_cols: Sequence[str] | None = None,
) -> Tuple[pd.DataFrame, List[str]]:
    """Split ``data`` into the underlying frame and its grouping column names."""
    if isinstance(data, DataFrameGroupBy):
        if group_cols:
            raise ValueError("Pass either a grouped frame or 'group_cols', not both.")
        keys = data.keys
        if isinstance(keys, str):
            keys = [keys]
        if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
            raise TypeError("Grouped data must be grouped by column labels.")
        return data.obj, list(keys)

    if not isinstance(data, pd.DataFrame):
        raise TypeError(f"'data' must be a pandas DataFrame, got {type(data).__name__}.")
    if isinstance(group_cols, str):
        group_cols = [group_cols]
    return data, list(group_cols or [])


def partition_groups(
    frame: pd.DataFrame,
    group_cols: Sequence[str],
) -> Tuple[pd.DataFrame, List[GroupSlice]]:
    """Reorder ``frame`` by group and describe each group as a row range.

    Group codes come from a single sorted ``groupby`` so that the row order and
    the emitted keys cannot drift apart. Missing keys form their own group and
    sort last.
    """
    if not group_cols:
        ordered = frame.reset_index(drop=True)
        return ordered, [GroupSlice((), 0, len(ordered))]
    if frame.empty:
        return frame.reset_index(drop=True), []

    codes = (
        frame.groupby(list(group_cols), sort=True, dropna=False, observed=True)
        .ngroup()
        .to_numpy()
    )
    order = np.argsort(codes, kind="stable")
    ordered = frame.iloc[order].reset_index(drop=True)

    boundaries = np.flatnonzero(np.diff(codes[order])) + 1
    starts = np.concatenate(([0], boundaries))
    stops = np.concatenate((boundaries, [len(ordered)]))

    keys = ordered.loc[starts, list(group_cols)].itertuples(index=False, name=None)
    slices = [
        GroupSlice(tuple(key), int(start), int(stop))
        for key, start, stop in zip(keys, starts, stops)
    ]
    return ordered, slices


def _check_numeric_column(frame: pd.DataFrame, column: str, allow_missing: bool) -> None:
    series = frame[column]
    if is_bool_dtype(series.dtype) or not is_numeric_dtype(series.dtype):
        raise TypeError(f"Column '{column}' must be numeric, got dtype '{series.dtype}'.")
    if not allow_missing and series.isna().any():
        raise ValueError(f"Column '{column}' contains missing values.")


def _check_metric_names(metrics: Any) -> List[str]:
    if not is_list_like(metrics) or isinstance(metrics, dict):
        raise InvalidConfiguration("'metrics' must be a list-like of metric names.")
    metrics = list(metrics)
    unknown = [name for name in metrics if not isinstance(name, str) or name not in METRIC_NAMES]
    if unknown:
        raise InvalidConfiguration(
            f"Unknown metric names: {unknown}. Available: {', '.join(METRIC_NAMES)}."
        )
    return metrics


def _check_columns(frame: pd.DataFrame, columns: Sequence[str]) -> None:
    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise KeyError(f"Columns not found in data: {missing}.")


def call_evaluate_residuals(
    data: pd.DataFrame | DataFrameGroupBy,
    target_col: str,
    prediction_col: str,
    metrics: Sequence[str],
    group_cols: Sequence[str] | None = None,
    allow_missing: bool = True,
    return_placeholder: bool = False,
    n_jobs: int | None = None,
) -> pd.DataFrame:
    """Evaluate residual metrics per group and return one row per group.

    ``metrics`` holds already-resolved metric names. Output columns are the
    grouping columns followed by the requested metrics in canonical order.
    With ``n_jobs`` above one, groups are evaluated on a thread pool; the row
    order does not depend on completion order and any failing group aborts
    the whole call.
    """
    frame, group_cols = unpack_grouped(data, group_cols)
    _check_columns(frame, [target_col, prediction_col, *group_cols])
    _check_numeric_column(frame, target_col, allow_missing)
    _check_numeric_column(frame, prediction_col, allow_missing)
    metric_names = _check_metric_names(metrics)
    clashing = [column for column in group_cols if column in METRIC_NAMES]
    if clashing:
        raise ValueError(f"Grouping columns clash with metric names: {clashing}.")
    if not isinstance(return_placeholder, (bool, np.bool_)):
        raise TypeError("'return_placeholder' must be a boolean.")
    if n_jobs is not None and (not isinstance(n_jobs, int) or n_jobs < 1):
        raise ValueError(f"'n_jobs' must be a positive integer or None, got {n_jobs!r}.")

    ordered, slices = partition_groups(frame, group_cols)
    targets = ordered[target_col]
    predictions = ordered[prediction_col]

    def _evaluate(group: GroupSlice) -> Dict[str, Any]:
        logger.debug("Evaluating group %s (%s rows)", group.key, group.size)
        return residual_metrics(
            predictions.iloc[group.start : group.stop],
            targets.iloc[group.start : group.stop],
            return_placeholder=bool(return_placeholder),
        )

    if n_jobs is not None and n_jobs > 1 and len(slices) > 1:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            records = list(executor.map(_evaluate, slices))
    else:
        records = [_evaluate(group) for group in slices]

    metrics_frame = pd.DataFrame.from_records(records, columns=list(METRIC_NAMES))
    selected = [
        name for name in METRIC_NAMES if name in metric_names and name in metrics_frame.columns
    ]
    result = metrics_frame[selected]

    if group_cols:
        starts = [group.start for group in slices]
        keys_frame = ordered.loc[starts, group_cols].reset_index(drop=True)
        result = pd.concat([keys_frame, result], axis=1)

    logger.info(
        "Evaluated %s group(s) on %s rows: %s",
        len(slices),
        len(frame),
        ", ".join(selected) if selected else "no metrics selected",
    )
    return result


def evaluate_residuals(
    data: pd.DataFrame | DataFrameGroupBy,
    target_col: str,
    prediction_col: str,
    metrics: Any = None,
    group_cols: Sequence[str] | None = None,
    n_jobs: int | None = None,
) -> pd.DataFrame:
    """Evaluate residuals from a regression task.

    Parameters
    ----------
    data:
        Frame with predictions and targets, or a ``DataFrameGroupBy`` grouped
        by column labels to evaluate group-wise.
    target_col, prediction_col:
        Names of the columns with the true and the predicted values.
    metrics:
        Mapping for enabling/disabling metrics, e.g. ``{"RMSE": False}``.
        ``"all"`` toggles every metric before the individual entries are
        applied. The string ``"all"`` enables everything. Defaults apply to
        metrics that are not mentioned.
    group_cols:
        Grouping columns when ``data`` is a plain frame.
    n_jobs:
        Worker threads for group-wise evaluation.

    Returns
    -------
    pandas.DataFrame
        Grouping columns followed by the enabled metrics.
    """
    frame, resolved_group_cols = unpack_grouped(data, group_cols)
    if frame.shape[0] < 1 or frame.shape[1] < 2:
        raise ValueError(
            f"'data' must have at least 1 row and 2 columns, got shape {frame.shape}."
        )
    for name, value in (("target_col", target_col), ("prediction_col", prediction_col)):
        if not isinstance(value, str):
            raise TypeError(f"'{name}' must be a string, got {type(value).__name__}.")
    _check_columns(frame, [target_col, prediction_col])

    metric_names = resolve(metrics)

    return call_evaluate_residuals(
        frame,
        target_col=target_col,
        prediction_col=prediction_col,
        metrics=metric_names,
        group_cols=resolved_group_cols,
        allow_missing=True,
        return_placeholder=False,
        n_jobs=n_jobs,
    )
