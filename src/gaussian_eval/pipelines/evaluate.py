"""Evaluation pipeline: CSV predictions + YAML metric config -> metrics table."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from gaussian_eval.evaluation import evaluate_residuals
from gaussian_eval.io import load_metric_config

logger = logging.getLogger(__name__)


@dataclass
class EvaluateArgs:
    target_col: str
    prediction_col: str
    data_path: Path | None = None
    group_cols: Sequence[str] = field(default_factory=tuple)
    metrics_config: Path | None = None
    all_metrics: bool | None = None
    enable: Sequence[str] = field(default_factory=tuple)
    disable: Sequence[str] = field(default_factory=tuple)
    n_jobs: int | None = None


def build_metric_config(args: EvaluateArgs) -> Dict[str, Any]:
    """Layer command-line toggles over the YAML metric configuration."""
    metrics_cfg: Dict[str, Any] = {}
    if args.metrics_config:
        metrics_cfg = dict(load_metric_config(args.metrics_config))
    if args.all_metrics is not None:
        metrics_cfg["all"] = args.all_metrics
    for name in args.enable:
        metrics_cfg[name] = True
    for name in args.disable:
        metrics_cfg[name] = False
    return metrics_cfg


def run_evaluate(args: EvaluateArgs, dataframe: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    metrics_cfg = build_metric_config(args)

    if dataframe is None:
        if not args.data_path:
            raise ValueError("Either a dataframe or 'data_path' must be provided.")
        dataframe = pd.read_csv(args.data_path)
        logger.info("Loaded %s rows from %s", len(dataframe), args.data_path)

    return evaluate_residuals(
        dataframe,
        target_col=args.target_col,
        prediction_col=args.prediction_col,
        metrics=metrics_cfg,
        group_cols=list(args.group_cols),
        n_jobs=args.n_jobs,
    )
