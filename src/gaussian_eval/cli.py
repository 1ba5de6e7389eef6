"""Command-line interface for evaluating regression residuals."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from gaussian_eval.errors import InvalidConfiguration
from gaussian_eval.evaluation import available_metrics
from gaussian_eval.pipelines import EvaluateArgs, run_evaluate

logger = logging.getLogger("gaussian_eval")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute regression error metrics from predictions and targets.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _build_evaluate_parser(subparsers)
    _build_list_parser(subparsers)

    return parser


def _build_evaluate_parser(subparsers: argparse._SubParsersAction) -> None:
    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Evaluate predictions stored in a CSV file.",
    )
    evaluate_parser.add_argument("--data", required=True, help="CSV file with targets and predictions.")
    evaluate_parser.add_argument("--target-col", required=True, help="Column with the true values.")
    evaluate_parser.add_argument("--prediction-col", required=True, help="Column with the predicted values.")
    evaluate_parser.add_argument(
        "--group-col",
        dest="group_cols",
        action="append",
        default=[],
        help="Evaluate separately per value of this column (repeat for multiple).",
    )
    evaluate_parser.add_argument(
        "--metrics-config",
        help="Optional YAML file mapping metric names (or 'all') to true/false.",
    )
    toggle_all = evaluate_parser.add_mutually_exclusive_group()
    toggle_all.add_argument(
        "--all",
        dest="all_metrics",
        action="store_const",
        const=True,
        help="Enable every metric before applying --enable/--disable.",
    )
    toggle_all.add_argument(
        "--none",
        dest="all_metrics",
        action="store_const",
        const=False,
        help="Disable every metric before applying --enable/--disable.",
    )
    evaluate_parser.add_argument(
        "--enable",
        action="append",
        default=[],
        metavar="METRIC",
        help="Enable a metric, e.g. 'NRMSE(STD)' (repeatable).",
    )
    evaluate_parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="METRIC",
        help="Disable a metric (repeatable).",
    )
    evaluate_parser.add_argument("--jobs", type=int, help="Worker threads for group-wise evaluation.")
    evaluate_parser.add_argument(
        "--output",
        help="Optional path to save the metrics table as CSV. Defaults to stdout.",
    )
    evaluate_parser.set_defaults(func=_cmd_evaluate)


def _build_list_parser(subparsers: argparse._SubParsersAction) -> None:
    list_parser = subparsers.add_parser(
        "list-metrics",
        help="Show the available metrics and whether they are enabled by default.",
    )
    list_parser.set_defaults(func=_cmd_list_metrics)


def _configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)


def _cmd_evaluate(args: argparse.Namespace) -> int:
    evaluate_args = EvaluateArgs(
        target_col=args.target_col,
        prediction_col=args.prediction_col,
        data_path=Path(args.data),
        group_cols=args.group_cols,
        metrics_config=Path(args.metrics_config) if args.metrics_config else None,
        all_metrics=args.all_metrics,
        enable=args.enable,
        disable=args.disable,
        n_jobs=args.jobs,
    )
    try:
        df = run_evaluate(evaluate_args)
    except (InvalidConfiguration, FileNotFoundError, KeyError, TypeError, ValueError) as exc:
        logger.error("Evaluation failed: %s", exc)
        return 2

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_path, index=False)
        print(f"Metrics saved to {output_path}")
    else:
        print(df.to_string(index=False))
    return 0


def _cmd_list_metrics(_: argparse.Namespace) -> int:
    print("Available metrics:")
    for info in available_metrics():
        state = "enabled" if info.default else "disabled"
        print(f"  - {info.name}: {info.description} ({state} by default)")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.log_level)
    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
