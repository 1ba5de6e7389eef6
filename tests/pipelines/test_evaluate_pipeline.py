import pandas as pd
import pytest

from gaussian_eval.errors import InvalidConfiguration
from gaussian_eval.io import load_metric_config, load_yaml
from gaussian_eval.pipelines import EvaluateArgs, run_evaluate
from gaussian_eval.pipelines.evaluate import build_metric_config


def _write_predictions(path):
    df = pd.DataFrame(
        {
            "meter": ["m2", "m1", "m2", "m1"],
            "y": [10.0, 4.0, 12.0, 6.0],
            "y_hat": [11.0, 4.0, 12.0, 8.0],
        }
    )
    df.to_csv(path, index=False)
    return path


def test_run_evaluate_from_csv_and_yaml(tmp_path):
    """YAML toggles and command-line overrides combine into one metric selection."""
    data_path = _write_predictions(tmp_path / "preds.csv")
    config_path = tmp_path / "metrics.yaml"
    config_path.write_text("metrics:\n  all: false\n  RMSE: true\n  MAE: true\n", encoding="utf-8")

    args = EvaluateArgs(
        target_col="y",
        prediction_col="y_hat",
        data_path=data_path,
        group_cols=["meter"],
        metrics_config=config_path,
        enable=["TAE"],
        disable=["RMSE"],
    )
    result = run_evaluate(args)

    assert list(result.columns) == ["meter", "MAE", "TAE"]
    assert result["meter"].tolist() == ["m1", "m2"]
    assert result["TAE"].tolist() == pytest.approx([2.0, 1.0])


def test_run_evaluate_with_dataframe_and_all_flag():
    df = pd.DataFrame({"y": [1.0, 2.0, 3.0, 4.0], "y_hat": [1.0, 2.0, 3.0, 5.0]})
    args = EvaluateArgs(target_col="y", prediction_col="y_hat", all_metrics=True)

    result = run_evaluate(args, dataframe=df)

    assert len(result) == 1
    assert len(result.columns) == 15
    assert result.loc[0, "TSE"] == pytest.approx(1.0)


def test_run_evaluate_requires_data():
    with pytest.raises(ValueError):
        run_evaluate(EvaluateArgs(target_col="y", prediction_col="y_hat"))


def test_build_metric_config_order():
    """'--none' is stored as the all toggle and individual toggles win over it."""
    args = EvaluateArgs(target_col="y", prediction_col="p", all_metrics=False, enable=["MSE"])
    assert build_metric_config(args) == {"all": False, "MSE": True}


def test_unknown_metric_in_yaml(tmp_path):
    df = pd.DataFrame({"y": [1.0, 2.0], "y_hat": [1.0, 2.5]})
    config_path = tmp_path / "metrics.yaml"
    config_path.write_text("R2: true\n", encoding="utf-8")

    with pytest.raises(InvalidConfiguration):
        run_evaluate(
            EvaluateArgs(target_col="y", prediction_col="y_hat", metrics_config=config_path),
            dataframe=df,
        )


def test_load_metric_config_variants(tmp_path):
    flat = tmp_path / "flat.yaml"
    flat.write_text("all: true\nMAE: false\n", encoding="utf-8")
    assert load_metric_config(flat) == {"all": True, "MAE": False}

    shorthand = tmp_path / "shorthand.yaml"
    shorthand.write_text("metrics: all\n", encoding="utf-8")
    assert load_metric_config(shorthand) == {"all": True}

    broken = tmp_path / "broken.yaml"
    broken.write_text("metrics:\n  - RMSE\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_metric_config(broken)


def test_load_yaml_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "missing.yaml")

    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(not_mapping)

    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_yaml(empty) == {}
