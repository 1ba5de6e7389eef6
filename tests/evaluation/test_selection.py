import numpy as np
import pytest

from gaussian_eval.errors import InvalidConfiguration
from gaussian_eval.evaluation.selection import (
    METRIC_NAMES,
    available_metrics,
    default_metrics,
    gaussian_metrics,
    resolve,
)

EXPECTED_ORDER = [
    "MAE",
    "RMSE",
    "NRMSE(RNG)",
    "NRMSE(IQR)",
    "NRMSE(STD)",
    "NRMSE(AVG)",
    "RSE",
    "RRSE",
    "RAE",
    "RMSLE",
    "MALE",
    "MAPE",
    "MSE",
    "TAE",
    "TSE",
]


def test_universe_order_and_defaults():
    """The metric universe is fixed and only six metrics are on by default."""
    assert list(METRIC_NAMES) == EXPECTED_ORDER
    assert default_metrics() == ["MAE", "RMSE", "NRMSE(IQR)", "RRSE", "RAE", "RMSLE"]
    assert [info.name for info in available_metrics()] == EXPECTED_ORDER


def test_resolve_without_config_uses_defaults():
    assert resolve() == default_metrics()
    assert resolve({}) == default_metrics()


def test_resolve_all_string_and_flag():
    """The literal 'all' and {'all': True} both enable every metric."""
    assert resolve("all") == EXPECTED_ORDER
    assert resolve({"all": True}) == EXPECTED_ORDER
    assert resolve({"all": False}) == []


def test_all_is_applied_before_individual_toggles():
    assert resolve({"all": False, "RMSE": True}) == ["RMSE"]
    # Position of 'all' in the mapping does not matter.
    assert resolve({"RMSE": True, "all": False}) == ["RMSE"]
    assert resolve({"MAE": False, "all": True}) == [name for name in EXPECTED_ORDER if name != "MAE"]


def test_individual_toggles_override_defaults():
    resolved = resolve({"RMSE": False, "MAPE": True, "NRMSE(STD)": np.bool_(True)})
    assert "RMSE" not in resolved
    assert "MAPE" in resolved and "NRMSE(STD)" in resolved
    assert resolved == [name for name in EXPECTED_ORDER if name in resolved]


@pytest.mark.parametrize(
    "config",
    [
        {"R2": True},
        {"rmse": True},
        {"RMSE": 1},
        {"all": "yes"},
        {"RMSE": None},
        {"": True},
        {1: True},
        [True, False],
        "everything",
    ],
)
def test_resolve_rejects_invalid_configuration(config):
    with pytest.raises(InvalidConfiguration):
        resolve(config)


def test_invalid_configuration_is_a_value_error():
    with pytest.raises(ValueError):
        resolve({"NOT_A_METRIC": True})


def test_gaussian_metrics_builds_named_config():
    """Keyword toggles map onto metric names and None leaves the default."""
    config = gaussian_metrics(all=False, rmse=True, nrmse_iqr=True, mae=None)
    assert config == {"all": False, "RMSE": True, "NRMSE(IQR)": True}
    assert resolve(config) == ["RMSE", "NRMSE(IQR)"]
    assert gaussian_metrics() == {}


def test_gaussian_metrics_rejects_unknown_keywords_and_values():
    with pytest.raises(InvalidConfiguration):
        gaussian_metrics(r2=True)
    with pytest.raises(InvalidConfiguration):
        gaussian_metrics(rmse="no")
