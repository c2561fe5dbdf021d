import numpy as np
import pytest

from conftest import make_params
from underconstrained_ik.config import load_ik_config
from underconstrained_ik.exceptions import ConfigurationError
from underconstrained_ik.types import UnderconstrainedIKConfig


def test_valid_parameters_load():
    result = load_ik_config(make_params(6, constrained_dofs=[1, 1, 1, 0, 0, 1]))

    assert result.success
    assert result.errors == []
    config = result.config
    assert config.constrained_indices == [0, 1, 2, 5]
    assert config.num_joints == 6
    assert config.max_ik_iterations == 200
    assert config.joint_update_rates.dtype == np.float64


def test_loaded_arrays_are_read_only():
    config = load_ik_config(make_params(3)).config
    with pytest.raises(ValueError):
        config.cartesian_convergence[0] = 1.0
    with pytest.raises(AttributeError):
        config.max_ik_iterations = 3


def test_numpy_arrays_are_accepted():
    params = make_params(
        2,
        constrained_dofs=np.array([1, 0, 1, 0, 1, 0]),
        joint_update_rates=np.array([0.2, 0.4]),
    )
    assert load_ik_config(params).success


def test_missing_keys_are_all_reported():
    result = load_ik_config({})

    assert not result.success
    assert result.config is None
    assert len(result.errors) == 4
    for key in (
        "constrained_dofs",
        "cartesian_convergence",
        "joint_update_rates",
        "max_ik_iterations",
    ):
        assert key in result.message


def test_every_malformed_field_is_reported_at_once():
    params = {
        "constrained_dofs": [1, 1, 1],
        "cartesian_convergence": [0.1, 0.1, 0.1, -0.1, 0.1, 0.1],
        "joint_update_rates": [],
        "max_ik_iterations": 0,
    }
    result = load_ik_config(params)

    assert result.config is None
    assert len(result.errors) == 4


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"constrained_dofs": [1, 1, 1, 1, 1, 1, 1]}, "exactly 6 entries"),
        ({"constrained_dofs": [1, 1, 0.5, 1, 1, 1]}, "must be integers"),
        ({"cartesian_convergence": "0.1"}, "must be an array"),
        ({"cartesian_convergence": [0.1, 0.1, None, 0.1, 0.1, 0.1]}, "numbers"),
        ({"joint_update_rates": 0.5}, "must be an array"),
        ({"max_ik_iterations": 2.5}, "must be an integer"),
        ({"max_ik_iterations": True}, "must be an integer"),
        ({"max_ik_iterations": -3}, ">= 1"),
        ({"cartesian_convergence": [float("nan")] + [0.1] * 5}, "must be finite"),
        ({"joint_update_rates": [float("inf")] * 6}, "must be finite"),
        ({"constrained_dofs": [1, 1, 1, float("inf"), 1, 1]}, "must be finite"),
    ],
)
def test_malformed_field(overrides, fragment):
    result = load_ik_config(make_params(6, **overrides))
    assert not result.success
    assert fragment in result.message


def test_non_mapping_parameters():
    result = load_ik_config([1, 2, 3])
    assert not result.success
    assert "mapping" in result.message


def test_config_dataclass_validates_itself():
    with pytest.raises(ConfigurationError, match="constrained_dofs"):
        UnderconstrainedIKConfig(
            constrained_dofs=[1, 1],
            cartesian_convergence=[0.1] * 6,
            joint_update_rates=[1.0],
            max_ik_iterations=10,
        )
    with pytest.raises(ConfigurationError, match="max_ik_iterations"):
        UnderconstrainedIKConfig(
            constrained_dofs=[1] * 6,
            cartesian_convergence=[0.1] * 6,
            joint_update_rates=[1.0],
            max_ik_iterations=0,
        )


def test_config_dataclass_reports_every_problem():
    with pytest.raises(ConfigurationError) as excinfo:
        UnderconstrainedIKConfig(
            constrained_dofs=[1, 1],
            cartesian_convergence=[float("nan")] + [0.1] * 5,
            joint_update_rates=[float("inf")],
            max_ik_iterations=0,
        )
    assert len(excinfo.value.problems) == 4
    assert "cartesian_convergence entries must be finite" in excinfo.value.problems
    assert "joint_update_rates entries must be finite" in excinfo.value.problems


def test_configuration_error_joins_problems():
    error = ConfigurationError(["first problem", "second problem"])
    assert str(error) == "first problem; second problem"
    assert error.problems == ["first problem", "second problem"]
    assert isinstance(error, ValueError)
