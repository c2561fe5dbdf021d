"""Loading of the underconstrained goal parameters from a key/value mapping.

Recognized keys (axis order [x, y, z, rx, ry, rz]):

    constrained_dofs:       6 integers, 0 = free, 1 = constrained
    cartesian_convergence:  6 non-negative convergence thresholds
    joint_update_rates:     one gain per joint of the chain
    max_ik_iterations:      positive iteration budget
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from underconstrained_ik.types import DOF_SIZE, UnderconstrainedIKConfig

# Singular values at or below EPSILON are damped with LAMBDA
EPSILON = 0.1
LAMBDA = 0.01

REQUIRED_KEYS = (
    "constrained_dofs",
    "cartesian_convergence",
    "joint_update_rates",
    "max_ik_iterations",
)


@dataclass
class ConfigLoadResult:
    """Result of loading a configuration. ``config`` is None on failure."""

    config: UnderconstrainedIKConfig | None
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.config is not None and not self.errors

    @property
    def message(self) -> str:
        return "; ".join(self.errors)


def load_ik_config(params: Mapping[str, Any]) -> ConfigLoadResult:
    """
    Validate a parameter mapping and build the solver configuration.

    Every missing or malformed field is reported; no partial configuration
    is returned.

    Input:
        params: Mapping holding the keys listed in REQUIRED_KEYS
    Output:
        ConfigLoadResult with the configuration or the list of problems
    """
    if not isinstance(params, Mapping):
        return ConfigLoadResult(
            config=None,
            errors=[f"parameters must be a mapping, got {type(params).__name__}"],
        )

    errors: list[str] = []
    for key in REQUIRED_KEYS:
        if key not in params:
            errors.append(f"missing required parameter '{key}'")

    dofs = _read_array(params, "constrained_dofs", errors, size=DOF_SIZE, integer=True)
    thresholds = _read_array(params, "cartesian_convergence", errors, size=DOF_SIZE)
    rates = _read_array(params, "joint_update_rates", errors)
    max_iterations = _read_iterations(params, errors)

    if thresholds is not None and any(t < 0 for t in thresholds):
        errors.append("'cartesian_convergence' entries must be >= 0")
    if rates is not None and len(rates) == 0:
        errors.append("'joint_update_rates' must not be empty")

    if errors:
        return ConfigLoadResult(config=None, errors=errors)

    config = UnderconstrainedIKConfig(
        constrained_dofs=dofs,  # type: ignore[arg-type]
        cartesian_convergence=thresholds,  # type: ignore[arg-type]
        joint_update_rates=rates,  # type: ignore[arg-type]
        max_ik_iterations=max_iterations,  # type: ignore[arg-type]
    )
    return ConfigLoadResult(config=config)


# --- Internal helper functions ---


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _read_array(
    params: Mapping[str, Any],
    key: str,
    errors: list[str],
    size: int | None = None,
    integer: bool = False,
) -> list | None:
    """Read a numeric array parameter, appending problems to ``errors``."""
    if key not in params:
        return None
    value = params[key]
    if isinstance(value, (str, bytes)) or not isinstance(
        value, (Sequence, np.ndarray)
    ):
        errors.append(f"'{key}' must be an array, got {type(value).__name__}")
        return None
    if size is not None and len(value) != size:
        errors.append(f"'{key}' must have exactly {size} entries, got {len(value)}")
        return None
    if not all(_is_number(v) for v in value):
        errors.append(f"'{key}' entries must be numbers")
        return None
    if not np.all(np.isfinite(np.asarray(value, dtype=np.float64))):
        errors.append(f"'{key}' entries must be finite")
        return None
    if integer:
        if not all(float(v).is_integer() for v in value):
            errors.append(f"'{key}' entries must be integers")
            return None
        return [int(v) for v in value]
    return [float(v) for v in value]


def _read_iterations(params: Mapping[str, Any], errors: list[str]) -> int | None:
    if "max_ik_iterations" not in params:
        return None
    value = params["max_ik_iterations"]
    if not _is_number(value) or not float(value).is_integer():
        errors.append(f"'max_ik_iterations' must be an integer, got {value!r}")
        return None
    if int(value) < 1:
        errors.append(f"'max_ik_iterations' must be >= 1, got {int(value)}")
        return None
    return int(value)
