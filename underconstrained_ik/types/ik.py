from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from underconstrained_ik.exceptions import ConfigurationError

DOF_SIZE = 6  # x, y, z, rx, ry, rz


class IKStatus(Enum):
    """Status of an underconstrained IK solve."""

    SUCCESS = "success"
    MAX_ITERATIONS = "max_iterations"
    JACOBIAN_UNAVAILABLE = "jacobian_unavailable"


@dataclass(frozen=True, eq=False)
class UnderconstrainedIKConfig:
    """Configuration parameters for the underconstrained IK solver.

    Cartesian arrays follow the axis order [x, y, z, rx, ry, rz].
    """

    constrained_dofs: Sequence[int]  # 0 = free, nonzero = constrained
    cartesian_convergence: Sequence[float]  # Per-axis twist thresholds
    joint_update_rates: Sequence[float]  # Per-joint gain on the IK delta
    max_ik_iterations: int

    def __post_init__(self):
        dofs = np.asarray(self.constrained_dofs, dtype=np.int64)
        thresholds = np.asarray(self.cartesian_convergence, dtype=np.float64)
        rates = np.asarray(self.joint_update_rates, dtype=np.float64)

        problems: list[str] = []
        if dofs.shape != (DOF_SIZE,):
            problems.append(
                f"constrained_dofs must have {DOF_SIZE} entries, got {dofs.size}"
            )
        if thresholds.shape != (DOF_SIZE,):
            problems.append(
                f"cartesian_convergence must have {DOF_SIZE} entries, "
                f"got {thresholds.size}"
            )
        elif not np.all(np.isfinite(thresholds)):
            problems.append("cartesian_convergence entries must be finite")
        elif np.any(thresholds < 0):
            problems.append("cartesian_convergence must be >= 0")
        if rates.ndim != 1 or rates.size == 0:
            problems.append("joint_update_rates must be a non-empty array")
        elif not np.all(np.isfinite(rates)):
            problems.append("joint_update_rates entries must be finite")
        if int(self.max_ik_iterations) < 1:
            problems.append("max_ik_iterations must be >= 1")
        if problems:
            raise ConfigurationError(problems)

        for arr in (dofs, thresholds, rates):
            arr.setflags(write=False)
        object.__setattr__(self, "constrained_dofs", dofs)
        object.__setattr__(self, "cartesian_convergence", thresholds)
        object.__setattr__(self, "joint_update_rates", rates)
        object.__setattr__(self, "max_ik_iterations", int(self.max_ik_iterations))

    @property
    def constrained_indices(self) -> list[int]:
        """Indices of the constrained Cartesian axes, in axis order."""
        return [i for i in range(DOF_SIZE) if self.constrained_dofs[i] != 0]

    @property
    def num_joints(self) -> int:
        return len(self.joint_update_rates)


@dataclass
class IKResult:
    """Result of an underconstrained IK solve."""

    status: IKStatus
    joint_positions: np.ndarray  # Best effort reached, even on failure
    twist: np.ndarray  # Last computed (masked) 6D twist
    iterations: int  # Number of joint updates applied
    position_error: float  # Norm of the translational twist (meters)
    orientation_error: float  # Norm of the rotational twist (radians)

    @property
    def success(self) -> bool:
        return self.status == IKStatus.SUCCESS
