"""Kinematic model interface consumed by the IK solver."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from underconstrained_ik.types import SE3Pose


@runtime_checkable
class KinematicModel(Protocol):
    """Protocol for kinematic model backends.

    Jacobians are (6, num_joints): linear rows first, then angular rows,
    both expressed in the base frame with the reference point at the
    tool frame origin.
    """

    @property
    def num_joints(self) -> int:
        ...

    @property
    def joint_names(self) -> list[str]:
        ...

    @property
    def tool_frame(self) -> str:
        ...

    def forward_kinematics(self, joint_positions: np.ndarray) -> SE3Pose:
        ...

    def jacobian(self, joint_positions: np.ndarray) -> np.ndarray | None:
        ...

    def enforce_bounds(self, joint_positions: np.ndarray) -> np.ndarray:
        ...

    def fork(self) -> "KinematicModel":
        ...
