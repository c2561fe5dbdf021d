from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from underconstrained_ik.exceptions import ErrorCode
from underconstrained_ik.types.ik import IKResult, IKStatus

__all__ = [
    "Constraints",
    "ErrorCode",
    "FilterResult",
    "JointConstraint",
    "JointState",
    "MotionPlanRequest",
    "OrientationConstraint",
    "PositionConstraint",
]


@dataclass
class JointState:
    """Named joint positions, e.g. the start state of a request."""

    name: list[str] = field(default_factory=list)
    position: list[float] = field(default_factory=list)

    def __post_init__(self):
        if len(self.name) != len(self.position):
            raise ValueError(
                f"JointState has {len(self.name)} names "
                f"but {len(self.position)} positions"
            )


@dataclass
class JointConstraint:
    joint_name: str
    position: float


@dataclass
class PositionConstraint:
    """Target position of a link origin in the reference frame."""

    link_name: str
    position: np.ndarray  # (3,) xyz

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64)
        if self.position.shape != (3,):
            raise ValueError(f"Position must be shape (3,), got {self.position.shape}")


@dataclass
class OrientationConstraint:
    """Target orientation of a link as a quaternion (x, y, z, w)."""

    link_name: str
    orientation: np.ndarray  # (4,) xyzw

    def __post_init__(self):
        self.orientation = np.asarray(self.orientation, dtype=np.float64)
        if self.orientation.shape != (4,):
            raise ValueError(
                f"Orientation must be shape (4,), got {self.orientation.shape}"
            )


@dataclass
class Constraints:
    """One goal constraint set. Only the first entry of each list is used."""

    joint_constraints: list[JointConstraint] = field(default_factory=list)
    position_constraints: list[PositionConstraint] = field(default_factory=list)
    orientation_constraints: list[OrientationConstraint] = field(
        default_factory=list
    )


@dataclass
class MotionPlanRequest:
    start_state: JointState = field(default_factory=JointState)
    goal_constraints: list[Constraints] = field(default_factory=list)


@dataclass
class FilterResult:
    """Outcome of filtering one rollout."""

    filtered: bool  # True when the last waypoint was overwritten
    status: IKStatus
    ik_result: IKResult | None = None

    @property
    def success(self) -> bool:
        return self.status == IKStatus.SUCCESS
