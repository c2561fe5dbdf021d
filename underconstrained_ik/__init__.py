"""Damped least squares IK for goals with unconstrained Cartesian axes."""

from underconstrained_ik.exceptions import (
    ConfigurationError,
    GoalExtractionError,
    UnderconstrainedIKError,
)
from underconstrained_ik.filters import (
    UnderconstrainedGoal,
    create_underconstrained_goal,
    extract_goal_pose,
)
from underconstrained_ik.kinematics import (
    KinematicModel,
    SerialChain,
    solve_underconstrained_ik,
)
from underconstrained_ik.types import (
    FilterResult,
    IKResult,
    IKStatus,
    SE3Pose,
    UnderconstrainedIKConfig,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "GoalExtractionError",
    "UnderconstrainedIKError",
    "UnderconstrainedGoal",
    "create_underconstrained_goal",
    "extract_goal_pose",
    "KinematicModel",
    "SerialChain",
    "solve_underconstrained_ik",
    "FilterResult",
    "IKResult",
    "IKStatus",
    "SE3Pose",
    "UnderconstrainedIKConfig",
]
