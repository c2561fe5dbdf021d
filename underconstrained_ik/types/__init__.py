from .geometry import SE3Pose
from .ik import DOF_SIZE, IKResult, IKStatus, UnderconstrainedIKConfig
from .planning import (
    Constraints,
    ErrorCode,
    FilterResult,
    JointConstraint,
    JointState,
    MotionPlanRequest,
    OrientationConstraint,
    PositionConstraint,
)

__all__ = [
    # Geometry
    "SE3Pose",
    # IK
    "DOF_SIZE",
    "IKResult",
    "IKStatus",
    "UnderconstrainedIKConfig",
    # Planning
    "Constraints",
    "ErrorCode",
    "FilterResult",
    "JointConstraint",
    "JointState",
    "MotionPlanRequest",
    "OrientationConstraint",
    "PositionConstraint",
]
