from .goal_extraction import extract_goal_pose
from .underconstrained_goal import UnderconstrainedGoal, create_underconstrained_goal

__all__ = [
    "UnderconstrainedGoal",
    "create_underconstrained_goal",
    "extract_goal_pose",
]
