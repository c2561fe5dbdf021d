"""Goal pose acquisition from a motion plan request."""

from __future__ import annotations

import logging

import numpy as np

from underconstrained_ik.exceptions import GoalExtractionError
from underconstrained_ik.kinematics.base import KinematicModel
from underconstrained_ik.types import MotionPlanRequest, SE3Pose

logger = logging.getLogger("UnderconstrainedGoal")


def extract_goal_pose(request: MotionPlanRequest, model: KinematicModel) -> SE3Pose:
    """
    Determine the tool goal pose of a motion plan request.

    An explicit Cartesian goal (position and orientation constraint) is used
    directly. Otherwise the joint constraints are applied on top of the start
    state, clamped to the joint limits, and forward kinematics gives the pose.

    Input:
        request: Motion plan request; only its first goal constraint set is used
        model: Kinematic model of the planning group
    Output:
        SE3Pose of the tool goal
    Raises:
        GoalExtractionError: if the request carries no usable goal
    """
    if not request.goal_constraints:
        raise GoalExtractionError("A goal constraint was not provided")

    goal = request.goal_constraints[0]

    if goal.position_constraints and goal.orientation_constraints:
        position = goal.position_constraints[0].position
        orientation = goal.orientation_constraints[0].orientation
        return SE3Pose.from_position_quat(position, orientation)

    logger.warning(
        "A goal constraint for the tool link was not provided, "
        "using forward kinematics"
    )

    if not goal.joint_constraints:
        raise GoalExtractionError("No joint values for the goal were found")

    joint_index = {name: i for i, name in enumerate(model.joint_names)}
    joint_positions = np.zeros(model.num_joints)

    start = request.start_state
    for name, position in zip(start.name, start.position):
        if name in joint_index:
            joint_positions[joint_index[name]] = position

    for jc in goal.joint_constraints:
        if jc.joint_name not in joint_index:
            raise GoalExtractionError(
                f"Goal joint '{jc.joint_name}' is not part of the chain "
                f"{model.joint_names}"
            )
        joint_positions[joint_index[jc.joint_name]] = jc.position

    joint_positions = model.enforce_bounds(joint_positions)
    return model.forward_kinematics(joint_positions)
