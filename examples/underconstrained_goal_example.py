"""Underconstrained goal filter example on a six joint serial arm.

Filters a batch of noisy rollouts so their final waypoint reaches the goal
position while the tool orientation is left free.
"""

import logging

import numpy as np

from underconstrained_ik.filters import create_underconstrained_goal
from underconstrained_ik.kinematics import ChainJoint, SerialChain
from underconstrained_ik.types import (
    Constraints,
    MotionPlanRequest,
    OrientationConstraint,
    PositionConstraint,
    SE3Pose,
)

NUM_ROLLOUTS = 6
NUM_TIMESTEPS = 20

PARAMS = {
    "constrained_dofs": [1, 1, 1, 0, 0, 0],  # position only
    "cartesian_convergence": [0.001, 0.001, 0.001, 1.0, 1.0, 1.0],
    "joint_update_rates": [0.5] * 6,
    "max_ik_iterations": 100,
}


def build_arm() -> SerialChain:
    def origin(x=0.0, z=0.0):
        return SE3Pose(position=[x, 0.0, z], rotation=np.eye(3))

    joints = [
        ChainJoint("base_yaw", origin(z=0.3), [0, 0, 1], lower=-3.0, upper=3.0),
        ChainJoint("shoulder", origin(), [0, 1, 0], lower=-2.0, upper=2.0),
        ChainJoint("elbow", origin(x=0.4), [0, 1, 0], lower=-2.5, upper=2.5),
        ChainJoint("wrist_roll", origin(x=0.35), [1, 0, 0]),
        ChainJoint("wrist_pitch", origin(), [0, 1, 0], lower=-2.0, upper=2.0),
        ChainJoint("tool_roll", origin(), [1, 0, 0]),
    ]
    return SerialChain(joints, tool_offset=origin(x=0.1), tool_frame="tool0")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    arm = build_arm()
    goal_filter = create_underconstrained_goal(arm, PARAMS)

    # Goal: a point in front of the arm, orientation irrelevant
    request = MotionPlanRequest(
        goal_constraints=[
            Constraints(
                position_constraints=[PositionConstraint("tool0", [0.55, 0.2, 0.35])],
                orientation_constraints=[
                    OrientationConstraint("tool0", [0.0, 0.0, 0.0, 1.0])
                ],
            )
        ]
    )
    code = goal_filter.set_motion_plan_request(request)
    print(f"Goal request: {code.value}")

    rng = np.random.default_rng(0)
    start = np.array([0.0, -0.3, 0.6, 0.0, 0.4, 0.0])
    end = np.array([0.35, -0.5, 1.0, 0.1, 0.6, 0.0])

    for rollout in range(NUM_ROLLOUTS):
        noise = rng.normal(scale=0.1, size=(6, NUM_TIMESTEPS))
        parameters = np.linspace(start, end, NUM_TIMESTEPS).T + noise

        result = goal_filter.filter(0, NUM_TIMESTEPS, 0, rollout, parameters)
        tool = arm.forward_kinematics(parameters[:, -1])
        print(
            f"  rollout {rollout}: {result.status.value}, "
            f"filtered={result.filtered}, "
            f"iterations={result.ik_result.iterations}, "
            f"tool={np.round(tool.position, 4).tolist()}"
        )


if __name__ == "__main__":
    main()
