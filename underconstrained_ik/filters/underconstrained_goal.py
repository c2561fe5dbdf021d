"""Trajectory filter that corrects the last waypoint of a rollout with IK.

The filter moves the final joint configuration of each rollout so the tool
reaches the goal pose on the constrained Cartesian axes only.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import numpy as np

from underconstrained_ik.config.ik_config import load_ik_config
from underconstrained_ik.exceptions import ConfigurationError, GoalExtractionError
from underconstrained_ik.filters.goal_extraction import extract_goal_pose
from underconstrained_ik.kinematics.base import KinematicModel
from underconstrained_ik.kinematics.ik_solver import solve_underconstrained_ik
from underconstrained_ik.types import (
    ErrorCode,
    FilterResult,
    IKStatus,
    MotionPlanRequest,
    SE3Pose,
    UnderconstrainedIKConfig,
)

logger = logging.getLogger("UnderconstrainedGoal")


class UnderconstrainedGoal:
    """Moves the last waypoint of a rollout toward an underconstrained goal.

    Lifecycle: ``initialize`` (or ``configure``) once, then
    ``set_motion_plan_request`` once per planning request, then ``filter``
    for every rollout. ``filter`` works on a forked kinematic model, so
    rollouts may be filtered concurrently.
    """

    def __init__(self) -> None:
        self._name = "UnderconstrainedGoal"
        self._model: KinematicModel | None = None
        self._config: UnderconstrainedIKConfig | None = None
        self._tool_goal_pose: SE3Pose | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> UnderconstrainedIKConfig | None:
        return self._config

    @property
    def tool_goal_pose(self) -> SE3Pose | None:
        return self._tool_goal_pose

    def initialize(self, model: KinematicModel, params: Mapping[str, Any]) -> bool:
        """
        Attach the kinematic model and load the parameters.

        Input:
            model: Kinematic model of the planning group
            params: Parameter mapping (see underconstrained_ik.config.ik_config)
        Output:
            True if the configuration is valid for this model
        """
        self._model = model
        return self.configure(params)

    def configure(self, params: Mapping[str, Any]) -> bool:
        """Load the parameters. On failure no configuration is retained."""
        self._config = None

        result = load_ik_config(params)
        if not result.success:
            logger.error(f"{self._name} failed to load parameters, {result.message}")
            return False

        config = result.config
        if config is None:
            return False
        if self._model is not None and config.num_joints != self._model.num_joints:
            logger.error(
                f"{self._name} received {config.num_joints} joint update rates "
                f"for a chain with {self._model.num_joints} joints"
            )
            return False

        self._config = config
        return True

    def set_motion_plan_request(self, request: MotionPlanRequest) -> ErrorCode:
        """
        Store the tool goal pose of a new planning request.

        Input:
            request: Motion plan request with goal and start state
        Output:
            ErrorCode.SUCCESS, or the reason the request cannot be filtered
        """
        self._tool_goal_pose = None

        if self._model is None or self._config is None:
            logger.error(f"{self._name} has not been configured")
            return ErrorCode.INVALID_CONFIGURATION

        try:
            self._tool_goal_pose = extract_goal_pose(request, self._model.fork())
        except GoalExtractionError as e:
            logger.error(f"{self._name}: {e}")
            return e.error_code

        return ErrorCode.SUCCESS

    def filter(
        self,
        start_timestep: int,
        num_timesteps: int,
        iteration_number: int,
        rollout_number: int,
        parameters: np.ndarray,
    ) -> FilterResult:
        """
        Correct the last waypoint of one rollout in place.

        Input:
            start_timestep: Index of the first timestep of the rollout
            num_timesteps: Number of timesteps in the rollout
            iteration_number: Optimization iteration, for logging
            rollout_number: Rollout index, for logging
            parameters: Joint positions, shape (num_joints, num_timesteps);
                the last column is overwritten when the IK converges
        Output:
            FilterResult; filtered is False when the waypoint was left alone
        """
        if self._model is None or self._config is None:
            raise ConfigurationError(f"{self._name} has not been configured")
        if self._tool_goal_pose is None:
            raise GoalExtractionError(
                f"{self._name} has no goal pose, call set_motion_plan_request first"
            )
        if parameters.ndim != 2 or parameters.shape[0] != self._model.num_joints:
            raise ValueError(
                f"Expected parameters of shape ({self._model.num_joints}, T), "
                f"got {parameters.shape}"
            )
        if not np.issubdtype(parameters.dtype, np.floating):
            raise ValueError(
                f"Expected floating point parameters, got dtype {parameters.dtype}"
            )

        init_joint_pose = parameters[:, -1].copy()
        result = solve_underconstrained_ik(
            self._model.fork(), self._tool_goal_pose, init_joint_pose, self._config
        )

        if not result.success:
            if result.status == IKStatus.JACOBIAN_UNAVAILABLE:
                reason = "could not evaluate the Jacobian"
            else:
                reason = f"did not converge in {result.iterations} iterations"
            logger.error(
                f"{self._name} failed to find valid ik close to reference pose "
                f"(iteration {iteration_number}, rollout {rollout_number}): {reason}"
            )
            return FilterResult(filtered=False, status=result.status, ik_result=result)

        parameters[:, -1] = result.joint_positions
        return FilterResult(filtered=True, status=result.status, ik_result=result)


def create_underconstrained_goal(
    model: KinematicModel,
    params: Mapping[str, Any],
) -> UnderconstrainedGoal:
    """Factory function to create a configured UnderconstrainedGoal filter.

    Input:
        model: Kinematic model of the planning group
        params: Parameter mapping with constrained_dofs, cartesian_convergence,
            joint_update_rates and max_ik_iterations
    Output:
        UnderconstrainedGoal instance

    Raises:
        ConfigurationError: listing every missing or malformed parameter

    Examples:
        create_underconstrained_goal(chain, {
            "constrained_dofs": [1, 1, 1, 0, 0, 0],
            "cartesian_convergence": [0.005] * 3 + [1.0] * 3,
            "joint_update_rates": [0.5] * chain.num_joints,
            "max_ik_iterations": 100,
        })
    """
    result = load_ik_config(params)
    if not result.success:
        raise ConfigurationError(result.errors)

    goal_filter = UnderconstrainedGoal()
    if not goal_filter.initialize(model, params):
        raise ConfigurationError(
            f"joint_update_rates must have {model.num_joints} entries, "
            f"got {len(params['joint_update_rates'])}"
        )
    return goal_filter
