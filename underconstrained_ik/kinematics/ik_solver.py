"""
Underconstrained inverse kinematics using damped least squares.

Cartesian degrees of freedom that are not constrained are removed from the
twist and the Jacobian, so the solver only drives the constrained axes of the
tool toward the goal pose. The pseudo-inverse is computed from the SVD with
damping of near-singular directions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

from underconstrained_ik.config.ik_config import EPSILON, LAMBDA
from underconstrained_ik.kinematics.base import KinematicModel
from underconstrained_ik.types import (
    DOF_SIZE,
    IKResult,
    IKStatus,
    SE3Pose,
    UnderconstrainedIKConfig,
)

logger = logging.getLogger("UnderconstrainedIK")

_ANGLE_EPS = 1e-12


@dataclass
class KinematicState:
    """Per-solve scratch state: current joint vector and the tool pose at it."""

    model: KinematicModel
    joint_positions: np.ndarray = field(default_factory=lambda: np.zeros(0))
    tool_pose: SE3Pose = field(default_factory=SE3Pose.identity)

    def set_joint_positions(self, joint_positions: np.ndarray) -> None:
        self.joint_positions = np.array(joint_positions, dtype=np.float64)
        self.tool_pose = self.model.forward_kinematics(self.joint_positions)


def compute_twist(
    current_pose: SE3Pose,
    goal_pose: SE3Pose,
    constrained_dofs: np.ndarray,
) -> np.ndarray:
    """
    Compute the 6D twist that moves the current pose onto the goal pose.

    The translational part is the position difference in the reference frame.
    The rotational part is the scaled axis of R_current^T * R_goal, i.e.
    expressed in the current tool frame. Free axes are set to exactly zero.

    Input:
        current_pose: Current tool pose
        goal_pose: Goal tool pose
        constrained_dofs: (6,) mask, 0 for free axes
    Output:
        twist [x, y, z, rx, ry, rz], shape (6,)
    """
    twist = np.zeros(DOF_SIZE)
    twist[:3] = goal_pose.position - current_pose.position

    relative_rot = current_pose.rotation.T @ goal_pose.rotation
    rotvec = Rotation.from_matrix(relative_rot).as_rotvec()
    angle = float(np.linalg.norm(rotvec))
    if angle > _ANGLE_EPS:
        axis = rotvec / angle
    else:
        axis = np.zeros(3)
        angle = 0.0

    # Force angle into [-pi, pi]
    while angle > np.pi or angle < -np.pi:
        angle = angle - 2 * np.pi if angle > np.pi else angle
        angle = angle + 2 * np.pi if angle < -np.pi else angle

    twist[3:] = axis * angle

    mask = np.asarray(constrained_dofs)
    twist[mask == 0] = 0.0
    return twist


def reduce_jacobian(jacobian: np.ndarray, indices: list[int]) -> np.ndarray:
    """Keep the Jacobian rows of the constrained axes, in index order."""
    return np.array(jacobian[list(indices), :], dtype=np.float64).reshape(
        len(indices), jacobian.shape[1]
    )


def damped_pseudo_inverse(
    jacobian: np.ndarray,
    epsilon: float = EPSILON,
    damping: float = LAMBDA,
) -> np.ndarray:
    """
    Compute the right pseudo-inverse J+ = V * S+ * U^T from the thin SVD.

    Singular values larger than epsilon are inverted exactly; smaller ones
    use s / (s^2 + damping^2) so the inverse stays bounded near singularities.

    Input:
        jacobian: Matrix of shape (K, N)
        epsilon: Singular value threshold below which damping applies
        damping: Damping factor (lambda)
    Output:
        pseudo-inverse, shape (N, K)
    """
    jacobian = np.asarray(jacobian, dtype=np.float64)
    rows, cols = jacobian.shape
    if jacobian.size == 0:
        return np.zeros((cols, rows))

    U, S, Vt = np.linalg.svd(jacobian, full_matrices=False)

    inv_S = np.empty_like(S)
    large = np.abs(S) > epsilon
    inv_S[large] = 1.0 / S[large]
    inv_S[~large] = S[~large] / (S[~large] ** 2 + damping**2)

    return Vt.T @ np.diag(inv_S) @ U.T


def moore_penrose_pseudo_inverse(jacobian: np.ndarray) -> np.ndarray:
    """
    Compute the undamped right pseudo-inverse J^T (J J^T)^-1.

    Only valid for well conditioned matrices of full row rank; it grows
    without bound near singular configurations.

    Raises:
        np.linalg.LinAlgError: if J J^T is exactly singular
    """
    jacobian = np.asarray(jacobian, dtype=np.float64)
    return jacobian.T @ np.linalg.inv(jacobian @ jacobian.T)


def solve_underconstrained_ik(
    model: KinematicModel,
    goal_pose: SE3Pose,
    initial_joint_positions: np.ndarray,
    config: UnderconstrainedIKConfig,
    epsilon: float = EPSILON,
    damping: float = LAMBDA,
) -> IKResult:
    """
    Iterate damped least squares steps until every axis of the twist is
    below its convergence threshold or the iteration budget runs out.

    Input:
        model: Kinematic model used for FK and Jacobians (not shared with
            concurrent solves)
        goal_pose: Goal tool pose
        initial_joint_positions: Initial joint configuration for iteration
        config: Constrained axes, thresholds, joint update rates and budget
        epsilon: Singular value threshold for damping
        damping: Damping factor for small singular values
    Output:
        IKResult; joint_positions holds the best effort reached on failure
    """
    initial = np.asarray(initial_joint_positions, dtype=np.float64)
    if initial.shape != (model.num_joints,):
        raise ValueError(
            f"Expected {model.num_joints} initial joint positions, "
            f"got shape {initial.shape}"
        )
    if config.num_joints != model.num_joints:
        raise ValueError(
            f"Got {config.num_joints} joint update rates for "
            f"{model.num_joints} joints"
        )

    indices = config.constrained_indices
    thresholds = config.cartesian_convergence
    rates = config.joint_update_rates

    state = KinematicState(model)
    state.set_joint_positions(initial)

    iteration_count = 0
    status = IKStatus.MAX_ITERATIONS
    twist = np.zeros(DOF_SIZE)

    while iteration_count < config.max_ik_iterations:
        twist = compute_twist(state.tool_pose, goal_pose, config.constrained_dofs)

        if np.all(np.abs(twist) < thresholds):
            status = IKStatus.SUCCESS
            logger.debug(
                f"Found numeric ik solution after {iteration_count} iterations"
            )
            break

        reduced_twist = twist[indices]

        jacobian = model.jacobian(state.joint_positions)
        if jacobian is None:
            logger.error(f"Failed to get Jacobian for link {model.tool_frame}")
            return _make_result(
                IKStatus.JACOBIAN_UNAVAILABLE, state, twist, iteration_count
            )

        # Rotational rows into tool coordinates, matching the twist
        jacobian = np.array(jacobian, dtype=np.float64)
        jacobian[3:, :] = state.tool_pose.rotation.T @ jacobian[3:, :]

        jacobian_reduced = reduce_jacobian(jacobian, indices)
        jacobian_pinv = damped_pseudo_inverse(jacobian_reduced, epsilon, damping)

        delta = jacobian_pinv @ reduced_twist
        state.set_joint_positions(state.joint_positions + rates * delta)

        iteration_count += 1
    else:
        twist = compute_twist(state.tool_pose, goal_pose, config.constrained_dofs)

    logger.debug(f"Final tool twist {np.array2string(twist, precision=6)}")

    return _make_result(status, state, twist, iteration_count)


# --- Internal helper functions ---


def _make_result(
    status: IKStatus, state: KinematicState, twist: np.ndarray, iterations: int
) -> IKResult:
    return IKResult(
        status=status,
        joint_positions=state.joint_positions.copy(),
        twist=twist.copy(),
        iterations=iterations,
        position_error=float(np.linalg.norm(twist[:3])),
        orientation_error=float(np.linalg.norm(twist[3:])),
    )
