import numpy as np
import pytest

from underconstrained_ik.config import EPSILON, LAMBDA
from underconstrained_ik.kinematics import (
    compute_twist,
    damped_pseudo_inverse,
    moore_penrose_pseudo_inverse,
    reduce_jacobian,
    solve_underconstrained_ik,
)
from underconstrained_ik.types import SE3Pose, UnderconstrainedIKConfig


def test_reduce_jacobian_keeps_rows_in_index_order():
    J = np.arange(6 * 4, dtype=float).reshape(6, 4)
    reduced = reduce_jacobian(J, [0, 2, 5])
    assert reduced.shape == (3, 4)
    np.testing.assert_array_equal(reduced, J[[0, 2, 5]])


def test_reduce_jacobian_with_no_constrained_axes():
    J = np.ones((6, 3))
    assert reduce_jacobian(J, []).shape == (0, 3)


def test_reduce_jacobian_does_not_alias_input():
    J = np.ones((6, 3))
    reduced = reduce_jacobian(J, [1, 2])
    reduced[:] = 5.0
    assert np.all(J == 1.0)


def test_damped_inverse_matches_pinv_when_well_conditioned():
    rng = np.random.default_rng(3)
    J = rng.normal(size=(3, 6))
    assert np.linalg.svd(J, compute_uv=False).min() > EPSILON

    np.testing.assert_allclose(
        damped_pseudo_inverse(J), np.linalg.pinv(J), atol=1e-10
    )
    np.testing.assert_allclose(
        damped_pseudo_inverse(J), moore_penrose_pseudo_inverse(J), atol=1e-10
    )


def test_damped_inverse_shape_is_transposed():
    J = np.random.default_rng(0).normal(size=(2, 7))
    assert damped_pseudo_inverse(J).shape == (7, 2)


def test_damped_inverse_is_bounded_near_singularity():
    J = np.array([[1.0, 0.0, 0.0], [0.0, 1e-6, 0.0]])

    damped = damped_pseudo_inverse(J, EPSILON, LAMBDA)
    plain = moore_penrose_pseudo_inverse(J)

    assert np.max(np.abs(damped)) <= 1.0 / LAMBDA
    assert np.max(np.abs(plain)) > 1e5


def test_damped_inverse_of_rank_deficient_matrix_is_finite():
    J = np.array([[1.0, 2.0, 0.0], [2.0, 4.0, 0.0]])
    damped = damped_pseudo_inverse(J)
    assert np.all(np.isfinite(damped))
    assert np.max(np.abs(damped)) <= 1.0 / LAMBDA


def test_damped_inverse_of_empty_matrix():
    assert damped_pseudo_inverse(np.zeros((0, 4))).shape == (4, 0)


def test_moore_penrose_fails_on_exactly_singular_matrix():
    J = np.array([[1.0, 0.0], [0.0, 0.0]])
    with pytest.raises(np.linalg.LinAlgError):
        moore_penrose_pseudo_inverse(J)


def test_single_step_decreases_twist_norm(planar3):
    mask = np.array([1, 1, 0, 0, 0, 1])
    q0 = np.array([0.3, 0.6, -0.4])
    goal = planar3.forward_kinematics(q0 + np.array([0.05, -0.04, 0.03]))
    config = UnderconstrainedIKConfig(
        constrained_dofs=mask,
        cartesian_convergence=[1e-12] * 6,
        joint_update_rates=[1.0, 1.0, 1.0],
        max_ik_iterations=1,
    )

    before = compute_twist(planar3.forward_kinematics(q0), goal, mask)
    result = solve_underconstrained_ik(planar3, goal, q0, config)

    assert result.iterations == 1
    assert np.linalg.norm(result.twist) < np.linalg.norm(before)


def test_step_direction_points_toward_goal(arm6, home):
    current = arm6.forward_kinematics(home)
    goal = SE3Pose(
        position=current.position + np.array([0.02, 0.0, -0.01]),
        rotation=current.rotation,
    )
    indices = [0, 1, 2]
    twist = compute_twist(current, goal, [1, 1, 1, 0, 0, 0])[indices]
    J = reduce_jacobian(arm6.jacobian(home), indices)

    delta = damped_pseudo_inverse(J) @ twist

    # Linearized Cartesian motion has a positive component along the twist
    assert np.dot(J @ delta, twist) > 0.0
