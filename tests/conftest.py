import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from underconstrained_ik.kinematics import ChainJoint, SerialChain, create_serial_chain
from underconstrained_ik.types import SE3Pose

ARM6_HOME = np.array([0.1, -0.4, 0.8, 0.2, 0.5, -0.3])


def _origin(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> SE3Pose:
    return SE3Pose(position=[x, y, z], rotation=np.eye(3))


def make_arm6() -> SerialChain:
    """Six revolute joints: yaw, shoulder, elbow and a roll-pitch-roll wrist."""
    x_axis = [1.0, 0.0, 0.0]
    y_axis = [0.0, 1.0, 0.0]
    z_axis = [0.0, 0.0, 1.0]
    joints = [
        ChainJoint("base_yaw", _origin(z=0.3), z_axis, lower=-3.0, upper=3.0),
        ChainJoint("shoulder", _origin(), y_axis, lower=-2.0, upper=2.0),
        ChainJoint("elbow", _origin(x=0.4), y_axis, lower=-2.5, upper=2.5),
        ChainJoint("wrist_roll", _origin(x=0.35), x_axis),
        ChainJoint("wrist_pitch", _origin(), y_axis, lower=-2.0, upper=2.0),
        ChainJoint("tool_roll", _origin(), x_axis),
    ]
    return SerialChain(joints, tool_offset=_origin(x=0.1), tool_frame="tool0")


def numeric_jacobian(model, q, h=1e-6):
    """Central differences; angular part from the rotation increment."""
    J = np.zeros((6, len(q)))
    for i in range(len(q)):
        dq = np.zeros(len(q))
        dq[i] = h
        plus = model.forward_kinematics(q + dq)
        minus = model.forward_kinematics(q - dq)
        J[:3, i] = (plus.position - minus.position) / (2 * h)
        increment = plus.rotation @ minus.rotation.T
        J[3:, i] = Rotation.from_matrix(increment).as_rotvec() / (2 * h)
    return J


class FailingJacobianModel:
    """Wraps a model and stops producing Jacobians from a given call on."""

    def __init__(self, model: SerialChain, fail_on_call: int = 1) -> None:
        self._model = model
        self._fail_on_call = fail_on_call
        self.jacobian_calls = 0

    @property
    def num_joints(self) -> int:
        return self._model.num_joints

    @property
    def joint_names(self) -> list[str]:
        return self._model.joint_names

    @property
    def tool_frame(self) -> str:
        return self._model.tool_frame

    def forward_kinematics(self, joint_positions):
        return self._model.forward_kinematics(joint_positions)

    def jacobian(self, joint_positions):
        self.jacobian_calls += 1
        if self.jacobian_calls >= self._fail_on_call:
            return None
        return self._model.jacobian(joint_positions)

    def enforce_bounds(self, joint_positions):
        return self._model.enforce_bounds(joint_positions)

    def fork(self):
        return self


def make_params(num_joints: int, **overrides) -> dict:
    params = {
        "constrained_dofs": [1, 1, 1, 1, 1, 1],
        "cartesian_convergence": [1e-5, 1e-5, 1e-5, 1e-4, 1e-4, 1e-4],
        "joint_update_rates": [0.5] * num_joints,
        "max_ik_iterations": 200,
    }
    params.update(overrides)
    return params


@pytest.fixture
def arm6() -> SerialChain:
    return make_arm6()


@pytest.fixture
def planar3() -> SerialChain:
    return create_serial_chain([0.5, 0.4, 0.1])


@pytest.fixture
def home() -> np.ndarray:
    return ARM6_HOME.copy()
