"""
Pinocchio-backed kinematic model built from a URDF.

Each instance owns a ``pin.Data`` workspace; use ``fork`` to get an
instance with its own workspace before solving rollouts concurrently.
"""

from __future__ import annotations

import importlib
from typing import Any

import numpy as np

from underconstrained_ik.types import SE3Pose

pin = importlib.import_module("pinocchio")


class PinocchioModel:
    """Kinematic model for a chain of joints ending at a tool frame."""

    def __init__(
        self,
        model: Any,
        tool_frame: str,
        joint_names: list[str] | None = None,
        data: Any | None = None,
    ) -> None:
        # Get tool frame ID
        if not model.existFrame(tool_frame):
            available_frames = [
                model.frames[i].name for i in range(int(model.nframes))  # type: ignore[arg-type]
            ]
            raise ValueError(
                f"Frame '{tool_frame}' not found. Available frames: {available_frames}"
            )

        # Get joint IDs for the specified joint names
        actual_joint_names: list[str]
        if joint_names is None:
            # Use all actuated joints (exclude universe joint)
            joint_ids = list(range(1, int(model.njoints)))  # type: ignore[arg-type]
            actual_joint_names = [str(model.names[i]) for i in joint_ids]  # type: ignore[index]
        else:
            joint_ids = []
            model_names_list = list(model.names)  # type: ignore[arg-type]
            for name in joint_names:
                if name not in model_names_list:
                    raise ValueError(f"Joint '{name}' not found in model")
                joint_ids.append(model.getJointId(name))
            actual_joint_names = list(joint_names)

        self._model = model
        self._data = data if data is not None else model.createData()
        self._tool_frame = tool_frame
        self._tool_frame_id = model.getFrameId(tool_frame)
        self._joint_names = actual_joint_names
        self._joint_ids = joint_ids
        self._q_indices = [model.joints[jid].idx_q for jid in joint_ids]
        self._v_indices = [model.joints[jid].idx_v for jid in joint_ids]

    @property
    def num_joints(self) -> int:
        return len(self._joint_ids)

    @property
    def joint_names(self) -> list[str]:
        return list(self._joint_names)

    @property
    def tool_frame(self) -> str:
        return self._tool_frame

    @property
    def joint_limits(self) -> tuple[np.ndarray, np.ndarray]:
        """Joint limits as (lower_bounds, upper_bounds) arrays."""
        lower = np.array([self._model.lowerPositionLimit[i] for i in self._q_indices])
        upper = np.array([self._model.upperPositionLimit[i] for i in self._q_indices])
        return lower, upper

    def forward_kinematics(self, joint_positions: np.ndarray) -> SE3Pose:
        """
        Compute forward kinematics for the tool frame.

        Input:
            joint_positions: Joint positions array
        Output:
            SE3Pose of the tool frame
        """
        q = self._to_pinocchio_config(joint_positions)
        pin.forwardKinematics(self._model, self._data, q)
        pin.updateFramePlacements(self._model, self._data)

        oMf = self._data.oMf[self._tool_frame_id]

        return SE3Pose(
            position=np.array(oMf.translation),
            rotation=np.array(oMf.rotation),
        )

    def jacobian(self, joint_positions: np.ndarray) -> np.ndarray | None:
        """
        Compute the Jacobian at the tool frame, world-aligned axes.

        Input:
            joint_positions: Joint positions array
        Output:
            Jacobian matrix, shape (6, n_joints), or None if the joint
            vector does not match the model
        """
        q_controlled = np.asarray(joint_positions, dtype=np.float64)
        if q_controlled.shape != (self.num_joints,):
            return None

        q = self._to_pinocchio_config(q_controlled)
        pin.computeJointJacobians(self._model, self._data, q)
        pin.updateFramePlacements(self._model, self._data)

        J_full = pin.getFrameJacobian(
            self._model,
            self._data,
            self._tool_frame_id,
            pin.LOCAL_WORLD_ALIGNED,
        )

        # Extract columns for controlled joints
        return np.column_stack([J_full[:, idx_v] for idx_v in self._v_indices])

    def enforce_bounds(self, joint_positions: np.ndarray) -> np.ndarray:
        """Clamp joint positions into the URDF joint limits."""
        lower, upper = self.joint_limits
        return np.clip(np.asarray(joint_positions, dtype=np.float64), lower, upper)

    def fork(self) -> PinocchioModel:
        """Return a model sharing the robot description with a fresh workspace."""
        return PinocchioModel(
            self._model,
            self._tool_frame,
            joint_names=self._joint_names,
            data=self._model.createData(),
        )

    def _to_pinocchio_config(self, joint_positions: np.ndarray) -> np.ndarray:
        """Convert controlled joint positions to full Pinocchio configuration."""
        q = pin.neutral(self._model)
        for i, idx in enumerate(self._q_indices):
            q[idx] = joint_positions[i]
        return q


def create_pinocchio_model(
    urdf_path: str,
    tool_frame: str,
    joint_names: list[str] | None = None,
) -> PinocchioModel:
    """
    Create a Pinocchio kinematic model from URDF file.

    Input:
        urdf_path: Path to the URDF file
        tool_frame: Name of the tool frame/link
        joint_names: Optional list of joint names to control (if None, uses all joints)
    Output:
        PinocchioModel for FK/Jacobian computations
    """
    model = pin.buildModelFromUrdf(urdf_path)
    return PinocchioModel(model, tool_frame, joint_names=joint_names)
