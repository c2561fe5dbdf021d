"""
Serial chain forward kinematics and Jacobian in numpy.

A chain is a sequence of revolute or prismatic joints. Each joint has a fixed
origin transform relative to its parent frame and a motion axis expressed in
its own frame. The tool frame is a fixed offset from the last joint frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

from underconstrained_ik.types import SE3Pose


@dataclass(frozen=True, eq=False)
class ChainJoint:
    """A single joint of a serial chain."""

    name: str
    origin: SE3Pose  # Parent frame -> joint frame at zero position
    axis: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    joint_type: str = "revolute"  # "revolute" or "prismatic"
    lower: float = -np.inf
    upper: float = np.inf

    def __post_init__(self):
        axis = np.asarray(self.axis, dtype=np.float64)
        if axis.shape != (3,):
            raise ValueError(f"Axis must be shape (3,), got {axis.shape}")
        norm = np.linalg.norm(axis)
        if norm < 1e-12:
            raise ValueError(f"Joint '{self.name}' has a zero-length axis")
        if self.joint_type not in ("revolute", "prismatic"):
            raise ValueError(
                f"Unknown joint type '{self.joint_type}'. "
                "Supported: revolute, prismatic"
            )
        if self.lower > self.upper:
            raise ValueError(
                f"Joint '{self.name}' lower limit {self.lower} exceeds "
                f"upper limit {self.upper}"
            )
        object.__setattr__(self, "axis", axis / norm)

    def motion(self, position: float) -> SE3Pose:
        """Transform contributed by the joint at the given position."""
        if self.joint_type == "revolute":
            rotation = Rotation.from_rotvec(self.axis * position).as_matrix()
            return SE3Pose(position=np.zeros(3), rotation=rotation)
        return SE3Pose(position=self.axis * position, rotation=np.eye(3))


class SerialChain:
    """Kinematic model of a serial chain of revolute and prismatic joints.

    The model holds no mutable state, so ``fork`` returns the same instance.
    """

    def __init__(
        self,
        joints: list[ChainJoint],
        tool_offset: SE3Pose | None = None,
        base_pose: SE3Pose | None = None,
        tool_frame: str = "tool0",
    ) -> None:
        if not joints:
            raise ValueError("A serial chain needs at least one joint")
        names = [j.name for j in joints]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate joint names in chain: {names}")

        if tool_offset is None:
            tool_offset = SE3Pose.identity()
        if base_pose is None:
            base_pose = SE3Pose.identity()

        self._joints = list(joints)
        self._tool_offset = tool_offset
        self._base_pose = base_pose
        self._tool_frame = tool_frame
        self._lower = np.array([j.lower for j in joints])
        self._upper = np.array([j.upper for j in joints])

    @property
    def num_joints(self) -> int:
        return len(self._joints)

    @property
    def joint_names(self) -> list[str]:
        return [j.name for j in self._joints]

    @property
    def tool_frame(self) -> str:
        return self._tool_frame

    @property
    def joint_limits(self) -> tuple[np.ndarray, np.ndarray]:
        """Joint limits as (lower_bounds, upper_bounds) arrays."""
        return self._lower.copy(), self._upper.copy()

    def forward_kinematics(self, joint_positions: np.ndarray) -> SE3Pose:
        """
        Compute the tool pose in the base frame.

        Input:
            joint_positions: Joint positions array of length num_joints
        Output:
            SE3Pose of the tool frame
        """
        q = self._check_positions(joint_positions)
        pose = self._base_pose
        for joint, value in zip(self._joints, q):
            pose = pose.compose(joint.origin).compose(joint.motion(value))
        return pose.compose(self._tool_offset)

    def jacobian(self, joint_positions: np.ndarray) -> np.ndarray | None:
        """
        Compute the geometric Jacobian at the tool frame origin.

        Input:
            joint_positions: Joint positions array of length num_joints
        Output:
            Jacobian matrix, shape (6, num_joints), base frame, or None if
            the joint vector does not match the chain
        """
        q = np.asarray(joint_positions, dtype=np.float64)
        if q.shape != (self.num_joints,) or not np.all(np.isfinite(q)):
            return None

        axes = []
        origins = []
        pose = self._base_pose
        for joint, value in zip(self._joints, q):
            pose = pose.compose(joint.origin)
            axes.append(pose.rotation @ joint.axis)
            origins.append(pose.position.copy())
            pose = pose.compose(joint.motion(value))
        tool_position = pose.compose(self._tool_offset).position

        J = np.zeros((6, self.num_joints))
        for i, joint in enumerate(self._joints):
            if joint.joint_type == "revolute":
                J[:3, i] = np.cross(axes[i], tool_position - origins[i])
                J[3:, i] = axes[i]
            else:
                J[:3, i] = axes[i]
        return J

    def enforce_bounds(self, joint_positions: np.ndarray) -> np.ndarray:
        """Clamp joint positions into the joint limits."""
        q = self._check_positions(joint_positions)
        return np.clip(q, self._lower, self._upper)

    def fork(self) -> SerialChain:
        return self

    def _check_positions(self, joint_positions: np.ndarray) -> np.ndarray:
        q = np.asarray(joint_positions, dtype=np.float64)
        if q.shape != (self.num_joints,):
            raise ValueError(
                f"Expected {self.num_joints} joint positions, got shape {q.shape}"
            )
        return q


def create_serial_chain(
    link_lengths: list[float],
    axes: list[np.ndarray] | None = None,
    tool_frame: str = "tool0",
) -> SerialChain:
    """Factory for a chain of revolute joints spaced along the x axis.

    Input:
        link_lengths: Distance from each joint to the next (last one is the tool)
        axes: Joint axes (defaults to z for every joint, i.e. a planar arm)
        tool_frame: Name reported for the tool frame
    Output:
        SerialChain instance

    Examples:
        create_serial_chain([0.5, 0.4, 0.1])
    """
    if axes is None:
        axes = [np.array([0.0, 0.0, 1.0])] * len(link_lengths)
    if len(axes) != len(link_lengths):
        raise ValueError(f"Got {len(axes)} axes for {len(link_lengths)} links")

    joints = []
    previous_length = 0.0
    for i, (length, axis) in enumerate(zip(link_lengths, axes)):
        joints.append(
            ChainJoint(
                name=f"joint_{i + 1}",
                origin=SE3Pose(
                    position=[previous_length, 0.0, 0.0], rotation=np.eye(3)
                ),
                axis=axis,
            )
        )
        previous_length = length
    tool_offset = SE3Pose(position=[previous_length, 0.0, 0.0], rotation=np.eye(3))
    return SerialChain(joints, tool_offset=tool_offset, tool_frame=tool_frame)
