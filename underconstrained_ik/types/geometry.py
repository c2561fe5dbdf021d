from dataclasses import dataclass

import numpy as np
from scipy.spatial.transform import Rotation


@dataclass
class SE3Pose:
    """
    Represents a 6D pose in SE(3) - position and orientation.
    Orientation is stored as a 3x3 rotation matrix.
    """

    position: np.ndarray  # (3,) xyz
    rotation: np.ndarray  # (3, 3) rotation matrix

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64)
        self.rotation = np.asarray(self.rotation, dtype=np.float64)
        if self.position.shape != (3,):
            raise ValueError(f"Position must be shape (3,), got {self.position.shape}")
        if self.rotation.shape != (3, 3):
            raise ValueError(
                f"Rotation must be shape (3, 3), got {self.rotation.shape}"
            )

    @classmethod
    def identity(cls) -> "SE3Pose":
        return cls(position=np.zeros(3), rotation=np.eye(3))

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "SE3Pose":
        """Create SE3Pose from 4x4 homogeneous transformation matrix."""
        matrix = np.asarray(matrix)
        if matrix.shape != (4, 4):
            raise ValueError(f"Matrix must be shape (4, 4), got {matrix.shape}")
        return cls(position=matrix[:3, 3], rotation=matrix[:3, :3])

    @classmethod
    def from_position_quat(
        cls, position: np.ndarray, quaternion: np.ndarray
    ) -> "SE3Pose":
        """Create SE3Pose from position and quaternion (x, y, z, w)."""
        rotation = Rotation.from_quat(np.asarray(quaternion, dtype=np.float64))
        return cls(position=np.asarray(position), rotation=rotation.as_matrix())

    def to_matrix(self) -> np.ndarray:
        """Convert to 4x4 homogeneous transformation matrix."""
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation
        matrix[:3, 3] = self.position
        return matrix

    def to_quaternion(self) -> np.ndarray:
        """Convert rotation to quaternion (x, y, z, w)."""
        return Rotation.from_matrix(self.rotation).as_quat()

    def compose(self, other: "SE3Pose") -> "SE3Pose":
        """Return self * other."""
        return SE3Pose(
            position=self.position + self.rotation @ other.position,
            rotation=self.rotation @ other.rotation,
        )
