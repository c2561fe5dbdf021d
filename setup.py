"""Build script for underconstrained_ik.

Pinocchio is optional; it is only needed for URDF-backed kinematic models
(``underconstrained_ik.kinematics.pinocchio_model``).
"""

from setuptools import find_packages, setup

setup(
    name="underconstrained-ik",
    version="0.1.0",
    description=(
        "Damped least squares IK correction for goals with unconstrained "
        "Cartesian degrees of freedom"
    ),
    packages=find_packages(include=["underconstrained_ik", "underconstrained_ik.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "scipy",
    ],
    extras_require={
        "pinocchio": ["pin"],
        "test": ["pytest"],
    },
)
