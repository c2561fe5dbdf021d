# Underconstrained damped least squares IK (primary interface)
from .base import KinematicModel
from .ik_solver import (
    KinematicState,
    compute_twist,
    damped_pseudo_inverse,
    moore_penrose_pseudo_inverse,
    reduce_jacobian,
    solve_underconstrained_ik,
)
from .serial_chain import ChainJoint, SerialChain, create_serial_chain

__all__ = [
    "KinematicModel",
    "KinematicState",
    "compute_twist",
    "damped_pseudo_inverse",
    "moore_penrose_pseudo_inverse",
    "reduce_jacobian",
    "solve_underconstrained_ik",
    "ChainJoint",
    "SerialChain",
    "create_serial_chain",
]

# Pinocchio URDF models (optional)
try:
    from .pinocchio_model import PinocchioModel, create_pinocchio_model

    __all__ += [
        "PinocchioModel",
        "create_pinocchio_model",
    ]
except ImportError:
    pass
