"""Forward kinematics for the ER50A arm.

The chain is evaluated stage by stage from the base. Each stage applies

    Tz(d) * R_axis(q + offset) * Tx(a) * Rx(alpha)

to the running transform, where the joint axis is local Z for every stage
except stage 4, which turns about local X. A uniform DH table cannot express
the real joint-axis directions of this arm, so fixed corrective rotations are
spliced in after stages 1, 3, 4 and 5, and a fixed flange offset closes the
chain. These are mechanical constants and are deliberately kept out of
:class:`~armsim.model.dh_params.DHParameterSet`.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from armsim.core.models import Matrix44, Pose, as_joint_vector
from armsim.core.orientation import matrix_to_pose
from armsim.model.dh_params import STAGE_COUNT, DHParameterSet
from armsim.model.transforms import Rx, Tx, Tz, rotation_about

# Stage whose joint turns about local X instead of local Z.
X_AXIS_STAGE = 4

# (axis, degrees) rotations applied to the running transform after a stage.
STAGE_CORRECTIONS: dict[int, tuple[tuple[str, float], ...]] = {
    1: (("x", 90.0),),
    3: (("y", 90.0), ("z", -90.0)),
    4: (("x", -90.0),),
    5: (("x", -90.0), ("y", 90.0)),
}

# Flange offset from the last joint frame, applied as Tz then Tx (mm).
FLANGE_OFFSET_Z = 386.63
FLANGE_OFFSET_X = -124.0

FRAME_COUNT = STAGE_COUNT + 1


def stage_axis(stage: int) -> str:
    return "x" if stage == X_AXIS_STAGE else "z"


def _stage_transform(stage: int, q_deg: float, dh: DHParameterSet) -> Matrix44:
    d, a, alpha, offset = dh.stage(stage)
    return (
        Tz(d)
        @ rotation_about(stage_axis(stage), math.radians(q_deg + offset))
        @ Tx(a)
        @ Rx(math.radians(alpha))
    )


def _correction(stage: int) -> Matrix44:
    T = np.eye(4, dtype=float)
    for axis, angle_deg in STAGE_CORRECTIONS.get(stage, ()):
        T = T @ rotation_about(axis, math.radians(angle_deg))
    return T


def flange_offset() -> Matrix44:
    return Tz(FLANGE_OFFSET_Z) @ Tx(FLANGE_OFFSET_X)


def forward_kinematics(
    joint_angles: Sequence[float] | NDArray[np.float64], dh: DHParameterSet
) -> list[Matrix44]:
    """Return the 8 absolute frames ``[T0, ..., T6, T_flange]`` for angles in degrees.

    Stage 0 is the fixed base and is always evaluated with a commanded angle
    of 0. Frame ``i`` is built only from frame ``i - 1``; non-finite values
    in ``dh`` propagate into the result unchanged.
    """
    q = (0.0,) + as_joint_vector(joint_angles)

    chain: list[Matrix44] = []
    T = np.eye(4, dtype=float)
    for stage in range(STAGE_COUNT):
        T = T @ _stage_transform(stage, q[stage], dh)
        chain.append(T.copy())
        if stage in STAGE_CORRECTIONS:
            T = T @ _correction(stage)
    chain.append(T @ flange_offset())
    return chain


def end_effector_pose(joint_angles: Sequence[float] | NDArray[np.float64], dh: DHParameterSet) -> Pose:
    """Position and Z-Y-X Euler rotation of the flange frame."""
    return matrix_to_pose(forward_kinematics(joint_angles, dh)[-1])


def link_positions(
    joint_angles: Sequence[float] | NDArray[np.float64], dh: DHParameterSet
) -> NDArray[np.float64]:
    """Origins of all chain frames as an ``(8, 3)`` array (mm)."""
    return np.array([T[:3, 3] for T in forward_kinematics(joint_angles, dh)], dtype=float)


__all__ = [
    "FLANGE_OFFSET_X",
    "FLANGE_OFFSET_Z",
    "FRAME_COUNT",
    "STAGE_CORRECTIONS",
    "X_AXIS_STAGE",
    "end_effector_pose",
    "flange_offset",
    "forward_kinematics",
    "link_positions",
    "stage_axis",
]
