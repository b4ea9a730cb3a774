"""Pose algebra: Z-Y-X Euler poses, rotation matrices and rotation errors.

Industrial motion programs describe a pose as ``x, y, z`` (mm) plus ``a, b, c``
(degrees), applied as ``Trans(x, y, z) * Rz(a) * Ry(b) * Rx(c)``. Everything
here is numeric (NumPy); the symbolic counterparts live in
:mod:`armsim.model.transforms`.
"""

from __future__ import annotations

import math

import numpy as np
from scipy.spatial.transform import Rotation

from armsim.core.models import Matrix33, Matrix44, Pose, Vector3
from armsim.model.transforms import Rx, Ry, Rz, Txyz

_GIMBAL_EPS = 1e-9


def pose_to_matrix(pose: Pose) -> Matrix44:
    """Build ``Trans(x, y, z) * Rz(a) * Ry(b) * Rx(c)`` from a pose in mm/degrees."""
    return (
        Txyz(pose.x, pose.y, pose.z)
        @ Rz(math.radians(pose.a))
        @ Ry(math.radians(pose.b))
        @ Rx(math.radians(pose.c))
    )


def rotation_to_euler_zyx(R: Matrix33) -> tuple[float, float, float]:
    """Return ``(a, b, c)`` in degrees with ``R = Rz(a) * Ry(b) * Rx(c)``.

    At gimbal lock (``|b| = 90``) only ``a - c`` or ``a + c`` is observable;
    ``c`` is pinned to zero and the whole yaw is folded into ``a``.
    """
    r20 = float(R[2, 0])
    if abs(abs(r20) - 1.0) < _GIMBAL_EPS:
        b = -math.copysign(math.pi / 2, r20)
        a = math.atan2(-float(R[0, 1]), float(R[1, 1]))
        c = 0.0
    else:
        b = math.asin(float(np.clip(-r20, -1.0, 1.0)))
        a = math.atan2(float(R[1, 0]), float(R[0, 0]))
        c = math.atan2(float(R[2, 1]), float(R[2, 2]))
    return math.degrees(a), math.degrees(b), math.degrees(c)


def matrix_to_pose(T: Matrix44) -> Pose:
    """Decompose a rigid transform into a display pose (mm, Z-Y-X degrees)."""
    if T.shape != (4, 4):
        raise ValueError("T must be a 4x4 homogeneous transform")
    a, b, c = rotation_to_euler_zyx(T[:3, :3])
    x, y, z = (float(v) for v in T[:3, 3])
    return Pose(x, y, z, a, b, c)


def compose_flange_target(waypoint: Pose, world: Pose, tool: Pose) -> Matrix44:
    """Return ``World * Waypoint * inv(Tool)``, the flange frame the chain must reach.

    The tool offset may carry a rotation, so the full inverse is required.
    """
    tcp = pose_to_matrix(world) @ pose_to_matrix(waypoint)
    return tcp @ np.linalg.inv(pose_to_matrix(tool))


def rotation_error_vector(R_target: Matrix33, R_current: Matrix33) -> Vector3:
    """Small-angle rotation error taking ``R_current`` onto ``R_target`` (rad).

    Twice the vector part of ``q_target * q_current^-1``, negated when the
    scalar part is negative so the error always follows the short arc.
    """
    # scipy quaternions are scalar-last: (x, y, z, w)
    q_err = Rotation.from_matrix(R_target @ R_current.T).as_quat()
    err = 2.0 * q_err[:3]
    if q_err[3] < 0:
        err = -err
    return err


def rotation_angle(RA: Matrix33, RB: Matrix33) -> float:
    """Geodesic distance between two rotations in radians, in ``[0, pi]``."""
    return float(Rotation.from_matrix(RA.T @ RB).magnitude())


__all__ = [
    "compose_flange_target",
    "matrix_to_pose",
    "pose_to_matrix",
    "rotation_angle",
    "rotation_error_vector",
    "rotation_to_euler_zyx",
]
