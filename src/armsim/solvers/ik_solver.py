"""
Inverse kinematics for the ER50A arm.

Design goals
------------
- Reuse the exact FK chain from ``armsim.model.chain`` (same stage axes and
  structural corrections)
- Pure functions taking the DH table explicitly; no I/O here
- Deterministic: identical target, seed and table give identical angles

Method
------
Damped Jacobian-transpose descent. Every iteration evaluates the chain once,
forms a position error (mm) and a small-angle orientation error (rad), and
moves each joint along its Jacobian column:

    dq_j = (Jv_j . e_pos + w_rot * Jw_j . e_rot) * learning_rate * gain

Joint ``j`` pivots about chain frame ``j``; its axis is that frame's local Z,
except joint index 3 which mirrors the FK stage-4 exception and uses local X.
The rotation weight, gain and pivot choice are empirical tuning constants
(see :class:`~armsim.core.config.IKOptions`), not derived from the geometry.

The solver never reports failure. When the iteration cap is hit it returns its
best estimate; use :func:`pose_residual` or :func:`solve_with_metrics` when a
convergence guarantee is needed.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from armsim.core.config import IKOptions
from armsim.core.models import Matrix33, Matrix44, Vector3, as_joint_vector
from armsim.core.orientation import rotation_error_vector
from armsim.model.chain import X_AXIS_STAGE, forward_kinematics
from armsim.model.dh_params import DHParameterSet

logger = logging.getLogger(__name__)

# Solved joint whose axis is the pivot frame's local X.
X_AXIS_JOINT = X_AXIS_STAGE - 1


class IKResult(NamedTuple):
    angles: tuple[float, ...]
    pos_err: float      # mm
    rot_err: float      # rad
    iterations: int
    converged: bool


def normalize_angle(deg: float) -> float:
    """Wrap an angle in degrees into ``(-180, 180]``; non-finite values pass through."""
    if not math.isfinite(deg):
        return deg
    angle = math.fmod(deg, 360.0)
    if angle > 180.0:
        angle -= 360.0
    elif angle <= -180.0:
        angle += 360.0
    return angle


def normalize_angles(q: Sequence[float] | NDArray[np.float64]) -> tuple[float, ...]:
    return tuple(normalize_angle(float(v)) for v in q)


def target_from_position(position_mm: Sequence[float] | Vector3, rotation: Matrix33) -> Matrix44:
    """Build a homogeneous target from a position (mm) and a 3x3 rotation."""
    T = np.eye(4, dtype=float)
    T[:3, :3] = rotation
    T[:3, 3] = np.asarray(position_mm, dtype=float).reshape(3)
    return T


def _pose_errors(T_des: Matrix44, T_cur: Matrix44) -> tuple[Vector3, Vector3]:
    e_pos = T_des[:3, 3] - T_cur[:3, 3]
    e_rot = rotation_error_vector(T_des[:3, :3], T_cur[:3, :3])
    return e_pos, e_rot


def joint_axis(frame: Matrix44, joint: int) -> Vector3:
    """World-frame rotation axis of solved joint ``joint`` given its pivot frame."""
    axis = frame[:3, 0] if joint == X_AXIS_JOINT else frame[:3, 2]
    return axis / np.linalg.norm(axis)


def _jacobian_transpose_step(
    q: NDArray[np.float64],
    chain: list[Matrix44],
    e_pos: Vector3,
    e_rot: Vector3,
    opts: IKOptions,
) -> NDArray[np.float64]:
    p_cur = chain[-1][:3, 3]
    scale = opts.learning_rate * opts.gain
    q_next = q.copy()
    for j in range(q.shape[0]):
        pivot = chain[j]
        axis = joint_axis(pivot, j)
        Jv = np.cross(axis, p_cur - pivot[:3, 3])
        Jw = axis
        contribution = float(Jv @ e_pos) + float(Jw @ e_rot) * opts.rotation_weight
        q_next[j] += contribution * scale
    return q_next


def pose_residual(
    T_des: Matrix44, angles: Sequence[float] | NDArray[np.float64], dh: DHParameterSet
) -> tuple[float, float]:
    """Return ``(position error mm, orientation error rad)`` of ``angles`` against ``T_des``."""
    e_pos, e_rot = _pose_errors(T_des, forward_kinematics(angles, dh)[-1])
    return float(np.linalg.norm(e_pos)), float(np.linalg.norm(e_rot))


def solve_with_metrics(
    T_des: Matrix44,
    seed: Sequence[float] | NDArray[np.float64],
    dh: DHParameterSet,
    opts: IKOptions | None = None,
) -> IKResult:
    """Run the Jacobian-transpose descent from ``seed`` (degrees) and report residuals."""
    if opts is None:
        opts = IKOptions()
    T_des = np.asarray(T_des, dtype=float)
    if T_des.shape != (4, 4):
        raise ValueError("T_des must be 4x4")

    q = np.array(as_joint_vector(seed), dtype=float)
    iterations = 0
    for _ in range(opts.max_iter):
        chain = forward_kinematics(q, dh)
        e_pos, e_rot = _pose_errors(T_des, chain[-1])
        if np.linalg.norm(e_pos) < opts.tol_pos and np.linalg.norm(e_rot) < opts.tol_rot:
            break
        q = _jacobian_transpose_step(q, chain, e_pos, e_rot, opts)
        iterations += 1

    angles = normalize_angles(q)
    pos_err, rot_err = pose_residual(T_des, angles, dh)
    converged = pos_err < opts.tol_pos and rot_err < opts.tol_rot
    logger.debug(
        "IK finished after %d iterations: pos_err=%.4f mm rot_err=%.6f rad converged=%s",
        iterations,
        pos_err,
        rot_err,
        converged,
    )
    return IKResult(angles, pos_err, rot_err, iterations, converged)


def solve(
    T_des: Matrix44,
    seed: Sequence[float] | NDArray[np.float64],
    dh: DHParameterSet,
    max_iter: int = 200,
) -> tuple[float, ...]:
    """Solve for joint angles (degrees, each in ``(-180, 180]``) reaching ``T_des``."""
    return solve_with_metrics(T_des, seed, dh, IKOptions(max_iter=max_iter)).angles


def solve_position(
    target_mm: Sequence[float] | Vector3,
    current_angles: Sequence[float] | NDArray[np.float64],
    dh: DHParameterSet,
    orientation: Matrix33 | None = None,
    opts: IKOptions | None = None,
) -> IKResult:
    """Ad-hoc move to a Cartesian point, seeded from the current angles.

    Without an explicit ``orientation`` the flange keeps the orientation it
    has at ``current_angles``.
    """
    if len(target_mm) != 3:
        raise ValueError("target position must have 3 components")
    if orientation is None:
        orientation = forward_kinematics(current_angles, dh)[-1][:3, :3]
    T_des = target_from_position(target_mm, orientation)
    return solve_with_metrics(T_des, current_angles, dh, opts)


__all__ = [
    "IKOptions",
    "IKResult",
    "X_AXIS_JOINT",
    "joint_axis",
    "normalize_angle",
    "normalize_angles",
    "pose_residual",
    "solve",
    "solve_position",
    "solve_with_metrics",
    "target_from_position",
]
