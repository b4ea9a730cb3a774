"""Waypoint generators and seed-chained trajectory solving.

Demo paths start at the current flange pose and keep its orientation fixed
while the position follows a parametric curve. Every waypoint, whether
generated here or read from a motion program, is solved with the previous
solution as seed so consecutive samples stay on the same IK branch.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal, get_args

import numpy as np
from numpy.typing import NDArray

from armsim.core.config import IKOptions
from armsim.core.models import GlobalConfig, Matrix33, Matrix44, Pose, Vector3, as_joint_vector
from armsim.core.orientation import compose_flange_target
from armsim.model.chain import forward_kinematics
from armsim.model.dh_params import DHParameterSet
from armsim.solvers.ik_solver import solve_with_metrics, target_from_position

logger = logging.getLogger(__name__)

PathKind = Literal["line", "s-curve", "spiral"]
PATH_KINDS: tuple[str, ...] = get_args(PathKind)

BASE_STEPS = 60

LINE_OFFSET_MM = np.array([500.0, 0.0, 0.0])

S_CURVE_AMPLITUDE_MM = 200.0
S_CURVE_PHASE_DIVISOR = 20.0
S_CURVE_ADVANCE_MM = 10.0

SPIRAL_CENTER_MM = np.array([1200.0, 0.0, 800.0])
SPIRAL_ANGLE_STEP = 0.1     # rad per sample
SPIRAL_RADIUS_MM = 200.0
SPIRAL_RADIUS_GROWTH_MM = 2.0
SPIRAL_RISE_MM = 5.0

JointVector = tuple[float, ...]


def line_points(start_mm: Vector3, steps: int = BASE_STEPS) -> list[Vector3]:
    """``steps + 1`` evenly spaced points from ``start`` to ``start + 500 mm`` along base X."""
    end_mm = start_mm + LINE_OFFSET_MM
    return [start_mm + (end_mm - start_mm) * (i / steps) for i in range(steps + 1)]


def s_curve_points(start_mm: Vector3, steps: int = 2 * BASE_STEPS) -> list[Vector3]:
    """Sinusoidal sweep in the horizontal plane through the start point."""
    cx, cy, z = (float(v) for v in start_mm)
    return [
        np.array(
            [
                cx + math.sin(i / S_CURVE_PHASE_DIVISOR) * S_CURVE_AMPLITUDE_MM,
                cy + i * S_CURVE_ADVANCE_MM,
                z,
            ],
            dtype=float,
        )
        for i in range(steps + 1)
    ]


def spiral_points(_start_mm: Vector3, steps: int = 3 * BASE_STEPS) -> list[Vector3]:
    """Rising helix of growing radius about a fixed centre; ignores the start point."""
    cx, cy, cz = (float(v) for v in SPIRAL_CENTER_MM)
    points: list[Vector3] = []
    for i in range(steps + 1):
        angle = i * SPIRAL_ANGLE_STEP
        radius = SPIRAL_RADIUS_MM + i * SPIRAL_RADIUS_GROWTH_MM
        points.append(
            np.array(
                [cx + math.cos(angle) * radius, cy + math.sin(angle) * radius, cz + i * SPIRAL_RISE_MM],
                dtype=float,
            )
        )
    return points


PATH_BUILDERS: dict[str, Callable[[Vector3], list[Vector3]]] = {
    "line": line_points,
    "s-curve": s_curve_points,
    "spiral": spiral_points,
}


def generate_path(
    kind: PathKind | str,
    start_angles: Sequence[float] | NDArray[np.float64],
    dh: DHParameterSet,
) -> list[Matrix44]:
    """Flange targets for a demo path starting at the pose of ``start_angles``."""
    try:
        builder = PATH_BUILDERS[kind]
    except KeyError:
        raise ValueError(f"unknown path {kind!r}; expected one of {', '.join(PATH_KINDS)}") from None
    start = forward_kinematics(start_angles, dh)[-1]
    rotation: Matrix33 = start[:3, :3].copy()
    return [target_from_position(p, rotation) for p in builder(start[:3, 3].copy())]


def solve_waypoints(
    targets: Sequence[Matrix44],
    seed: Sequence[float] | NDArray[np.float64],
    dh: DHParameterSet,
    opts: IKOptions | None = None,
) -> list[JointVector]:
    """Solve each target in order, seeding every solve with the previous result."""
    current = as_joint_vector(seed)
    solutions: list[JointVector] = []
    missed = 0
    for T_des in targets:
        result = solve_with_metrics(T_des, current, dh, opts)
        if not result.converged:
            missed += 1
        solutions.append(result.angles)
        current = result.angles
    if missed:
        logger.warning("%d of %d waypoints did not converge", missed, len(solutions))
    return solutions


def plan_path(
    kind: PathKind | str,
    start_angles: Sequence[float] | NDArray[np.float64],
    dh: DHParameterSet,
    opts: IKOptions | None = None,
) -> list[JointVector]:
    return solve_waypoints(generate_path(kind, start_angles, dh), start_angles, dh, opts)


@dataclass(frozen=True)
class ProgramPlan:
    flange_targets: tuple[Matrix44, ...]
    solutions: tuple[JointVector, ...]

    @property
    def flange_positions(self) -> NDArray[np.float64]:
        if not self.flange_targets:
            return np.zeros((0, 3), dtype=float)
        return np.array([T[:3, 3] for T in self.flange_targets], dtype=float)


def plan_program(
    waypoints: Sequence[Pose],
    config: GlobalConfig,
    seed: Sequence[float] | NDArray[np.float64],
    dh: DHParameterSet,
    opts: IKOptions | None = None,
) -> ProgramPlan:
    """Map recorded waypoints through the world/tool frames and solve them."""
    targets = [compose_flange_target(pt, config.world, config.tool) for pt in waypoints]
    solutions = solve_waypoints(targets, seed, dh, opts)
    logger.info("planned %d program waypoints", len(solutions))
    return ProgramPlan(tuple(targets), tuple(solutions))


__all__ = [
    "PATH_KINDS",
    "PathKind",
    "ProgramPlan",
    "generate_path",
    "line_points",
    "plan_path",
    "plan_program",
    "s_curve_points",
    "solve_waypoints",
    "spiral_points",
]
