"""Lightweight data models shared by the kinematics, parser and CLI modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

Matrix33 = NDArray[np.float64]
Matrix44 = NDArray[np.float64]
Vector3 = NDArray[np.float64]

JOINT_COUNT = 6


@dataclass(frozen=True)
class Pose:
    """Cartesian pose: position in mm, ``a, b, c`` in degrees about Z, Y, X."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0

    @classmethod
    def zero(cls) -> "Pose":
        return cls()

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return (self.x, self.y, self.z, self.a, self.b, self.c)


@dataclass(frozen=True)
class GlobalConfig:
    """World frame and tool-centre-point offset declared by a motion program."""

    world: Pose = field(default_factory=Pose.zero)
    tool: Pose = field(default_factory=Pose.zero)


@dataclass(frozen=True)
class PoseTarget:
    matrix: Matrix44

    @property
    def position_mm(self) -> Vector3:
        return self.matrix[:3, 3]


@dataclass(frozen=True)
class JointAngles:
    degrees: tuple[float, ...]

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "JointAngles":
        if len(values) != JOINT_COUNT:
            raise ValueError(f"Expected {JOINT_COUNT} joint angles, received {len(values)}")
        return cls(tuple(float(value) for value in values))


def as_joint_vector(values: Sequence[float] | NDArray[np.float64]) -> tuple[float, ...]:
    """Validate a 6-element angle sequence and return it as an immutable tuple."""
    return JointAngles.from_sequence(values).degrees


__all__ = [
    "JOINT_COUNT",
    "GlobalConfig",
    "JointAngles",
    "Matrix33",
    "Matrix44",
    "Pose",
    "PoseTarget",
    "Vector3",
    "as_joint_vector",
]
