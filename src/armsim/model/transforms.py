"""Homogeneous transform primitives with NumPy and SymPy backends.

Angles are in radians. The numeric backend returns ``float64`` arrays and is
what the kinematic chain and the IK solver use; the symbolic backend mirrors
it one-to-one so the chain can also be printed as closed-form matrices.
"""

from __future__ import annotations

import math
from typing import Literal, overload

import numpy as np
import sympy as sp

from armsim.core.models import Matrix44
from armsim.core.type_utils import Num


@overload
def Rx(theta: float, *, numeric: Literal[True] = True) -> Matrix44: ...


@overload
def Rx(theta: Num, *, numeric: Literal[False]) -> sp.Matrix: ...


def Rx(theta: Num, *, numeric: bool = True) -> Matrix44 | sp.Matrix:
    if numeric:
        c, s = math.cos(float(theta)), math.sin(float(theta))
        return np.array(
            [[1.0, 0.0, 0.0, 0.0], [0.0, c, -s, 0.0], [0.0, s, c, 0.0], [0.0, 0.0, 0.0, 1.0]],
            dtype=float,
        )
    c, s = sp.cos(theta), sp.sin(theta)
    return sp.Matrix([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0], [0, 0, 0, 1]])


@overload
def Ry(theta: float, *, numeric: Literal[True] = True) -> Matrix44: ...


@overload
def Ry(theta: Num, *, numeric: Literal[False]) -> sp.Matrix: ...


def Ry(theta: Num, *, numeric: bool = True) -> Matrix44 | sp.Matrix:
    if numeric:
        c, s = math.cos(float(theta)), math.sin(float(theta))
        return np.array(
            [[c, 0.0, s, 0.0], [0.0, 1.0, 0.0, 0.0], [-s, 0.0, c, 0.0], [0.0, 0.0, 0.0, 1.0]],
            dtype=float,
        )
    c, s = sp.cos(theta), sp.sin(theta)
    return sp.Matrix([[c, 0, s, 0], [0, 1, 0, 0], [-s, 0, c, 0], [0, 0, 0, 1]])


@overload
def Rz(theta: float, *, numeric: Literal[True] = True) -> Matrix44: ...


@overload
def Rz(theta: Num, *, numeric: Literal[False]) -> sp.Matrix: ...


def Rz(theta: Num, *, numeric: bool = True) -> Matrix44 | sp.Matrix:
    if numeric:
        c, s = math.cos(float(theta)), math.sin(float(theta))
        return np.array(
            [[c, -s, 0.0, 0.0], [s, c, 0.0, 0.0], [0.0, 0.0, 1.0, 0.0], [0.0, 0.0, 0.0, 1.0]],
            dtype=float,
        )
    c, s = sp.cos(theta), sp.sin(theta)
    return sp.Matrix([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])


@overload
def Txyz(x: float, y: float, z: float, *, numeric: Literal[True] = True) -> Matrix44: ...


@overload
def Txyz(x: Num, y: Num, z: Num, *, numeric: Literal[False]) -> sp.Matrix: ...


def Txyz(x: Num, y: Num, z: Num, *, numeric: bool = True) -> Matrix44 | sp.Matrix:
    if numeric:
        T = np.eye(4, dtype=float)
        T[:3, 3] = (float(x), float(y), float(z))
        return T
    return sp.Matrix([[1, 0, 0, x], [0, 1, 0, y], [0, 0, 1, z], [0, 0, 0, 1]])


def Tx(a: Num, *, numeric: bool = True) -> Matrix44 | sp.Matrix:
    return Txyz(a, 0, 0, numeric=numeric)  # type: ignore[call-overload]


def Tz(d: Num, *, numeric: bool = True) -> Matrix44 | sp.Matrix:
    return Txyz(0, 0, d, numeric=numeric)  # type: ignore[call-overload]


AXIS_ROTATIONS = {"x": Rx, "y": Ry, "z": Rz}


def rotation_about(axis: str, theta: Num, *, numeric: bool = True) -> Matrix44 | sp.Matrix:
    """Rotate about the named local axis (``"x"``, ``"y"`` or ``"z"``)."""
    try:
        fn = AXIS_ROTATIONS[axis]
    except KeyError:
        raise ValueError(f"axis must be one of 'x', 'y', 'z', got {axis!r}") from None
    return fn(theta, numeric=numeric)  # type: ignore[operator]


__all__ = ["Rx", "Ry", "Rz", "Tx", "Tz", "Txyz", "rotation_about"]
