"""Symbolic forward kinematics for the ER50A chain and a numeric cross-check.

The symbolic chain is built from the same stage recipe, corrections and
flange offset as :func:`armsim.model.chain.forward_kinematics`, with the six
joint angles left as SymPy symbols ``th1..th6`` (degrees).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import NamedTuple, cast

import numpy as np
import sympy as sp

from armsim.core.type_utils import DEG_TO_RAD, Num
from armsim.model.chain import (
    FLANGE_OFFSET_X,
    FLANGE_OFFSET_Z,
    STAGE_CORRECTIONS,
    forward_kinematics,
    stage_axis,
)
from armsim.model.dh_params import STAGE_COUNT, DHParameterSet
from armsim.model.transforms import Rx, Tx, Tz, rotation_about


class SymbolicChain(NamedTuple):
    frames: list[sp.Matrix]
    thetas: tuple[sp.Symbol, ...]


class NumericCheckResult(NamedTuple):
    err_F: float
    err_inf: float
    delta: sp.Matrix


def _exact(value: float) -> sp.Expr:
    return cast(sp.Expr, sp.nsimplify(value))


def _deg(expr: Num) -> sp.Expr:
    return cast(sp.Expr, expr * DEG_TO_RAD)


def symbolic_chain(dh: DHParameterSet, simplify: bool = False) -> SymbolicChain:
    """Return the 8 absolute frames with ``th1..th6`` as free symbols."""
    thetas = cast(tuple[sp.Symbol, ...], sp.symbols("th1:7", real=True))
    q: list[Num] = [0, *thetas]

    frames: list[sp.Matrix] = []
    T = cast(sp.Matrix, sp.eye(4))  # type: ignore[no-untyped-call]
    for stage in range(STAGE_COUNT):
        d, a, alpha, offset = (_exact(v) for v in dh.stage(stage))
        Ti = (
            Tz(d, numeric=False)
            * rotation_about(stage_axis(stage), _deg(q[stage] + offset), numeric=False)
            * Tx(a, numeric=False)
            * Rx(_deg(alpha), numeric=False)
        )
        T = cast(sp.Matrix, T * Ti)
        if simplify:
            T = cast(sp.Matrix, sp.simplify(T))  # type: ignore[no-untyped-call]
        frames.append(T)
        for axis, angle_deg in STAGE_CORRECTIONS.get(stage, ()):
            T = cast(sp.Matrix, T * rotation_about(axis, _deg(_exact(angle_deg)), numeric=False))

    T = cast(
        sp.Matrix,
        T * Tz(_exact(FLANGE_OFFSET_Z), numeric=False) * Tx(_exact(FLANGE_OFFSET_X), numeric=False),
    )
    frames.append(sp.simplify(T) if simplify else T)  # type: ignore[no-untyped-call]
    return SymbolicChain(frames, thetas)


def mat_to_np(M: sp.Matrix) -> np.ndarray:
    lst = M.tolist()  # type: ignore[no-untyped-call]
    return np.array(lst, dtype=np.float64)


def evaluate(chain: SymbolicChain, joint_angles: Sequence[float], digits: int = 15) -> list[np.ndarray]:
    subs: Mapping[sp.Symbol, float] = {s: float(v) for s, v in zip(chain.thetas, joint_angles)}
    return [mat_to_np(sp.N(T.subs(subs), digits)) for T in chain.frames]  # type: ignore[no-untyped-call]


def check_numeric_once(dh: DHParameterSet, joint_angles: Sequence[float]) -> NumericCheckResult:
    """Compare the symbolic flange frame against the numeric chain at ``joint_angles``."""
    chain = symbolic_chain(dh)
    flange_only = SymbolicChain(chain.frames[-1:], chain.thetas)
    sym_T = evaluate(flange_only, joint_angles)[0]
    num_T = forward_kinematics(joint_angles, dh)[-1]
    d_np = sym_T - num_T
    err_F = float(np.linalg.norm(d_np, ord="fro"))
    err_inf = float(np.max(np.abs(d_np)))
    return NumericCheckResult(err_F, err_inf, sp.Matrix(d_np.tolist()))


__all__ = ["NumericCheckResult", "SymbolicChain", "check_numeric_once", "evaluate", "symbolic_chain"]
