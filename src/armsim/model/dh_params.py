"""Denavit-Hartenberg style parameter table for the ER50A arm.

Index 0 is the fixed base stage, indices 1-6 are the six driven joints.
Lengths are in millimeters, ``alpha`` and ``joint_offset`` in degrees.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Literal

STAGE_COUNT = 7

DHField = Literal["d", "a", "alpha", "joint_offset"]
DH_FIELDS: tuple[DHField, ...] = ("d", "a", "alpha", "joint_offset")


def _as_stage_tuple(name: str, values: Iterable[float]) -> tuple[float, ...]:
    out = tuple(float(v) for v in values)
    if len(out) != STAGE_COUNT:
        raise ValueError(f"DH column {name!r} must have {STAGE_COUNT} entries, received {len(out)}")
    return out


@dataclass(frozen=True)
class DHParameterSet:
    """Four parallel columns of length 7.

    Instances are immutable; an edit produces a new table (see :meth:`with_value`)
    so a table handed to the kinematics functions can never change under them.
    """

    d: tuple[float, ...]
    a: tuple[float, ...]
    alpha: tuple[float, ...]
    joint_offset: tuple[float, ...]

    def __post_init__(self) -> None:
        for name in DH_FIELDS:
            object.__setattr__(self, name, _as_stage_tuple(name, getattr(self, name)))

    def stage(self, i: int) -> tuple[float, float, float, float]:
        """Return ``(d, a, alpha, joint_offset)`` of stage ``i``."""
        return self.d[i], self.a[i], self.alpha[i], self.joint_offset[i]

    def with_value(self, field: DHField, index: int, value: float) -> "DHParameterSet":
        """Return a copy with a single cell replaced."""
        if field not in DH_FIELDS:
            raise ValueError(f"unknown DH column {field!r}")
        if not 0 <= index < STAGE_COUNT:
            raise ValueError(f"stage index out of range: {index}")
        column = list(getattr(self, field))
        column[index] = float(value)
        return replace(self, **{field: tuple(column)})

    def as_dict(self) -> dict[str, list[float]]:
        return {
            "d": list(self.d),
            "a": list(self.a),
            "alpha": list(self.alpha),
            "offsets": list(self.joint_offset),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Iterable[float]]) -> "DHParameterSet":
        """Build from a mapping with ``d``, ``a``, ``alpha`` and ``offsets`` keys."""
        offsets = data.get("offsets", data.get("joint_offset"))
        if offsets is None:
            raise ValueError("DH mapping needs an 'offsets' column")
        return cls(d=tuple(data["d"]), a=tuple(data["a"]), alpha=tuple(data["alpha"]), joint_offset=tuple(offsets))


def er50a_dh_params() -> DHParameterSet:
    """Factory defaults of the ER50A table."""
    return DHParameterSet(
        d=(0.0, 563.0, -180.0, 180.0, 160.0, 0.0, 0.0),
        a=(0.0, 220.0, 900.0, 0.0, 1013.5, 200.0, 0.0),
        alpha=(0.0,) * STAGE_COUNT,
        joint_offset=(-90.0, 0.0, 90.0, 0.0, 0.0, 45.0, 0.0),
    )


__all__ = ["DHField", "DH_FIELDS", "DHParameterSet", "STAGE_COUNT", "er50a_dh_params"]
