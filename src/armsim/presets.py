"""Shared joint angle presets used across CLI helpers."""

from __future__ import annotations

JointPreset = list[float]

HOME_DEG: JointPreset = [0.0, 0.0, 0.0, 0.0, 0.0, 0.0]

# Degrees, joints 1..6.
PRESETS_DEG: list[JointPreset] = [
    HOME_DEG,
    [30, 10, -20, 0, 15, 0],
    [-45, 20, 10, 30, -30, 60],
    [90, -15, 30, -60, 45, -90],
    [15, 15, 15, 15, 15, 15],
]

# Default Cartesian target (mm) for ad-hoc IK moves.
DEFAULT_IK_TARGET_MM: tuple[float, float, float] = (1000.0, 0.0, 1000.0)
