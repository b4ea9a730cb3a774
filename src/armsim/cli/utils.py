"""Shared helpers for CLI modules."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

import numpy as np
import sympy as sp

from armsim.control.playback import TrajectoryPlayer, run_headless
from armsim.core.config import load_dh_json
from armsim.model.dh_params import DHParameterSet, er50a_dh_params
from armsim.presets import HOME_DEG, PRESETS_DEG


def pprint_matrix(matrix: sp.Matrix | np.ndarray, digits: int = 6) -> None:
    if isinstance(matrix, np.ndarray):
        matrix = sp.Matrix(np.round(matrix, digits).tolist())
    sp.pprint(matrix, use_unicode=True)  # type: ignore[operator]


def fmt_values(values: Sequence[float], digits: int = 3) -> list[float]:
    return [round(float(v), digits) for v in values]


def add_dh_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dh", metavar="JSON", help="DH table (d, a, alpha, offsets); default ER50A")


def add_angles_arguments(parser: argparse.ArgumentParser, help_suffix: str = "") -> None:
    parser.add_argument("--q", nargs=6, type=float, metavar="DEG", help="joint angles q1..q6 in degrees" + help_suffix)
    parser.add_argument("--preset", type=int, help=f"use preset 1..{len(PRESETS_DEG)}" + help_suffix)


def load_dh(args: argparse.Namespace) -> DHParameterSet:
    path = getattr(args, "dh", None)
    if not path:
        return er50a_dh_params()
    try:
        return load_dh_json(path)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"cannot load DH table: {exc}") from exc


def resolve_angles(args: argparse.Namespace) -> list[float]:
    """Angles from ``--q`` or ``--preset``; home when neither is given."""
    if getattr(args, "q", None):
        return [float(v) for v in args.q]
    preset = getattr(args, "preset", None)
    if preset is not None:
        if not 1 <= preset <= len(PRESETS_DEG):
            raise SystemExit(f"--preset index out of range: {preset}")
        return [float(v) for v in PRESETS_DEG[preset - 1]]
    return list(HOME_DEG)


def add_playback_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--play", action="store_true", help="run the solved queue through headless playback")
    parser.add_argument("--dt", type=float, default=1.0 / 60.0, help="playback tick (s)")
    parser.add_argument("--max-ticks", type=int, default=1_000_000)


def play_solutions(args: argparse.Namespace, start: Sequence[float], solutions: Sequence[Sequence[float]]) -> None:
    """Play ``solutions`` back from ``start`` and report the elapsed simulated time."""
    player = TrajectoryPlayer(start)
    player.enqueue(solutions)
    history = run_headless(player, dt=args.dt, max_ticks=args.max_ticks)
    print(f"Playback: {len(history)} ticks ({len(history) * args.dt:.2f} s), "
          f"{player.pending} targets left")
    print("  final q (deg):", fmt_values(player.current))
