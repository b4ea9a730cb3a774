"""CLI wiring for the parametric demo paths."""

from __future__ import annotations

import argparse

from armsim.cli.utils import (
    add_angles_arguments,
    add_dh_argument,
    add_playback_arguments,
    fmt_values,
    load_dh,
    play_solutions,
    resolve_angles,
)
from armsim.model.chain import forward_kinematics
from armsim.solvers.trajectories import PATH_KINDS, plan_path


def cmd_path_run(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    start = resolve_angles(args)
    solutions = plan_path(args.kind, start, dh)

    print(f"{args.kind}: {len(solutions)} samples from q {fmt_values(start)}")
    for label, q in (("first", solutions[0]), ("last", solutions[-1])):
        print(f"  {label} flange (mm):", fmt_values(forward_kinematics(q, dh)[-1][:3, 3], 1))
    print("  last solution q (deg):", fmt_values(solutions[-1]))
    if args.play:
        play_solutions(args, start, solutions)
    return 0


def register_subparsers(subparsers: argparse._SubParsersAction) -> None:
    path = subparsers.add_parser("path", help="parametric demo paths")
    path_sub = path.add_subparsers(dest="path_command", required=True)

    run = path_sub.add_parser("run", help="generate and solve a demo path")
    run.add_argument("kind", choices=PATH_KINDS)
    add_angles_arguments(run, " (start pose)")
    add_dh_argument(run)
    add_playback_arguments(run)
    run.set_defaults(func=cmd_path_run)
