"""CLI wiring for recorded motion programs."""

from __future__ import annotations

import argparse

from armsim.adapters.program_parser import load_program, load_program_files
from armsim.cli.utils import (
    add_angles_arguments,
    add_dh_argument,
    add_playback_arguments,
    fmt_values,
    load_dh,
    play_solutions,
    resolve_angles,
)
from armsim.solvers.trajectories import plan_program


def cmd_program_run(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    try:
        if args.files:
            program = load_program_files(args.files)
        elif args.trajectory:
            program = load_program(args.globals, args.trajectory)
        else:
            raise SystemExit("Provide --trajectory FILE [--globals FILE] or positional program files")
    except OSError as exc:
        raise SystemExit(f"cannot read program: {exc}") from exc

    print("World (x y z a b c):", fmt_values(program.config.world.as_tuple()))
    print("Tool  (x y z a b c):", fmt_values(program.config.tool.as_tuple()))
    print(f"Waypoints: {len(program.waypoints)}")
    if not program.waypoints:
        return 0

    start = resolve_angles(args)
    plan = plan_program(program.waypoints, program.config, start, dh)
    if args.list:
        for i, (pos, q) in enumerate(zip(plan.flange_positions, plan.solutions), 1):
            print(f"{i:4d}: flange {fmt_values(pos, 1)} -> q {fmt_values(q)}")
    print("Last solution q (deg):", fmt_values(plan.solutions[-1]))

    if args.play:
        play_solutions(args, start, plan.solutions)
    return 0


def register_subparsers(subparsers: argparse._SubParsersAction) -> None:
    program = subparsers.add_parser("program", help="recorded motion programs")
    program_sub = program.add_subparsers(dest="program_command", required=True)

    run = program_sub.add_parser("run", help="parse, solve and optionally play a program")
    run.add_argument("files", nargs="*", help="*_globalvars.txt / *commontest.txt files, sorted by name")
    run.add_argument("--globals", help="global-vars file (world1 / tool1)")
    run.add_argument("--trajectory", help="trajectory file with CARTPOS lines")
    run.add_argument("--list", action="store_true", help="print every solved waypoint")
    add_angles_arguments(run, " (start / first seed)")
    add_dh_argument(run)
    add_playback_arguments(run)
    run.set_defaults(func=cmd_program_run)
