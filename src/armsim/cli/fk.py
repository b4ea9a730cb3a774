"""CLI wiring for forward-kinematics utilities."""

from __future__ import annotations

import argparse

import sympy as sp

from armsim.cli.utils import (
    add_angles_arguments,
    add_dh_argument,
    fmt_values,
    load_dh,
    pprint_matrix,
    resolve_angles,
)
from armsim.model.chain import end_effector_pose, forward_kinematics
from armsim.model.symbolic import check_numeric_once, symbolic_chain

FRAME_LABELS = ["base", "J1", "J2", "J3", "J4", "J5", "J6", "flange"]


def cmd_fk_eval(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    q = resolve_angles(args)
    T = forward_kinematics(q, dh)[-1]
    pose = end_effector_pose(q, dh)

    print("q (deg):", fmt_values(q))
    print("Flange T:")
    pprint_matrix(T)
    print("XYZ (mm):", fmt_values((pose.x, pose.y, pose.z)))
    print("ABC (deg, Z-Y-X):", fmt_values((pose.a, pose.b, pose.c)))
    return 0


def cmd_fk_chain(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    q = resolve_angles(args)
    for label, T in zip(FRAME_LABELS, forward_kinematics(q, dh)):
        print(f"{label:>7}: {fmt_values(T[:3, 3])}")
        if args.matrices:
            pprint_matrix(T)
    return 0


def cmd_fk_symbolic(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    chain = symbolic_chain(dh, simplify=args.simplify)
    if args.steps:
        for label, T in zip(FRAME_LABELS, chain.frames):
            print(f"\nT[{label}]:")
            pprint_matrix(T)
    else:
        print("Symbolic flange frame:")
        pprint_matrix(chain.frames[-1])

    if args.check:
        q = resolve_angles(args)
        result = check_numeric_once(dh, q)
        print("\nNumeric check at q (deg):", fmt_values(q))
        print(f"||T_sym-T_num||_F = {result.err_F:.3e},  ||T_sym-T_num||_inf = {result.err_inf:.3e}")
        sp.pprint(result.delta)  # type: ignore[operator]
    return 0


def cmd_fk_dh(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    for name, column in dh.as_dict().items():
        print(f"{name}:", column)
    return 0


def register_subparsers(subparsers: argparse._SubParsersAction) -> None:
    fk = subparsers.add_parser("fk", help="forward kinematics utilities")
    fk_sub = fk.add_subparsers(dest="fk_command", required=True)

    fk_eval = fk_sub.add_parser("eval", help="flange transform and pose for joint angles")
    add_angles_arguments(fk_eval)
    add_dh_argument(fk_eval)
    fk_eval.set_defaults(func=cmd_fk_eval)

    fk_chain = fk_sub.add_parser("chain", help="positions of all 8 chain frames")
    add_angles_arguments(fk_chain)
    add_dh_argument(fk_chain)
    fk_chain.add_argument("--matrices", action="store_true", help="also print every 4x4 frame")
    fk_chain.set_defaults(func=cmd_fk_chain)

    fk_symbolic = fk_sub.add_parser("symbolic", help="symbolic chain with th1..th6 free")
    fk_symbolic.add_argument("--steps", action="store_true", help="show every frame")
    fk_symbolic.add_argument("--simplify", action="store_true", help="simplify frames (slow)")
    fk_symbolic.add_argument("--check", action="store_true", help="compare against the numeric chain")
    add_angles_arguments(fk_symbolic, " (for --check)")
    add_dh_argument(fk_symbolic)
    fk_symbolic.set_defaults(func=cmd_fk_symbolic)

    fk_dh = fk_sub.add_parser("dh", help="print DH parameters")
    add_dh_argument(fk_dh)
    fk_dh.set_defaults(func=cmd_fk_dh)
