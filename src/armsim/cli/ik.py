"""CLI wiring for inverse-kinematics helpers."""

from __future__ import annotations

import argparse
import math

from armsim.cli.utils import add_dh_argument, fmt_values, load_dh, pprint_matrix
from armsim.core.config import IKOptions
from armsim.core.models import Pose, PoseTarget
from armsim.core.orientation import pose_to_matrix, rotation_angle
from armsim.model.chain import forward_kinematics
from armsim.model.dh_params import DHParameterSet
from armsim.presets import DEFAULT_IK_TARGET_MM, HOME_DEG
from armsim.solvers.ik_solver import IKResult, solve_position, solve_with_metrics, target_from_position


def _build_ik_options(args: argparse.Namespace) -> IKOptions:
    return IKOptions(
        max_iter=int(args.max_iter),
        learning_rate=float(args.learning_rate),
        gain=float(args.gain),
        rotation_weight=float(args.w_rot),
        tol_pos=float(args.tol_pos),
        tol_rot=float(args.tol_rot),
    )


def _seed(args: argparse.Namespace) -> list[float]:
    return [float(v) for v in args.seed] if args.seed else list(HOME_DEG)


def _print_result(target: PoseTarget, result: IKResult, dh: DHParameterSet) -> None:
    reached = forward_kinematics(result.angles, dh)[-1]
    print("Target T:")
    pprint_matrix(target.matrix)
    print("  target XYZ (mm):", fmt_values(target.position_mm))
    status = "converged" if result.converged else "NOT converged"
    print(f"\n{status}: iters={result.iterations}, pos_err={result.pos_err:.3e} mm, "
          f"rot_err={result.rot_err:.3e} rad")
    angle = rotation_angle(target.matrix[:3, :3], reached[:3, :3])
    print(f"  orientation off by {math.degrees(angle):.4f} deg")
    print("  q (deg):", fmt_values(result.angles))


def cmd_ik_solve(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    seed = _seed(args)
    options = _build_ik_options(args)
    if args.abc is None:
        rotation = forward_kinematics(seed, dh)[-1][:3, :3]
    else:
        rotation = pose_to_matrix(Pose(0.0, 0.0, 0.0, *args.abc))[:3, :3]
    result = solve_position(args.target, seed, dh, orientation=rotation, opts=options)
    T_des = target_from_position(args.target, rotation)
    _print_result(PoseTarget(T_des), result, dh)
    return 0 if result.converged else 1


def cmd_ik_from_q(args: argparse.Namespace) -> int:
    dh = load_dh(args)
    T_des = forward_kinematics(args.q, dh)[-1]
    result = solve_with_metrics(T_des, _seed(args), dh, _build_ik_options(args))
    _print_result(PoseTarget(T_des), result, dh)
    print("  reference q (deg):", fmt_values(args.q))
    return 0 if result.converged else 1


def add_ik_options(parser: argparse.ArgumentParser) -> None:
    defaults = IKOptions()
    parser.add_argument("--max-iter", type=int, default=defaults.max_iter)
    parser.add_argument("--learning-rate", type=float, default=defaults.learning_rate)
    parser.add_argument("--gain", type=float, default=defaults.gain, help="deg per unit contribution")
    parser.add_argument("--w-rot", type=float, default=defaults.rotation_weight, help="orientation weight")
    parser.add_argument("--tol-pos", type=float, default=defaults.tol_pos, help="pos tol (mm)")
    parser.add_argument("--tol-rot", type=float, default=defaults.tol_rot, help="rot tol (rad)")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--seed", nargs=6, type=float, metavar="DEG", help="initial joint angles (deg)")
    add_ik_options(parser)
    add_dh_argument(parser)


def register_subparsers(subparsers: argparse._SubParsersAction) -> None:
    ik = subparsers.add_parser("ik", help="inverse kinematics helpers")
    ik_sub = ik.add_subparsers(dest="ik_command", required=True)

    ik_solve = ik_sub.add_parser("solve", help="move the flange to a Cartesian target")
    ik_solve.add_argument(
        "--target",
        nargs=3,
        type=float,
        default=list(DEFAULT_IK_TARGET_MM),
        metavar=("x", "y", "z"),
        help="target position in mm",
    )
    ik_solve.add_argument(
        "--abc",
        nargs=3,
        type=float,
        metavar=("a", "b", "c"),
        help="Z-Y-X orientation in degrees (default: keep the seed orientation)",
    )
    _add_common(ik_solve)
    ik_solve.set_defaults(func=cmd_ik_solve)

    ik_from_q = ik_sub.add_parser("from-q", help="solve for the flange pose of given joint angles")
    ik_from_q.add_argument("--q", nargs=6, type=float, required=True, metavar="DEG")
    _add_common(ik_from_q)
    ik_from_q.set_defaults(func=cmd_ik_from_q)
