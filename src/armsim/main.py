"""Unified command-line interface for the armsim toolkit.

The parser definitions are delegated to the individual CLI modules under
``armsim.cli`` so the entry point stays lightweight.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from armsim.cli import fk, ik, path, program
from armsim.core.logging_utils import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="armsim", description="ER50A arm kinematics CLI")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")
    sub = parser.add_subparsers(dest="command", required=True)

    fk.register_subparsers(sub)
    ik.register_subparsers(sub)
    program.register_subparsers(sub)
    path.register_subparsers(sub)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
