"""
Readers for recorded motion-program text files.

Two line-oriented formats are understood:

* ``*_globalvars.txt``: the program's world frame (line starting ``world1``)
  and tool offset (line starting ``tool1``).
* ``*commontest.txt``: Cartesian waypoints, one per line containing both
  ``CARTPOS`` and ``x :=``.

Values are ``KEY := NUMBER`` assignments found anywhere on a line. Parsing is
best-effort: unmatched lines are skipped and missing or malformed keys read
as 0, so no content ever raises.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from armsim.core.models import GlobalConfig, Pose

logger = logging.getLogger(__name__)

POSE_KEYS = ("x", "y", "z", "a", "b", "c")

WORLD_PREFIX = "world1"
TOOL_PREFIX = "tool1"
WAYPOINT_MARKERS = ("CARTPOS", "x :=")

GLOBALS_SUFFIX = "_globalvars.txt"
TRAJECTORY_SUFFIX = "commontest.txt"

_TOKEN_RE = re.compile(
    r"""
      (?P<assign>:=)
    | (?P<number>[-+]?(?:\d+\.?\d*|\.\d+))
    | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<space>\s+)
    | (?P<other>.)
    """,
    re.VERBOSE,
)

TokenKind = Literal["assign", "number", "ident", "other"]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


def tokenize(line: str) -> list[Token]:
    """Split a line into identifier, ``:=``, number and punctuation tokens."""
    tokens: list[Token] = []
    for match in _TOKEN_RE.finditer(line):
        kind = match.lastgroup
        if kind == "space":
            continue
        tokens.append(Token(kind, match.group()))  # type: ignore[arg-type]
    return tokens


def scan_assignments(line: str) -> dict[str, float]:
    """Return every ``KEY := NUMBER`` on a line, keys lower-cased.

    When a key repeats, its first occurrence wins. An assignment whose
    right-hand side is not a number is ignored.
    """
    values: dict[str, float] = {}
    tokens = tokenize(line)
    for i in range(len(tokens) - 2):
        key, op, value = tokens[i], tokens[i + 1], tokens[i + 2]
        if key.kind == "ident" and op.kind == "assign" and value.kind == "number":
            values.setdefault(key.text.lower(), float(value.text))
    return values


def parse_pose_line(line: str) -> Pose:
    values = scan_assignments(line)
    return Pose(*(values.get(key, 0.0) for key in POSE_KEYS))


def parse_global_vars(text: str) -> GlobalConfig:
    """Extract the world and tool poses; absent lines leave the zero pose."""
    world = Pose.zero()
    tool = Pose.zero()
    for line in text.splitlines():
        stripped = line.lstrip()
        if stripped.startswith(WORLD_PREFIX):
            world = parse_pose_line(line)
        elif stripped.startswith(TOOL_PREFIX):
            tool = parse_pose_line(line)
    logger.debug("global vars: world=%s tool=%s", world, tool)
    return GlobalConfig(world=world, tool=tool)


def is_waypoint_line(line: str) -> bool:
    return all(marker in line for marker in WAYPOINT_MARKERS)


def iter_waypoints(lines: Iterable[str]) -> Iterator[Pose]:
    for line in lines:
        if is_waypoint_line(line):
            yield parse_pose_line(line)


def parse_trajectory(text: str) -> list[Pose]:
    """Return the recorded waypoints in file order (possibly empty)."""
    points = list(iter_waypoints(text.splitlines()))
    logger.debug("parsed %d waypoints", len(points))
    return points


ProgramFileKind = Literal["globals", "trajectory"]


def classify_program_file(name: str) -> ProgramFileKind | None:
    """Tell a global-vars file from a trajectory file by its name."""
    if GLOBALS_SUFFIX in name:
        return "globals"
    if TRAJECTORY_SUFFIX in name:
        return "trajectory"
    return None


@dataclass(frozen=True)
class MotionProgram:
    config: GlobalConfig = field(default_factory=GlobalConfig)
    waypoints: tuple[Pose, ...] = ()


def load_program(globals_path: str | Path | None, trajectory_path: str | Path) -> MotionProgram:
    """Read a global-vars file (optional) and a trajectory file from disk."""
    config = GlobalConfig()
    if globals_path is not None:
        config = parse_global_vars(Path(globals_path).read_text(encoding="utf-8", errors="replace"))
    waypoints = parse_trajectory(Path(trajectory_path).read_text(encoding="utf-8", errors="replace"))
    logger.info("loaded %d waypoints from %s", len(waypoints), trajectory_path)
    return MotionProgram(config=config, waypoints=tuple(waypoints))


def load_program_files(paths: Iterable[str | Path]) -> MotionProgram:
    """Sort a batch of files by name and load them as one program.

    Files whose names match neither convention are ignored; without a
    trajectory file the program has no waypoints.
    """
    globals_path: Path | None = None
    trajectory_path: Path | None = None
    for raw in paths:
        path = Path(raw)
        kind = classify_program_file(path.name)
        if kind == "globals":
            globals_path = path
        elif kind == "trajectory":
            trajectory_path = path
        else:
            logger.info("ignoring %s: not a program file", path)
    if trajectory_path is None:
        config = GlobalConfig()
        if globals_path is not None:
            config = parse_global_vars(globals_path.read_text(encoding="utf-8", errors="replace"))
        return MotionProgram(config=config)
    return load_program(globals_path, trajectory_path)


__all__ = [
    "MotionProgram",
    "Token",
    "classify_program_file",
    "is_waypoint_line",
    "load_program",
    "load_program_files",
    "parse_global_vars",
    "parse_pose_line",
    "parse_trajectory",
    "scan_assignments",
    "tokenize",
]
