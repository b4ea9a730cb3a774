"""Tick-driven joint-space playback of solved trajectories.

The player owns a FIFO of target joint vectors and the live joint vector.
Each :meth:`TrajectoryPlayer.tick` ramps every joint toward the front target
at a bounded angular rate; once all joints sit inside the tolerance band the
target is popped. Motion between consecutive targets is therefore a straight
line in joint space, not in Cartesian space; Cartesian straightness has to
come from densely sampled waypoints upstream.

Nothing here schedules itself. Drive ``tick`` from a frame clock, a test or
:func:`run_headless`.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Iterable, Sequence

from armsim.core.config import PlaybackOptions
from armsim.core.models import JOINT_COUNT, as_joint_vector

logger = logging.getLogger(__name__)

JointVector = tuple[float, ...]


def advance_joints(
    current: Sequence[float],
    target: Sequence[float],
    dt: float,
    max_rate: float = 120.0,
    tolerance: float = 0.1,
) -> tuple[JointVector, bool]:
    """Move ``current`` toward ``target`` by at most ``max_rate * dt`` per joint.

    Joints already within ``tolerance`` snap onto the target. Returns the new
    vector and whether every joint was inside the band at the start of
    this step.
    """
    step = max_rate * dt
    reached = True
    out: list[float] = []
    for cur, tgt in zip(current, target):
        diff = tgt - cur
        if abs(diff) > tolerance:
            reached = False
            out.append(cur + math.copysign(min(abs(diff), step), diff))
        else:
            out.append(float(tgt))
    return tuple(out), reached


class TrajectoryPlayer:
    """Plays queued joint-angle targets back over time."""

    def __init__(
        self,
        current: Sequence[float] | None = None,
        options: PlaybackOptions | None = None,
    ) -> None:
        self.options = options if options is not None else PlaybackOptions()
        self._current: JointVector = (
            as_joint_vector(current) if current is not None else (0.0,) * JOINT_COUNT
        )
        self._queue: deque[JointVector] = deque()

    @property
    def current(self) -> JointVector:
        return self._current

    @current.setter
    def current(self, angles: Sequence[float]) -> None:
        self._current = as_joint_vector(angles)

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def is_idle(self) -> bool:
        return not self._queue

    def peek(self) -> JointVector | None:
        return self._queue[0] if self._queue else None

    def enqueue(self, targets: Iterable[Sequence[float]]) -> None:
        """Append targets; each is copied so callers keep no alias into the queue."""
        added = [as_joint_vector(t) for t in targets]
        self._queue.extend(added)
        logger.debug("enqueued %d targets (%d pending)", len(added), len(self._queue))

    def clear(self) -> None:
        """Cancel playback; the arm stays where it is."""
        if self._queue:
            logger.debug("playback cleared with %d targets pending", len(self._queue))
        self._queue.clear()

    def tick(self, dt: float) -> tuple[JointVector, bool]:
        """Advance one frame of ``dt`` seconds.

        Returns ``(current angles, finished)`` where ``finished`` is true only
        on the tick that consumes the last queued target.

        A target is popped only when every joint was already inside the
        tolerance band before this tick, so the pop lands one tick after the
        last moving step.
        """
        if not self._queue:
            return self._current, False

        self._current, reached = advance_joints(
            self._current,
            self._queue[0],
            dt,
            self.options.max_rate_deg_s,
            self.options.tolerance_deg,
        )
        if not reached:
            return self._current, False

        self._queue.popleft()
        if self._queue:
            return self._current, False
        logger.debug("playback finished at %s", self._current)
        return self._current, True


def run_headless(
    player: TrajectoryPlayer, dt: float = 1.0 / 60.0, max_ticks: int = 100_000
) -> list[JointVector]:
    """Tick ``player`` until its queue drains; return the angles after every tick.

    Stops after ``max_ticks`` even if targets remain.
    """
    if dt <= 0:
        raise ValueError("dt must be positive")
    history: list[JointVector] = []
    for _ in range(max_ticks):
        if player.is_idle:
            break
        angles, finished = player.tick(dt)
        history.append(angles)
        if finished:
            break
    else:
        logger.warning("playback stopped after %d ticks with %d targets left", max_ticks, player.pending)
    return history


__all__ = ["JointVector", "TrajectoryPlayer", "advance_joints", "run_headless"]
