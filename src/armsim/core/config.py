"""Runtime configuration: solver/playback options and the editable DH table."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NamedTuple

from armsim.model.dh_params import DHParameterSet, er50a_dh_params

logger = logging.getLogger(__name__)


class IKOptions(NamedTuple):
    max_iter: int = 200
    learning_rate: float = 0.5
    gain: float = 0.00005       # deg per (mm^2) of Jacobian-transpose contribution
    rotation_weight: float = 100.0
    tol_pos: float = 0.1        # mm
    tol_rot: float = 0.001      # rad


class PlaybackOptions(NamedTuple):
    max_rate_deg_s: float = 120.0
    tolerance_deg: float = 0.1


class DHConfigStore:
    """Holds the current DH table for an editing surface.

    The kinematics functions never read from here; callers fetch the table
    with :meth:`get_config` and pass it explicitly on every evaluation.
    """

    def __init__(self, params: DHParameterSet | None = None) -> None:
        self._params = params if params is not None else er50a_dh_params()

    def get_config(self) -> DHParameterSet:
        return self._params

    def set_config(self, params: DHParameterSet | dict[str, list[float]]) -> None:
        if not isinstance(params, DHParameterSet):
            params = DHParameterSet.from_dict(params)
        logger.debug("DH configuration replaced: %s", params.as_dict())
        self._params = params

    def reset(self) -> None:
        self._params = er50a_dh_params()


def load_dh_json(path: str | Path) -> DHParameterSet:
    """Read a DH table from JSON with ``d``, ``a``, ``alpha`` and ``offsets`` lists."""
    with Path(path).open(encoding="utf-8") as fh:
        data = json.load(fh)
    try:
        return DHParameterSet.from_dict(data)
    except KeyError as exc:
        raise ValueError(f"{path}: missing DH column {exc.args[0]!r}") from exc


def dump_dh_json(params: DHParameterSet, path: str | Path) -> None:
    Path(path).write_text(json.dumps(params.as_dict(), indent=2) + "\n", encoding="utf-8")


__all__ = ["DHConfigStore", "IKOptions", "PlaybackOptions", "dump_dh_json", "load_dh_json"]
