from __future__ import annotations

import pytest

from armsim.model.dh_params import DHParameterSet, er50a_dh_params
from armsim.presets import PRESETS_DEG


@pytest.fixture
def dh() -> DHParameterSet:
    return er50a_dh_params()


@pytest.fixture(params=range(len(PRESETS_DEG)), ids=lambda i: f"preset{i + 1}")
def preset_angles(request: pytest.FixtureRequest) -> list[float]:
    return [float(v) for v in PRESETS_DEG[request.param]]
