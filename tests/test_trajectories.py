from __future__ import annotations

import numpy as np
import pytest

from armsim.core.config import IKOptions
from armsim.core.models import GlobalConfig, Pose
from armsim.core.orientation import matrix_to_pose
from armsim.model.chain import forward_kinematics
from armsim.solvers import trajectories
from armsim.solvers.ik_solver import IKResult, solve_with_metrics
from armsim.solvers.trajectories import (
    generate_path,
    line_points,
    plan_path,
    plan_program,
    s_curve_points,
    solve_waypoints,
    spiral_points,
)

START = [30.0, 10.0, -20.0, 0.0, 15.0, 0.0]


@pytest.mark.parametrize("kind, count", [("line", 61), ("s-curve", 121), ("spiral", 181)])
def test_sample_counts(dh, kind, count):
    assert len(generate_path(kind, START, dh)) == count


def test_paths_keep_start_orientation(dh):
    start_rotation = forward_kinematics(START, dh)[-1][:3, :3]
    for kind in trajectories.PATH_KINDS:
        for T in generate_path(kind, START, dh):
            assert T.shape == (4, 4)
            np.testing.assert_allclose(T[:3, :3], start_rotation)
            np.testing.assert_allclose(T[3], [0.0, 0.0, 0.0, 1.0])


def test_line_endpoints(dh):
    start = forward_kinematics(START, dh)[-1][:3, 3]
    targets = generate_path("line", START, dh)
    np.testing.assert_allclose(targets[0][:3, 3], start)
    np.testing.assert_allclose(targets[-1][:3, 3], start + [500.0, 0.0, 0.0])
    steps = np.diff([T[:3, 3] for T in targets], axis=0)
    np.testing.assert_allclose(steps, np.tile([500.0 / 60, 0.0, 0.0], (60, 1)))


def test_s_curve_shape():
    points = s_curve_points(np.array([1000.0, 50.0, 700.0]))
    np.testing.assert_allclose(points[0], [1000.0, 50.0, 700.0])
    np.testing.assert_allclose(points[120], [1000.0 + np.sin(6.0) * 200.0, 1250.0, 700.0])
    assert {p[2] for p in points} == {700.0}


def test_spiral_ignores_start():
    points = spiral_points(np.array([1.0, 2.0, 3.0]))
    np.testing.assert_allclose(points[0], [1400.0, 0.0, 800.0])
    np.testing.assert_allclose(points[180], [1200.0 + np.cos(18.0) * 560.0, np.sin(18.0) * 560.0, 1700.0])


def test_line_points_are_deterministic():
    start = np.array([100.0, 200.0, 300.0])
    assert all(np.array_equal(p, q) for p, q in zip(line_points(start), line_points(start)))


def test_unknown_kind(dh):
    with pytest.raises(ValueError, match="unknown path"):
        generate_path("circle", START, dh)


def test_solve_waypoints_chains_seeds(dh, monkeypatch):
    seeds = []

    def fake_solve(T_des, seed, dh, opts=None):
        seeds.append(tuple(seed))
        angles = (float(T_des[0, 3]),) + (0.0,) * 5
        return IKResult(angles, 0.0, 0.0, 1, True)

    monkeypatch.setattr(trajectories, "solve_with_metrics", fake_solve)
    targets = [np.eye(4) for _ in range(3)]
    for i, T in enumerate(targets):
        T[0, 3] = i + 1.0

    solutions = solve_waypoints(targets, [9.0] * 6, dh)
    assert solutions == [(1.0, 0, 0, 0, 0, 0), (2.0, 0, 0, 0, 0, 0), (3.0, 0, 0, 0, 0, 0)]
    assert seeds == [(9.0,) * 6, solutions[0], solutions[1]]


def test_solve_waypoints_warns_on_misses(dh, monkeypatch, caplog):
    def fake_solve(T_des, seed, dh, opts=None):
        return IKResult(tuple(seed), 5.0, 0.0, 200, False)

    monkeypatch.setattr(trajectories, "solve_with_metrics", fake_solve)
    with caplog.at_level("WARNING", logger="armsim.solvers.trajectories"):
        solve_waypoints([np.eye(4), np.eye(4)], [0.0] * 6, dh)
    assert "2 of 2 waypoints did not converge" in caplog.text


def test_plan_program_with_reachable_waypoint(dh):
    here = forward_kinematics(START, dh)[-1]
    waypoint = matrix_to_pose(here)
    plan = plan_program([waypoint], GlobalConfig(), START, dh)

    assert len(plan.solutions) == 1
    np.testing.assert_allclose(plan.flange_targets[0], here, atol=1e-9)
    np.testing.assert_allclose(plan.solutions[0], START, atol=1e-6)
    np.testing.assert_allclose(plan.flange_positions, [here[:3, 3]], atol=1e-9)


def test_plan_program_applies_world_frame(dh, monkeypatch):
    monkeypatch.setattr(
        trajectories,
        "solve_with_metrics",
        lambda T_des, seed, dh, opts=None: IKResult(tuple(seed), 0.0, 0.0, 0, True),
    )
    config = GlobalConfig(world=Pose(100.0, 0.0, 50.0, 0.0, 0.0, 0.0))
    plan = plan_program([Pose(1000.0, 0.0, 800.0, 0.0, 0.0, 0.0)], config, START, dh, IKOptions())
    np.testing.assert_allclose(plan.flange_positions, [[1100.0, 0.0, 850.0]])


def test_empty_program_plan(dh):
    plan = plan_program([], GlobalConfig(), START, dh)
    assert plan.solutions == ()
    assert plan.flange_positions.shape == (0, 3)


def test_line_plan_is_reproducible(dh):
    first = plan_path("line", START, dh)
    assert len(first) == 61
    assert first == plan_path("line", START, dh)


def test_solver_seeds_follow_previous_solutions(dh, monkeypatch):
    seeds = []

    def recording_solve(T_des, seed, dh, opts=None):
        seeds.append(tuple(seed))
        return solve_with_metrics(T_des, seed, dh, opts)

    monkeypatch.setattr(trajectories, "solve_with_metrics", recording_solve)
    targets = generate_path("line", START, dh)[:4]
    solutions = solve_waypoints(targets, START, dh, IKOptions(max_iter=20))

    assert len(solutions) == 4
    assert seeds[0] == tuple(START)
    assert seeds[1:] == solutions[:-1]
    # first sample is the start pose itself
    np.testing.assert_allclose(solutions[0], START, atol=1e-9)
