from __future__ import annotations

import math

import numpy as np
import pytest

from armsim.core.config import IKOptions
from armsim.model.chain import forward_kinematics
from armsim.solvers.ik_solver import (
    X_AXIS_JOINT,
    joint_axis,
    normalize_angle,
    normalize_angles,
    pose_residual,
    solve,
    solve_position,
    solve_with_metrics,
    target_from_position,
)


@pytest.mark.parametrize(
    "deg, expected",
    [
        (0.0, 0.0),
        (180.0, 180.0),
        (-180.0, 180.0),
        (190.0, -170.0),
        (-190.0, 170.0),
        (540.0, 180.0),
        (359.5, -0.5),
        (-720.25, -0.25),
    ],
)
def test_normalize_angle(deg, expected):
    assert normalize_angle(deg) == pytest.approx(expected)


def test_normalize_angle_is_idempotent():
    for deg in np.linspace(-1000.0, 1000.0, 97):
        once = normalize_angle(float(deg))
        assert -180.0 < once <= 180.0
        assert normalize_angle(once) == once


def test_normalize_angle_passes_nan_through():
    assert math.isnan(normalize_angle(float("nan")))


def test_round_trip_converges_from_exact_seed(dh, preset_angles):
    T = forward_kinematics(preset_angles, dh)[-1]
    result = solve_with_metrics(T, preset_angles, dh)
    assert result.converged
    assert result.iterations <= 1
    assert result.pos_err < 0.1
    assert result.rot_err < 0.001
    np.testing.assert_allclose(result.angles, normalize_angles(preset_angles), atol=1e-9)


def test_solve_returns_normalized_angles(dh):
    seed = [350.0, 10.0, -200.0, 0.0, 20.0, 540.0]
    T = forward_kinematics(seed, dh)[-1]
    angles = solve(T, seed, dh)
    assert len(angles) == 6
    assert all(-180.0 < a <= 180.0 for a in angles)
    np.testing.assert_allclose(angles, [-10.0, 10.0, 160.0, 0.0, 20.0, 180.0], atol=1e-9)
    pos_err, rot_err = pose_residual(T, angles, dh)
    assert pos_err < 0.1 and rot_err < 0.001


def test_solver_is_deterministic(dh):
    T = forward_kinematics([20.0, 5.0, -10.0, 15.0, 30.0, -45.0], dh)[-1]
    seed = [18.0, 6.0, -8.0, 12.0, 28.0, -40.0]
    assert solve(T, seed, dh) == solve(T, seed, dh)


def test_zero_iterations_return_the_normalized_seed(dh):
    T = forward_kinematics([20.0, 5.0, -10.0, 15.0, 30.0, -45.0], dh)[-1]
    assert solve(T, [0.0, 0.0, 0.0, 0.0, 0.0, 270.0], dh, max_iter=0) == (0.0, 0.0, 0.0, 0.0, 0.0, -90.0)


def test_unreachable_target_does_not_raise(dh):
    T = target_from_position([20_000.0, 0.0, 0.0], np.eye(3))
    result = solve_with_metrics(T, [0.0] * 6, dh, IKOptions(max_iter=50))
    assert not result.converged
    assert result.iterations == 50
    assert all(-180.0 < a <= 180.0 for a in result.angles)


def test_reported_residual_matches_pose_residual(dh):
    T = forward_kinematics([30.0, 10.0, -20.0, 0.0, 15.0, 0.0], dh)[-1]
    result = solve_with_metrics(T, [28.0, 11.0, -19.0, 1.0, 14.0, 1.0], dh, IKOptions(max_iter=5))
    assert (result.pos_err, result.rot_err) == pose_residual(T, result.angles, dh)


def test_one_step_moves_toward_a_nearby_target(dh):
    q_ref = [30.0, 10.0, -20.0, 0.0, 15.0, 0.0]
    T = forward_kinematics(q_ref, dh)[-1]
    seed = list(q_ref)
    seed[0] += 0.05
    err_before, _ = pose_residual(T, seed, dh)
    result = solve_with_metrics(T, seed, dh, IKOptions(max_iter=1, rotation_weight=0.0))
    assert result.iterations == 1
    assert result.angles != tuple(seed)
    assert result.angles[0] < seed[0]
    assert err_before > 0.1


def test_invalid_target_shape(dh):
    with pytest.raises(ValueError):
        solve(np.eye(3), [0.0] * 6, dh)


def test_joint_axes_follow_pivot_frames(dh):
    chain = forward_kinematics([10.0, 20.0, 30.0, 40.0, 50.0, 60.0], dh)
    for j in range(6):
        expected = chain[j][:3, 0] if j == X_AXIS_JOINT else chain[j][:3, 2]
        np.testing.assert_allclose(joint_axis(chain[j], j), expected, atol=1e-12)
    assert X_AXIS_JOINT == 3


def test_solve_position_keeps_current_orientation(dh):
    q = [15.0, 5.0, -10.0, 0.0, 20.0, 0.0]
    here = forward_kinematics(q, dh)[-1]
    result = solve_position(here[:3, 3], q, dh)
    assert result.converged
    np.testing.assert_allclose(result.angles, q, atol=1e-9)


def test_solve_position_validates_target(dh):
    with pytest.raises(ValueError):
        solve_position([1.0, 2.0], [0.0] * 6, dh)


def test_solve_from_a_perturbed_seed_reduces_the_residual(dh):
    q_ref = [0.0, 0.0, 0.0, 0.0, 0.0, 0.0]
    T = forward_kinematics(q_ref, dh)[-1]
    seed = [1.0, 0.0, 0.0, 0.0, 0.0, 0.0]
    pos_before, rot_before = pose_residual(T, seed, dh)

    result = solve_with_metrics(T, seed, dh, IKOptions(learning_rate=0.1))
    assert result.pos_err < pos_before / 10
    assert result.rot_err < rot_before
    assert abs(result.angles[0]) < abs(seed[0])
