from __future__ import annotations

import json

import pytest

from armsim.main import build_parser, main

TRAJECTORY = "cp1 : CARTPOS := (x := 1200.0, y := 0.0, z := 900.0, a := 0, b := 90, c := 0)\n"


def test_fk_eval(capsys):
    assert main(["fk", "eval", "--q", "10", "20", "-30", "0", "45", "0"]) == 0
    out = capsys.readouterr().out
    assert "Flange T:" in out
    assert "XYZ (mm):" in out


def test_fk_chain_lists_every_frame(capsys):
    assert main(["fk", "chain", "--preset", "2"]) == 0
    out = capsys.readouterr().out
    assert "base" in out and "flange" in out
    assert len(out.strip().splitlines()) == 8


def test_fk_dh_with_json(tmp_path, capsys, dh):
    path = tmp_path / "dh.json"
    path.write_text(json.dumps(dh.with_value("d", 1, 600.0).as_dict()))
    assert main(["fk", "dh", "--dh", str(path)]) == 0
    assert "600.0" in capsys.readouterr().out


def test_bad_dh_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        main(["fk", "dh", "--dh", str(tmp_path / "missing.json")])


def test_bad_preset_exits():
    with pytest.raises(SystemExit):
        main(["fk", "eval", "--preset", "99"])


def test_ik_from_q_converges_from_exact_seed(capsys):
    q = ["30", "10", "-20", "0", "15", "0"]
    assert main(["ik", "from-q", "--q", *q, "--seed", *q]) == 0
    assert "converged" in capsys.readouterr().out


def test_ik_solve_zero_iterations_reports_failure(capsys):
    assert main(["ik", "solve", "--target", "1500", "0", "1500", "--max-iter", "0"]) == 1
    assert "NOT converged" in capsys.readouterr().out


def test_program_run_with_files(tmp_path, capsys):
    (tmp_path / "cell_globalvars.txt").write_text("world1 x := 0\n")
    trajectory = tmp_path / "cell_commontest.txt"
    trajectory.write_text(TRAJECTORY)
    assert main(["program", "run", str(tmp_path / "cell_globalvars.txt"), str(trajectory), "--list"]) == 0
    out = capsys.readouterr().out
    assert "Waypoints: 1" in out
    assert "Last solution q (deg):" in out


def test_program_run_without_waypoints(tmp_path, capsys):
    trajectory = tmp_path / "empty_commontest.txt"
    trajectory.write_text("// nothing\n")
    assert main(["program", "run", "--trajectory", str(trajectory)]) == 0
    assert "Waypoints: 0" in capsys.readouterr().out


def test_program_run_needs_input():
    with pytest.raises(SystemExit):
        main(["program", "run"])


def test_path_kind_is_validated():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["path", "run", "circle"])


def test_verbosity_flag():
    args = build_parser().parse_args(["-vv", "fk", "dh"])
    assert args.verbose == 2


def test_ik_from_q_reports_orientation_gap(capsys):
    q = ["-45", "20", "10", "30", "-30", "60"]
    assert main(["ik", "from-q", "--q", *q, "--seed", *q]) == 0
    assert "orientation off by 0.0000 deg" in capsys.readouterr().out


def test_path_run_plans_through_plan_path(monkeypatch, capsys):
    calls = []

    def fake_plan(kind, start, dh):
        calls.append((kind, tuple(start)))
        return [tuple(start), tuple(start)]

    monkeypatch.setattr("armsim.cli.path.plan_path", fake_plan)
    assert main(["path", "run", "spiral", "--preset", "2"]) == 0
    assert calls == [("spiral", (30.0, 10.0, -20.0, 0.0, 15.0, 0.0))]
    out = capsys.readouterr().out
    assert "spiral: 2 samples" in out
    assert "last flange (mm):" in out
