import json

from scripts.run_abc import main


def test_headless_run_writes_log(tmp_path, capsys):
    log = tmp_path / "run.json"
    rc = main(["--no-render", "--iterations", "30", "--seed", "3", "--log", str(log)])
    assert rc == 0
    records = json.loads(log.read_text())
    assert len(records) == 30
    assert records[-1]["iteration"] == 30
    out = capsys.readouterr().out
    assert "best fitness" in out
    assert "iterations: 30" in out


def test_stagnation_stop(tmp_path):
    rc = main(["--no-render", "--iterations", "50", "--seed", "1", "--stop-after-stagnant", "1"])
    assert rc == 0


def test_bad_config_exit_code(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("swarm:\n  patch_size: 0\n")
    assert main(["--no-render", "--config", str(cfg)]) == 2


def test_missing_config_exit_code(tmp_path):
    assert main(["--no-render", "--config", str(tmp_path / "nope.yaml")]) == 2


def test_missing_inherited_config_exit_code(tmp_path):
    cfg = tmp_path / "child.yaml"
    cfg.write_text("inherits: base.yaml\n")
    assert main(["--no-render", "--config", str(cfg)]) == 2


def test_empty_problem_section_runs(tmp_path, capsys):
    cfg = tmp_path / "run.yaml"
    cfg.write_text("problem:\nswarm:\n  iterations: 3\n")
    assert main(["--no-render", "--config", str(cfg), "--seed", "0"]) == 0
    out = capsys.readouterr().out
    assert "iterations: 3" in out
    assert "roles: scout=10, employed=15, onlooker=4" in out
    assert "extent:" in out
