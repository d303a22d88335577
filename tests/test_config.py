import pathlib

import pytest

from beecolony.config import DEFAULT_CONFIG, SwarmConfig, deep_update, load_config
from beecolony.core.errors import InvalidConfiguration
from beecolony.core.state import Role

CONFIG_DIR = pathlib.Path(__file__).resolve().parents[1] / "configs"


def test_default_config_is_copied():
    cfg = load_config(None)
    cfg["swarm"]["iterations"] = 1
    assert DEFAULT_CONFIG["swarm"]["iterations"] == 1000


def test_deep_update_merges_nested():
    out = deep_update({"a": {"x": 1, "y": 2}, "b": 3}, {"a": {"y": 5}})
    assert out == {"a": {"x": 1, "y": 5}, "b": 3}


def test_yaml_overrides(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("seed: 7\nproblem:\n  dimension: 4\nswarm:\n  scouts_count: 3\n")
    cfg = SwarmConfig.from_dict(load_config(path))
    assert cfg.seed == 7
    assert cfg.dimension == 4
    assert cfg.scouts_count == 3
    assert cfg.best_agents_count == 5
    assert cfg.population_size == 3 + 15 + 4


def test_inherits(tmp_path):
    (tmp_path / "base.yaml").write_text("swarm:\n  patch_size: 0.5\n  scouts_count: 8\n")
    child = tmp_path / "child.yaml"
    child.write_text("inherits: base.yaml\nswarm:\n  scouts_count: 2\n")
    cfg = SwarmConfig.from_dict(load_config(child))
    assert cfg.patch_size == 0.5
    assert cfg.scouts_count == 2


def test_shipped_configs():
    cfg = SwarmConfig.from_dict(load_config(CONFIG_DIR / "rosenbrock_10d.yaml"))
    assert cfg.dimension == 10
    assert cfg.scouts_count == 20
    assert cfg.best_patches_count == 5
    assert cfg.best_agents_count == 5
    assert cfg.seed == 42


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == DEFAULT_CONFIG


def test_bad_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("swarm: [unclosed\n")
    with pytest.raises(InvalidConfiguration):
        load_config(path)


@pytest.mark.parametrize(
    "override",
    [
        {"swarm": {"scout_count": 3}},
        {"swarm": {"patch_size": -1}},
        {"swarm": {"elite_agents_count": 0}},
        {"swarm": {"average_divisor": "mean"}},
        {"problem": {"bounds": [3, -3]}},
        {"problem": {"bounds": [0]}},
        {"problem": {"dimension": "2"}},
        {"problem": {"fitness": "sphere"}},
        {"seed": "abc"},
    ],
)
def test_invalid_values(override):
    cfg = deep_update(load_config(None), override)
    with pytest.raises(InvalidConfiguration):
        SwarmConfig.from_dict(cfg)


def test_build_initializes_swarm():
    swarm = SwarmConfig(seed=3, scouts_count=4).build()
    assert swarm.initialized
    assert swarm.size == 4 + 15 + 4
    assert len(swarm.agents_by_role(Role.SCOUT)) == 4


def test_missing_file(tmp_path):
    with pytest.raises(InvalidConfiguration, match="cannot read"):
        load_config(tmp_path / "nope.yaml")


def test_missing_inherited_file(tmp_path):
    child = tmp_path / "child.yaml"
    child.write_text("inherits: base.yaml\nswarm:\n  scouts_count: 2\n")
    with pytest.raises(InvalidConfiguration, match="cannot read"):
        load_config(child)


def test_empty_section_uses_defaults(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("problem:\nswarm:\n  iterations: 3\n")
    cfg = SwarmConfig.from_dict(load_config(path))
    assert cfg.dimension == 2
    assert cfg.iterations == 3


@pytest.mark.parametrize(
    "override",
    [
        {"problem": {"dimention": 10}},
        {"problem": [1, 2]},
        {"swarm": "fast"},
        {"iteratons": 5},
    ],
)
def test_unknown_or_malformed_sections(override):
    cfg = deep_update(load_config(None), override)
    with pytest.raises(InvalidConfiguration):
        SwarmConfig.from_dict(cfg)
