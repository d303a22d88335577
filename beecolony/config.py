import copy
import pathlib
from dataclasses import dataclass, field

import yaml

from .core.errors import InvalidConfiguration
from .core.fitness import DEFAULT_FITNESS, get_fitness_function
from .core.swarm import AVERAGE_DIVISORS, DEFAULT_BOUNDS, Swarm


DEFAULT_CONFIG = {
    "seed": None,
    "render_every": 10,
    "stop_after_stagnant": None,
    "problem": {
        "fitness": DEFAULT_FITNESS,
        "dimension": 2,
        "bounds": list(DEFAULT_BOUNDS),
    },
    "swarm": {
        "iterations": 1000,
        "scouts_count": 10,
        "best_agents_count": 5,
        "elite_agents_count": 2,
        "best_patches_count": 3,
        "elite_patches_count": 2,
        "patch_size": 1.0,
        "average_divisor": "exact",  # exact | legacy
        "greedy_acceptance": False,
    },
}


def deep_update(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: pathlib.Path | None) -> dict:
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        cfg = yaml.safe_load(path.read_text())
    except OSError as e:
        raise InvalidConfiguration(f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise InvalidConfiguration(f"cannot parse {path}: {e}") from e
    if cfg is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(cfg, dict):
        raise InvalidConfiguration(f"{path}: top level must be a mapping")
    if "inherits" in cfg:
        base_path = path.parent / cfg["inherits"]
        base_cfg = load_config(base_path)
        cfg = {k: v for k, v in cfg.items() if k != "inherits"}
        return deep_update(base_cfg, cfg)
    return deep_update(copy.deepcopy(DEFAULT_CONFIG), cfg)


@dataclass
class SwarmConfig:
    fitness: str = DEFAULT_FITNESS
    dimension: int = 2
    bounds: tuple[float, float] = DEFAULT_BOUNDS
    iterations: int = 1000
    scouts_count: int = 10
    best_agents_count: int = 5
    elite_agents_count: int = 2
    best_patches_count: int = 3
    elite_patches_count: int = 2
    patch_size: float = 1.0
    seed: int | None = None
    average_divisor: str = "exact"
    greedy_acceptance: bool = False
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, cfg: dict) -> "SwarmConfig":
        unknown = set(cfg) - set(DEFAULT_CONFIG)
        if unknown:
            raise InvalidConfiguration(f"unknown config keys: {sorted(unknown)}")
        problem = _section(cfg, "problem")
        swarm_cfg = _section(cfg, "swarm")
        known = set(DEFAULT_CONFIG["swarm"])
        bounds = problem.get("bounds", DEFAULT_BOUNDS)
        if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
            raise InvalidConfiguration(f"problem.bounds must be [lower, upper], got {bounds!r}")
        out = cls(
            fitness=problem.get("fitness", DEFAULT_FITNESS),
            dimension=problem.get("dimension", 2),
            bounds=tuple(bounds),
            seed=cfg.get("seed"),
            extra={k: v for k, v in cfg.items() if k not in ("problem", "swarm", "seed")},
            **{k: swarm_cfg[k] for k in known if k in swarm_cfg},
        )
        out.validate()
        return out

    def validate(self):
        get_fitness_function(self.fitness)
        for name in (
            "dimension",
            "iterations",
            "scouts_count",
            "best_agents_count",
            "elite_agents_count",
            "best_patches_count",
            "elite_patches_count",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.patch_size, bool) or not isinstance(self.patch_size, (int, float)) or self.patch_size <= 0:
            raise InvalidConfiguration(f"patch_size must be a positive real, got {self.patch_size!r}")
        lower, upper = self.bounds
        if not all(isinstance(b, (int, float)) and not isinstance(b, bool) for b in self.bounds) or not lower < upper:
            raise InvalidConfiguration(f"bounds must satisfy lower < upper, got {list(self.bounds)}")
        if self.average_divisor not in AVERAGE_DIVISORS:
            raise InvalidConfiguration(
                f"average_divisor must be one of {AVERAGE_DIVISORS}, got {self.average_divisor!r}"
            )
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidConfiguration(f"seed must be an integer or null, got {self.seed!r}")

    @property
    def population_size(self) -> int:
        return (
            self.scouts_count
            + self.best_agents_count * self.best_patches_count
            + self.elite_agents_count * self.elite_patches_count
        )

    def build(self, swarm: Swarm | None = None) -> Swarm:
        swarm = swarm if swarm is not None else Swarm()
        return swarm.initialize(
            get_fitness_function(self.fitness),
            dimension=self.dimension,
            iterations=self.iterations,
            scouts_count=self.scouts_count,
            best_agents_count=self.best_agents_count,
            elite_agents_count=self.elite_agents_count,
            best_patches_count=self.best_patches_count,
            elite_patches_count=self.elite_patches_count,
            patch_size=self.patch_size,
            bounds=self.bounds,
            seed=self.seed,
            average_divisor=self.average_divisor,
            greedy_acceptance=self.greedy_acceptance,
        )


def _section(cfg: dict, name: str) -> dict:
    # an empty "problem:" in YAML loads as None
    section = cfg.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfiguration(f"{name} must be a mapping, got {section!r}")
    unknown = set(section) - set(DEFAULT_CONFIG[name])
    if unknown:
        raise InvalidConfiguration(f"unknown {name} options: {sorted(unknown)}")
    return section
