import matplotlib

matplotlib.use("Agg")

import pytest

from beecolony.core.fitness import rosenbrock
from beecolony.core.swarm import Swarm


REFERENCE_CONFIG = dict(
    dimension=2,
    iterations=100,
    scouts_count=10,
    best_agents_count=5,
    elite_agents_count=2,
    best_patches_count=3,
    elite_patches_count=2,
    patch_size=1.0,
)


@pytest.fixture
def swarm():
    return Swarm().initialize(rosenbrock, seed=1234, **REFERENCE_CONFIG)


def constant(value=1.0):
    def fn(coords):
        return value
    return fn


class CountingFitness:
    """Returns the number of calls so far: every new evaluation is worse."""

    def __init__(self, fail_after=None):
        self.calls = 0
        self.fail_after = fail_after

    def __call__(self, coords):
        self.calls += 1
        if self.fail_after is not None and self.calls > self.fail_after:
            raise FitnessExploded(f"call {self.calls}")
        return float(self.calls)


class FitnessExploded(Exception):
    pass
