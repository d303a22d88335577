import pytest

from beecolony.core.errors import InvalidConfiguration
from beecolony.core.fitness import (
    DEFAULT_FITNESS,
    FITNESS_FUNCTIONS,
    get_fitness_function,
    known_optimum,
    rosenbrock,
)


def test_rosenbrock_minimum_at_ones():
    for dim in (2, 3, 10):
        assert rosenbrock(list(known_optimum(dim))) == 0.0


def test_rosenbrock_values():
    assert rosenbrock([0.0, 0.0]) == pytest.approx(1.0)
    assert rosenbrock([-1.0, 1.0]) == pytest.approx(4.0)
    # two terms for three coordinates
    assert rosenbrock([0.0, 0.0, 0.0]) == pytest.approx(2.0)


def test_registry_default():
    assert get_fitness_function(DEFAULT_FITNESS) is rosenbrock
    assert "rosenbrock" in FITNESS_FUNCTIONS


def test_unknown_function():
    with pytest.raises(InvalidConfiguration, match="unknown fitness"):
        get_fitness_function("himmelblau")
