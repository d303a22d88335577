from typing import Callable, Sequence

from .errors import InvalidConfiguration
from .point import Point

# Pure, lower is better.
FitnessFunction = Callable[[Sequence[float]], float]


def rosenbrock(coords: Sequence[float]) -> float:
    """
    Rosenbrock's valley. Global minimum 0 at the all-ones point.
    """
    total = 0.0
    for i in range(len(coords) - 1):
        x, x_next = coords[i], coords[i + 1]
        total += 100.0 * (x_next - x * x) ** 2 + (1.0 - x) ** 2
    return total


FITNESS_FUNCTIONS: dict[str, FitnessFunction] = {
    "rosenbrock": rosenbrock,
}

DEFAULT_FITNESS = "rosenbrock"


def get_fitness_function(name: str) -> FitnessFunction:
    try:
        return FITNESS_FUNCTIONS[name]
    except KeyError:
        known = ", ".join(sorted(FITNESS_FUNCTIONS))
        raise InvalidConfiguration(f"unknown fitness function {name!r} (known: {known})") from None


def known_optimum(dimension: int) -> Point:
    # rosenbrock only; meaningless for arbitrary fitness functions
    return Point.ones(dimension)
