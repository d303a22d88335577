from dataclasses import dataclass, asdict
from enum import IntEnum


class Role(IntEnum):
    SCOUT = 0       # global exploration
    EMPLOYED = 1    # local search around best patches
    ONLOOKER = 2    # local search around elite patches


@dataclass
class AgentState:
    id: int
    role: Role
    pos: list[float]
    fitness: float


@dataclass
class SwarmSnapshot:
    """Read-only view of a swarm between steps, for charts and run logs."""
    iteration: int
    fitness: float
    position: list[float]
    average_fitness: float
    patch_size: float
    generations_counter: int
    patch_change_counter: int
    fitness_calls: int
    trail_size: int
    distance_to_optimum: float

    def to_dict(self) -> dict:
        return asdict(self)
