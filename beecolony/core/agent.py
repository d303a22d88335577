import math

import numpy as np

from .errors import DimensionMismatch, NotInitialized
from .point import Point
from .state import AgentState, Role


class Agent:
    """
    A single bee. Scouts sample the whole domain; Employed and Onlooker agents
    sample the hypercube of half-width ``patch_size`` around an anchor.
    """

    def __init__(self, id: int, role: Role, swarm):
        self.id = id
        self.role = role
        self.swarm = swarm
        self.position: Point | None = None
        self.fitness = math.inf

    def global_search(self) -> Point:
        lower, upper = self._bounds()
        dim = self.swarm.dimension
        cand = self.swarm.rng.uniform(lower, upper, size=dim)
        return self._move_to(Point(cand))

    def search(self, anchor: Point) -> Point:
        lower, upper = self._bounds()
        dim = self.swarm.dimension
        if anchor.dimension != dim:
            raise DimensionMismatch(dim, anchor.dimension)
        r = self.swarm.patch_size
        # hypercube neighbourhood, clipped to the domain
        offset = self.swarm.rng.uniform(-r, r, size=dim)
        cand = np.clip(anchor.as_array() + offset, lower, upper)
        return self._move_to(Point(cand))

    def _bounds(self):
        bounds = self.swarm.bounds
        if bounds is None or self.swarm.rng is None:
            raise NotInitialized("swarm domain bounds are not configured; call initialize() first")
        return bounds

    def _move_to(self, cand: Point) -> Point:
        value = self.swarm.evaluate(cand)
        # the trail always sees the candidate, accepted or not
        self.swarm.record(cand, value)
        if not self.swarm.greedy_acceptance or value <= self.fitness:
            self.position = cand
            self.fitness = value
        return cand

    def to_state(self) -> AgentState:
        pos = list(self.position) if self.position is not None else []
        return AgentState(id=self.id, role=self.role, pos=pos, fitness=self.fitness)

    def __repr__(self):
        return f"Agent(id={self.id}, role={self.role.name}, fitness={self.fitness:.6g})"
