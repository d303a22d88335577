from collections import Counter

import numpy as np

from .agent import Agent
from .state import Role


def _positions(agents: list[Agent]) -> np.ndarray:
    return np.array([a.position.coords for a in agents if a.position is not None], dtype=float)


def population_extent(agents: list[Agent]) -> float:
    """
    Rough spread proxy: volume of the bounding box around all agents.
    """
    positions = _positions(agents)
    if len(positions) == 0:
        return 0.0
    mins = positions.min(axis=0)
    maxs = positions.max(axis=0)
    return float(np.prod(maxs - mins))


def mean_pairwise_distance(agents: list[Agent]) -> float:
    """
    Diversity proxy: average pairwise distance between agents.
    """
    positions = _positions(agents)
    if len(positions) < 2:
        return 0.0
    dists = np.linalg.norm(positions[:, None, :] - positions[None, :, :], axis=-1)
    # exclude self distances (zero diagonal)
    n = len(positions)
    return float(dists.sum() / (n * (n - 1)))


def role_counts(agents: list[Agent]) -> dict[Role, int]:
    counts = Counter(a.role for a in agents)
    return {role: counts.get(role, 0) for role in Role}
