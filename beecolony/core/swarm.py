import logging
import math
import threading
from typing import Callable

import numpy as np

from .agent import Agent
from .errors import InvalidConfiguration, NotInitialized
from .fitness import DEFAULT_FITNESS, FitnessFunction, get_fitness_function, known_optimum
from .point import Point
from .state import AgentState, Role, SwarmSnapshot

logger = logging.getLogger(__name__)

AVERAGE_STAGNATION_TOL = 1e-4
PATCH_STAGNATION_LIMIT = 50
PATCH_SHRINK = 0.95
DEFAULT_BOUNDS = (-5.0, 5.0)
AVERAGE_DIVISORS = ("exact", "legacy")


class Swarm:
    """
    Bee-colony optimizer state for one run.

    All mutation happens inside ``initialize()`` and ``step()``, each of which
    holds the instance lock for its whole duration. Observers read the public
    attributes, or ``snapshot()``, between steps.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._initialized = False
        self._staged: dict[Point, float] | None = None
        self.agents: list[Agent] = []
        self.trail: dict[Point, float] = {}
        self.best_patches: list[Point] = []
        self.elite_patches: list[Point] = []
        self.rng: np.random.Generator | None = None
        self.bounds: tuple[float, float] | None = None
        self.fitness_fn: FitnessFunction | None = None
        self.greedy_acceptance = False
        self.average_divisor = "exact"

        self.dimension = 0
        self.iterations = 0
        self.size = 0
        self.scouts_count = 0
        self.best_agents_count = 0
        self.elite_agents_count = 0
        self.best_patches_count = 0
        self.elite_patches_count = 0
        self.patch_size = 0.0

        self.position: Point | None = None
        self.fitness = math.inf
        self.average_fitness = math.inf
        self.prev_average_fitness = math.inf
        self.prev_fitness = math.inf
        self.current_iteration = 0
        self.generations_counter = 0
        self.patch_change_counter = 0
        self.fitness_calls_counter = 0

    # ------------------------------------------------------------------ setup
    def initialize(
        self,
        fitness_fn: FitnessFunction | str = DEFAULT_FITNESS,
        dimension: int = 2,
        iterations: int = 100000,
        scouts_count: int = 10,
        best_agents_count: int = 5,
        elite_agents_count: int = 2,
        best_patches_count: int = 3,
        elite_patches_count: int = 2,
        patch_size: float = 1.0,
        bounds=DEFAULT_BOUNDS,
        seed: int | None = None,
        average_divisor: str = "exact",
        greedy_acceptance: bool = False,
    ) -> "Swarm":
        if isinstance(fitness_fn, str):
            fitness_fn = get_fitness_function(fitness_fn)
        if not callable(fitness_fn):
            raise InvalidConfiguration("fitness_fn must be callable")
        counts = {
            "dimension": dimension,
            "iterations": iterations,
            "scouts_count": scouts_count,
            "best_agents_count": best_agents_count,
            "elite_agents_count": elite_agents_count,
            "best_patches_count": best_patches_count,
            "elite_patches_count": elite_patches_count,
        }
        for name, value in counts.items():
            _check_positive_int(name, value)
        if isinstance(patch_size, bool) or not isinstance(patch_size, (int, float)) or not (
            math.isfinite(patch_size) and patch_size > 0
        ):
            raise InvalidConfiguration(f"patch_size must be a positive real, got {patch_size!r}")
        lower, upper = _check_bounds(bounds)
        if average_divisor not in AVERAGE_DIVISORS:
            raise InvalidConfiguration(
                f"average_divisor must be one of {AVERAGE_DIVISORS}, got {average_divisor!r}"
            )

        with self._lock:
            # the previous run is discarded up front; a failure below leaves the swarm uninitialized
            self._initialized = False
            self.fitness_fn = fitness_fn
            self.dimension = dimension
            self.iterations = iterations
            self.scouts_count = scouts_count
            self.best_agents_count = best_agents_count
            self.elite_agents_count = elite_agents_count
            self.best_patches_count = best_patches_count
            self.elite_patches_count = elite_patches_count
            self.patch_size = float(patch_size)
            self.bounds = (lower, upper)
            self.rng = np.random.default_rng(seed)
            self.average_divisor = average_divisor
            self.greedy_acceptance = bool(greedy_acceptance)

            self.size = (
                scouts_count
                + best_agents_count * best_patches_count
                + elite_agents_count * elite_patches_count
            )
            self.current_iteration = 0
            self.generations_counter = 0
            self.patch_change_counter = 0
            self.fitness_calls_counter = 0
            self.trail = {}
            self.best_patches = []
            self.elite_patches = []
            self.position = Point.zeros(dimension)
            self.fitness = math.inf
            self.prev_fitness = math.inf
            self.prev_average_fitness = math.inf

            roles = (
                [Role.SCOUT] * scouts_count
                + [Role.EMPLOYED] * (best_agents_count * best_patches_count)
                + [Role.ONLOOKER] * (elite_agents_count * elite_patches_count)
            )
            self.agents = [Agent(i, role, self) for i, role in enumerate(roles)]
            # place every bee once so the first step has patches to rank
            for agent in self.agents:
                agent.global_search()

            self.average_fitness = self._compute_average_fitness()
            self._initialized = True
            logger.info(
                "initialized swarm: dim=%d size=%d (scouts=%d employed=%d onlookers=%d) patch_size=%g",
                dimension,
                self.size,
                scouts_count,
                best_agents_count * best_patches_count,
                elite_agents_count * elite_patches_count,
                self.patch_size,
            )
        return self

    # ------------------------------------------------------------ evaluation
    def evaluate(self, point: Point) -> float:
        self.fitness_calls_counter += 1
        return float(self.fitness_fn(point.coords))

    def record(self, point: Point, value: float):
        # staged during step(), committed only when the whole step succeeds
        target = self._staged if self._staged is not None else self.trail
        target[point] = value
        if value < self.fitness:
            self.fitness = value
            self.position = point

    # ------------------------------------------------------------------ loop
    def rank_patches(self) -> tuple[list[Point], list[Point]]:
        with self._lock:
            ranked = [p for p, _ in sorted(self.trail.items(), key=lambda kv: kv[1])]
            best = ranked[: self.best_patches_count]
            elite = ranked[self.best_patches_count : self.best_patches_count + self.elite_patches_count]
            return best, elite

    def step(self) -> SwarmSnapshot:
        with self._lock:
            self._require_initialized()
            saved = self._save_state()
            self._staged = {}
            try:
                self._step()
            except BaseException:
                self._restore_state(saved)
                raise
            else:
                self.trail.update(self._staged)
            finally:
                self._staged = None
            return self.snapshot()

    def _step(self):
        self.prev_average_fitness = self.average_fitness
        self.prev_fitness = self.fitness

        self.best_patches, self.elite_patches = self.rank_patches()

        employed = self.agents_by_role(Role.EMPLOYED)
        for k, patch in enumerate(self.best_patches):
            group = employed[k * self.best_agents_count : (k + 1) * self.best_agents_count]
            for agent in group:
                agent.search(patch)

        onlookers = self.agents_by_role(Role.ONLOOKER)
        for k, patch in enumerate(self.elite_patches):
            group = onlookers[k * self.elite_agents_count : (k + 1) * self.elite_agents_count]
            for agent in group:
                agent.search(patch)

        for scout in self.agents_by_role(Role.SCOUT):
            scout.global_search()

        self.average_fitness = self._compute_average_fitness()
        self.current_iteration += 1

        if abs(self.prev_average_fitness - self.average_fitness) < AVERAGE_STAGNATION_TOL:
            self.generations_counter += 1
        else:
            self.generations_counter = 0

        if self.fitness == self.prev_fitness:
            self.patch_change_counter += 1
        else:
            self.patch_change_counter = 0

        if self.patch_change_counter > PATCH_STAGNATION_LIMIT:
            self.patch_size *= PATCH_SHRINK
            self.patch_change_counter = 0
            logger.info("iteration %d: best stalled, patch_size -> %g", self.current_iteration, self.patch_size)

        logger.debug(
            "iteration %d: best=%g avg=%g trail=%d",
            self.current_iteration,
            self.fitness,
            self.average_fitness,
            len(self.trail) + len(self._staged),
        )

    def run(
        self,
        steps: int | None = None,
        callback: Callable[[SwarmSnapshot], None] | None = None,
        stop_after_stagnant: int | None = None,
    ) -> SwarmSnapshot:
        """
        Drive ``step()`` ``steps`` times (default: what is left of the
        iteration budget). Stops early once ``generations_counter`` reaches
        ``stop_after_stagnant``.
        """
        with self._lock:
            self._require_initialized()
            if steps is None:
                steps = max(self.iterations - self.current_iteration, 0)
            snap = self.snapshot()
            for _ in range(steps):
                snap = self.step()
                if callback is not None:
                    callback(snap)
                if stop_after_stagnant is not None and self.generations_counter >= stop_after_stagnant:
                    logger.info(
                        "average fitness flat for %d generations, stopping at iteration %d",
                        self.generations_counter,
                        self.current_iteration,
                    )
                    break
            return snap

    # -------------------------------------------------------------- queries
    def agents_by_role(self, role: Role) -> list[Agent]:
        return [a for a in self.agents if a.role == role]

    def distance_to_known_optimum(self) -> float:
        self._require_initialized()
        return self.position.distance_to(known_optimum(self.dimension))

    def agent_states(self) -> list[AgentState]:
        with self._lock:
            return [a.to_state() for a in self.agents]

    def snapshot(self) -> SwarmSnapshot:
        with self._lock:
            self._require_initialized()
            return SwarmSnapshot(
                iteration=self.current_iteration,
                fitness=self.fitness,
                position=list(self.position),
                average_fitness=self.average_fitness,
                patch_size=self.patch_size,
                generations_counter=self.generations_counter,
                patch_change_counter=self.patch_change_counter,
                fitness_calls=self.fitness_calls_counter,
                trail_size=len(self.trail),
                distance_to_optimum=self.distance_to_known_optimum(),
            )

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _compute_average_fitness(self) -> float:
        workers = [a.fitness for a in self.agents if a.role != Role.SCOUT]
        if self.average_divisor == "legacy":
            divisor = self.size - self.best_agents_count
        else:
            divisor = len(workers)
        return sum(workers) / divisor

    def _require_initialized(self):
        if not self._initialized:
            raise NotInitialized("swarm is not initialized; call initialize() first")

    def _save_state(self) -> dict:
        return {
            "agents": [(a.position, a.fitness) for a in self.agents],
            "rng": self.rng.bit_generator.state,
            "scalars": {
                name: getattr(self, name)
                for name in (
                    "position",
                    "fitness",
                    "average_fitness",
                    "prev_average_fitness",
                    "prev_fitness",
                    "current_iteration",
                    "generations_counter",
                    "patch_change_counter",
                    "patch_size",
                    "best_patches",
                    "elite_patches",
                )
            },
        }

    def _restore_state(self, saved: dict):
        for agent, (pos, fit) in zip(self.agents, saved["agents"]):
            agent.position = pos
            agent.fitness = fit
        self.rng.bit_generator.state = saved["rng"]
        for name, value in saved["scalars"].items():
            setattr(self, name, value)


def _check_positive_int(name: str, value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")


def _check_bounds(bounds) -> tuple[float, float]:
    try:
        lower, upper = (float(b) for b in bounds)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"bounds must be a (lower, upper) pair, got {bounds!r}") from None
    if not (math.isfinite(lower) and math.isfinite(upper) and lower < upper):
        raise InvalidConfiguration(f"bounds must satisfy lower < upper, got {bounds!r}")
    return lower, upper


_default_swarm: Swarm | None = None
_default_lock = threading.Lock()


def default_swarm() -> Swarm:
    """Process-wide swarm for callers that want one shared run."""
    global _default_swarm
    with _default_lock:
        if _default_swarm is None:
            _default_swarm = Swarm()
        return _default_swarm
