import matplotlib.pyplot as plt
import numpy as np

from ..core.point import Point
from ..core.state import Role
from ..core.swarm import Swarm


ROLE_COLORS = {Role.SCOUT: "gray", Role.EMPLOYED: "blue", Role.ONLOOKER: "orange"}


class SwarmRenderer2D:
    """
    Live view of a run: agent positions (first two coordinates) on the left,
    best-fitness trajectory on the right.
    """

    def __init__(self, bounds, optimum: Point | None = None):
        self.bounds = bounds
        self.optimum = optimum
        self.fig, (self.ax, self.ax_fit) = plt.subplots(1, 2, figsize=(12, 6))
        backend = plt.get_backend().lower()
        self._interactive = backend not in {"agg", "pdf", "svg"}
        if self._interactive:
            plt.ion()
        self.role_scatters = {}
        self.best_marker = None
        self.fit_line = None
        self.iterations: list[int] = []
        self.fitness: list[float] = []
        self.ax.set_xlim(bounds[0], bounds[1])
        self.ax.set_ylim(bounds[0], bounds[1])
        self.ax.set_aspect("equal")
        self.ax_fit.set_xlabel("iteration")
        self.ax_fit.set_ylabel("best fitness")
        self.ax_fit.set_yscale("log")
        self._draw_static()

    def _draw_static(self):
        if self.optimum is not None and self.optimum.dimension >= 2:
            self.ax.scatter([self.optimum[0]], [self.optimum[1]], c="green", marker="*", s=120, zorder=2, label="optimum")

    def render(self, swarm: Swarm):
        if swarm.dimension < 2:
            return
        role_to_positions = {}
        for a in swarm.agents:
            if a.position is not None:
                role_to_positions.setdefault(a.role, []).append(a.position.coords[:2])
        for role, pos_list in role_to_positions.items():
            positions = np.array(pos_list)
            scat = self.role_scatters.get(role)
            if scat is None:
                scat = self.ax.scatter(
                    positions[:, 0],
                    positions[:, 1],
                    c=ROLE_COLORS.get(role, "blue"),
                    s=20,
                    zorder=4,
                    alpha=0.8,
                    label=role.name.lower(),
                )
                self.role_scatters[role] = scat
            else:
                scat.set_offsets(positions)

        best = swarm.position.coords[:2]
        if self.best_marker is None:
            self.best_marker = self.ax.scatter([best[0]], [best[1]], c="red", marker="x", s=60, zorder=5, label="best")
            self.ax.legend(loc="upper right", fontsize=8)
        else:
            self.best_marker.set_offsets([best])

        self.iterations.append(swarm.current_iteration)
        # log axis: keep strictly positive
        self.fitness.append(max(swarm.fitness, 1e-300))
        if self.fit_line is None:
            (self.fit_line,) = self.ax_fit.plot(self.iterations, self.fitness, c="red")
        else:
            self.fit_line.set_data(self.iterations, self.fitness)
            self.ax_fit.relim()
            self.ax_fit.autoscale_view()

        self.ax.set_title(f"iter={swarm.current_iteration} | patch={swarm.patch_size:.3g}")
        self.ax_fit.set_title(f"best={swarm.fitness:.4g}")
        if self._interactive:
            plt.pause(0.001)
