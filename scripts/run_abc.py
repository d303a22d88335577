import argparse
import logging
import pathlib
import sys

# Ensure repository root is on PYTHONPATH when running without installation.
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from beecolony.config import SwarmConfig, load_config
from beecolony.core.errors import SwarmError
from beecolony.core.fitness import known_optimum
from beecolony.core.metrics import mean_pairwise_distance, population_extent, role_counts
from beecolony.viz.logger import SwarmLogger
from beecolony.viz.render_2d import SwarmRenderer2D

logger = logging.getLogger("beecolony.run")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the bee colony optimizer.")
    parser.add_argument("--config", type=pathlib.Path, help="Path to YAML config.")
    parser.add_argument("--iterations", type=int, help="Override the iteration budget.")
    parser.add_argument("--dimension", type=int, help="Override the problem dimension.")
    parser.add_argument("--seed", type=int, help="Seed for reproducible runs.")
    parser.add_argument("--stop-after-stagnant", type=int, dest="stop_after_stagnant",
                        help="Stop once average fitness is flat for N generations.")
    parser.add_argument("--no-render", action="store_true", help="Disable live rendering (headless).")
    parser.add_argument("--render-every", type=int, dest="render_every", help="Render every N iterations.")
    parser.add_argument("--log", type=pathlib.Path, help="Optional path to write JSON log.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...).")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        cfg = load_config(args.config)
        if args.iterations is not None:
            cfg["swarm"]["iterations"] = args.iterations
        if args.dimension is not None:
            cfg["problem"]["dimension"] = args.dimension
        if args.seed is not None:
            cfg["seed"] = args.seed
        if args.render_every is not None:
            cfg["render_every"] = args.render_every
        if args.stop_after_stagnant is not None:
            cfg["stop_after_stagnant"] = args.stop_after_stagnant
        swarm_cfg = SwarmConfig.from_dict(cfg)
        swarm = swarm_cfg.build()
    except SwarmError as e:
        logger.error("%s", e)
        return 2

    renderer = None if args.no_render else SwarmRenderer2D(
        bounds=swarm.bounds, optimum=known_optimum(swarm.dimension)
    )
    run_log = SwarmLogger(args.log) if args.log else None
    render_every = max(int(cfg.get("render_every") or 1), 1)

    def on_step(snap):
        if renderer and snap.iteration % render_every == 0:
            renderer.render(swarm)
        if run_log:
            run_log.log_state(swarm)

    swarm.run(callback=on_step, stop_after_stagnant=cfg.get("stop_after_stagnant"))

    if run_log:
        run_log.flush()

    print(f"iterations: {swarm.current_iteration}")
    print(f"best fitness: {swarm.fitness:.10g}")
    print(f"best position: {list(swarm.position)}")
    print(f"distance to (1, ..., 1): {swarm.distance_to_known_optimum():.6g}")
    print(f"fitness calls: {swarm.fitness_calls_counter}, trail size: {len(swarm.trail)}")
    print(f"population spread: {mean_pairwise_distance(swarm.agents):.4g}, extent: {population_extent(swarm.agents):.4g}")
    counts = role_counts(swarm.agents)
    print("roles: " + ", ".join(f"{role.name.lower()}={n}" for role, n in counts.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
