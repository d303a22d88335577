import json
from pathlib import Path

from ..core.swarm import Swarm


class SwarmLogger:
    """Collects one record per iteration and writes them as a JSON list."""

    def __init__(self, path: str | Path, with_agents: bool = False):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.with_agents = with_agents
        self.records = []

    def log_state(self, swarm: Swarm):
        snapshot = swarm.snapshot().to_dict()
        if self.with_agents:
            snapshot["agents"] = {
                st.id: {"role": st.role.name.lower(), "pos": st.pos, "fitness": st.fitness}
                for st in swarm.agent_states()
            }
        self.records.append(snapshot)

    def flush(self):
        with self.path.open("w") as f:
            json.dump(self.records, f, indent=2)
