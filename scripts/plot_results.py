import json
import sys
import numpy as np
import matplotlib.pyplot as plt


def load_log(path):
    with open(path, "r") as f:
        return json.load(f)


def main(log_path="logs/run.json"):
    data = load_log(log_path)
    its = [entry["iteration"] for entry in data]
    best = np.array([entry["fitness"] for entry in data], dtype=float)
    avg = np.array([entry["average_fitness"] for entry in data], dtype=float)
    patch = [entry["patch_size"] for entry in data]

    fig, (ax_fit, ax_patch) = plt.subplots(2, 1, sharex=True)
    ax_fit.semilogy(its, np.maximum(best, 1e-300), label="best")
    ax_fit.semilogy(its, np.maximum(avg, 1e-300), label="average (non-scouts)", alpha=0.6)
    ax_fit.set_ylabel("fitness")
    ax_fit.legend()
    ax_patch.plot(its, patch)
    ax_patch.set_xlabel("iteration")
    ax_patch.set_ylabel("patch size")
    fig.suptitle("Bee colony convergence")
    plt.show()


if __name__ == "__main__":
    log = sys.argv[1] if len(sys.argv) > 1 else "logs/run.json"
    main(log)
