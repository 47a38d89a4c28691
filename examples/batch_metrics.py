import json
import logging

import numpy as np

from delivery_drone_planner import (
    ScenarioConfig,
    generate_scenario,
    run_deliveries,
    summarize_run,
)


def main(n_runs: int = 10) -> None:
    logging.basicConfig(level=logging.WARNING)

    rows = []
    for seed in range(n_runs):
        scenario = generate_scenario(ScenarioConfig(n_destinations=12, n_zones=4, seed=seed))
        result = run_deliveries(scenario.requests(), scenario.no_fly_zones, depot=scenario.depot)
        summary = summarize_run(result)
        summary["seed"] = seed
        rows.append(summary)

    delivered = np.array([r["n_delivered"] for r in rows])
    battery = np.array([r["battery_remaining"] for r in rows])
    print(json.dumps(rows, indent=2))
    print(f"delivered per run: mean={delivered.mean():.2f} min={delivered.min()} max={delivered.max()}")
    print(f"battery left:      mean={battery.mean():.1f}")


if __name__ == "__main__":
    main()
