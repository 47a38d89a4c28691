import logging

import matplotlib.pyplot as plt

from delivery_drone_planner import (
    ScenarioConfig,
    generate_scenario,
    run_deliveries,
    summarize_run,
)
from delivery_drone_planner.plotting import plot_run


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = ScenarioConfig(n_destinations=8, orders_per_destination=2, n_zones=3, seed=42)
    scenario = generate_scenario(cfg)

    result = run_deliveries(scenario.requests(), scenario.no_fly_zones, depot=scenario.depot)

    print("Orders:")
    for r in result.results:
        print(f"  {r.request.order_no}: {r.outcome.value:<13} {r.move_count:4d} moves")

    print("Summary:")
    for key, value in summarize_run(result).items():
        print(f"  {key}: {value}")

    plot_run(result, scenario.no_fly_zones, title="Delivery run (seed 42)")
    plt.show()


if __name__ == "__main__":
    main()
