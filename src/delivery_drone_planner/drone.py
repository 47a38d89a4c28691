from dataclasses import dataclass, field
from typing import List, Sequence

from delivery_drone_planner.flight_config import BATTERY_CAPACITY, MOVE_COST, DEFAULT_CONFIG, FlightConfig
from delivery_drone_planner.geometry import LngLat
from delivery_drone_planner.flight_simulator import Move

NO_ORDER = "no-order"


@dataclass
class Drone:
    """
    Execution state of the delivery vehicle.

    Fields:
    - position: current position.
    - battery: remaining move budget for the whole run. It only ever
      decreases; reset() does not restore it.
    - order_no: order currently being flown, or NO_ORDER between deliveries.
    - moves: log of the moves applied since the last reset().
    - config: FlightConfig used to apply moves.
    """
    position: LngLat
    battery: int = BATTERY_CAPACITY
    order_no: str = NO_ORDER
    moves: List[Move] = field(default_factory=list)
    config: FlightConfig = DEFAULT_CONFIG

    @staticmethod
    def at_depot(depot: LngLat, config: FlightConfig = DEFAULT_CONFIG) -> "Drone":
        """A fully charged drone at ``depot``."""
        return Drone(position=depot, battery=config.battery_capacity, config=config)

    def has_capacity(self, move_count: int) -> bool:
        return self.battery >= move_count * MOVE_COST

    def follow_path(self, order_no: str, moves: Sequence[Move]) -> None:
        """
        Apply ``moves`` in order: log each one, advance the position by its
        direction and spend one battery unit per move.

        The route is applied entirely or not at all; a ValueError is raised
        (and nothing changes) if the battery cannot cover every move.
        """
        if not self.has_capacity(len(moves)):
            raise ValueError(
                f"Battery of {self.battery} cannot cover a route of {len(moves)} moves"
            )
        self.order_no = order_no
        for move in moves:
            self.moves.append(move)
            self.position = move.next_position(self.config)
            self.battery -= MOVE_COST

    def reset(self, depot: LngLat) -> None:
        """Back to the depot with an empty log; the battery is left as is."""
        self.position = depot
        self.moves = []
        self.order_no = NO_ORDER
