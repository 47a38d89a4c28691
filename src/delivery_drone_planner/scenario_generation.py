# src/delivery_drone_planner/scenario_generation.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple
import random

from delivery_drone_planner.delivery_run import DeliveryRequest
from delivery_drone_planner.geometry import DEPOT, LngLat
from delivery_drone_planner.polygon import Polygon


@dataclass
class ScenarioConfig:
    """
    Configuration options controlling random scenario generation.

    Key fields:
    - $$depot$$: start and end point of every delivery.
    - $$lng\\_range$$, $$lat\\_range$$: sampling rectangle for destinations and
      zone centres (defaults cover the streets around the depot).
    - $$n\\_destinations$$: number of distinct destinations.
    - $$orders\\_per\\_destination$$: requests generated per destination; values
      above 1 exercise the route cache.
    - $$n\\_zones$$, $$zone\\_half\\_size$$: number and half side length of the
      axis-aligned square no-fly zones.
    - $$max\\_attempts$$: rejection-sampling budget per point / zone.
    - $$seed$$: RNG seed for reproducibility.
    """
    depot: LngLat = DEPOT
    lng_range: Tuple[float, float] = (-3.192473, -3.184319)
    lat_range: Tuple[float, float] = (55.942617, 55.946233)

    n_destinations: int = 10
    orders_per_destination: int = 1

    n_zones: int = 3
    zone_half_size: float = 0.0003

    max_attempts: int = 1000
    seed: int = 0


@dataclass
class Scenario:
    """
    Container holding the result of scenario generation.

    Attributes:
    - $$config$$: the ScenarioConfig used to produce this scenario.
    - $$depot$$: depot location.
    - $$destinations$$: distinct destination points, none inside a zone.
    - $$no\\_fly\\_zones$$: square zone polygons, none containing the depot.
    """
    config: ScenarioConfig
    depot: LngLat
    destinations: List[LngLat]
    no_fly_zones: List[Polygon] = field(default_factory=list)

    def requests(self) -> List[DeliveryRequest]:
        """One request per destination and repeat; order numbers are 8 hex digits."""
        out: List[DeliveryRequest] = []
        for _ in range(self.config.orders_per_destination):
            for dest in self.destinations:
                out.append(DeliveryRequest(order_no=f"{len(out) + 1:08X}", destination=dest))
        return out


def _random_point(config: ScenarioConfig) -> LngLat:
    """
    Sample a point uniformly in the rectangle
    $$[lng_0, lng_1] \\times [lat_0, lat_1].$$
    """
    return LngLat(
        random.uniform(*config.lng_range),
        random.uniform(*config.lat_range),
    )


def _square_zone(center: LngLat, half: float, name: str) -> Polygon:
    return Polygon(
        (
            LngLat(center.lng - half, center.lat - half),
            LngLat(center.lng - half, center.lat + half),
            LngLat(center.lng + half, center.lat + half),
            LngLat(center.lng + half, center.lat - half),
        ),
        name,
    )


def _generate_zones(config: ScenarioConfig) -> List[Polygon]:
    """
    Square zones whose closed area does not contain the depot.

    Raises ValueError if a zone cannot be placed within max_attempts draws.
    """
    zones: List[Polygon] = []
    for i in range(config.n_zones):
        for _ in range(config.max_attempts):
            zone = _square_zone(_random_point(config), config.zone_half_size, f"zone-{i + 1}")
            if not zone.contains(config.depot):
                zones.append(zone)
                break
        else:
            raise ValueError("Could not place a no-fly zone away from the depot")
    return zones


def _generate_destinations(config: ScenarioConfig, zones: List[Polygon]) -> List[LngLat]:
    destinations: List[LngLat] = []
    for _ in range(config.n_destinations):
        for _ in range(config.max_attempts):
            p = _random_point(config)
            if p != config.depot and not any(z.contains(p) for z in zones):
                destinations.append(p)
                break
        else:
            raise ValueError("Could not place a destination outside the no-fly zones")
    return destinations


def generate_scenario(config: ScenarioConfig) -> Scenario:
    """
    Generate a random Scenario from the provided config.

    The procedure is deterministic when $$config.seed$$ is fixed via
    $$random.seed(config.seed)$$, making it suitable for repeatable tests.
    """
    if config.n_destinations <= 0:
        raise ValueError("n_destinations must be positive")
    if config.n_zones < 0 or config.orders_per_destination < 1:
        raise ValueError("n_zones must be non-negative and orders_per_destination positive")

    random.seed(config.seed)

    zones = _generate_zones(config)
    destinations = _generate_destinations(config, zones)

    return Scenario(
        config=config,
        depot=config.depot,
        destinations=destinations,
        no_fly_zones=zones,
    )
