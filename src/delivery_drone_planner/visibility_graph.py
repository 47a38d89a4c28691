# src/delivery_drone_planner/visibility_graph.py
from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence

from delivery_drone_planner.flight_config import DEFAULT_CONFIG, FlightConfig
from delivery_drone_planner.geometry import LngLat, distance, interpolate
from delivery_drone_planner.polygon import Polygon

# ---------------------------------------------------------------------------
# Module: visibility graph and A* search
#
# Nodes are the depot, every destination and every no-fly-zone vertex. They
# are stored once in an arena and addressed by integer id; edges refer to
# those ids. All per-query search state (g, h, f, predecessor) lives in
# tables owned by a single call to shortest_path, so the graph itself is
# never mutated after it has been built.
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    """Directed edge between two node ids; weight is the Euclidean length."""
    start: int
    end: int
    weight: float


@dataclass
class WaypointPath:
    """
    Result of a successful query.

    - waypoints: points to visit, starting with the query's start and ending
      with its destination (empty when start and destination coincide).
    - cost: total weight of the traversed edges.
    """
    waypoints: List[LngLat]
    cost: float = 0.0

    def __len__(self) -> int:
        return len(self.waypoints)


@dataclass
class SearchState:
    """Per-query search bookkeeping for every node id."""
    g: List[float]
    h: List[float]
    f: List[float]
    prev: List[Optional[int]]

    @staticmethod
    def fresh(n: int) -> "SearchState":
        return SearchState(
            g=[math.inf] * n,
            h=[0.0] * n,
            f=[math.inf] * n,
            prev=[None] * n,
        )


@dataclass
class VisibilityGraph:
    """
    Pruned complete graph over the planning points.

    Build with VisibilityGraph.build(...); the constructor only stores the
    given arena and adjacency lists.
    """
    nodes: List[LngLat]
    edges: Dict[int, List[Edge]]
    config: FlightConfig = DEFAULT_CONFIG
    _index: Dict[LngLat, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self._index = {p: i for i, p in enumerate(self.nodes)}

    # ----- construction -----

    @classmethod
    def build(
        cls,
        depot: Optional[LngLat],
        destinations: Sequence[LngLat],
        no_fly_zones: Sequence[Polygon],
        config: FlightConfig = DEFAULT_CONFIG,
    ) -> "VisibilityGraph":
        """
        Create the node arena, connect every ordered pair of distinct nodes and
        discard the edges that are blocked by a no-fly zone.

        Raises ValueError if the depot is missing or there are no destinations.
        """
        if depot is None:
            raise ValueError("The depot location must not be None")
        if not destinations:
            raise ValueError("There must be at least one destination")
        if any(d is None for d in destinations):
            raise ValueError("Destination locations must not be None")

        nodes: List[LngLat] = []
        seen = set()
        points = [depot, *destinations]
        for zone in no_fly_zones:
            points.extend(zone.vertices)
        for p in points:
            if p not in seen:
                seen.add(p)
                nodes.append(p)

        edges = {
            u: [Edge(u, v, distance(nodes[u], nodes[v])) for v in range(len(nodes)) if v != u]
            for u in range(len(nodes))
        }
        graph = cls(nodes=nodes, edges=edges, config=config)
        graph._prune(no_fly_zones)
        return graph

    def _prune(self, no_fly_zones: Sequence[Polygon]) -> None:
        if not no_fly_zones:
            return
        removed = 0
        for u, out in self.edges.items():
            visible = [e for e in out if self.is_visible(self.nodes[e.start], self.nodes[e.end], no_fly_zones)]
            removed += len(out) - len(visible)
            self.edges[u] = visible
        logger.debug("Pruned %d of %d edges", removed, removed + self.edge_count())

    def is_visible(self, start: LngLat, end: LngLat, no_fly_zones: Sequence[Polygon]) -> bool:
        """
        Approximate visibility test for the segment start->end.

        The edge is blocked if it strictly crosses a zone edge or if one of the
        sample points (config.sample_fractions along the edge) lies inside a
        zone. Boundary points do not count as inside, so edges running along
        a zone boundary stay visible.
        """
        samples = [
            interpolate(start, end, t, legacy=self.config.legacy_interpolation)
            for t in self.config.sample_fractions
        ]
        for zone in no_fly_zones:
            if zone.is_crossed_by(start, end):
                return False
            if any(zone.contains(q, allow_boundary=True) for q in samples):
                return False
        return True

    # ----- lookups -----

    def __contains__(self, point: LngLat) -> bool:
        return point in self._index

    def index_of(self, point: LngLat) -> Optional[int]:
        return self._index.get(point)

    def edge_count(self) -> int:
        return sum(len(out) for out in self.edges.values())

    def edges_from(self, point: LngLat) -> List[Edge]:
        """Outgoing edges of ``point``; an unknown point yields no edges."""
        u = self.index_of(point)
        if u is None:
            logger.warning("No node with coordinates %s", point)
            return []
        return self.edges[u]

    # ----- search -----

    def heuristic(self, u: int, destination: LngLat) -> float:
        return distance(self.nodes[u], destination)

    def shortest_path(self, start: LngLat, destination: LngLat) -> Optional[WaypointPath]:
        """
        A* search from ``start`` to ``destination`` over the visible edges.

        Returns:
        - an empty WaypointPath if start == destination (no search is run),
        - the cheapest waypoint sequence over the pruned graph otherwise,
        - None if the destination cannot be reached.

        The straight-line heuristic never overestimates, so the result is
        cost-minimal over the pruned graph (not over the free plane).
        """
        if start == destination:
            return WaypointPath([], 0.0)

        s = self.index_of(start)
        t = self.index_of(destination)
        if s is None or t is None:
            missing = start if s is None else destination
            logger.warning("There are no nodes associated with the coordinates %s", missing)
            return None

        state = SearchState.fresh(len(self.nodes))
        for u in range(len(self.nodes)):
            state.h[u] = self.heuristic(u, destination)
        state.g[s] = 0.0
        state.f[s] = state.h[s]

        # Entries are (f, node id); stale entries are skipped when popped.
        open_set = [(state.f[s], s)]
        closed = set()
        iterations = 0
        while open_set:
            iterations += 1
            if iterations > self.config.max_search_iterations:
                logger.warning("Search from %s to %s stopped after %d iterations", start, destination, iterations - 1)
                return None
            f, u = heapq.heappop(open_set)
            if u in closed or f > state.f[u]:
                continue
            if u == t:
                return WaypointPath(self._reconstruct(state, t), state.g[t])
            closed.add(u)
            for e in self.edges[u]:
                g_new = state.g[u] + e.weight
                if g_new < state.g[e.end]:
                    state.prev[e.end] = u
                    state.g[e.end] = g_new
                    state.f[e.end] = g_new + state.h[e.end]
                    closed.discard(e.end)
                    heapq.heappush(open_set, (state.f[e.end], e.end))

        logger.warning("There is no path from %s to %s", start, destination)
        return None

    def _reconstruct(self, state: SearchState, t: int) -> List[LngLat]:
        ids = []
        cur: Optional[int] = t
        while cur is not None:
            ids.append(cur)
            cur = state.prev[cur]
        return [self.nodes[i] for i in reversed(ids)]
