# src/delivery_drone_planner/polygon.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from delivery_drone_planner.geometry import LngLat

# ---------------------------------------------------------------------------
# Module: spatial predicates
#
# Orientation-based segment intersection tests and a ray-casting point in
# polygon test. Two flavours exist for both:
# - inclusive: touching a boundary counts (used for "is this point in the
#   area" questions),
# - strict: only proper transversal crossings count, so a path may run along
#   a no-fly-zone boundary or touch one of its vertices.
# ---------------------------------------------------------------------------

# Longitude beyond any real coordinate; the end point of the east-bound ray.
RAY_LONGITUDE = 181.0

Orientation = Literal[0, 1, 2]


def orientation(a: LngLat, b: LngLat, c: LngLat) -> Orientation:
    """
    Orientation of the turn a->b->c.

    Returns:
    - 0 if c is collinear with a->b,
    - 1 if b->c turns anticlockwise relative to a->b,
    - 2 if it turns clockwise.
    """
    cross = (b.lat - a.lat) * (c.lng - b.lng) - (c.lat - b.lat) * (b.lng - a.lng)
    if cross == 0:
        return 0
    return 1 if cross < 0 else 2


def on_segment(a: LngLat, b: LngLat, p: LngLat) -> bool:
    """True if p lies within the bounding box of a->b (p assumed collinear)."""
    return (min(a.lng, b.lng) <= p.lng <= max(a.lng, b.lng)
            and min(a.lat, b.lat) <= p.lat <= max(a.lat, b.lat))


def segments_intersect(p1: LngLat, p2: LngLat, q1: LngLat, q2: LngLat) -> bool:
    """Inclusive test: proper crossings and boundary touches both count."""
    d1 = orientation(p1, p2, q1)
    d2 = orientation(p1, p2, q2)
    d3 = orientation(q1, q2, p1)
    d4 = orientation(q1, q2, p2)

    if d1 != d2 and d3 != d4:
        return True
    # An endpoint of one segment lying on the other
    if d1 == 0 and on_segment(p1, p2, q1):
        return True
    if d2 == 0 and on_segment(p1, p2, q2):
        return True
    if d3 == 0 and on_segment(q1, q2, p1):
        return True
    if d4 == 0 and on_segment(q1, q2, p2):
        return True
    return False


def segments_cross_strictly(p1: LngLat, p2: LngLat, q1: LngLat, q2: LngLat) -> bool:
    """
    Strict test: True only for a proper transversal crossing. Shared
    endpoints and any collinear configuration are not crossings.
    """
    if p1 == q1 or p1 == q2 or p2 == q1 or p2 == q2:
        return False

    d1 = orientation(p1, p2, q1)
    d2 = orientation(p1, p2, q2)
    d3 = orientation(q1, q2, p1)
    d4 = orientation(q1, q2, p2)

    if d1 == 0 or d2 == 0 or d3 == 0 or d4 == 0:
        return False
    return d1 != d2 and d3 != d4


@dataclass(frozen=True)
class Polygon:
    """
    A closed polygon given by its vertices in order, without a repeated
    closing vertex. Edge i joins vertex i to vertex (i + 1) mod n.

    Used both for no-fly zones and for the central area; only no-fly zones
    take part in route planning.
    """
    vertices: Tuple[LngLat, ...]
    name: Optional[str] = None

    def __post_init__(self):
        # Accept any sequence but store a tuple so the polygon stays hashable
        object.__setattr__(self, "vertices", tuple(self.vertices))
        if len(self.vertices) < 3:
            raise ValueError("A polygon must have at least three vertices")
        if any(v is None for v in self.vertices):
            raise ValueError("Polygon vertices must not be None")

    @staticmethod
    def from_points(points: Sequence[LngLat], name: Optional[str] = None) -> "Polygon":
        return Polygon(tuple(points), name)

    @staticmethod
    def from_dict(d: Dict) -> "Polygon":
        """
        Build a polygon from ``{"name": ..., "coordinates": [[lng, lat], ...]}``.
        """
        coords = d.get("coordinates")
        if coords is None:
            raise ValueError(f"polygon mapping has no coordinates: {d!r}")
        try:
            vertices = tuple(LngLat(float(c[0]), float(c[1])) for c in coords)
        except (IndexError, TypeError, ValueError) as exc:
            raise ValueError(f"not a polygon coordinate list: {d!r}") from exc
        return Polygon(vertices, d.get("name"))

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "coordinates": [[v.lng, v.lat] for v in self.vertices],
        }

    def edges(self) -> List[Tuple[LngLat, LngLat]]:
        n = len(self.vertices)
        return [(self.vertices[i], self.vertices[(i + 1) % n]) for i in range(n)]

    def is_crossed_by(self, a: LngLat, b: LngLat) -> bool:
        """True if the segment a->b strictly crosses any edge of the polygon."""
        return any(segments_cross_strictly(a, b, v1, v2) for v1, v2 in self.edges())

    def contains(self, p: LngLat, allow_boundary: bool = False) -> bool:
        """
        Ray-casting containment test with a ray from p heading east.

        - allow_boundary=False: a point on the boundary is inside. Edges are
          tested inclusively and the method returns True as soon as p is
          found on an edge.
        - allow_boundary=True: the boundary is not a crossing. Only strict
          crossings with the ray are counted, so sliding along an edge or
          through a vertex is not seen as entering the polygon.

        The point is inside if the ray crosses the edges an odd number of times.
        """
        ray_end = LngLat(RAY_LONGITUDE, p.lat)
        count = 0
        for v1, v2 in self.edges():
            if allow_boundary:
                if segments_cross_strictly(v1, v2, p, ray_end):
                    count += 1
            elif segments_intersect(v1, v2, p, ray_end):
                if orientation(v1, v2, p) == 0 and on_segment(v1, v2, p):
                    return True
                count += 1
        return count % 2 == 1


def crosses_any(a: LngLat, b: LngLat, polygons: Iterable[Polygon]) -> bool:
    return any(poly.is_crossed_by(a, b) for poly in polygons)
