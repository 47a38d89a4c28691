# src/delivery_drone_planner/plotting.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as PolygonPatch

from delivery_drone_planner.delivery_run import RunResult
from delivery_drone_planner.flight_simulator import Move
from delivery_drone_planner.polygon import Polygon
from delivery_drone_planner.visibility_graph import VisibilityGraph


@dataclass
class PlotStyle:
    zone_face: str = "tab:red"
    zone_alpha: float = 0.3
    edge_color: str = "tab:gray"
    edge_alpha: float = 0.3
    edge_width: float = 0.5
    path_color: str = "C0"
    path_width: float = 1.5
    hover_color: str = "tab:green"
    hover_marker: str = "o"
    depot_color: str = "k"
    depot_marker: str = "s"


def finalize_axes(ax, title: Optional[str] = None, equal: bool = True, grid: bool = True):
    if title:
        ax.set_title(title)
    if equal:
        ax.set_aspect("equal", adjustable="datalim")
    if grid:
        ax.grid(True, alpha=0.3)
    ax.set_xlabel("longitude")
    ax.set_ylabel("latitude")


def plot_no_fly_zones(ax, zones: Sequence[Polygon], style: Optional[PlotStyle] = None):
    if style is None:
        style = PlotStyle()
    for zone in zones:
        xy = [(v.lng, v.lat) for v in zone.vertices]
        ax.add_patch(PolygonPatch(xy, closed=True, facecolor=style.zone_face, alpha=style.zone_alpha))
        if zone.name:
            cx = sum(x for x, _ in xy) / len(xy)
            cy = sum(y for _, y in xy) / len(xy)
            ax.annotate(zone.name, (cx, cy), ha="center", fontsize=7)
    ax.autoscale_view()
    return ax


def plot_visibility_graph(ax, graph: VisibilityGraph, style: Optional[PlotStyle] = None):
    if style is None:
        style = PlotStyle()
    for out in graph.edges.values():
        for e in out:
            a, b = graph.nodes[e.start], graph.nodes[e.end]
            ax.plot([a.lng, b.lng], [a.lat, b.lat], color=style.edge_color,
                    alpha=style.edge_alpha, lw=style.edge_width)
    ax.scatter([p.lng for p in graph.nodes], [p.lat for p in graph.nodes], s=8, c=style.edge_color)
    return ax


def plot_flight_path(ax, moves: Sequence[Move], style: Optional[PlotStyle] = None, label: Optional[str] = None):
    """Draw a flight log as a polyline; hover moves are marked."""
    if style is None:
        style = PlotStyle()
    if not moves:
        return ax
    pts = [m.position for m in moves] + [moves[-1].next_position()]
    ax.plot([p.lng for p in pts], [p.lat for p in pts], color=style.path_color,
            lw=style.path_width, label=label)
    hovers = [m.position for m in moves if m.is_hover]
    if hovers:
        ax.scatter([p.lng for p in hovers], [p.lat for p in hovers],
                   c=style.hover_color, marker=style.hover_marker, s=20, zorder=3)
    return ax


def plot_run(result: RunResult, zones: Sequence[Polygon], ax=None, style: Optional[PlotStyle] = None,
             title: Optional[str] = None):
    """Zones, depot and the whole flight log of a delivery run."""
    if style is None:
        style = PlotStyle()
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 6))
    plot_no_fly_zones(ax, zones, style)
    plot_flight_path(ax, result.moves, style)
    depot = result.drone.position
    ax.scatter([depot.lng], [depot.lat], c=style.depot_color, marker=style.depot_marker, s=60, zorder=4)
    n = len(result.delivered())
    finalize_axes(ax, title or f"{n} of {len(result.results)} orders delivered")
    return ax
