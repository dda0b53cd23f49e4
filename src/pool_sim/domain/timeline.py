# pool_sim/domain/timeline.py
from collections.abc import Iterable

from pool_sim.domain.entities.geography import NodeId
from pool_sim.domain.network import SpatialGraph


def compute_timeline(
    graph: SpatialGraph, start: NodeId, stops: Iterable[NodeId]
) -> dict[NodeId, float]:
    """
    Cumulative arrival time at each stop when visiting `stops` in order from `start`.

    A node that appears more than once keeps the value from its last visit.
    An unreachable leg adds inf, which carries through every later stop.
    """
    timeline: dict[NodeId, float] = {}
    total = 0.0
    current = start
    for stop in stops:
        total += graph.shortest_path(current, stop).cost
        timeline[stop] = total
        current = stop
    return timeline
