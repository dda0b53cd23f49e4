from collections.abc import Iterable
from itertools import combinations
from string import ascii_uppercase

from pool_sim.domain.entities.geography import Point
from pool_sim.domain.network import SpatialGraph


def node_labels(n: int) -> list[str]:
    """A..Z, then AA, AB, ... like spreadsheet columns."""
    out = []
    for i in range(n):
        label, k = "", i + 1
        while k:
            k, r = divmod(k - 1, 26)
            label = ascii_uppercase[r] + label
        out.append(label)
    return out


class RandomCompleteNetwork:
    """
    n nodes uniformly placed in a padded rectangle, every pair joined by an
    edge weighted with its straight-line distance.
    """

    def __init__(
        self,
        *,
        n_nodes: int,
        bounds: tuple[float, float, float, float],
        padding: float = 0.0,
        rng,
    ):
        x0, y0, x1, y1 = bounds
        if x1 - x0 <= 2 * padding or y1 - y0 <= 2 * padding:
            raise ValueError(f"padding {padding} leaves no room inside bounds {bounds}")
        self.n_nodes, self.rng = n_nodes, rng
        self.rect = (x0 + padding, y0 + padding, x1 - padding, y1 - padding)

    def _uniform(self) -> Point:
        x0, y0, x1, y1 = self.rect
        return Point(float(self.rng.uniform(x0, x1)), float(self.rng.uniform(y0, y1)))

    def build(self) -> SpatialGraph:
        g = SpatialGraph()
        labels = node_labels(self.n_nodes)
        for label in labels:
            g.add_node(label, self._uniform())
        for a, b in combinations(labels, 2):
            g.add_edge(a, b)
        return g


class ExplicitNetwork:
    """Nodes and edges given verbatim; missing edge weights default to distance."""

    def __init__(
        self,
        *,
        nodes: dict[str, tuple[float, float]],
        edges: Iterable[tuple[str, str] | tuple[str, str, float]],
    ):
        self.nodes, self.edges = dict(nodes), list(edges)

    def build(self) -> SpatialGraph:
        g = SpatialGraph()
        for label, (x, y) in self.nodes.items():
            g.add_node(label, Point(float(x), float(y)))
        for e in self.edges:
            a, b, *w = e
            g.add_edge(a, b, w[0] if w else None)
        return g
