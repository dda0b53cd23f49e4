# pool_sim/domain/network.py
import heapq
import math
from collections.abc import Iterable, Iterator

from pool_sim.domain.entities.geography import Edge, Node, NodeId, Point, Route
from pool_sim.domain.errors import DuplicateNodeError, UnknownNodeError


class SpatialGraph:
    """
    Undirected weighted graph over labelled 2D nodes.

    Every edge is stored twice (once per endpoint) so both directions carry
    the same weight. Parallel edges are kept as-is; shortest_path picks the
    cheapest one through ordinary relaxation.
    """

    def __init__(self):
        self._points: dict[NodeId, Point] = {}
        self._adj: dict[NodeId, list[tuple[NodeId, float]]] = {}
        self._edges: list[Edge] = []

    # ------------- construction ---------------------

    def add_node(self, node_id: NodeId, point: Point | tuple[float, float]) -> Node:
        if node_id in self._points:
            raise DuplicateNodeError(node_id)
        p = point if isinstance(point, Point) else Point(float(point[0]), float(point[1]))
        self._points[node_id] = p
        self._adj[node_id] = []
        return Node(node_id, p)

    def add_edge(self, a: NodeId, b: NodeId, weight: float | None = None) -> Edge:
        self._require(a)
        self._require(b)
        w = self.distance(a, b) if weight is None else float(weight)
        edge = Edge(a, b, w)
        self._adj[a].append((b, w))
        self._adj[b].append((a, w))
        self._edges.append(edge)
        return edge

    # ------------- lookups --------------------------

    def _require(self, node_id: NodeId) -> None:
        if node_id not in self._points:
            raise UnknownNodeError(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._points

    def __len__(self) -> int:
        return len(self._points)

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._points

    def nodes(self) -> Iterator[Node]:
        for nid, p in self._points.items():
            yield Node(nid, p)

    def node_ids(self) -> list[NodeId]:
        return list(self._points)

    def edges(self) -> Iterable[Edge]:
        return tuple(self._edges)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def position(self, node_id: NodeId) -> Point:
        self._require(node_id)
        return self._points[node_id]

    def neighbors(self, node_id: NodeId) -> list[tuple[NodeId, float]]:
        self._require(node_id)
        return list(self._adj[node_id])

    def edge_weight(self, a: NodeId, b: NodeId) -> float:
        """Cheapest direct edge between a and b (inf when not adjacent)."""
        self._require(b)
        return min((w for n, w in self.neighbors(a) if n == b), default=math.inf)

    def distance(self, a: NodeId, b: NodeId) -> float:
        """Straight-line distance; seeds edge weights, never a path-length shortcut."""
        return self.position(a).distance_to(self.position(b))

    # ------------- routing --------------------------

    def shortest_path(self, start: NodeId, end: NodeId) -> Route:
        self._require(start)
        self._require(end)
        if start == end:
            return Route(path=(start,), cost=0.0)

        dist: dict[NodeId, float] = {start: 0.0}
        prev: dict[NodeId, NodeId] = {}
        done: set[NodeId] = set()
        # (distance, push order, node); equal distances pop in push order
        seq = 0
        heap: list[tuple[float, int, NodeId]] = [(0.0, seq, start)]

        while heap:
            d, _, u = heapq.heappop(heap)
            if u in done:
                continue
            done.add(u)
            if u == end:
                break
            for v, w in self._adj[u]:
                if v in done:
                    continue
                alt = d + w
                if alt < dist.get(v, math.inf):
                    dist[v] = alt
                    prev[v] = u
                    seq += 1
                    heapq.heappush(heap, (alt, seq, v))

        if end not in done:
            return Route.unreachable()

        path = [end]
        while path[-1] != start:
            path.append(prev[path[-1]])
        path.reverse()
        return Route(path=tuple(path), cost=dist[end])
