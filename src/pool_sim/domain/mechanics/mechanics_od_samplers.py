import numpy as np

from pool_sim.domain.entities.geography import NodeId


class UniformNodeODSampler:
    """
    Draws (origin, destination) node pairs with origin != destination.

    Optional per-node weights bias both ends; the destination is redrawn
    until it differs from the origin.
    """

    def __init__(self, *, nodes: list[NodeId], weights: dict[NodeId, float] | None = None, rng):
        if len(nodes) < 2:
            raise ValueError("need at least two nodes to sample requests")
        self.nodes = list(nodes)
        self.rng = rng
        self._p = None if weights is None else self._normalize_weights(weights, self.nodes)

    @staticmethod
    def _normalize_weights(weights: dict[NodeId, float], nodes: list[NodeId]):
        unknown = set(weights) - set(nodes)
        if unknown:
            raise ValueError(f"weights given for unknown nodes: {sorted(map(str, unknown))}")
        w = np.asarray([float(weights.get(n, 0.0)) for n in nodes], dtype=float)
        if not np.isfinite(w).all() or (w < 0).any():
            raise ValueError("node weights must be finite and >= 0")
        if np.count_nonzero(w) < 2:
            raise ValueError("node weights must give at least two nodes positive mass")
        return w / w.sum()

    def _pick(self) -> NodeId:
        idx = self.rng.choice(len(self.nodes), p=self._p)
        return self.nodes[int(idx)]

    def sample_origin(self) -> NodeId:
        return self._pick()

    def sample_destination(self, origin: NodeId) -> NodeId:
        dest = self._pick()
        while dest == origin:
            dest = self._pick()
        return dest

    def sample(self) -> tuple[NodeId, NodeId]:
        origin = self.sample_origin()
        return origin, self.sample_destination(origin)

    def sample_count(self, rate: float) -> int:
        """Number of requests arriving in one tick at the given Poisson rate."""
        return int(self.rng.poisson(rate)) if rate > 0 else 0
