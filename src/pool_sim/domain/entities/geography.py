import math
from collections.abc import Hashable
from dataclasses import dataclass

NodeId = Hashable


# Core geometry types used by the network and the motion model
@dataclass(frozen=True)
class Point:
    x: float  # abstract spatial units
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Node:
    id: NodeId
    point: Point


@dataclass(frozen=True)
class Edge:
    a: NodeId
    b: NodeId
    weight: float

    def __post_init__(self):
        if not math.isfinite(self.weight) or self.weight < 0:
            raise ValueError(f"edge {self.a!r}-{self.b!r} weight must be finite and >= 0")


@dataclass(frozen=True)
class Route:
    """Result of a shortest-path query. Unreachable => empty path, infinite cost."""

    path: tuple[NodeId, ...]
    cost: float

    @property
    def reachable(self) -> bool:
        return math.isfinite(self.cost)

    @classmethod
    def unreachable(cls) -> "Route":
        return cls(path=(), cost=math.inf)
