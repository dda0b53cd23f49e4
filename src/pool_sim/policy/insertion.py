# pool_sim/policy/insertion.py
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Literal

from pool_sim.domain.entities.geography import NodeId


@dataclass(frozen=True)
class DelayTolerance:
    """
    How much an existing passenger may be delayed by a new insertion.

    A candidate violates a passenger only when BOTH thresholds are exceeded:
    the relative slowdown new/old and the absolute extra time new - old.
    """

    ratio: float = 1.3
    absolute: float = 10.0

    def violated(self, new_eta: float, old_eta: float) -> bool:
        delay = new_eta - old_eta
        # an overdue (or due-now) passenger has no meaningful ratio; treat it as exceeded
        ratio = new_eta / old_eta if old_eta > 0 else math.inf
        return ratio > self.ratio and delay > self.absolute


@dataclass(frozen=True)
class InsertionPlan:
    stops: tuple[NodeId, ...]
    pickup_index: int
    dropoff_index: int
    reused: bool = False  # both stops already present, queue unchanged


@dataclass(frozen=True)
class Accepted:
    plan: InsertionPlan
    cost: float
    accepted: Literal[True] = True


@dataclass(frozen=True)
class Rejected:
    reason: Literal["capacity", "infeasible"]
    accepted: Literal[False] = False


InsertionResult = Accepted | Rejected


def find_reusable(
    stops: Sequence[NodeId], origin: NodeId, destination: NodeId
) -> InsertionPlan | None:
    """Existing pickup followed later by an existing dropoff, or None."""
    try:
        i = stops.index(origin)
        j = stops.index(destination, i + 1)
    except ValueError:
        return None
    return InsertionPlan(stops=tuple(stops), pickup_index=i, dropoff_index=j, reused=True)


def candidate_plans(
    stops: Sequence[NodeId], origin: NodeId, destination: NodeId
) -> Iterator[InsertionPlan]:
    """
    Every (pickup at i, dropoff at j) splice with 0 <= i <= n and i < j <= n + 1.

    j indexes the list after the pickup has been inserted, so the dropoff
    always lands after the pickup.
    """
    n = len(stops)
    for i in range(n + 1):
        for j in range(i + 1, n + 2):
            cand = list(stops)
            cand.insert(i, origin)
            cand.insert(j, destination)
            yield InsertionPlan(stops=tuple(cand), pickup_index=i, dropoff_index=j)
