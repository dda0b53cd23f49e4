# pool_sim/policy/matching.py
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from pool_sim.app.events import Assignment, Resolution
from pool_sim.domain.entities.request import Request
from pool_sim.domain.entities.vehicle import Vehicle
from pool_sim.domain.network import SpatialGraph
from pool_sim.policy.insertion import Accepted, DelayTolerance

Fleet = Mapping[str, Vehicle] | Iterable[Vehicle]


def _vehicles(fleet: Fleet) -> Iterable[Vehicle]:
    return fleet.values() if isinstance(fleet, Mapping) else fleet


@dataclass
class DispatchEngine:
    """
    Greedy cheapest-insertion matching across the fleet.

    Each request is priced against every vehicle and committed to the
    cheapest accepting one. Equal costs go to the vehicle seen first.
    Requests are handled one at a time; an earlier commit changes the
    prices seen by later requests in the same pass.
    """

    tolerance: DelayTolerance = field(default_factory=DelayTolerance)

    def assign(
        self, graph: SpatialGraph, fleet: Fleet, request: Request, now: float
    ) -> Assignment:
        best_vehicle: Vehicle | None = None
        best_bid: Accepted | None = None
        best_cost = math.inf
        for v in _vehicles(fleet):
            bid = v.evaluate_insertion(graph, request, now, self.tolerance)
            if bid.accepted and bid.cost < best_cost:
                best_vehicle, best_bid, best_cost = v, bid, bid.cost

        if best_vehicle is None:
            return Assignment(accepted=False)
        best_vehicle.apply_insertion(graph, request, best_bid.plan, now)
        return Assignment(accepted=True, vehicle_id=best_vehicle.id, cost=best_cost)

    def resolve_pending(
        self, graph: SpatialGraph, fleet: Fleet, pending: list[Request], now: float
    ) -> list[Resolution]:
        """Try each pending request once, in order; accepted ones are removed from `pending`."""
        results: list[Resolution] = []
        still_pending: list[Request] = []
        for req in pending:
            a = self.assign(graph, fleet, req, now)
            results.append(Resolution(req.id, a.accepted, a.vehicle_id, a.cost))
            if not a.accepted:
                still_pending.append(req)
        pending[:] = still_pending
        return results
