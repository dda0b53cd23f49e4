# domain/entities/vehicle.py
import logging
import math
from dataclasses import dataclass, field

from pool_sim.app.events import PassengerDelivered, StopServed
from pool_sim.domain.entities.geography import NodeId, Point
from pool_sim.domain.entities.motion import MotionPhase, MotionState, step_toward
from pool_sim.domain.entities.request import PassengerRecord, Request
from pool_sim.domain.network import SpatialGraph
from pool_sim.domain.timeline import compute_timeline
from pool_sim.policy.insertion import (
    Accepted,
    DelayTolerance,
    InsertionPlan,
    InsertionResult,
    Rejected,
    candidate_plans,
    find_reusable,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 15
DEFAULT_STEP = 5.0
DEFAULT_ARRIVAL_THRESHOLD = 5.0


@dataclass(frozen=True)
class VehicleSnapshot:
    id: str
    location: NodeId
    position: Point | None
    stops: tuple[NodeId, ...]
    passenger_count: int


@dataclass
class Vehicle:
    id: str
    location: NodeId
    capacity: int = DEFAULT_CAPACITY
    stops: list[NodeId] = field(default_factory=list)
    passengers: list[PassengerRecord] = field(default_factory=list)
    motion: MotionState = field(default_factory=MotionState)

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError(f"vehicle {self.id}: capacity must be positive, got {self.capacity}")

    @property
    def phase(self) -> MotionPhase:
        if self.motion.routing:
            return MotionPhase.ROUTING
        if self.stops and self.stops[0] == self.location:
            return MotionPhase.AT_STOP
        return MotionPhase.IDLE

    @property
    def is_full(self) -> bool:
        return len(self.passengers) >= self.capacity

    @property
    def is_idle(self) -> bool:
        return not self.stops and not self.passengers and not self.motion.routing

    def snapshot(self) -> VehicleSnapshot:
        return VehicleSnapshot(
            id=self.id,
            location=self.location,
            position=self.motion.position,
            stops=tuple(self.stops),
            passenger_count=len(self.passengers),
        )

    # ------------ insertion pricing --------------

    def evaluate_insertion(
        self,
        graph: SpatialGraph,
        request: Request,
        now: float,
        tolerance: DelayTolerance = DelayTolerance(),
    ) -> InsertionResult:
        if self.is_full:
            return Rejected("capacity")

        reuse = find_reusable(self.stops, request.origin, request.destination)
        if reuse is not None:
            return Accepted(plan=reuse, cost=0.0)

        best: InsertionPlan | None = None
        best_cost = math.inf
        for plan in candidate_plans(self.stops, request.origin, request.destination):
            timeline = compute_timeline(graph, self.location, plan.stops)
            cost = self._candidate_cost(timeline, request, now, tolerance)
            if cost is not None and cost < best_cost:
                best, best_cost = plan, cost

        if best is None:
            return Rejected("infeasible")
        return Accepted(plan=best, cost=best_cost)

    def _candidate_cost(
        self, timeline: dict, request: Request, now: float, tolerance: DelayTolerance
    ) -> float | None:
        """New rider ETA plus positive delays imposed on booked riders; None if infeasible."""
        penalty = 0.0
        for p in self.passengers:
            new_eta = timeline[p.destination]
            old_eta = p.promised_arrival - now
            if tolerance.violated(new_eta, old_eta):
                return None
            delay = new_eta - old_eta
            if delay > 0:
                penalty += delay
        return timeline[request.destination] + penalty

    def apply_insertion(
        self, graph: SpatialGraph, request: Request, plan: InsertionPlan, now: float
    ) -> PassengerRecord:
        # Existing promises are left alone; later insertions are checked against them as-is.
        if self.is_full:
            raise ValueError(f"vehicle {self.id} is at capacity ({self.capacity})")
        self.stops = list(plan.stops)
        timeline = compute_timeline(graph, self.location, self.stops)
        record = PassengerRecord(
            request_id=request.id,
            destination=request.destination,
            promised_arrival=now + timeline[request.destination],
        )
        self.passengers.append(record)
        return record

    # ------------ motion ------------------------

    def _serve_head(self, now: float) -> list:
        node = self.stops.pop(0)
        out: list = [
            StopServed(t=now, vehicle_id=self.id, node=node, remaining_stops=len(self.stops))
        ]
        staying = []
        for p in self.passengers:
            if p.destination == self.location:
                out.append(
                    PassengerDelivered(
                        t=now,
                        vehicle_id=self.id,
                        request_id=p.request_id,
                        node=self.location,
                        promised_arrival=p.promised_arrival,
                    )
                )
            else:
                staying.append(p)
        self.passengers = staying
        return out

    def advance(
        self,
        graph: SpatialGraph,
        now: float,
        step: float = DEFAULT_STEP,
        arrival_threshold: float = DEFAULT_ARRIVAL_THRESHOLD,
    ) -> list:
        """
        One discrete motion step. Returns StopServed / PassengerDelivered events.

        With no active route the head stop is served while the vehicle stands on
        it, then a fresh shortest path to the next head is laid out. With a route
        the vehicle either snaps onto its target waypoint (within the threshold)
        or moves `step` units toward it.
        """
        m = self.motion
        out: list = []
        if m.position is None:
            m.position = graph.position(self.location)

        if not m.routing and self.stops:
            while self.stops and self.stops[0] == self.location:
                out.extend(self._serve_head(now))
            if self.stops:
                route = graph.shortest_path(self.location, self.stops[0])
                if not route.reachable:
                    logger.warning(
                        "vehicle %s cannot reach stop %r from %r",
                        self.id,
                        self.stops[0],
                        self.location,
                    )
                    return out
                m.set_route(list(route.path[1:]))

        if m.routing:
            target_pt = graph.position(m.target)
            if m.position.distance_to(target_pt) <= arrival_threshold:
                m.position = target_pt
                self.location = m.pop_waypoint()
                if not m.routing and self.stops and self.stops[0] == self.location:
                    out.extend(self._serve_head(now))
            else:
                m.position = step_toward(m.position, target_pt, step)
        return out
