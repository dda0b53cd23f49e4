# pool_sim/domain/state.py
from dataclasses import dataclass, field

from pool_sim.domain.entities.geography import Edge, Node, NodeId, Point
from pool_sim.domain.entities.request import Request
from pool_sim.domain.entities.vehicle import DEFAULT_CAPACITY, Vehicle, VehicleSnapshot
from pool_sim.domain.errors import UnknownNodeError
from pool_sim.domain.network import SpatialGraph


@dataclass
class WorldState:
    """
    Everything the simulation mutates, in one place.

    The graph is built once and then only read. Vehicles are mutated by motion
    ticks and dispatch commits; the pending pool by submissions and
    resolution passes.
    """

    graph: SpatialGraph = field(default_factory=SpatialGraph)
    capacity: int = DEFAULT_CAPACITY
    vehicles: dict[str, Vehicle] = field(default_factory=dict)
    pending: list[Request] = field(default_factory=list)
    next_request_id: int = 0

    # ------------- network setup --------------

    def create_node(self, node_id: NodeId, point: Point | tuple[float, float]) -> Node:
        return self.graph.add_node(node_id, point)

    def create_edge(self, a: NodeId, b: NodeId, weight: float | None = None) -> Edge:
        return self.graph.add_edge(a, b, weight)

    # ------------- fleet ----------------------

    def create_vehicle(self, vehicle_id: str, start: NodeId, capacity: int | None = None) -> str:
        if start not in self.graph:
            raise UnknownNodeError(start)
        if vehicle_id in self.vehicles:
            raise ValueError(f"vehicle {vehicle_id!r} already exists")
        cap = self.capacity if capacity is None else capacity
        self.vehicles[vehicle_id] = Vehicle(id=vehicle_id, location=start, capacity=cap)
        return vehicle_id

    def get_vehicle_snapshot(self, vehicle_id: str) -> VehicleSnapshot:
        return self.vehicles[vehicle_id].snapshot()

    # ------------- demand ---------------------

    def submit_request(self, origin: NodeId, destination: NodeId, now: float) -> Request:
        for n in (origin, destination):
            if n not in self.graph:
                raise UnknownNodeError(n)
        req = Request(
            id=self.next_request_id, origin=origin, destination=destination, created_at=now
        )
        self.next_request_id += 1
        self.pending.append(req)
        return req

    def get_pending_requests(self) -> tuple[Request, ...]:
        return tuple(self.pending)

    @property
    def is_quiescent(self) -> bool:
        """No pending demand and every vehicle empty with nothing queued."""
        return not self.pending and all(v.is_idle for v in self.vehicles.values())
