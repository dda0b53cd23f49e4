# pool_sim/app/controllers/fleet.py
from collections.abc import Mapping

from pool_sim.app.events import PassengerDelivered, StopServed
from pool_sim.domain.entities.geography import NodeId
from pool_sim.domain.entities.vehicle import (
    DEFAULT_ARRIVAL_THRESHOLD,
    DEFAULT_STEP,
    Vehicle,
    VehicleSnapshot,
)
from pool_sim.domain.network import SpatialGraph
from pool_sim.domain.state import WorldState
from pool_sim.sim.hooks import NoopHooks, SimHooks


def tick_motion(
    graph: SpatialGraph,
    fleet: Mapping[str, Vehicle],
    now: float,
    *,
    step: float = DEFAULT_STEP,
    arrival_threshold: float = DEFAULT_ARRIVAL_THRESHOLD,
) -> list:
    """Advance every vehicle by one motion step; returns the events they produced."""
    out: list = []
    for v in fleet.values():
        out.extend(v.advance(graph, now, step=step, arrival_threshold=arrival_threshold))
    return out


class FleetHandler:
    def __init__(
        self,
        world: WorldState,
        hooks: SimHooks | None = None,
        step: float = DEFAULT_STEP,
        arrival_threshold: float = DEFAULT_ARRIVAL_THRESHOLD,
    ):
        self.world = world
        self.hooks = hooks or NoopHooks()
        self.step = step
        self.arrival_threshold = arrival_threshold

    def add_vehicle(self, vehicle_id: str, start: NodeId, capacity: int | None = None) -> str:
        return self.world.create_vehicle(vehicle_id, start, capacity)

    def snapshot(self, vehicle_id: str) -> VehicleSnapshot:
        return self.world.get_vehicle_snapshot(vehicle_id)

    def snapshots(self) -> list[VehicleSnapshot]:
        return [v.snapshot() for v in self.world.vehicles.values()]

    def on_motion_tick(self, now: float) -> list:
        events = tick_motion(
            self.world.graph,
            self.world.vehicles,
            now,
            step=self.step,
            arrival_threshold=self.arrival_threshold,
        )
        for ev in events:
            if isinstance(ev, StopServed):
                self.hooks.stop_served(ev)
            elif isinstance(ev, PassengerDelivered):
                self.hooks.passenger_delivered(ev)
        return events
