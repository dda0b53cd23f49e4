# app/events.py
from dataclasses import dataclass

from pool_sim.domain.entities.geography import NodeId


# Motion outcomes, returned by Vehicle.advance
@dataclass
class StopServed:
    t: float
    vehicle_id: str
    node: NodeId
    remaining_stops: int


@dataclass
class PassengerDelivered:
    t: float
    vehicle_id: str
    request_id: int
    node: NodeId
    promised_arrival: float

    @property
    def lateness(self) -> float:
        return self.t - self.promised_arrival


# Dispatch outcomes
@dataclass(frozen=True)
class Assignment:
    accepted: bool
    vehicle_id: str | None = None
    cost: float | None = None


@dataclass(frozen=True)
class Resolution:
    request_id: int
    accepted: bool
    vehicle_id: str | None = None
    cost: float | None = None
