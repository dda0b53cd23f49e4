# domain/entities/request.py
from dataclasses import dataclass

from pool_sim.domain.entities.geography import NodeId


@dataclass(frozen=True)
class Request:
    id: int
    origin: NodeId
    destination: NodeId
    created_at: float

    def __post_init__(self):
        if self.origin == self.destination:
            raise ValueError(f"request {self.id}: origin and destination are both {self.origin!r}")


@dataclass(frozen=True)
class PassengerRecord:
    request_id: int
    destination: NodeId
    promised_arrival: float  # absolute sim time promised at acceptance
