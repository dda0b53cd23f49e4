# pool_sim/io/business_events.py

from dataclasses import dataclass


# Base type for analytics events (never fed back into the simulation)
@dataclass
class BizEvent:
    run_id: str
    t: float  # simulation time (motion ticks)
    seq: int  # emission order within the run
    name: str  # stable event name


@dataclass
class RequestSubmittedBiz(BizEvent):
    request_id: int
    origin: str
    destination: str


@dataclass
class RequestAssignedBiz(BizEvent):
    request_id: int
    vehicle_id: str
    cost: float
    wait_ticks: float  # time spent in the pending pool


@dataclass
class RequestDeferredBiz(BizEvent):
    request_id: int


@dataclass
class StopServedBiz(BizEvent):
    vehicle_id: str
    node: str
    remaining_stops: int


@dataclass
class PassengerDeliveredBiz(BizEvent):
    request_id: int
    vehicle_id: str
    node: str
    promised_arrival: float
    lateness: float
