# sim/hooks.py
from typing import Protocol

from pool_sim.app.events import PassengerDelivered, Resolution, StopServed
from pool_sim.domain.entities.request import Request


class SimHooks(Protocol):
    def run_start(self, *, ticks, vehicles, pending): ...
    def run_end(self, *, ticks, last_t, pending, wall_ms): ...
    def request_submitted(self, req: Request, *, now): ...
    def resolution_pass(self, *, now, attempted, accepted, ms): ...
    def request_assigned(self, req: Request, res: Resolution, *, now): ...
    def request_deferred(self, req: Request, *, now): ...
    def stop_served(self, ev: StopServed): ...
    def passenger_delivered(self, ev: PassengerDelivered): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def request_submitted(self, *_, **__):
        pass

    def resolution_pass(self, **_):
        pass

    def request_assigned(self, *_, **__):
        pass

    def request_deferred(self, *_, **__):
        pass

    def stop_served(self, *_, **__):
        pass

    def passenger_delivered(self, *_, **__):
        pass
