# io/sim_logging.py
import json
import logging
import sys

from pool_sim.app.events import PassengerDelivered, Resolution, StopServed
from pool_sim.domain.entities.request import Request
from pool_sim.io.business_events import (
    PassengerDeliveredBiz,
    RequestAssignedBiz,
    RequestDeferredBiz,
    RequestSubmittedBiz,
    StopServedBiz,
)
from pool_sim.io.recorder import Recorder
from pool_sim.sim.clock import SimClock
from pool_sim.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="pool_sim", level="INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class SimLogging(NoopHooks):
    """
    Shapes and emits structured logs for the driver loop and dispatch/motion
    outcomes, and forwards the business subset to a Recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        clock: SimClock | None = None,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.clock, self.debug = run_id, clock, debug
        self.recorder = recorder
        self.log = logger or default_json_logger(level=level)
        self._seq = 0
        self._deferred: set[int] = set()  # requests already recorded as deferred

    # --------------- helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        if self.clock is not None and extra.get("t") is not None:
            payload["wall"] = self.clock.to_wall(extra["t"]).isoformat()
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _biz(self, cls, t: float, **fields):
        self._seq += 1
        if self.recorder:
            name = cls.__name__.removesuffix("Biz")
            self.recorder.emit(cls(run_id=self.run_id, t=t, seq=self._seq, name=name, **fields))

    # --------------- driver lifecycle -------------------

    def run_start(self, *, ticks, vehicles, pending):
        self._emit("INFO", "run_start", ticks=ticks, vehicles=vehicles, pending=pending)

    def run_end(self, *, ticks, last_t, pending, wall_ms):
        self._emit(
            "INFO", "run_end", ticks=ticks, t=last_t, pending=pending, wall_ms=round(wall_ms, 3)
        )

    # --------------- demand / dispatch ------------------

    def request_submitted(self, req: Request, *, now):
        self._emit(
            "INFO",
            "request_submitted",
            t=now,
            request_id=req.id,
            origin=req.origin,
            destination=req.destination,
        )
        self._biz(
            RequestSubmittedBiz,
            now,
            request_id=req.id,
            origin=str(req.origin),
            destination=str(req.destination),
        )

    def resolution_pass(self, *, now, attempted, accepted, ms):
        if attempted:
            self._emit(
                "INFO",
                "resolution_pass",
                t=now,
                attempted=attempted,
                accepted=accepted,
                deferred=attempted - accepted,
                ms=round(ms, 3),
            )

    def request_assigned(self, req: Request, res: Resolution, *, now):
        self._deferred.discard(req.id)
        self._emit(
            "INFO",
            "request_assigned",
            t=now,
            request_id=req.id,
            vehicle_id=res.vehicle_id,
            cost=res.cost,
        )
        self._biz(
            RequestAssignedBiz,
            now,
            request_id=req.id,
            vehicle_id=res.vehicle_id,
            cost=res.cost,
            wait_ticks=now - req.created_at,
        )

    def request_deferred(self, req: Request, *, now):
        if self.debug:
            self._emit("DEBUG", "request_deferred", t=now, request_id=req.id)
        if req.id not in self._deferred:
            self._deferred.add(req.id)
            self._biz(RequestDeferredBiz, now, request_id=req.id)

    # --------------- motion -----------------------------

    def stop_served(self, ev: StopServed):
        if self.debug:
            self._emit(
                "DEBUG",
                "stop_served",
                t=ev.t,
                vehicle_id=ev.vehicle_id,
                node=ev.node,
                remaining_stops=ev.remaining_stops,
            )
        self._biz(
            StopServedBiz,
            ev.t,
            vehicle_id=ev.vehicle_id,
            node=str(ev.node),
            remaining_stops=ev.remaining_stops,
        )

    def passenger_delivered(self, ev: PassengerDelivered):
        self._emit(
            "INFO",
            "passenger_delivered",
            t=ev.t,
            request_id=ev.request_id,
            vehicle_id=ev.vehicle_id,
            node=ev.node,
            lateness=ev.lateness,
        )
        self._biz(
            PassengerDeliveredBiz,
            ev.t,
            request_id=ev.request_id,
            vehicle_id=ev.vehicle_id,
            node=str(ev.node),
            promised_arrival=ev.promised_arrival,
            lateness=ev.lateness,
        )
