# tests/io/test_logging_and_recorder.py
import io
import itertools
import json
import logging

from pool_sim.app.build import build
from pool_sim.app.events import PassengerDelivered, Resolution, StopServed
from pool_sim.domain.entities.request import Request
from pool_sim.io.business_events import RequestDeferredBiz, StopServedBiz
from pool_sim.io.recorder import JsonlSink, MemorySink, Recorder
from pool_sim.io.sim_logging import SimLogging, _JsonFormatter
from pool_sim.sim.clock import SimClock

_names = itertools.count()


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def make_logging(debug=False):
    logger = logging.getLogger(f"pool_sim.test.{next(_names)}")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    handler = ListHandler()
    logger.addHandler(handler)
    sink = MemorySink()
    hooks = SimLogging(
        run_id="r-1",
        clock=SimClock.utc_epoch(2025, 1, 1),
        debug=debug,
        logger=logger,
        recorder=Recorder(sink),
    )
    return hooks, handler, sink


def test_json_formatter_merges_extra_payload():
    rec = logging.LogRecord("pool_sim", logging.INFO, __file__, 1, "hello", None, None)
    rec.extra = {"run_id": "r", "t": 3.0}
    out = json.loads(_JsonFormatter().format(rec))
    assert out == {"level": "INFO", "msg": "hello", "logger": "pool_sim", "run_id": "r", "t": 3.0}


def test_assignment_is_logged_and_recorded():
    hooks, handler, sink = make_logging()
    req = Request(id=4, origin="A", destination="C", created_at=2.0)
    hooks.request_submitted(req, now=2.0)
    hooks.request_assigned(req, Resolution(4, True, "bus0", 17.5), now=5.0)

    msgs = [r.getMessage() for r in handler.records]
    assert msgs == ["request_submitted", "request_assigned"]
    extra = handler.records[1].extra
    assert extra["run_id"] == "r-1"
    assert extra["vehicle_id"] == "bus0"
    assert extra["wall"] == "2025-01-01T00:00:05+00:00"

    assert [e.name for e in sink.events] == ["RequestSubmitted", "RequestAssigned"]
    assigned = sink.named("RequestAssigned")[0]
    assert assigned.seq == 2
    assert assigned.wait_ticks == 3.0
    assert assigned.cost == 17.5


def test_debug_only_messages_still_record_business_events():
    hooks, handler, sink = make_logging(debug=False)
    req = Request(id=1, origin="A", destination="B", created_at=0.0)
    hooks.request_deferred(req, now=1.0)
    hooks.stop_served(StopServed(t=1.0, vehicle_id="bus0", node="A", remaining_stops=1))
    hooks.resolution_pass(now=1.0, attempted=0, accepted=0, ms=0.1)
    assert handler.records == []
    assert [type(e) for e in sink.events] == [RequestDeferredBiz, StopServedBiz]

    hooks, handler, _ = make_logging(debug=True)
    hooks.request_deferred(req, now=1.0)
    assert handler.records[0].levelno == logging.DEBUG


def test_deferral_is_recorded_once_per_request():
    hooks, _, sink = make_logging()
    a = Request(id=1, origin="A", destination="B", created_at=0.0)
    b = Request(id=2, origin="B", destination="A", created_at=0.0)
    for t in range(5):
        hooks.request_deferred(a, now=float(t))
        hooks.request_deferred(b, now=float(t))
    hooks.request_assigned(a, Resolution(1, True, "bus0", 3.0), now=5.0)
    recorded = [(e.request_id, e.t) for e in sink.named("RequestDeferred")]
    assert recorded == [(1, 0.0), (2, 0.0)]
    assert len(sink.named("RequestAssigned")) == 1


def test_delivery_reports_lateness():
    hooks, handler, sink = make_logging()
    hooks.passenger_delivered(
        PassengerDelivered(
            t=30.0, vehicle_id="bus1", request_id=2, node="C", promised_arrival=26.0
        )
    )
    assert handler.records[0].extra["lateness"] == 4.0
    assert sink.named("PassengerDelivered")[0].lateness == 4.0


def test_jsonl_sink_writes_one_line_per_event():
    buf = io.StringIO()
    rec = Recorder(JsonlSink(buf))
    rec.emit(
        StopServedBiz(
            run_id="r", t=1.0, seq=1, name="StopServed", vehicle_id="v", node="A", remaining_stops=0
        )
    )
    line = json.loads(buf.getvalue().strip())
    assert line["name"] == "StopServed"
    assert line["vehicle_id"] == "v"


def test_broken_sink_does_not_stop_the_others(caplog):
    class Broken:
        def write(self, ev):
            raise OSError("disk full")

    good = MemorySink()
    rec = Recorder(Broken(), good)
    ev = RequestDeferredBiz(run_id="r", t=0.0, seq=1, name="RequestDeferred", request_id=0)
    with caplog.at_level(logging.ERROR):
        rec.emit(ev)
    assert good.events == [ev]
    assert "sink Broken failed" in caplog.text


def test_built_app_records_a_full_trip():
    sink = MemorySink()
    cfg = {
        "name": "line",
        "network": {
            "kind": "explicit",
            "nodes": {"A": [0, 0], "B": [10, 0]},
            "edges": [["A", "B"]],
        },
        "fleet": {"size": 1, "start_nodes": ["A"]},
        "dispatch": {"resolution_interval_ms": 0},
    }
    app = build(cfg, use_logging=False)
    hooks = SimLogging(
        run_id="trip", logger=logging.getLogger("pool_sim.test.trip"), recorder=Recorder(sink)
    )
    app.fleet.hooks = app.demand.hooks = app.driver.hooks = hooks

    app.demand.submit_request("A", "B", now=0.0)
    app.driver.run_until_idle(max_ticks=20)
    assert [e.name for e in sink.events] == [
        "RequestSubmitted",
        "RequestAssigned",
        "StopServed",
        "StopServed",
        "PassengerDelivered",
    ]
    assert [e.seq for e in sink.events] == [1, 2, 3, 4, 5]
    assert all(e.run_id == "trip" for e in sink.events)
