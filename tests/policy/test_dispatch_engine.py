# tests/policy/test_dispatch_engine.py
import numpy as np
import pytest

from pool_sim.domain.entities.request import PassengerRecord, Request
from pool_sim.domain.entities.vehicle import Vehicle
from pool_sim.domain.mechanics.mechanics_geospace import RandomCompleteNetwork
from pool_sim.domain.mechanics.mechanics_od_samplers import UniformNodeODSampler
from pool_sim.domain.network import SpatialGraph
from pool_sim.policy.insertion import DelayTolerance
from pool_sim.policy.matching import DispatchEngine


@pytest.fixture
def line() -> SpatialGraph:
    # A --10-- B --10-- C --10-- D
    g = SpatialGraph()
    for i, nid in enumerate("ABCD"):
        g.add_node(nid, (10.0 * i, 0.0))
    for a, b in ["AB", "BC", "CD"]:
        g.add_edge(a, b)
    return g


def req(origin, dest, rid=0, t=0.0) -> Request:
    return Request(id=rid, origin=origin, destination=dest, created_at=t)


def test_cheapest_vehicle_wins(line):
    far = Vehicle(id="far", location="A")
    near = Vehicle(id="near", location="C")
    fleet = {"far": far, "near": near}
    a = DispatchEngine().assign(line, fleet, req("C", "D"), now=0.0)
    assert a.accepted and a.vehicle_id == "near"
    assert a.cost == pytest.approx(10.0)
    assert near.stops == ["C", "D"]
    assert far.stops == [] and far.passengers == []


def test_equal_costs_go_to_first_vehicle(line):
    fleet = {"v1": Vehicle(id="v1", location="B"), "v2": Vehicle(id="v2", location="B")}
    a = DispatchEngine().assign(line, fleet, req("B", "C"), now=0.0)
    assert a.vehicle_id == "v1"
    assert fleet["v2"].stops == []


def test_fleet_may_be_a_plain_iterable(line):
    vs = [Vehicle(id="x", location="D"), Vehicle(id="y", location="A")]
    a = DispatchEngine().assign(line, vs, req("A", "B"), now=0.0)
    assert a.vehicle_id == "y"


def test_rejection_when_every_vehicle_refuses(line):
    v = Vehicle(id="v", location="A", capacity=1)
    v.passengers.append(PassengerRecord(request_id=9, destination="D", promised_arrival=30.0))
    v.stops = ["D"]
    a = DispatchEngine().assign(line, {"v": v}, req("B", "C"), now=0.0)
    assert not a.accepted
    assert a.vehicle_id is None and a.cost is None
    assert v.stops == ["D"]
    assert len(v.passengers) == 1


def test_empty_fleet_rejects(line):
    assert not DispatchEngine().assign(line, {}, req("A", "B"), now=0.0).accepted


def test_resolve_pending_runs_in_order_and_keeps_rejects(line):
    v = Vehicle(id="v", location="A", capacity=1)
    pending = [req("A", "B", rid=0), req("C", "D", rid=1), req("B", "D", rid=2)]
    results = DispatchEngine().resolve_pending(line, {"v": v}, pending, now=0.0)
    assert [(r.request_id, r.accepted) for r in results] == [(0, True), (1, False), (2, False)]
    assert results[0].vehicle_id == "v"
    assert [r.id for r in pending] == [1, 2]


def test_resolve_pending_empty_pool_is_a_noop(line):
    pending: list[Request] = []
    assert DispatchEngine().resolve_pending(line, {}, pending, now=0.0) == []
    assert pending == []


def test_engine_tolerance_is_passed_through(line):
    def loaded():
        v = Vehicle(id="v", location="B", stops=["D"])
        v.passengers.append(PassengerRecord(request_id=1, destination="D", promised_arrival=20.0))
        return v

    # dropping at A first doubles the D rider's trip: cheapest, but only within a loose tolerance
    strict, relaxed = loaded(), loaded()
    a = DispatchEngine().assign(line, {"v": strict}, req("B", "A"), now=0.0)
    b = DispatchEngine(tolerance=DelayTolerance(ratio=10.0, absolute=100.0)).assign(
        line, {"v": relaxed}, req("B", "A"), now=0.0
    )
    assert strict.stops == ["B", "D", "A"] and a.cost == pytest.approx(50.0)
    assert relaxed.stops == ["B", "A", "D"] and b.cost == pytest.approx(30.0)


def test_capacity_and_stop_invariants_under_random_load():
    rng = np.random.default_rng(42)
    g = RandomCompleteNetwork(n_nodes=15, bounds=(0, 0, 800, 600), padding=100, rng=rng).build()
    sampler = UniformNodeODSampler(nodes=g.node_ids(), rng=rng)
    fleet = {f"bus{i}": Vehicle(id=f"bus{i}", location="A", capacity=3) for i in range(3)}
    engine = DispatchEngine()
    pending = [req(*sampler.sample(), rid=i) for i in range(40)]
    results = engine.resolve_pending(g, fleet, pending, now=0.0)

    accepted = [r for r in results if r.accepted]
    assert accepted
    assert len(accepted) + len(pending) == 40
    assert sum(len(v.passengers) for v in fleet.values()) == len(accepted)
    for v in fleet.values():
        assert len(v.passengers) <= v.capacity
        for p in v.passengers:
            assert p.destination in v.stops
