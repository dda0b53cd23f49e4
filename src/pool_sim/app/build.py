# pool_sim/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from pool_sim.app.controllers.demand import DemandHandler
from pool_sim.app.controllers.fleet import FleetHandler
from pool_sim.config.models import ScenarioModel
from pool_sim.domain.mechanics.mechanics_od_samplers import UniformNodeODSampler
from pool_sim.domain.state import WorldState
from pool_sim.io.recorder import JsonlSink, Recorder
from pool_sim.io.sim_logging import SimLogging
from pool_sim.policy.insertion import DelayTolerance
from pool_sim.policy.matching import DispatchEngine
from pool_sim.runtime.registries import make_demand, make_network
from pool_sim.sim.clock import ResolutionThrottle, SimClock
from pool_sim.sim.driver import SimulationDriver
from pool_sim.sim.hooks import NoopHooks, SimHooks
from pool_sim.sim.rng import RNGRegistry


@dataclass
class App:
    clock: SimClock
    rng: RNGRegistry
    world: WorldState
    engine: DispatchEngine
    fleet: FleetHandler
    demand: DemandHandler
    sampler: UniformNodeODSampler
    driver: SimulationDriver
    hooks: SimHooks


def build(
    cfg: ScenarioModel | Mapping,
    *,
    use_logging: bool = True,
    hooks: SimHooks | None = None,
    wall_ms=None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Clock & RNG
    clock = SimClock.utc_epoch(*model.sim.epoch, tick_s=model.sim.tick_s)
    rng_registry = RNGRegistry(model.sim.seed, scenario=model.name)

    # 2) Hooks (structured logs + business events)
    if hooks is None:
        if use_logging:
            recorder = Recorder(JsonlSink()) if model.log.record else None
            hooks = SimLogging(
                run_id=model.run_id,
                clock=clock,
                level=model.log.level,
                debug=model.log.debug,
                recorder=recorder,
            )
        else:
            hooks = NoopHooks()

    # 3) World: network + fleet
    graph = make_network(model.network, rng=rng_registry.stream("network"))
    world = WorldState(graph=graph, capacity=model.fleet.capacity)
    fleet = FleetHandler(
        world,
        hooks=hooks,
        step=model.motion.step,
        arrival_threshold=model.motion.arrival_threshold,
    )
    vehicle_ids = [f"bus{i}" for i in range(model.fleet.size)]
    starts = model.fleet.start_nodes
    if starts is None:
        ids = graph.node_ids()
        starts = [
            ids[int(rng_registry.stream("fleet", vid).integers(0, len(ids)))]
            for vid in vehicle_ids
        ]
    for vid, node in zip(vehicle_ids, starts):
        fleet.add_vehicle(vid, node)

    # 4) Dispatch & demand
    engine = DispatchEngine(
        tolerance=DelayTolerance(
            ratio=model.dispatch.delay_ratio_threshold,
            absolute=model.dispatch.delay_absolute_threshold,
        )
    )
    demand = DemandHandler(world, engine, hooks=hooks)
    sampler = make_demand(model.demand, graph=graph, rng=rng_registry.stream("demand"))

    # 5) Driver loop
    throttle = (
        ResolutionThrottle(model.dispatch.resolution_interval_ms)
        if wall_ms is None
        else ResolutionThrottle(model.dispatch.resolution_interval_ms, wall_ms=wall_ms)
    )
    driver = SimulationDriver(
        fleet,
        demand,
        throttle=throttle,
        hooks=hooks,
        sampler=sampler,
        requests_per_tick=model.demand.requests_per_tick,
    )

    return App(clock, rng_registry, world, engine, fleet, demand, sampler, driver, hooks)
