# sim/driver.py
import time

from pool_sim.app.controllers.demand import DemandHandler
from pool_sim.app.controllers.fleet import FleetHandler
from pool_sim.domain.mechanics.mechanics_od_samplers import UniformNodeODSampler
from pool_sim.sim.clock import ResolutionThrottle
from pool_sim.sim.hooks import NoopHooks, SimHooks


class SimulationDriver:
    """
    Headless tick loop around the dispatch core.

    One step = optional random demand, a resolution pass if the throttle is
    open, one motion tick, then the clock advances by one unit. Motion and
    resolution never interleave.
    """

    def __init__(
        self,
        fleet: FleetHandler,
        demand: DemandHandler,
        throttle: ResolutionThrottle | None = None,
        hooks: SimHooks | None = None,
        sampler: UniformNodeODSampler | None = None,
        requests_per_tick: float = 0.0,
        start_t: float = 0.0,
    ):
        self.fleet = fleet
        self.demand = demand
        self.throttle = throttle or ResolutionThrottle(interval_ms=0.0)
        self.hooks = hooks or NoopHooks()
        self.sampler = sampler
        self.requests_per_tick = requests_per_tick
        self.now = start_t

    @property
    def world(self):
        return self.fleet.world

    def _inject_demand(self) -> None:
        if self.sampler is None:
            return
        for _ in range(self.sampler.sample_count(self.requests_per_tick)):
            origin, dest = self.sampler.sample()
            self.demand.submit_request(origin, dest, self.now)

    def step(self) -> list:
        self._inject_demand()
        if self.throttle.due():
            self.demand.on_resolution_pass(self.now)
        events = self.fleet.on_motion_tick(self.now)
        self.now += 1
        return events

    def run(self, ticks: int) -> int:
        t0 = time.perf_counter()
        self.hooks.run_start(
            ticks=ticks, vehicles=len(self.world.vehicles), pending=len(self.world.pending)
        )
        for _ in range(ticks):
            self.step()
        self._finish(ticks, t0)
        return ticks

    def run_until_idle(self, max_ticks: int) -> int:
        """Step until nothing is pending, queued or aboard; returns ticks used."""
        t0 = time.perf_counter()
        self.hooks.run_start(
            ticks=max_ticks, vehicles=len(self.world.vehicles), pending=len(self.world.pending)
        )
        n = 0
        while n < max_ticks and not self.world.is_quiescent:
            self.step()
            n += 1
        self._finish(n, t0)
        return n

    def _finish(self, ticks: int, t0: float) -> None:
        self.hooks.run_end(
            ticks=ticks,
            last_t=self.now,
            pending=len(self.world.pending),
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
