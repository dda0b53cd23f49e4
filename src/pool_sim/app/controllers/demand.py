# pool_sim/app/controllers/demand.py
import time

from pool_sim.app.events import Resolution
from pool_sim.domain.entities.geography import NodeId
from pool_sim.domain.entities.request import Request
from pool_sim.domain.state import WorldState
from pool_sim.policy.matching import DispatchEngine
from pool_sim.sim.hooks import NoopHooks, SimHooks


class DemandHandler:
    def __init__(
        self, world: WorldState, engine: DispatchEngine, hooks: SimHooks | None = None
    ):
        self.world = world
        self.engine = engine
        self.hooks = hooks or NoopHooks()

    def submit_request(self, origin: NodeId, destination: NodeId, now: float) -> int:
        req = self.world.submit_request(origin, destination, now)
        self.hooks.request_submitted(req, now=now)
        return req.id

    def pending(self) -> tuple[Request, ...]:
        return self.world.get_pending_requests()

    def on_resolution_pass(self, now: float) -> list[Resolution]:
        """Offer every pending request to the fleet once; accepted ones leave the pool."""
        by_id = {r.id: r for r in self.world.pending}
        t1 = time.perf_counter()
        results = self.engine.resolve_pending(
            self.world.graph, self.world.vehicles, self.world.pending, now
        )
        ms = (time.perf_counter() - t1) * 1000
        accepted = 0
        for res in results:
            req = by_id[res.request_id]
            if res.accepted:
                accepted += 1
                self.hooks.request_assigned(req, res, now=now)
            else:
                self.hooks.request_deferred(req, now=now)
        self.hooks.resolution_pass(now=now, attempted=len(results), accepted=accepted, ms=ms)
        return results
