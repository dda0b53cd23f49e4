import math
from dataclasses import dataclass, field
from enum import Enum

from pool_sim.domain.entities.geography import NodeId, Point


class MotionPhase(Enum):
    IDLE = "idle"  # nothing to do, or waiting on an unreachable stop
    ROUTING = "routing"  # following waypoints toward the head stop
    AT_STOP = "at_stop"  # standing on the head stop, service pending


def step_toward(pos: Point, target: Point, step: float) -> Point:
    """Move `step` units from pos along the straight line to target (no overshoot)."""
    dx, dy = target.x - pos.x, target.y - pos.y
    dist = math.hypot(dx, dy)
    if dist <= step:
        return target
    f = step / dist
    return Point(pos.x + f * dx, pos.y + f * dy)


@dataclass
class MotionState:
    waypoints: list[NodeId] = field(default_factory=list)  # route still to drive, target first
    target: NodeId | None = None
    position: Point | None = None  # continuous position; None until first tick

    @property
    def routing(self) -> bool:
        return bool(self.waypoints)

    def set_route(self, waypoints: list[NodeId]) -> None:
        self.waypoints = list(waypoints)
        self.target = self.waypoints[0] if self.waypoints else None

    def pop_waypoint(self) -> NodeId:
        reached = self.waypoints.pop(0)
        self.target = self.waypoints[0] if self.waypoints else None
        return reached
