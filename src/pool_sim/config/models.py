from math import isfinite
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    epoch: tuple[int, int, int, int, int, int] = (2025, 1, 1, 0, 0, 0)
    seed: int = 0
    tick_s: float = Field(default=1.0, gt=0)  # wall seconds per motion tick, for logs only
    ticks: int = Field(default=1_000, ge=0)


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    record: bool = False  # emit business events as JSON lines on stdout


# ----------------- NETWORK ---------------------


class NetworkRandomCompleteModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["random_complete"] = "random_complete"
    n_nodes: int = Field(default=26, ge=2)
    bounds: tuple[float, float, float, float] = (0.0, 0.0, 800.0, 600.0)
    padding: float = Field(default=100.0, ge=0)


class NetworkExplicitModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["explicit"] = "explicit"
    nodes: dict[str, tuple[float, float]]
    edges: list[tuple[str, str] | tuple[str, str, float]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_edges(self):
        for e in self.edges:
            a, b = e[0], e[1]
            for n in (a, b):
                if n not in self.nodes:
                    raise ValueError(f"edge {a}-{b} references unknown node {n!r}")
            if len(e) == 3 and (not isfinite(e[2]) or e[2] < 0):
                raise ValueError(f"edge {a}-{b} weight must be finite and >= 0")
        return self


NetworkUnion = Annotated[
    NetworkRandomCompleteModel | NetworkExplicitModel,
    Field(discriminator="kind"),
]


# ----------------- FLEET / MOTION ---------------------


class FleetModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    size: int = Field(default=0, ge=0)
    capacity: int = Field(default=15, gt=0)
    start_nodes: list[str] | None = None  # explicit starts; random nodes otherwise

    @model_validator(mode="after")
    def _check_starts(self):
        if self.start_nodes is not None and len(self.start_nodes) != self.size:
            raise ValueError(
                f"start_nodes must list {self.size} nodes, got {len(self.start_nodes)}"
            )
        return self


class MotionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    step: float = Field(default=5.0, gt=0)
    arrival_threshold: float = Field(default=5.0, ge=0)


# ----------------- DISPATCH / DEMAND ---------------------


class DispatchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    resolution_interval_ms: float = Field(default=500.0, ge=0)
    delay_ratio_threshold: float = Field(default=1.3, gt=0)
    delay_absolute_threshold: float = Field(default=10.0, ge=0)


class DemandUniformModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["uniform"] = "uniform"
    requests_per_tick: float = Field(default=0.0, ge=0)
    weights: dict[str, float] | None = None

    @field_validator("weights", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        # YAML {} or "" should mean "uniform"
        if v is None or (isinstance(v, (dict, str)) and len(v) == 0):
            return None
        return v


DemandUnion = Annotated[DemandUniformModel, Field(discriminator="kind")]


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    sim: SimModel = Field(default_factory=SimModel)
    log: LogModel = Field(default_factory=LogModel)
    network: NetworkUnion = Field(default_factory=NetworkRandomCompleteModel)
    fleet: FleetModel = Field(default_factory=FleetModel)
    motion: MotionModel = Field(default_factory=MotionModel)
    dispatch: DispatchModel = Field(default_factory=DispatchModel)
    demand: DemandUnion = Field(default_factory=DemandUniformModel)

    @model_validator(mode="after")
    def _starts_exist(self):
        if isinstance(self.network, NetworkExplicitModel) and self.fleet.start_nodes:
            missing = [n for n in self.fleet.start_nodes if n not in self.network.nodes]
            if missing:
                raise ValueError(f"fleet.start_nodes not in network: {missing}")
        return self
