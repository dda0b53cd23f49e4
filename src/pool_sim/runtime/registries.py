# runtime/registries.py
from collections.abc import Callable
from typing import Any

from pool_sim.config.models import (
    DemandUniformModel,
    DemandUnion,
    NetworkExplicitModel,
    NetworkRandomCompleteModel,
    NetworkUnion,
)
from pool_sim.domain.mechanics.mechanics_geospace import ExplicitNetwork, RandomCompleteNetwork
from pool_sim.domain.mechanics.mechanics_od_samplers import UniformNodeODSampler
from pool_sim.domain.network import SpatialGraph

NetworkFactory = Callable[[NetworkUnion, dict], Any]
DemandFactory = Callable[[DemandUnion, dict], UniformNodeODSampler]

_network_registry: dict[str, NetworkFactory] = {}
_demand_registry: dict[str, DemandFactory] = {}


# ------------------- Network builders ---------------------------


def register_network(kind: str):
    def deco(fn: NetworkFactory):
        _network_registry[kind] = fn
        return fn

    return deco


def make_network(cfg: NetworkUnion, *, rng) -> SpatialGraph:
    try:
        factory = _network_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown network kind {cfg.kind!r}") from None
    return factory(cfg, {"rng": rng}).build()


@register_network("random_complete")
def _make_random_complete(cfg: NetworkRandomCompleteModel, deps):
    return RandomCompleteNetwork(
        n_nodes=cfg.n_nodes, bounds=cfg.bounds, padding=cfg.padding, rng=deps["rng"]
    )


@register_network("explicit")
def _make_explicit(cfg: NetworkExplicitModel, deps):
    return ExplicitNetwork(nodes=cfg.nodes, edges=cfg.edges)


# ------------------- Demand samplers ---------------------------


def register_demand(kind: str):
    def deco(fn: DemandFactory):
        _demand_registry[kind] = fn
        return fn

    return deco


def make_demand(cfg: DemandUnion, *, graph: SpatialGraph, rng) -> UniformNodeODSampler:
    try:
        factory = _demand_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown demand kind {cfg.kind!r}") from None
    return factory(cfg, {"graph": graph, "rng": rng})


@register_demand("uniform")
def _make_uniform(cfg: DemandUniformModel, deps):
    return UniformNodeODSampler(
        nodes=deps["graph"].node_ids(), weights=cfg.weights, rng=deps["rng"]
    )
