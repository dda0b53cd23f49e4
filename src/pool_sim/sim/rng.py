# sim/rng.py
from functools import cache
from zlib import crc32

import numpy as np


def _word(part: object) -> int:
    """One unsigned 32-bit entropy word: ints are masked, anything else is crc32'd."""
    if isinstance(part, (int, np.integer)):
        return int(part) & 0xFFFFFFFF
    text = part if isinstance(part, str) else repr(part)
    return crc32(text.encode("utf-8")) & 0xFFFFFFFF


class RNGRegistry:
    """
    Named numpy Generators derived from one master seed.

    build() draws node placement from "network", request origins and
    destinations from "demand", and each vehicle's start node from
    ("fleet", vehicle_id). A stream's seed is [master_seed, scenario, name,
    *parts], so streams never share state and adding a vehicle leaves the
    other vehicles' draws alone.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0):
        self.master_seed = master_seed
        self.scenario = str(scenario)
        self._prefix = (_word(master_seed), _word(self.scenario))

    @cache
    def stream(self, name: str, *parts: object) -> np.random.Generator:
        entropy = [*self._prefix, _word(name), *(_word(p) for p in parts)]
        return np.random.Generator(np.random.PCG64(np.random.SeedSequence(entropy)))
