"""
Driftwood RPG - Deterministic PRNG
==================================
Hash-style pseudo-random numbers: the same seed always yields the same
value, so procedural placement and NPC pauses need no stored RNG stream.
"""

from __future__ import annotations

import math


def fract(v: float) -> float:
    return v - math.floor(v)


def pseudo_random(seed: float) -> float:
    """Map *seed* onto ``[0, 1)``."""
    return fract(abs(math.sin(seed * 12.9898) * 43758.5453))


def random_between(seed: float, low: float, high: float) -> float:
    return low + pseudo_random(seed) * (high - low)
