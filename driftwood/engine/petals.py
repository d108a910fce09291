"""
Driftwood RPG - Title Petals
============================
Blossom petals drifting down the title screen.  Every parameter is derived
from the deterministic PRNG, so the same count always yields the same field.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from driftwood.core.constants import BUFFER_HEIGHT, BUFFER_WIDTH, PETAL_COUNT, PETAL_RECYCLE_MARGIN
from driftwood.core.prng import pseudo_random


class PetalLayer(Enum):
    BACK = "back"  # drawn behind the title plank
    FRONT = "front"


@dataclass
class Petal:
    base_x: float
    x: float
    y: float
    size: int
    speed: float
    amp: float
    freq: float
    phase: float
    layer: PetalLayer


def _layer(seed: float) -> PetalLayer:
    return PetalLayer.FRONT if pseudo_random(seed) > 0.5 else PetalLayer.BACK


def create_petals(n: int = PETAL_COUNT) -> list[Petal]:
    petals: list[Petal] = []
    for i in range(n):
        base_x = math.floor(pseudo_random(i * 3.7) * BUFFER_WIDTH)
        petals.append(
            Petal(
                base_x=base_x,
                x=base_x,
                y=math.floor(-pseudo_random(i * 5.1) * BUFFER_HEIGHT),
                size=1 + math.floor(pseudo_random(i * 1.3) * 4),
                speed=8 + math.floor(pseudo_random(i * 7.9) * 24),
                amp=6 + math.floor(pseudo_random(i * 2.5) * 18),
                freq=0.02 + pseudo_random(i * 9.1) * 0.04,
                phase=pseudo_random(i * 4.4) * math.pi * 2,
                layer=_layer(i * 11.7),
            )
        )
    return petals


def update_petals(petals: list[Petal], dt: float) -> None:
    for p in petals:
        p.y += p.speed * dt
        p.x = p.base_x + math.sin(p.y * p.freq + p.phase) * p.amp
        p.base_x += math.sin(p.phase + p.y * 0.01) * 0.02
        if p.y > BUFFER_HEIGHT + PETAL_RECYCLE_MARGIN:
            _recycle(p)


def _recycle(p: Petal) -> None:
    seed = p.phase
    p.y = -(1 + math.floor(pseudo_random(seed * 7.1) * 20))
    p.base_x = math.floor(pseudo_random(seed * 3.3) * BUFFER_WIDTH)
    p.size = 1 + math.floor(pseudo_random(seed * 4.7) * 4)
    p.speed = 8 + math.floor(pseudo_random(seed * 5.9) * 24)
    p.amp = 6 + math.floor(pseudo_random(seed * 2.2) * 18)
    p.freq = 0.02 + pseudo_random(seed * 8.1) * 0.04
    p.phase = pseudo_random(seed * 9.3) * math.pi * 2
    p.layer = _layer(p.phase * 2.7)
