"""
Driftwood RPG - Tide
====================
Stand-in for the water-surface simulation: the shoreline rises and falls
slowly, and the player may never stand above it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from driftwood.core.constants import SHORE_BASE_Y, TIDE_AMPLITUDE, TIDE_PERIOD


@dataclass
class Tide:
    base_y: float = SHORE_BASE_Y
    amplitude: float = TIDE_AMPLITUDE
    period: float = TIDE_PERIOD
    time: float = 0.0

    def tick(self, dt: float) -> None:
        self.time += dt

    @property
    def collision_y(self) -> float:
        return self.base_y + self.amplitude * math.sin(2 * math.pi * self.time / self.period)
