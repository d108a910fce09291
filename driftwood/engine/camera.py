"""
Driftwood RPG - Camera
======================
Horizontal follow camera with a dead zone.  While the player stays inside
the margins nothing moves; once they step out, the target jumps just far
enough to put them back on the margin edge and the camera eases after it.
"""

from __future__ import annotations

from dataclasses import dataclass

from driftwood.core.constants import (
    CAMERA_DEAD_ZONE,
    CAMERA_FOLLOW_RATE,
    VIEWPORT_WIDTH,
    WORLD_WIDTH,
)


@dataclass
class Camera:
    x: float = 0.0
    target_x: float = 0.0
    world_width: float = WORLD_WIDTH
    viewport_width: float = VIEWPORT_WIDTH
    dead_zone: float = CAMERA_DEAD_ZONE
    follow_rate: float = CAMERA_FOLLOW_RATE

    @property
    def max_x(self) -> float:
        return max(0.0, self.world_width - self.viewport_width)

    def clamp(self, x: float) -> float:
        return max(0.0, min(self.max_x, x))

    def snap_to(self, player_x: float) -> None:
        """Center on *player_x* immediately (scene start)."""
        self.x = self.target_x = self.clamp(player_x - self.viewport_width / 2)

    def update(self, dt: float, player_x: float) -> None:
        """Call after the player has been clamped for this frame."""
        left_edge = self.target_x + self.dead_zone
        right_edge = self.target_x + self.viewport_width - self.dead_zone
        if player_x < left_edge:
            self.target_x = player_x - self.dead_zone
        elif player_x > right_edge:
            self.target_x = player_x - (self.viewport_width - self.dead_zone)
        self.target_x = self.clamp(self.target_x)

        self.x += (self.target_x - self.x) * min(1.0, dt * self.follow_rate)
        self.x = self.clamp(self.x)

    def to_world(self, screen_x: float, screen_y: float) -> tuple[float, float]:
        return screen_x + self.x, screen_y
