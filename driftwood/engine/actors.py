"""
Driftwood RPG - Actors
======================
The fixed cast of the beach scene and the rules that move them:

* the player – held direction keys, or an auto-move target set by a click;
* the Keeper – patrols up and down a fixed column;
* the Drifter – wanders between random points inside a rectangle.

An actor's position is only ever written by its own motion rule.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from driftwood.core.constants import (
    ARRIVAL_EPSILON,
    BOUNDS_PADDING,
    BUFFER_HEIGHT,
    DRIFTER_MIN_HOP,
    DRIFTER_PAUSE_RANGE,
    DRIFTER_PICK_ATTEMPTS,
    DRIFTER_RECT,
    DRIFTER_SEED,
    DRIFTER_SPEED,
    KEEPER_PAUSE_RANGE,
    KEEPER_SEED,
    KEEPER_SPEED,
    KEEPER_X,
    KEEPER_Y_BOUNDS,
    PLAYER_SPEED,
    PLAYER_SPRITE_HEIGHT,
    PLAYER_SPRITE_WIDTH,
    WALK_FRAME_COUNT,
    WALK_FRAME_INTERVAL,
    WORLD_WIDTH,
)
from driftwood.core.prng import pseudo_random, random_between

if TYPE_CHECKING:
    from driftwood.engine.collection import Collectible


class Facing(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Sprite-sheet row for each facing
FACING_ROW: dict[Facing, int] = {
    Facing.DOWN: 0,
    Facing.LEFT: 1,
    Facing.RIGHT: 2,
    Facing.UP: 3,
}


def facing_for(vx: float, vy: float, current: Facing) -> Facing:
    """Pick a facing from a velocity; ties go to the vertical axis."""
    if vx == 0 and vy == 0:
        return current
    if abs(vx) > abs(vy):
        return Facing.RIGHT if vx > 0 else Facing.LEFT
    return Facing.DOWN if vy > 0 else Facing.UP


@dataclass
class Actor:
    x: float
    y: float
    facing: Facing = Facing.DOWN
    anim_frame: int = 0
    anim_timer: float = 0.0
    moving: bool = False

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(x - self.x, y - self.y)

    def animate(self, dt: float, moving: bool) -> None:
        """Advance the walk cycle; stopping drops back to the idle frame."""
        self.moving = moving
        if not moving:
            self.anim_frame = 0
            self.anim_timer = 0.0
            return
        self.anim_timer += dt
        while self.anim_timer >= WALK_FRAME_INTERVAL:
            self.anim_timer -= WALK_FRAME_INTERVAL
            self.anim_frame = (self.anim_frame + 1) % WALK_FRAME_COUNT


@dataclass
class AutoMoveTarget:
    x: float
    y: float
    collect_target: "Collectible | None" = None


@dataclass(frozen=True)
class PlayerBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def for_water_line(cls, water_y: float) -> "PlayerBounds":
        half_w = PLAYER_SPRITE_WIDTH / 2
        return cls(
            min_x=half_w + BOUNDS_PADDING,
            max_x=WORLD_WIDTH - half_w - BOUNDS_PADDING,
            min_y=max(PLAYER_SPRITE_HEIGHT + BOUNDS_PADDING, water_y),
            max_y=BUFFER_HEIGHT - BOUNDS_PADDING,
        )

    def clamp(self, x: float, y: float) -> tuple[float, float]:
        return (
            max(self.min_x, min(self.max_x, x)),
            max(self.min_y, min(self.max_y, y)),
        )


# ── Player ──────────────────────────────────────────────────────────
class PlayerController:
    """Moves the player from held keys or toward an auto-move target."""

    def __init__(self, actor: Actor, speed: float = PLAYER_SPEED) -> None:
        self.actor = actor
        self.speed = speed
        self.auto_move: AutoMoveTarget | None = None

    def set_auto_move(self, x: float, y: float, collect_target: "Collectible | None" = None) -> None:
        self.auto_move = AutoMoveTarget(x, y, collect_target)

    def cancel_auto_move(self) -> None:
        self.auto_move = None

    def update(self, dt: float, input_x: float, input_y: float, bounds: PlayerBounds) -> "Collectible | None":
        """Move one frame.  Returns the collectible reached by an auto-move, if any."""
        actor = self.actor
        arrived: Collectible | None = None
        vx = vy = 0.0

        if input_x or input_y:
            self.auto_move = None
            length = math.hypot(input_x, input_y)
            vx, vy = input_x / length, input_y / length
            actor.x += vx * self.speed * dt
            actor.y += vy * self.speed * dt
        elif self.auto_move is not None:
            target = self.auto_move
            tx, ty = bounds.clamp(target.x, target.y)
            dx, dy = tx - actor.x, ty - actor.y
            remaining = math.hypot(dx, dy)
            step = self.speed * dt
            if remaining <= step or remaining <= ARRIVAL_EPSILON:
                if remaining > 0:
                    vx, vy = dx / remaining, dy / remaining
                actor.x, actor.y = tx, ty
                arrived = target.collect_target
                self.auto_move = None
            else:
                vx, vy = dx / remaining, dy / remaining
                actor.x += vx * step
                actor.y += vy * step

        actor.x, actor.y = bounds.clamp(actor.x, actor.y)
        actor.facing = facing_for(vx, vy, actor.facing)
        actor.animate(dt, moving=bool(vx or vy))
        return arrived


# ── NPCs ────────────────────────────────────────────────────────────
def _step_toward(actor: Actor, tx: float, ty: float, speed: float, dt: float) -> bool:
    """Move *actor* toward (tx, ty).  Returns True on arrival."""
    dx, dy = tx - actor.x, ty - actor.y
    dist = math.hypot(dx, dy)
    step = speed * dt
    if dist <= step or dist <= ARRIVAL_EPSILON:
        actor.x, actor.y = tx, ty
        if dist > 0:
            actor.facing = facing_for(dx, dy, actor.facing)
        return True
    vx, vy = dx / dist, dy / dist
    actor.x += vx * step
    actor.y += vy * step
    actor.facing = facing_for(vx, vy, actor.facing)
    return False


@dataclass
class PatrolBehavior:
    """Walks a fixed column between two Y bounds, pausing between legs."""

    actor: Actor
    x: float = KEEPER_X
    y_bounds: tuple[float, float] = KEEPER_Y_BOUNDS
    speed: float = KEEPER_SPEED
    pause_range: tuple[float, float] = KEEPER_PAUSE_RANGE
    seed: float = KEEPER_SEED
    direction: int = 1
    pause_timer: float = 0.0
    legs: int = 0

    def _next_pause(self) -> float:
        low, high = self.pause_range
        return random_between(self.seed + self.legs * 7.31, low, high)

    def update(self, dt: float, frozen: bool) -> None:
        if frozen:
            self.actor.animate(dt, moving=False)
            return
        if self.pause_timer > 0:
            self.pause_timer = max(0.0, self.pause_timer - dt)
            self.actor.animate(dt, moving=False)
            return
        top, bottom = self.y_bounds
        target_y = bottom if self.direction > 0 else top
        if _step_toward(self.actor, self.x, target_y, self.speed, dt):
            self.direction = -self.direction
            self.legs += 1
            self.pause_timer = self._next_pause()
            self.actor.animate(dt, moving=False)
        else:
            self.actor.animate(dt, moving=True)


@dataclass
class WanderBehavior:
    """Idles, then strolls to a random spot in its rectangle."""

    actor: Actor
    rect: tuple[float, float, float, float] = DRIFTER_RECT
    speed: float = DRIFTER_SPEED
    min_hop: float = DRIFTER_MIN_HOP
    attempts: int = DRIFTER_PICK_ATTEMPTS
    pause_range: tuple[float, float] = DRIFTER_PAUSE_RANGE
    seed: float = DRIFTER_SEED
    target: tuple[float, float] | None = None
    pause_timer: float = 0.0
    draws: int = field(default=0)

    def _rand(self) -> float:
        self.draws += 1
        return pseudo_random(self.seed + self.draws * 3.17)

    def clamp_into_rect(self, x: float, y: float) -> tuple[float, float]:
        rx, ry, rw, rh = self.rect
        return max(rx, min(rx + rw, x)), max(ry, min(ry + rh, y))

    def pick_target(self) -> tuple[float, float]:
        rx, ry, rw, rh = self.rect
        for _ in range(self.attempts):
            x = rx + self._rand() * rw
            y = ry + self._rand() * rh
            if self.actor.distance_to(x, y) >= self.min_hop:
                return x, y
        return self.clamp_into_rect(self.actor.x, self.actor.y)

    def update(self, dt: float, frozen: bool) -> None:
        if frozen:
            self.actor.animate(dt, moving=False)
            return
        if self.target is None:
            if self.pause_timer > 0:
                self.pause_timer = max(0.0, self.pause_timer - dt)
                self.actor.animate(dt, moving=False)
                return
            self.target = self.pick_target()
        tx, ty = self.target
        if _step_toward(self.actor, tx, ty, self.speed, dt):
            self.target = None
            low, high = self.pause_range
            self.pause_timer = low + self._rand() * (high - low)
            self.actor.animate(dt, moving=False)
        else:
            self.actor.animate(dt, moving=True)
