"""
Driftwood RPG - Collection & Inventory
======================================
World pickups, the stacking inventory, and the little "picked up" banner.

Placement is deterministic: every type is spread along an evenly spaced
band with PRNG jitter, and candidates too close to an earlier item are
retried a bounded number of times before falling back to an unchecked
spot.  The requested counts are always met; spacing is best effort.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from driftwood.core.constants import (
    CLICK_RADIUS,
    COLLECTIBLE_PLAN,
    INVENTORY_CAPACITY,
    NOTICE_DURATION,
    NOTICE_FADE_IN,
    NOTICE_FADE_OUT,
    PICKUP_RADIUS,
    SCATTER_BAND,
    SCATTER_MAX_ATTEMPTS,
    SCATTER_MIN_SPACING,
)
from driftwood.core.prng import pseudo_random

if TYPE_CHECKING:
    from driftwood.engine.actors import Actor, PlayerController

logger = logging.getLogger(__name__)


@dataclass
class Collectible:
    type: str
    world_x: float
    world_y: float
    collected: bool = False


# ── Scatter generation ──────────────────────────────────────────────
def scatter_collectibles(
    plan: tuple[tuple[str, int], ...] = COLLECTIBLE_PLAN,
    band: tuple[float, float, float, float] = SCATTER_BAND,
    min_spacing: float = SCATTER_MIN_SPACING,
    max_attempts: int = SCATTER_MAX_ATTEMPTS,
) -> list[Collectible]:
    bx, by, bw, bh = band
    placed: list[Collectible] = []
    fallbacks = 0

    for type_index, (kind, count) in enumerate(plan):
        if count <= 0:
            continue
        cell = bw / count
        for i in range(count):
            base_x = bx + (i + 0.5) * cell
            spot: tuple[float, float] | None = None
            for attempt in range(max_attempts):
                seed = type_index * 97.13 + i * 13.37 + attempt * 5.11
                x = base_x + (pseudo_random(seed) - 0.5) * cell
                y = by + pseudo_random(seed + 0.77) * bh
                x = max(bx, min(bx + bw, x))
                if all(math.hypot(x - c.world_x, y - c.world_y) >= min_spacing for c in placed):
                    spot = (x, y)
                    break
            if spot is None:
                fallbacks += 1
                spot = (base_x, by + bh * ((i % 3) + 0.5) / 3)
            placed.append(Collectible(kind, spot[0], spot[1]))

    if fallbacks:
        logger.debug("[Collection] %d items placed without spacing check", fallbacks)
    return placed


# ── Inventory ───────────────────────────────────────────────────────
@dataclass
class InventorySlot:
    type: str
    count: int = 0


@dataclass
class Inventory:
    capacity: int = INVENTORY_CAPACITY
    slots: list[InventorySlot] = field(default_factory=list)

    def slot_for(self, kind: str) -> InventorySlot | None:
        return next((s for s in self.slots if s.type == kind), None)

    def count(self, kind: str) -> int:
        slot = self.slot_for(kind)
        return slot.count if slot else 0

    def can_accept(self, kind: str) -> bool:
        return self.slot_for(kind) is not None or len(self.slots) < self.capacity

    def add(self, kind: str) -> bool:
        slot = self.slot_for(kind)
        if slot is None:
            if len(self.slots) >= self.capacity:
                return False
            slot = InventorySlot(kind)
            self.slots.append(slot)
        slot.count += 1
        return True


# ── Pickup banner ───────────────────────────────────────────────────
@dataclass
class PickupNotice:
    """A single self-expiring message; a new one replaces the old."""

    text: str = ""
    age: float = 0.0
    duration: float = NOTICE_DURATION
    active: bool = False

    def show(self, text: str) -> None:
        self.text = text
        self.age = 0.0
        self.active = True

    def tick(self, dt: float) -> None:
        if not self.active:
            return
        self.age += dt
        if self.age >= self.duration:
            self.active = False
            self.text = ""

    @property
    def alpha(self) -> float:
        if not self.active:
            return 0.0
        if self.age < NOTICE_FADE_IN:
            return self.age / NOTICE_FADE_IN
        remaining = self.duration - self.age
        if remaining < NOTICE_FADE_OUT:
            return max(0.0, remaining / NOTICE_FADE_OUT)
        return 1.0


# ── Collection system ───────────────────────────────────────────────
class CollectionSystem:
    def __init__(
        self,
        inventory: Inventory | None = None,
        notice: PickupNotice | None = None,
        pickup_radius: float = PICKUP_RADIUS,
        click_radius: float = CLICK_RADIUS,
    ) -> None:
        self.inventory = inventory or Inventory()
        self.notice = notice or PickupNotice()
        self.pickup_radius = pickup_radius
        self.click_radius = click_radius
        self.items: list[Collectible] = []

    def reset(self, items: list[Collectible] | None = None) -> None:
        self.items = scatter_collectibles() if items is None else items
        self.inventory.slots.clear()
        self.notice = PickupNotice()

    def collect(self, item: Collectible) -> bool:
        if item.collected or not self.inventory.can_accept(item.type):
            return False
        self.inventory.add(item.type)
        item.collected = True
        self.notice.show(f"+1 {item.type} ({self.inventory.count(item.type)})")
        logger.debug("[Collection] picked up %s at (%.0f, %.0f)", item.type, item.world_x, item.world_y)
        return True

    def item_at(self, x: float, y: float) -> Collectible | None:
        best: Collectible | None = None
        best_dist = self.click_radius
        for item in self.items:
            if item.collected:
                continue
            d = math.hypot(item.world_x - x, item.world_y - y)
            if d <= best_dist:
                best, best_dist = item, d
        return best

    def in_range(self, actor: "Actor", item: Collectible) -> bool:
        return actor.distance_to(item.world_x, item.world_y) <= self.pickup_radius

    def handle_click(self, world_x: float, world_y: float, player: "PlayerController") -> None:
        """Collect a nearby item, walk to a distant one, or walk to the spot."""
        item = self.item_at(world_x, world_y)
        if item is None:
            player.set_auto_move(world_x, world_y)
        elif self.in_range(player.actor, item):
            self.collect(item)
        else:
            player.set_auto_move(item.world_x, item.world_y, item)

    def tick(self, dt: float) -> None:
        self.notice.tick(dt)
