"""
Driftwood RPG - Player Profile
==============================
Who the player is and what they own besides the inventory.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PlayerProfile:
    """Mutable container for the player's name and purse."""

    name: str | None = None
    coins: int = 0

    @property
    def display_name(self) -> str:
        return self.name or "stranger"

    def grant_coins(self, amount: int) -> None:
        self.coins += max(0, amount)
