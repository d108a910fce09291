"""
Driftwood RPG - Adventure Scene
===============================
The beach: walk with the arrow keys / WASD or click to walk, pick things
up, talk to the Keeper and the Drifter, and set sail.

Per-frame order (later steps read what earlier ones wrote):

    prompts/dialogue → motion → camera → collection → terminal fade
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from driftwood.core.constants import (
    BEACH_WAVES_FADE,
    BEACH_WAVES_VOLUME,
    CLICK_RADIUS,
    KEY_CANCEL,
    KEY_INVENTORY,
    KEY_TALK,
    KEYS_CONFIRM,
    KEYS_DOWN,
    KEYS_LEFT,
    KEYS_RIGHT,
    KEYS_UP,
    NPC_TALK_RANGE,
    PLAYER_SPRITE_HEIGHT,
    TERMINAL_FADE_DURATION,
)
from driftwood.core.soundtrack import ADVENTURE_CONTEXT, AMBIENT_WAVES, BEACH_THEME, CUE_COINS, CUE_PICKUP, CUE_TYPE
from driftwood.engine.actors import Actor, PlayerBounds, facing_for
from driftwood.engine.quest import DrifterBranch, KeeperBranch, drifter_dialogue, keeper_dialogue

if TYPE_CHECKING:
    from driftwood.core.game_state import GameState
    from driftwood.core.scene_controller import SceneController

logger = logging.getLogger(__name__)

KEEPER_CONTEXT = "keeper"
DRIFTER_CONTEXT = "drifter"

_MOVEMENT_KEYS = KEYS_UP | KEYS_DOWN | KEYS_LEFT | KEYS_RIGHT


class AdventureScene:
    """Top-down beach exploration."""

    def __init__(self, controller: "SceneController") -> None:
        self._sc = controller

    @property
    def _game(self) -> "GameState":
        return self._sc.game

    # ── Lifecycle ───────────────────────────────────────────────────
    def enter(self) -> None:
        game = self._game
        game.reset_adventure()
        game.quest_prompt.on_confirm = self._on_voyage_confirmed
        game.dialogue.on_glyph = self._on_glyph
        game.audio.set_context(ADVENTURE_CONTEXT)
        game.audio.set_target(AMBIENT_WAVES, BEACH_WAVES_VOLUME, BEACH_WAVES_FADE)

    def exit(self) -> None:
        game = self._game
        game.dialogue.clear()
        game.quest_prompt.reset()
        game.player_controller.cancel_auto_move()
        game.held_keys.clear()
        game.inventory_open = False
        game.terminal_fading = False
        game.terminal_fade = 0.0

    # ── Events ──────────────────────────────────────────────────────
    def on_key_down(self, code: str, text: str | None) -> bool:
        game = self._game
        if code in _MOVEMENT_KEYS:
            game.held_keys.add(code)

        if game.terminal_fading:
            return True
        if game.quest_prompt.is_open:
            return game.quest_prompt.handle_key(code, text)
        if game.dialogue.is_active:
            if code in KEYS_CONFIRM:
                game.dialogue.advance()
            elif code == KEY_CANCEL:
                game.dialogue.cancel()
            return True

        if code in _MOVEMENT_KEYS:
            return True
        if code == KEY_INVENTORY:
            game.inventory_open = not game.inventory_open
            return True
        if code == KEY_CANCEL and game.inventory_open:
            game.inventory_open = False
            return True
        if code == KEY_TALK or code in KEYS_CONFIRM:
            npc = self._npc_in_range()
            if npc is not None:
                self._talk_to(npc)
                return True
        return False

    def on_key_up(self, code: str) -> None:
        self._game.held_keys.discard(code)

    def on_pointer_down(self, pos: tuple[float, float]) -> bool:
        game = self._game
        if game.terminal_fading:
            return True
        if game.quest_prompt.is_open:
            return game.quest_prompt.handle_pointer(pos)
        if game.dialogue.is_active:
            game.dialogue.advance()
            return True

        wx, wy = game.camera.to_world(*pos)
        npc = self._npc_at(wx, wy)
        if npc is not None and game.player.distance_to(npc.x, npc.y) <= NPC_TALK_RANGE:
            self._talk_to(npc)
            return True
        game.collection.handle_click(wx, wy, game.player_controller)
        return True

    # ── Update ──────────────────────────────────────────────────────
    def update(self, dt: float) -> None:
        game = self._game
        game.tide.tick(dt)

        # prompts / dialogue
        game.quest_prompt.tick(dt)
        game.dialogue.tick(dt)

        # motion
        ix, iy = self._input_vector()
        bounds = PlayerBounds.for_water_line(game.tide.collision_y)
        reached = game.player_controller.update(dt, ix, iy, bounds)
        talking_to = game.dialogue.context
        game.keeper_ai.update(dt, frozen=game.terminal_fading or talking_to == KEEPER_CONTEXT)
        game.drifter_ai.update(dt, frozen=game.terminal_fading or talking_to == DRIFTER_CONTEXT)

        # camera, after the player clamp
        game.camera.update(dt, game.player.x)

        # collection
        if reached is not None and game.collection.collect(reached):
            game.audio.play_one_shot(CUE_PICKUP)
        game.collection.tick(dt)

        # fades
        if game.terminal_fading:
            game.terminal_fade = min(1.0, game.terminal_fade + dt / TERMINAL_FADE_DURATION)
            if game.terminal_fade >= 1.0:
                from driftwood.core.scene_controller import SceneKey

                self._sc.change_scene(SceneKey.TITLE)

    def _input_vector(self) -> tuple[float, float]:
        game = self._game
        if game.modal_open or game.terminal_fading:
            return 0.0, 0.0
        held = game.held_keys
        ix = float(bool(held & KEYS_RIGHT)) - float(bool(held & KEYS_LEFT))
        iy = float(bool(held & KEYS_DOWN)) - float(bool(held & KEYS_UP))
        return ix, iy

    # ── NPCs ────────────────────────────────────────────────────────
    def _npc_in_range(self) -> Actor | None:
        game = self._game
        best, best_dist = None, NPC_TALK_RANGE
        for npc in (game.keeper, game.drifter):
            d = game.player.distance_to(npc.x, npc.y)
            if d <= best_dist:
                best, best_dist = npc, d
        return best

    def _npc_at(self, wx: float, wy: float) -> Actor | None:
        # Actor y is the feet; accept clicks anywhere on the sprite
        for npc in (self._game.keeper, self._game.drifter):
            if abs(wx - npc.x) <= CLICK_RADIUS and npc.y - PLAYER_SPRITE_HEIGHT <= wy <= npc.y + 2:
                return npc
        return None

    def _talk_to(self, npc: Actor) -> None:
        game = self._game
        game.player_controller.cancel_auto_move()
        game.player.facing = facing_for(npc.x - game.player.x, npc.y - game.player.y, game.player.facing)
        npc.facing = facing_for(game.player.x - npc.x, game.player.y - npc.y, npc.facing)

        if npc is game.keeper:
            branch, lines = keeper_dialogue(game.quest, game.collection.inventory, game.profile)
            if branch is KeeperBranch.REWARD:
                game.audio.play_one_shot(CUE_COINS)
                logger.info("[Quest] reward paid: %d coins", game.quest.reward)
            game.dialogue.begin(lines, portrait_key="keeper", context=KEEPER_CONTEXT)
            return

        branch, lines = drifter_dialogue(game.quest)
        on_complete = game.quest_prompt.open if branch is DrifterBranch.OFFER_VOYAGE else None
        game.dialogue.begin(lines, portrait_key="drifter", context=DRIFTER_CONTEXT, on_complete=on_complete)

    # ── Flow ────────────────────────────────────────────────────────
    def _on_voyage_confirmed(self) -> None:
        game = self._game
        logger.info("[Quest] voyage accepted")
        game.terminal_fading = True
        game.audio.set_target(BEACH_THEME, 0.0, TERMINAL_FADE_DURATION)
        game.audio.set_target(AMBIENT_WAVES, 0.0, TERMINAL_FADE_DURATION)

    def _on_glyph(self, glyph: str) -> None:
        self._game.audio.play_one_shot(CUE_TYPE)
