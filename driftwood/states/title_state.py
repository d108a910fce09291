"""
Driftwood RPG - Title Scene
===========================
Petals drift over the title plank until the player presses a key.  Then:

    name entry → waking cinematic → reaction → intro conversation

and the finished conversation hands over to the beach.  The intro
conversation cannot be cancelled.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from driftwood.core.constants import (
    AMBIENT_FADE_OUT_DURATION,
    AMBIENT_SOFTEN_FACTOR,
    KEY_CANCEL,
    KEYS_CONFIRM,
    TO_BLACK_DURATION,
)
from driftwood.core.soundtrack import (
    AMBIENT_TRACKS,
    CUE_CONFIRM,
    CUE_REACTION,
    CUE_TYPE,
    TITLE_CONTEXT,
    TITLE_THEME,
)
from driftwood.engine.cinematic import CinematicEvent, CinematicPhase
from driftwood.engine.petals import update_petals

if TYPE_CHECKING:
    from driftwood.core.game_state import GameState
    from driftwood.core.scene_controller import SceneController

logger = logging.getLogger(__name__)

INTRO_CONTEXT = "intro"


def intro_lines(name: str) -> list[str]:
    return [
        "...",
        "Where... am I?",
        f"{name}. My name is {name}. I remember that much.",
        "Waves. Salt. I should have a look around.",
    ]


class TitleScene:
    """Title screen, name entry and the waking cinematic."""

    def __init__(self, controller: "SceneController") -> None:
        self._sc = controller

    @property
    def _game(self) -> "GameState":
        return self._sc.game

    # ── Lifecycle ───────────────────────────────────────────────────
    def enter(self) -> None:
        game = self._game
        game.reset_title()
        game.name_prompt.on_submit = self._on_name_submitted
        game.dialogue.on_glyph = self._on_glyph
        game.audio.set_context(TITLE_CONTEXT)

    def exit(self) -> None:
        game = self._game
        game.dialogue.clear()
        game.name_prompt.reset()
        game.cinematic.reset()

    @property
    def waiting_for_start(self) -> bool:
        game = self._game
        return (
            game.cinematic.phase is CinematicPhase.IDLE
            and not game.name_prompt.is_open
            and not game.dialogue.is_active
        )

    # ── Events ──────────────────────────────────────────────────────
    def on_key_down(self, code: str, text: str | None) -> bool:
        game = self._game
        if game.name_prompt.is_open:
            return game.name_prompt.handle_key(code, text)
        if game.dialogue.is_active:
            if code in KEYS_CONFIRM:
                game.dialogue.advance()
            elif code == KEY_CANCEL:
                game.dialogue.cancel()
            return True
        if game.cinematic.phase is not CinematicPhase.IDLE:
            # Nothing to skip into; the sequence owns the screen
            return True
        if code in KEYS_CONFIRM:
            self._open_name_entry()
            return True
        return False

    def on_key_up(self, code: str) -> None:
        pass

    def on_pointer_down(self, pos: tuple[float, float]) -> bool:
        game = self._game
        if game.name_prompt.is_open:
            return game.name_prompt.handle_pointer(pos)
        if game.dialogue.is_active:
            game.dialogue.advance()
            return True
        if self.waiting_for_start:
            self._open_name_entry()
            return True
        return game.cinematic.phase is not CinematicPhase.IDLE

    # ── Update ──────────────────────────────────────────────────────
    def update(self, dt: float) -> None:
        game = self._game
        update_petals(game.petals, dt)

        for event in game.cinematic.tick(dt):
            self._handle_cinematic_event(event)
        game.dialogue.tick(dt)

        game.name_prompt.tick(dt)

    def _handle_cinematic_event(self, event: CinematicEvent) -> None:
        game = self._game
        if event is CinematicEvent.SOFTEN_AMBIENT:
            game.audio.soften(AMBIENT_TRACKS, AMBIENT_SOFTEN_FACTOR)
        elif event is CinematicEvent.REACTION_CUE:
            game.audio.play_one_shot(CUE_REACTION)
        elif event is CinematicEvent.AMBIENT_FADE_OUT:
            for name in AMBIENT_TRACKS:
                game.audio.set_target(name, 0.0, AMBIENT_FADE_OUT_DURATION)
        elif event is CinematicEvent.BEGIN_INTRO_DIALOGUE:
            game.dialogue.begin(
                intro_lines(game.profile.display_name),
                portrait_key="hero",
                context=INTRO_CONTEXT,
                cancellable=False,
                on_complete=self._on_intro_complete,
            )

    # ── Flow ────────────────────────────────────────────────────────
    def _open_name_entry(self) -> None:
        if self._game.name_prompt.open():
            self._game.audio.play_one_shot(CUE_CONFIRM)

    def _on_name_submitted(self, name: str) -> None:
        game = self._game
        game.profile.name = name
        logger.info("[Title] player named '%s'", name)
        game.audio.set_target(TITLE_THEME, 0.0, TO_BLACK_DURATION)
        game.cinematic.start()

    def _on_glyph(self, glyph: str) -> None:
        self._game.audio.play_one_shot(CUE_TYPE)

    def _on_intro_complete(self) -> None:
        from driftwood.core.scene_controller import SceneKey

        self._sc.change_scene(SceneKey.ADVENTURE)
