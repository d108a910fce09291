"""
Driftwood RPG - Scene Controller
================================
Switches between the Title and Adventure scenes with a fade through black,
and is the one place the frame loop talks to.

Scene changes are deferred like the old push/pop requests: ``change_scene``
only schedules the switch, which happens once the fade-out has covered the
screen.  The leaving scene's ``exit`` cancels everything it owns before the
next scene's ``enter`` takes over input and audio.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from driftwood.core.constants import MAX_FRAME_DT, SCENE_FADE_IN_DURATION, SCENE_FADE_OUT_DURATION
from driftwood.core.game_state import GameSnapshot, GameState
from driftwood.states.adventure_state import AdventureScene
from driftwood.states.title_state import TitleScene

logger = logging.getLogger(__name__)


class SceneKey(Enum):
    TITLE = "title"
    ADVENTURE = "adventure"


# ── Scene Protocol ──────────────────────────────────────────────────
class SceneProtocol(Protocol):
    """Every scene must implement these methods."""

    def enter(self) -> None: ...
    def exit(self) -> None: ...
    def on_key_down(self, code: str, text: str | None) -> bool: ...
    def on_key_up(self, code: str) -> None: ...
    def on_pointer_down(self, pos: tuple[float, float]) -> bool: ...
    def update(self, dt: float) -> None: ...


# ── Scene Controller ────────────────────────────────────────────────
class SceneController:
    def __init__(
        self,
        game: GameState | None = None,
        fade_out: float = SCENE_FADE_OUT_DURATION,
        fade_in: float = SCENE_FADE_IN_DURATION,
    ) -> None:
        self.game = game or GameState()
        self._fade_out = max(1e-6, fade_out)
        self._fade_in = max(1e-6, fade_in)
        self._scenes: dict[SceneKey, SceneProtocol] = {
            SceneKey.TITLE: TitleScene(self),
            SceneKey.ADVENTURE: AdventureScene(self),
        }
        self.active_key = SceneKey.TITLE
        self._pending: SceneKey | None = None
        self._fade_direction = 0  # +1 fading out, -1 fading in
        self.crossfade = 0.0  # 0 clear, 1 fully black
        self.current.enter()

    # ── public API ──────────────────────────────────────────────────
    @property
    def current(self) -> SceneProtocol:
        return self._scenes[self.active_key]

    @property
    def is_transitioning(self) -> bool:
        return self._fade_direction != 0

    def change_scene(self, key: SceneKey) -> bool:
        """Fade out, swap to *key*, fade in.  Ignored mid-transition."""
        if self.is_transitioning:
            return False
        logger.info("[Scenes] %s -> %s", self.active_key.value, key.value)
        self._pending = key
        self._fade_direction = 1
        return True

    # ── frame lifecycle ─────────────────────────────────────────────
    def update(self, dt: float) -> None:
        dt = max(0.0, min(dt, MAX_FRAME_DT))
        self.game.time += dt
        self.game.audio.tick(dt)
        self.current.update(dt)
        self._update_crossfade(dt)

    def _update_crossfade(self, dt: float) -> None:
        if self._fade_direction > 0:
            self.crossfade = min(1.0, self.crossfade + dt / self._fade_out)
            if self.crossfade >= 1.0:
                self._process_pending()
                self._fade_direction = -1
        elif self._fade_direction < 0:
            self.crossfade = max(0.0, self.crossfade - dt / self._fade_in)
            if self.crossfade <= 0.0:
                self._fade_direction = 0

    def _process_pending(self) -> None:
        if self._pending is None:
            return
        self.current.exit()
        self.active_key = self._pending
        self._pending = None
        self.current.enter()

    # ── input ───────────────────────────────────────────────────────
    def on_key_down(self, code: str, text: str | None = None) -> bool:
        """Returns True when the key was consumed (the caller should swallow it)."""
        if self.is_transitioning:
            return True
        return self.current.on_key_down(code, text)

    def on_key_up(self, code: str) -> None:
        self.game.held_keys.discard(code)
        self.current.on_key_up(code)

    def on_pointer_down(self, pos: tuple[float, float]) -> bool:
        if self.is_transitioning:
            return True
        return self.current.on_pointer_down(pos)

    def snapshot(self) -> GameSnapshot:
        return self.game.snapshot(self.active_key.value, self.crossfade)
