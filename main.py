"""
Driftwood RPG
=============
A small beach adventure: wake up, name yourself, gather driftwood for the
Keeper, and sail away with the Drifter.

Entry point: initialises Pygame, creates the scene controller, and runs the
main loop at 60 FPS.  Everything is drawn into a 320x200 buffer that is
scaled up to the window.

Controls:
  Arrows / WASD   Walk
  Mouse Left      Walk to a spot / pick up / talk
  Enter / Space   Advance dialogue, confirm
  E               Talk to someone nearby
  I               Toggle inventory
  ESC             Cancel / decline
"""

from __future__ import annotations

import logging
import sys

import pygame

from driftwood.core.assets import AssetLibrary
from driftwood.core.constants import BUFFER_HEIGHT, BUFFER_WIDTH, FPS, TITLE, WINDOW_SCALE
from driftwood.core.scene_controller import SceneController
from driftwood.core.soundtrack import install_soundtrack
from driftwood.render.renderer import Renderer

logger = logging.getLogger(__name__)

# pygame key constant -> key code understood by the scenes
KEY_CODES: dict[int, str] = {
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_LEFT: "ArrowLeft",
    pygame.K_RIGHT: "ArrowRight",
    pygame.K_RETURN: "Enter",
    pygame.K_KP_ENTER: "Enter",
    pygame.K_SPACE: "Space",
    pygame.K_ESCAPE: "Escape",
    pygame.K_BACKSPACE: "Backspace",
    pygame.K_QUOTE: "Quote",
    pygame.K_MINUS: "Minus",
    pygame.K_KP_MINUS: "NumpadSubtract",
}
KEY_CODES.update(
    {
        key: f"Numpad{n}"
        for n, key in enumerate(
            (
                pygame.K_KP0, pygame.K_KP1, pygame.K_KP2, pygame.K_KP3, pygame.K_KP4,
                pygame.K_KP5, pygame.K_KP6, pygame.K_KP7, pygame.K_KP8, pygame.K_KP9,
            )
        )
    }
)

# Printable keys without a named code still carry their text
UNIDENTIFIED_KEY = "Unidentified"


def key_code(key: int) -> str | None:
    """Translate a pygame key into a key code, e.g. ``K_w`` -> ``"KeyW"``."""
    if key in KEY_CODES:
        return KEY_CODES[key]
    if pygame.K_a <= key <= pygame.K_z:
        return "Key" + chr(key).upper()
    if pygame.K_0 <= key <= pygame.K_9:
        return "Digit" + chr(key)
    return None


def to_buffer(pos: tuple[int, int], window_size: tuple[int, int]) -> tuple[float, float]:
    """Window pixel -> buffer pixel."""
    ww, wh = window_size
    return pos[0] * BUFFER_WIDTH / max(1, ww), pos[1] * BUFFER_HEIGHT / max(1, wh)


def dispatch_event(controller: SceneController, event: pygame.event.Event, window_size: tuple[int, int]) -> None:
    """Forward one pygame input event to the scene controller."""
    if event.type == pygame.KEYDOWN:
        text = event.unicode or None
        code = key_code(event.key)
        if code is None and text is not None and text.isprintable():
            code = UNIDENTIFIED_KEY
        if code is not None:
            controller.on_key_down(code, text)
    elif event.type == pygame.KEYUP:
        code = key_code(event.key)
        if code is not None:
            controller.on_key_up(code)
    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        controller.on_pointer_down(to_buffer(event.pos, window_size))


class Game:
    """Top-level application: owns the window, clock, and scene controller."""

    def __init__(self) -> None:
        pygame.init()
        try:
            pygame.mixer.init()
        except pygame.error as e:
            logger.warning("[Audio] mixer unavailable, running silent: %s", e)
        pygame.display.set_caption(TITLE)
        self._screen = pygame.display.set_mode((BUFFER_WIDTH * WINDOW_SCALE, BUFFER_HEIGHT * WINDOW_SCALE))
        self._buffer = pygame.Surface((BUFFER_WIDTH, BUFFER_HEIGHT))
        self._clock = pygame.time.Clock()
        self._running = True

        assets = AssetLibrary()
        for key in ("player", "keeper", "drifter", "portrait_hero", "portrait_keeper", "portrait_drifter"):
            assets.load_image(key, f"{key}.png")

        self._controller = SceneController()
        install_soundtrack(self._controller.game.audio, assets)
        # Tracks exist now; let the title context start its music
        self._controller.game.audio.set_context(self._controller.game.audio.active_context)
        self._renderer = Renderer(assets)

    def run(self) -> None:
        """Main loop."""
        while self._running:
            dt = self._clock.tick(FPS) / 1000.0  # seconds

            # ── Events ──────────────────────────────────────────────
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                    break
                self._handle_event(event)

            # ── Update ──────────────────────────────────────────────
            self._controller.update(dt)

            # ── Draw ────────────────────────────────────────────────
            self._renderer.render_frame(self._buffer, self._controller.snapshot())
            pygame.transform.scale(self._buffer, self._screen.get_size(), self._screen)
            pygame.display.flip()

        pygame.quit()
        sys.exit()

    def _handle_event(self, event: pygame.event.Event) -> None:
        dispatch_event(self._controller, event, self._screen.get_size())


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    game = Game()
    game.run()


if __name__ == "__main__":
    main()
