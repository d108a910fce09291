import logging

import pygame
import pytest

from driftwood.core.constants import BUFFER_HEIGHT, BUFFER_WIDTH
from driftwood.core.scene_controller import SceneKey
from driftwood.render.renderer import Renderer, lerp_color


@pytest.fixture
def renderer():
    return Renderer()


@pytest.fixture
def buffer():
    return pygame.Surface((BUFFER_WIDTH, BUFFER_HEIGHT))


# ── helpers ─────────────────────────────────────────────────


def test_lerp_color_endpoints():
    assert lerp_color((0, 0, 0), (200, 100, 50), 0.0) == (0, 0, 0)
    assert lerp_color((0, 0, 0), (200, 100, 50), 1.0) == (200, 100, 50)
    assert lerp_color((0, 0, 0), (200, 100, 50), 0.5) == (100, 50, 25)


# ── draw pass ───────────────────────────────────────────────


def test_title_frame_draws(renderer, buffer, controller):
    renderer.draw(buffer, controller.snapshot())
    assert buffer.get_at((BUFFER_WIDTH // 2, BUFFER_HEIGHT // 2))[:3] != (0, 0, 0)


def test_title_with_name_prompt_and_dialogue(renderer, buffer, controller, advance):
    game = controller.game
    controller.on_key_down("Enter")
    advance(controller.update, 0.2)
    game.dialogue.begin(["A long line that needs to wrap across the box more than once."], start_typing=True)
    advance(controller.update, 0.5)
    renderer.draw(buffer, controller.snapshot())


def test_beach_frame_draws(renderer, buffer, controller, advance):
    game = controller.game
    controller.change_scene(SceneKey.ADVENTURE)
    advance(controller.update, 2.0)
    game.inventory_open = True
    game.collection.inventory.add("shell")
    game.collection.notice.show("+1 shell (1)")
    game.quest_prompt.open()
    controller.update(0.1)
    renderer.draw(buffer, controller.snapshot())


def test_cinematic_frames_draw(renderer, buffer, controller, advance):
    game = controller.game
    game.cinematic.start()
    for _ in range(12):
        advance(controller.update, 0.75)
        renderer.draw(buffer, controller.snapshot())


# ── fallback frame ──────────────────────────────────────────


def test_failing_draw_shows_error_frame(renderer, buffer, controller, monkeypatch, caplog):
    def boom(surface, snap):
        surface.fill((255, 255, 255))
        raise RuntimeError("sprite sheet exploded")

    monkeypatch.setattr(renderer, "draw", boom)
    with caplog.at_level(logging.ERROR):
        renderer.render_frame(buffer, controller.snapshot())

    assert buffer.get_at((2, 2))[:3] == (0, 0, 0)
    assert buffer.get_at((BUFFER_WIDTH - 2, BUFFER_HEIGHT - 2))[:3] == (0, 0, 0)
    assert "draw pass failed" in caplog.text


def test_dialogue_overlay_without_conversation_draws_nothing(renderer, buffer, controller):
    snap = controller.snapshot()
    assert snap.dialogue is None
    buffer.fill((1, 2, 3))
    renderer._draw_dialogue(buffer, snap)
    assert buffer.get_at((BUFFER_WIDTH // 2, BUFFER_HEIGHT - 20))[:3] == (1, 2, 3)
