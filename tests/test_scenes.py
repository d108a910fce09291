import dataclasses

import pytest

from driftwood.core.scene_controller import SceneKey
from driftwood.core.constants import BEACH_WAVES_VOLUME
from driftwood.core.soundtrack import AMBIENT_WAVES, AMBIENT_WIND, BEACH_THEME, TITLE_THEME
from driftwood.engine.cinematic import CinematicPhase
from driftwood.engine.collection import Collectible
from driftwood.engine.prompts import PromptPhase


def _press(controller, code, text=None):
    return controller.on_key_down(code, text)


def _talk_through(controller, limit=40):
    game = controller.game
    for _ in range(limit):
        if not game.dialogue.is_active:
            return
        _press(controller, "Enter")
    raise AssertionError("conversation never ended")


@pytest.fixture
def on_beach(controller, advance):
    controller.change_scene(SceneKey.ADVENTURE)
    advance(controller.update, 2.0)
    assert controller.active_key is SceneKey.ADVENTURE
    assert not controller.is_transitioning
    return controller


# ── controller ──────────────────────────────────────────────


def test_starts_on_title(controller):
    game = controller.game
    assert controller.active_key is SceneKey.TITLE
    assert game.audio.active_context == "title"
    assert game.audio.tracks[TITLE_THEME].current_target_volume > 0


def test_frame_delta_is_clamped(controller):
    controller.update(5.0)
    assert controller.game.time == pytest.approx(0.25)
    controller.update(-1.0)
    assert controller.game.time == pytest.approx(0.25)


def test_crossfade_ignores_reentrant_changes(controller, advance):
    assert controller.change_scene(SceneKey.ADVENTURE)
    assert controller.change_scene(SceneKey.TITLE) is False

    advance(controller.update, 0.3)
    assert controller.active_key is SceneKey.TITLE
    assert 0.0 < controller.crossfade < 1.0

    advance(controller.update, 0.4)
    assert controller.active_key is SceneKey.ADVENTURE
    assert controller.is_transitioning

    advance(controller.update, 1.0)
    assert not controller.is_transitioning
    assert controller.crossfade == 0.0


def test_input_swallowed_during_transition(controller):
    controller.change_scene(SceneKey.ADVENTURE)
    assert _press(controller, "Enter") is True
    assert not controller.game.name_prompt.is_open
    assert controller.on_pointer_down((160, 100)) is True


def test_snapshot_is_read_only(controller):
    snap = controller.snapshot()
    assert snap.scene == "title"
    assert len(snap.petals) == 34
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.coins = 99


# ── title flow ──────────────────────────────────────────────


def test_title_to_beach(controller, advance):
    game = controller.game
    assert _press(controller, "KeyX", "x") is False
    assert _press(controller, "Enter")
    assert game.name_prompt.is_open

    advance(controller.update, 0.5)
    assert game.name_prompt.phase is PromptPhase.VISIBLE
    for ch in "Mira":
        _press(controller, "Key" + ch.upper(), ch)
    _press(controller, "Enter")
    assert game.profile.name == "Mira"
    assert game.cinematic.phase is CinematicPhase.TO_BLACK
    assert game.audio.tracks[TITLE_THEME].current_target_volume == 0.0

    # Keys do nothing while the cinematic owns the screen
    assert _press(controller, "Enter")
    assert not game.dialogue.is_active

    advance(controller.update, 10.0)
    assert game.dialogue.context == "intro"
    assert any("Mira" in line for line in game.dialogue.session.lines)

    # The intro cannot be dismissed
    _press(controller, "Escape")
    assert game.dialogue.is_active

    _talk_through(controller)
    assert controller.is_transitioning
    advance(controller.update, 2.0)
    assert controller.active_key is SceneKey.ADVENTURE
    assert game.audio.active_context == "adventure"
    assert game.audio.tracks[BEACH_THEME].current_target_volume > 0
    assert len(game.collection.items) == 22
    assert game.profile.name == "Mira"


def test_click_opens_name_entry(controller):
    assert controller.on_pointer_down((10, 10))
    assert controller.game.name_prompt.is_open


# ── beach ───────────────────────────────────────────────────


def test_walking_with_held_keys(on_beach, advance):
    game = on_beach.game
    start_x = game.player.x
    _press(on_beach, "ArrowRight")
    advance(on_beach.update, 1.0)
    assert game.player.x == pytest.approx(start_x + 70, abs=1.5)

    on_beach.on_key_up("ArrowRight")
    on_beach.update(1 / 60)
    assert not game.player.moving
    assert game.player.anim_frame == 0


def test_click_to_collect(on_beach, advance):
    game = on_beach.game
    item = Collectible("shell", game.player.x + 50, game.player.y)
    game.collection.reset(items=[item])

    screen_x = item.world_x - game.camera.x
    assert on_beach.on_pointer_down((screen_x, item.world_y))
    advance(on_beach.update, 1.5)
    assert item.collected
    assert game.collection.inventory.count("shell") == 1
    assert game.collection.notice.text == "+1 shell (1)"


def test_beach_keeps_a_wave_bed(on_beach):
    audio = on_beach.game.audio
    assert audio.active_context == "adventure"
    assert audio.tracks[AMBIENT_WAVES].current_target_volume == BEACH_WAVES_VOLUME
    assert audio.tracks[AMBIENT_WAVES].element.volume > 0
    assert audio.tracks[AMBIENT_WIND].element.volume == 0.0


def test_inventory_toggle(on_beach):
    game = on_beach.game
    _press(on_beach, "KeyI")
    assert game.inventory_open
    _press(on_beach, "Escape")
    assert not game.inventory_open


def test_talking_freezes_keeper_and_player(on_beach, advance):
    game = on_beach.game
    game.player.x, game.player.y = game.keeper.x, game.keeper.y + 10
    assert _press(on_beach, "KeyE")
    assert game.dialogue.context == "keeper"

    keeper_at = (game.keeper.x, game.keeper.y)
    player_at = (game.player.x, game.player.y)
    _press(on_beach, "ArrowLeft")
    advance(on_beach.update, 1.0)
    assert (game.keeper.x, game.keeper.y) == keeper_at
    assert game.player.x == player_at[0]

    _press(on_beach, "Escape")
    assert not game.dialogue.is_active


def test_talk_key_out_of_range_does_nothing(on_beach):
    assert _press(on_beach, "KeyE") is False
    assert not on_beach.game.dialogue.is_active


def test_full_quest_and_voyage(on_beach, advance):
    game = on_beach.game
    for _ in range(10):
        game.collection.inventory.add("driftwood")

    game.player.x, game.player.y = game.keeper.x, game.keeper.y + 10
    _press(on_beach, "KeyE")
    assert game.profile.coins == 25
    assert game.quest.reward_given
    _talk_through(on_beach)

    game.player.x, game.player.y = game.drifter.x, game.drifter.y + 5
    _press(on_beach, "KeyE")
    assert game.dialogue.context == "drifter"
    _talk_through(on_beach)
    assert game.quest_prompt.is_open

    advance(on_beach.update, 0.5)
    assert game.quest_prompt.phase is PromptPhase.VISIBLE
    _press(on_beach, "Enter")
    assert game.terminal_fading
    assert game.audio.tracks[BEACH_THEME].current_target_volume == 0.0
    assert game.audio.tracks[AMBIENT_WAVES].current_target_volume == 0.0

    # Input is ignored once the voyage begins
    _press(on_beach, "KeyI")
    assert not game.inventory_open

    advance(on_beach.update, 4.0)
    assert on_beach.active_key is SceneKey.TITLE
    assert game.profile.coins == 0
    assert game.profile.name is None
    assert not game.quest.reward_given
    assert game.collection.items == []
    assert not game.terminal_fading

    # The soundtrack starts over with the title
    beach = game.audio.tracks[BEACH_THEME]
    assert game.audio.active_context == "title"
    assert not beach.started
    assert beach.element.volume == 0.0
    assert beach.element.rewinds >= 1
    assert game.audio.tracks[TITLE_THEME].current_target_volume > 0


def test_declining_the_voyage_keeps_playing(on_beach, advance):
    game = on_beach.game
    game.quest.reward_given = True
    game.player.x, game.player.y = game.drifter.x, game.drifter.y + 5
    _press(on_beach, "KeyE")
    _talk_through(on_beach)
    advance(on_beach.update, 0.5)
    _press(on_beach, "Escape")
    advance(on_beach.update, 0.5)
    assert not game.quest_prompt.is_open
    assert not game.terminal_fading
    assert on_beach.active_key is SceneKey.ADVENTURE
