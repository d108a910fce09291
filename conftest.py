import os

# Headless pygame for the whole suite
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from driftwood.core.game_state import GameState
from driftwood.core.scene_controller import SceneController
from driftwood.core.soundtrack import (
    ADVENTURE_CONTEXT,
    AMBIENT_TRACKS,
    AMBIENT_WAVES,
    BEACH_THEME,
    TITLE_CONTEXT,
    TITLE_THEME,
)
from driftwood.engine.audio import AudioFadeManager, PlaybackRejected


class FakeElement:
    """In-memory audio element.  ``rejections`` plays fail before one succeeds."""

    def __init__(self, ready=True, rejections=0):
        self.volume = 0.0
        self.loop = True
        self.ready = ready
        self.paused = True
        self.rejections = rejections
        self.play_calls = 0
        self.rewinds = 0

    def play(self):
        self.play_calls += 1
        if self.rejections > 0:
            self.rejections -= 1
            raise PlaybackRejected("autoplay blocked")
        self.paused = False

    def pause(self):
        self.paused = True

    def rewind(self):
        self.rewinds += 1
        self.paused = True


@pytest.fixture
def make_element():
    return FakeElement


@pytest.fixture
def audio():
    return AudioFadeManager()


@pytest.fixture
def game():
    """A GameState whose soundtrack is wired to fake elements."""
    state = GameState()
    for name in (TITLE_THEME, *AMBIENT_TRACKS):
        state.audio.add_track(
            name,
            FakeElement(),
            base_volume=0.5,
            context=TITLE_CONTEXT,
            auto_start=True,
            allow_idle_playback=name == AMBIENT_WAVES,
        )
    state.audio.add_track(BEACH_THEME, FakeElement(), base_volume=0.5, context=ADVENTURE_CONTEXT, auto_start=True)
    return state


@pytest.fixture
def controller(game):
    return SceneController(game)


def run_for(tick, seconds, step=1 / 60):
    """Call ``tick(step)`` until *seconds* have elapsed."""
    elapsed = 0.0
    while elapsed < seconds - 1e-9:
        dt = min(step, seconds - elapsed)
        tick(dt)
        elapsed += dt


@pytest.fixture
def advance():
    return run_for
