"""
Driftwood RPG - Soundtrack
==========================
Track and cue names, and the table that wires them to sound files.
"""

from __future__ import annotations

from driftwood.core.assets import AssetLibrary
from driftwood.engine.audio import AudioFadeManager, MixerElement

TITLE_CONTEXT = "title"
ADVENTURE_CONTEXT = "adventure"

TITLE_THEME = "title_theme"
AMBIENT_WAVES = "ambient_waves"
AMBIENT_WIND = "ambient_wind"
BEACH_THEME = "beach_theme"
AMBIENT_TRACKS: tuple[str, ...] = (AMBIENT_WAVES, AMBIENT_WIND)

CUE_TYPE = "type_click"
CUE_REACTION = "reaction_gasp"
CUE_PICKUP = "pickup_chime"
CUE_COINS = "coins"
CUE_CONFIRM = "confirm"

# name: (file, base volume, context, auto start, allow idle playback)
_TRACKS: dict[str, tuple[str, float, str, bool, bool]] = {
    TITLE_THEME: ("title_theme.ogg", 0.6, TITLE_CONTEXT, True, False),
    AMBIENT_WAVES: ("waves.ogg", 0.5, TITLE_CONTEXT, True, True),
    AMBIENT_WIND: ("wind.ogg", 0.3, TITLE_CONTEXT, True, False),
    BEACH_THEME: ("beach_theme.ogg", 0.5, ADVENTURE_CONTEXT, True, False),
}

_CUES: dict[str, tuple[str, float]] = {
    CUE_TYPE: ("type_click.wav", 0.25),
    CUE_REACTION: ("reaction_gasp.wav", 0.8),
    CUE_PICKUP: ("pickup.wav", 0.6),
    CUE_COINS: ("coins.wav", 0.7),
    CUE_CONFIRM: ("confirm.wav", 0.6),
}


def install_soundtrack(audio: AudioFadeManager, assets: AssetLibrary) -> None:
    for name, (filename, volume, context, auto_start, idle_ok) in _TRACKS.items():
        element = MixerElement(assets.load_sound(name, filename))
        audio.add_track(
            name,
            element,
            base_volume=volume,
            context=context,
            auto_start=auto_start,
            retrigger=name == TITLE_THEME,
            allow_idle_playback=idle_ok,
        )
    for name, (filename, volume) in _CUES.items():
        audio.add_cue(name, MixerElement(assets.load_sound(name, filename), loop=False), volume)
