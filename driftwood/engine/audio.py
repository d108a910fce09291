"""
Driftwood RPG - Audio Fade Manager
==================================
Every looping track ramps its volume linearly toward a target.  Other
components only ever move targets; the element's real volume belongs to
this manager.

Starting playback may be refused (no mixer, no free channel, an autoplay
policy on other backends).  A refused track is retried quietly after a
short backoff until it plays or its target drops back to zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

import pygame

from driftwood.core.assets import SoundAsset
from driftwood.core.constants import AUDIO_DEFAULT_FADE, AUDIO_RETRY_DELAY

logger = logging.getLogger(__name__)


class PlaybackRejected(RuntimeError):
    """Raised by an audio element that could not start playing."""


# ── Element protocol ────────────────────────────────────────────────
class AudioElement(Protocol):
    volume: float
    loop: bool

    @property
    def ready(self) -> bool: ...
    @property
    def paused(self) -> bool: ...
    def play(self) -> None: ...
    def pause(self) -> None: ...
    def rewind(self) -> None: ...


class MixerElement:
    """:class:`AudioElement` backed by a ``pygame.mixer`` sound and channel."""

    def __init__(self, asset: SoundAsset, loop: bool = True) -> None:
        self._asset = asset
        self.loop = loop
        self._channel: pygame.mixer.Channel | None = None
        self._paused = True
        self._volume = 0.0

    @property
    def ready(self) -> bool:
        return self._asset.ready

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = max(0.0, min(1.0, value))
        if self._channel is not None:
            self._channel.set_volume(self._volume)

    def play(self) -> None:
        if not pygame.mixer.get_init() or self._asset.sound is None:
            raise PlaybackRejected("mixer not available")
        if self._channel is not None and self._channel.get_sound() is self._asset.sound:
            self._channel.unpause()
        else:
            channel = self._asset.sound.play(loops=-1 if self.loop else 0)
            if channel is None:
                raise PlaybackRejected("no free mixer channel")
            self._channel = channel
        self._channel.set_volume(self._volume)
        self._paused = False

    def pause(self) -> None:
        if self._channel is not None:
            self._channel.pause()
        self._paused = True

    def rewind(self) -> None:
        if self._channel is not None:
            self._channel.stop()
        self._channel = None
        self._paused = True


# ── Track state ─────────────────────────────────────────────────────
@dataclass
class AudioTrack:
    name: str
    element: AudioElement
    base_target_volume: float = 1.0
    current_target_volume: float = 0.0
    fade_duration: float = AUDIO_DEFAULT_FADE
    loop: bool = True
    auto_start: bool = False
    retrigger: bool = False
    context: str | None = None
    allow_idle_playback: bool = False
    started: bool = False
    play_pending: bool = False
    retry_delay: float = 0.0
    attempting: bool = False

    @property
    def volume(self) -> float:
        return self.element.volume


class AudioFadeManager:
    """Owns every track and cue; advanced once per frame by :meth:`tick`."""

    def __init__(self, retry_delay: float = AUDIO_RETRY_DELAY) -> None:
        self._retry_delay = retry_delay
        self.tracks: dict[str, AudioTrack] = {}
        self.cues: dict[str, tuple[AudioElement, float]] = {}
        self.active_context: str | None = None

    # ── registration ────────────────────────────────────────────────
    def add_track(
        self,
        name: str,
        element: AudioElement,
        *,
        base_volume: float = 1.0,
        fade_duration: float = AUDIO_DEFAULT_FADE,
        loop: bool = True,
        auto_start: bool = False,
        retrigger: bool = False,
        context: str | None = None,
        allow_idle_playback: bool = False,
    ) -> AudioTrack:
        element.volume = 0.0
        track = AudioTrack(
            name=name,
            element=element,
            base_target_volume=base_volume,
            fade_duration=max(1e-3, fade_duration),
            loop=loop,
            auto_start=auto_start,
            retrigger=retrigger,
            context=context,
            allow_idle_playback=allow_idle_playback,
        )
        self.tracks[name] = track
        return track

    def add_cue(self, name: str, element: AudioElement, volume: float = 1.0) -> None:
        self.cues[name] = (element, volume)

    # ── targets ─────────────────────────────────────────────────────
    def set_context(self, context: str | None) -> None:
        """Make *context* the active one; its auto-start tracks fade in."""
        self.active_context = context
        for track in self.tracks.values():
            if track.context != context:
                continue
            if track.auto_start:
                self.set_target(track.name, track.base_target_volume)
            elif track.current_target_volume > 0 and track.element.paused:
                self._request_play(track)

    def set_target(self, name: str, volume: float, fade_duration: float | None = None) -> None:
        track = self.tracks.get(name)
        if track is None:
            logger.debug("[Audio] no track named '%s'", name)
            return
        volume = max(0.0, min(1.0, volume))
        was_silent = track.current_target_volume <= 0 or track.element.paused
        track.current_target_volume = volume
        if fade_duration is not None:
            track.fade_duration = max(1e-3, fade_duration)
        if volume > 0 and was_silent and track.element.paused:
            if track.retrigger:
                track.element.rewind()
            self._request_play(track)

    def soften(self, names: Iterable[str], factor: float) -> None:
        for name in names:
            track = self.tracks.get(name)
            if track is not None:
                self.set_target(name, track.current_target_volume * factor)

    def effective_target(self, track: AudioTrack) -> float:
        idle = track.context is not None and track.context != self.active_context
        if idle and not track.allow_idle_playback:
            return 0.0
        return track.current_target_volume

    # ── playback ────────────────────────────────────────────────────
    def _request_play(self, track: AudioTrack) -> None:
        if track.attempting:
            return
        if track.play_pending and track.retry_delay > 0:
            return
        if not track.element.ready:
            # Not loaded yet: check again next frame, no backoff
            track.play_pending = True
            track.retry_delay = 0.0
            return
        track.attempting = True
        track.element.loop = track.loop
        try:
            track.element.play()
        except PlaybackRejected as e:
            track.play_pending = True
            track.retry_delay = self._retry_delay
            logger.debug("[Audio] '%s' rejected (%s), retrying in %.2fs", track.name, e, self._retry_delay)
        else:
            track.started = True
            track.play_pending = False
            track.retry_delay = 0.0
        finally:
            track.attempting = False

    def play_one_shot(self, name: str) -> None:
        """Restart cue *name* from the top.  Refusals are dropped."""
        cue = self.cues.get(name)
        if cue is None:
            return
        element, volume = cue
        if not element.ready:
            return
        element.rewind()
        element.volume = volume
        try:
            element.play()
        except PlaybackRejected as e:
            logger.debug("[Audio] cue '%s' dropped: %s", name, e)

    def tick(self, dt: float) -> None:
        for track in self.tracks.values():
            target = self.effective_target(track)

            if track.play_pending:
                if target <= 0:
                    track.play_pending = False
                    track.retry_delay = 0.0
                else:
                    track.retry_delay = max(0.0, track.retry_delay - dt)
                    if track.retry_delay <= 0:
                        self._request_play(track)
                if track.play_pending:
                    continue

            current = track.element.volume
            step = dt / track.fade_duration
            if current < target:
                current = min(target, current + step)
            elif current > target:
                current = max(target, current - step)
            track.element.volume = max(0.0, min(1.0, current))

            if target <= 0 and track.element.volume <= 0 and not track.element.paused:
                track.element.pause()

    def reset(self) -> None:
        """Silence every track and forget pending retries."""
        for track in self.tracks.values():
            track.current_target_volume = 0.0
            track.play_pending = False
            track.retry_delay = 0.0
            track.started = False
            track.element.volume = 0.0
            track.element.rewind()
        self.active_context = None
