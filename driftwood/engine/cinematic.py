"""
Driftwood RPG - Cinematic Sequencer
===================================
The waking-up sequence played after the name is entered::

    IDLE → TO_BLACK → BLACK_HOLD → EYE_OPENING → EYE_CLOSING
         → EYE_FINAL_OPEN → DONE

Each phase fills ``progress`` by ``dt / duration`` and moves on at 1.  At
most one edge is crossed per tick.  Reaching DONE starts a chain of plain
countdowns (reaction cue, then ambient fade-out, then the intro
conversation).  Everything the scene must react to comes back from
:meth:`CinematicSequencer.tick` as :class:`CinematicEvent` values, so
:meth:`reset` can cancel the whole chain by zeroing fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from driftwood.core.constants import (
    AMBIENT_FADE_DELAY,
    BLACK_HOLD_DURATION,
    EYE_CLOSING_DURATION,
    EYE_CRACK_OPENNESS,
    EYE_FINAL_OPEN_DURATION,
    EYE_OPENING_DURATION,
    REACTION_CUE_DURATION,
    TO_BLACK_DURATION,
)

_EPSILON = 1e-9


class CinematicPhase(Enum):
    IDLE = auto()
    TO_BLACK = auto()
    BLACK_HOLD = auto()
    EYE_OPENING = auto()
    EYE_CLOSING = auto()
    EYE_FINAL_OPEN = auto()
    DONE = auto()


class CinematicEvent(Enum):
    SOFTEN_AMBIENT = auto()
    REACTION_CUE = auto()
    AMBIENT_FADE_OUT = auto()
    BEGIN_INTRO_DIALOGUE = auto()


_NEXT_PHASE: dict[CinematicPhase, CinematicPhase] = {
    CinematicPhase.TO_BLACK: CinematicPhase.BLACK_HOLD,
    CinematicPhase.BLACK_HOLD: CinematicPhase.EYE_OPENING,
    CinematicPhase.EYE_OPENING: CinematicPhase.EYE_CLOSING,
    CinematicPhase.EYE_CLOSING: CinematicPhase.EYE_FINAL_OPEN,
    CinematicPhase.EYE_FINAL_OPEN: CinematicPhase.DONE,
}


@dataclass(frozen=True)
class CinematicTimings:
    to_black: float = TO_BLACK_DURATION
    black_hold: float = BLACK_HOLD_DURATION
    eye_opening: float = EYE_OPENING_DURATION
    eye_closing: float = EYE_CLOSING_DURATION
    eye_final_open: float = EYE_FINAL_OPEN_DURATION
    reaction_cue: float = REACTION_CUE_DURATION
    ambient_fade_delay: float = AMBIENT_FADE_DELAY

    def duration(self, phase: CinematicPhase) -> float:
        return {
            CinematicPhase.TO_BLACK: self.to_black,
            CinematicPhase.BLACK_HOLD: self.black_hold,
            CinematicPhase.EYE_OPENING: self.eye_opening,
            CinematicPhase.EYE_CLOSING: self.eye_closing,
            CinematicPhase.EYE_FINAL_OPEN: self.eye_final_open,
        }[phase]


class CinematicSequencer:
    def __init__(self, timings: CinematicTimings | None = None) -> None:
        self.timings = timings or CinematicTimings()
        self.reset()

    def reset(self) -> None:
        self.phase = CinematicPhase.IDLE
        self.progress = 0.0
        self.black_fade = 0.0
        self.eye_openness = 0.0
        self.reaction_timer = 0.0
        self.ambient_timer = 0.0

    def start(self) -> bool:
        if self.phase is not CinematicPhase.IDLE:
            return False
        self.phase = CinematicPhase.TO_BLACK
        self.progress = 0.0
        return True

    # ── per-frame ───────────────────────────────────────────────────
    def tick(self, dt: float) -> list[CinematicEvent]:
        events: list[CinematicEvent] = []
        if self.phase is CinematicPhase.DONE:
            self._tick_chain(dt, events)
            return events
        if self.phase is CinematicPhase.IDLE:
            return events

        duration = max(1e-6, self.timings.duration(self.phase))
        self.progress = min(1.0, self.progress + dt / duration)
        if self.progress >= 1.0 - _EPSILON:
            self.progress = 1.0
            self._apply_visuals()
            self._exit_phase(events)
        else:
            self._apply_visuals()
        return events

    def _exit_phase(self, events: list[CinematicEvent]) -> None:
        leaving = self.phase
        self.phase = _NEXT_PHASE[leaving]
        if leaving is CinematicPhase.EYE_FINAL_OPEN:
            events.append(CinematicEvent.SOFTEN_AMBIENT)
            events.append(CinematicEvent.REACTION_CUE)
            self.reaction_timer = max(1e-6, self.timings.reaction_cue)
            self.progress = 1.0
            return
        self.progress = 0.0

    def _tick_chain(self, dt: float, events: list[CinematicEvent]) -> None:
        if self.reaction_timer > 0:
            self.reaction_timer = max(0.0, self.reaction_timer - dt)
            if self.reaction_timer <= 0:
                events.append(CinematicEvent.AMBIENT_FADE_OUT)
                self.ambient_timer = max(1e-6, self.timings.ambient_fade_delay)
            return
        if self.ambient_timer > 0:
            self.ambient_timer = max(0.0, self.ambient_timer - dt)
            if self.ambient_timer <= 0:
                events.append(CinematicEvent.BEGIN_INTRO_DIALOGUE)

    def _apply_visuals(self) -> None:
        p = self.progress
        phase = self.phase
        if phase is CinematicPhase.TO_BLACK:
            self.black_fade = p
            self.eye_openness = 0.0
        elif phase is CinematicPhase.BLACK_HOLD:
            self.black_fade = 1.0
        elif phase is CinematicPhase.EYE_OPENING:
            self.eye_openness = EYE_CRACK_OPENNESS * p
        elif phase is CinematicPhase.EYE_CLOSING:
            self.eye_openness = EYE_CRACK_OPENNESS * (1.0 - p)
        elif phase is CinematicPhase.EYE_FINAL_OPEN:
            self.eye_openness = p
