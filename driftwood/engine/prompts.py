"""
Driftwood RPG - Modal Prompts
=============================
Fade-in / visible / fade-out overlays that capture input while open:

* ``NameEntryPrompt`` – a short text field for the player's name.
* ``QuestPrompt``     – a yes/no gate for setting sail.

Both share :class:`ModalPrompt`.  ``progress`` is 0 while hidden and 1 while
visible; ``layout`` holds the hit rectangles and is ``None`` while hidden.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

import pygame

from driftwood.core.constants import (
    BUFFER_HEIGHT,
    BUFFER_WIDTH,
    CARET_BLINK_PERIOD,
    KEY_BACKSPACE,
    KEY_CANCEL,
    KEYS_CONFIRM,
    NAME_ALLOWED_PATTERN,
    NAME_MAX_LENGTH,
    PROMPT_FADE_IN_DURATION,
    PROMPT_FADE_OUT_DURATION,
)

_NAME_CHAR = re.compile(NAME_ALLOWED_PATTERN)


class PromptPhase(Enum):
    HIDDEN = auto()
    OPENING = auto()
    VISIBLE = auto()
    CLOSING = auto()


@dataclass
class PromptState:
    phase: PromptPhase = PromptPhase.HIDDEN
    progress: float = 0.0


class ModalPrompt:
    """Shared open/close lifecycle."""

    def __init__(
        self,
        fade_in: float = PROMPT_FADE_IN_DURATION,
        fade_out: float = PROMPT_FADE_OUT_DURATION,
    ) -> None:
        self._fade_in = max(1e-6, fade_in)
        self._fade_out = max(1e-6, fade_out)
        self.state = PromptState()
        self.layout: dict[str, pygame.Rect] | None = None

    @property
    def phase(self) -> PromptPhase:
        return self.state.phase

    @property
    def progress(self) -> float:
        return self.state.progress

    @property
    def is_open(self) -> bool:
        return self.state.phase is not PromptPhase.HIDDEN

    @property
    def accepts_input(self) -> bool:
        return self.state.phase in (PromptPhase.OPENING, PromptPhase.VISIBLE)

    # ── lifecycle ───────────────────────────────────────────────────
    def open(self) -> bool:
        if self.state.phase is not PromptPhase.HIDDEN:
            return False
        self.state.phase = PromptPhase.OPENING
        self.state.progress = 0.0
        self.refresh_layout()
        return True

    def close(self) -> bool:
        if self.state.phase is not PromptPhase.VISIBLE:
            return False
        self.state.phase = PromptPhase.CLOSING
        self.state.progress = 1.0
        return True

    def reset(self) -> None:
        self.state = PromptState()
        self.layout = None

    def tick(self, dt: float) -> None:
        st = self.state
        if st.phase is PromptPhase.OPENING:
            st.progress = min(1.0, st.progress + dt / self._fade_in)
            if st.progress >= 1.0:
                st.phase = PromptPhase.VISIBLE
                st.progress = 1.0
        elif st.phase is PromptPhase.CLOSING:
            st.progress = max(0.0, st.progress - dt / self._fade_out)
            if st.progress <= 0.0:
                st.phase = PromptPhase.HIDDEN
                st.progress = 0.0
        self.refresh_layout()

    # ── hit testing ─────────────────────────────────────────────────
    def refresh_layout(self) -> None:
        self.layout = None if self.state.phase is PromptPhase.HIDDEN else self.compute_layout()

    def compute_layout(self) -> dict[str, pygame.Rect]:
        panel = pygame.Rect(0, 0, 200, 80)
        panel.center = (BUFFER_WIDTH // 2, BUFFER_HEIGHT // 2)
        return {"panel": panel}

    def hit_test(self, pos: tuple[float, float]) -> str | None:
        if not self.layout:
            return None
        hit = None
        for name, rect in self.layout.items():
            if rect.collidepoint(pos):
                if name != "panel":
                    return name
                hit = name
        return hit


# ── Name entry ──────────────────────────────────────────────────────
class NameEntryPrompt(ModalPrompt):
    def __init__(
        self,
        on_submit: Callable[[str], None] | None = None,
        max_length: int = NAME_MAX_LENGTH,
        **kwargs: float,
    ) -> None:
        super().__init__(**kwargs)
        self.on_submit = on_submit
        self.max_length = max_length
        self.buffer = ""
        self.caret_timer = 0.0

    @property
    def caret_visible(self) -> bool:
        return self.caret_timer < CARET_BLINK_PERIOD / 2

    def open(self) -> bool:
        opened = super().open()
        if opened:
            self.buffer = ""
            self.caret_timer = 0.0
        return opened

    def reset(self) -> None:
        super().reset()
        self.buffer = ""
        self.caret_timer = 0.0

    def tick(self, dt: float) -> None:
        super().tick(dt)
        if self.is_open:
            self.caret_timer = (self.caret_timer + dt) % CARET_BLINK_PERIOD

    def type_text(self, text: str) -> bool:
        """Append allowed characters; returns True if anything was added."""
        if not self.accepts_input:
            return False
        added = False
        for ch in text:
            if len(self.buffer) >= self.max_length:
                break
            if _NAME_CHAR.fullmatch(ch):
                self.buffer += ch
                added = True
        if added:
            self.caret_timer = 0.0
        return added

    def backspace(self) -> None:
        if self.accepts_input and self.buffer:
            self.buffer = self.buffer[:-1]
            self.caret_timer = 0.0

    def submit(self) -> bool:
        """Close with the trimmed name; blank input leaves the prompt open."""
        if self.phase is not PromptPhase.VISIBLE:
            return False
        name = self.buffer.strip()
        if not name:
            return False
        self.close()
        if self.on_submit:
            self.on_submit(name)
        return True

    def handle_key(self, code: str, text: str | None = None) -> bool:
        if not self.is_open:
            return False
        # Space types a space here, so only Enter submits
        if code == "Enter":
            self.submit()
        elif code == KEY_BACKSPACE:
            self.backspace()
        elif text:
            self.type_text(text)
        # Everything is swallowed while the prompt is up
        return True

    def handle_pointer(self, pos: tuple[float, float]) -> bool:
        if not self.is_open:
            return False
        if self.hit_test(pos) == "submit":
            self.submit()
        return True

    def compute_layout(self) -> dict[str, pygame.Rect]:
        layout = super().compute_layout()
        panel = layout["panel"]
        layout["field"] = pygame.Rect(panel.x + 12, panel.y + 28, panel.width - 24, 16)
        layout["submit"] = pygame.Rect(panel.centerx - 24, panel.bottom - 24, 48, 14)
        return layout


# ── Quest accept ────────────────────────────────────────────────────
class QuestPrompt(ModalPrompt):
    def __init__(
        self,
        on_confirm: Callable[[], None] | None = None,
        on_decline: Callable[[], None] | None = None,
        **kwargs: float,
    ) -> None:
        super().__init__(**kwargs)
        self.on_confirm = on_confirm
        self.on_decline = on_decline
        self.quest_accepted = False

    def reset(self) -> None:
        super().reset()
        self.quest_accepted = False

    def confirm(self) -> bool:
        if self.quest_accepted or self.phase is not PromptPhase.VISIBLE:
            return False
        self.quest_accepted = True
        self.close()
        if self.on_confirm:
            self.on_confirm()
        return True

    def decline(self) -> bool:
        if not self.close():
            return False
        if self.on_decline:
            self.on_decline()
        return True

    def handle_key(self, code: str, text: str | None = None) -> bool:
        if not self.is_open:
            return False
        if code in KEYS_CONFIRM:
            self.confirm()
        elif code == KEY_CANCEL:
            self.decline()
        return True

    def handle_pointer(self, pos: tuple[float, float]) -> bool:
        if not self.is_open:
            return False
        hit = self.hit_test(pos)
        if hit == "confirm":
            self.confirm()
        elif hit == "decline":
            self.decline()
        return True

    def compute_layout(self) -> dict[str, pygame.Rect]:
        layout = super().compute_layout()
        panel = layout["panel"]
        layout["confirm"] = pygame.Rect(panel.x + 24, panel.bottom - 26, 60, 16)
        layout["decline"] = pygame.Rect(panel.right - 84, panel.bottom - 26, 60, 16)
        return layout
