"""
Driftwood RPG - Dialogue Engine
===============================
One conversation at a time: an ordered list of lines revealed glyph by
glyph (typewriter), advanced by the player, closed by completion or an
explicit cancel.

Starting a new session replaces the running one *without* calling its
``on_cancel``; only :meth:`DialogueEngine.cancel` does that.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from driftwood.core.constants import DIALOGUE_BOX_OPEN_DURATION, DIALOGUE_CHAR_INTERVAL


def _clean_lines(lines: Iterable[Any]) -> list[str]:
    return [line for line in lines if isinstance(line, str) and line]


@dataclass
class DialogueSession:
    """State of the active conversation."""

    lines: list[str]
    index: int = 0
    revealed_chars: int = 0
    typing_active: bool = False
    portrait_key: str | None = None
    context: str | None = None
    cancellable: bool = True
    on_complete: Callable[[], None] | None = None
    on_cancel: Callable[[], None] | None = None
    box_progress: float = 0.0
    type_timer: float = 0.0
    started_typing: bool = False

    @property
    def current_line(self) -> str:
        return self.lines[self.index]

    @property
    def fully_revealed(self) -> bool:
        return self.revealed_chars >= len(self.current_line)

    @property
    def visible_text(self) -> str:
        return self.current_line[: self.revealed_chars]

    @property
    def is_last_line(self) -> bool:
        return self.index >= len(self.lines) - 1


@dataclass
class DialogueEngine:
    char_interval: float = DIALOGUE_CHAR_INTERVAL
    box_open_duration: float = DIALOGUE_BOX_OPEN_DURATION
    on_glyph: Callable[[str], None] | None = None
    session: DialogueSession | None = field(default=None)

    @property
    def is_active(self) -> bool:
        return self.session is not None

    @property
    def context(self) -> str | None:
        return self.session.context if self.session else None

    # ── lifecycle ───────────────────────────────────────────────────
    def begin(
        self,
        lines: Iterable[Any],
        *,
        start_index: int = 0,
        start_typing: bool = False,
        portrait_key: str | None = None,
        context: str | None = None,
        cancellable: bool = True,
        on_complete: Callable[[], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> bool:
        """Replace any running session.  Returns False if *lines* is empty."""
        cleaned = _clean_lines(lines)
        if not cleaned:
            return False
        start_index = max(0, min(start_index, len(cleaned) - 1))
        self.session = DialogueSession(
            lines=cleaned,
            index=start_index,
            portrait_key=portrait_key,
            context=context,
            cancellable=cancellable,
            on_complete=on_complete,
            on_cancel=on_cancel,
        )
        if start_typing:
            self.session.box_progress = 1.0
            self._start_line()
        return True

    def append_lines(self, lines: Iterable[Any]) -> None:
        if self.session is not None:
            self.session.lines.extend(_clean_lines(lines))

    def clear(self) -> None:
        """Drop the session without running any callback."""
        self.session = None

    def cancel(self) -> bool:
        s = self.session
        if s is None or not s.cancellable:
            return False
        self.session = None
        if s.on_cancel:
            s.on_cancel()
        return True

    # ── per-frame ───────────────────────────────────────────────────
    def tick(self, dt: float) -> None:
        s = self.session
        if s is None:
            return

        if not s.started_typing:
            s.box_progress = min(1.0, s.box_progress + dt / max(1e-6, self.box_open_duration))
            if s.box_progress >= 1.0:
                self._start_line()
            return

        if not s.typing_active:
            return
        s.type_timer += dt
        line = s.current_line
        while s.type_timer >= self.char_interval and s.revealed_chars < len(line):
            s.type_timer -= self.char_interval
            glyph = line[s.revealed_chars]
            s.revealed_chars += 1
            if self.on_glyph and not glyph.isspace():
                self.on_glyph(glyph)
        if s.revealed_chars >= len(line):
            s.typing_active = False
            s.type_timer = 0.0

    def advance(self) -> None:
        """Skip-reveal the current line, or move on once it is fully shown."""
        s = self.session
        if s is None:
            return
        if not s.fully_revealed:
            s.box_progress = 1.0
            s.started_typing = True
            s.revealed_chars = len(s.current_line)
            s.typing_active = False
            s.type_timer = 0.0
            return
        if s.is_last_line:
            self.session = None
            if s.on_complete:
                s.on_complete()
            return
        s.index += 1
        self._start_line()

    def _start_line(self) -> None:
        s = self.session
        if s is None:
            return
        s.started_typing = True
        s.revealed_chars = 0
        s.type_timer = 0.0
        s.typing_active = True
