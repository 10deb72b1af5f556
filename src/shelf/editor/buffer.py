"""Text buffer model: the Markdown text being edited plus its selection."""

from __future__ import annotations

import copy
from dataclasses import dataclass


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass
class BufferState:
    """Detached copy of a buffer's text and selection."""

    text: str = ""
    selection_start: int = 0
    selection_end: int = 0


class TextBuffer:
    """Owns the note text and a selection ``(start, end)``.

    Every mutation keeps ``0 <= start <= end <= len(text)``. The caret is the
    selection start, which is what a text input reports after an edit.
    """

    def __init__(self, text: str = "", caret: int | None = None) -> None:
        self._text = text
        pos = len(text) if caret is None else _clamp(caret, 0, len(text))
        self._start = pos
        self._end = pos

    @property
    def text(self) -> str:
        return self._text

    @property
    def caret(self) -> int:
        return self._start

    @property
    def selection(self) -> tuple[int, int]:
        return self._start, self._end

    def __len__(self) -> int:
        return len(self._text)

    def char_at(self, index: int) -> str | None:
        if 0 <= index < len(self._text):
            return self._text[index]
        return None

    def set_text(self, text: str) -> None:
        """Replace the whole buffer.

        The selection is clamped into the new bounds but not otherwise
        preserved; callers that need the caret somewhere specific must set it
        afterwards.
        """
        self._text = text
        self._start = _clamp(self._start, 0, len(text))
        self._end = _clamp(self._end, self._start, len(text))

    def set_selection(self, start: int, end: int | None = None) -> None:
        length = len(self._text)
        start = _clamp(start, 0, length)
        end = start if end is None else _clamp(end, 0, length)
        self._start, self._end = min(start, end), max(start, end)

    def splice(self, start: int, end: int, inserted: str, cursor_offset: int = 0) -> int:
        """Replace ``[start, end)`` with *inserted* in one step.

        Returns the new caret: ``start + len(inserted) + cursor_offset``,
        clamped to the resulting text.
        """
        length = len(self._text)
        start = _clamp(start, 0, length)
        end = _clamp(end, start, length)
        self._text = self._text[:start] + inserted + self._text[end:]
        caret = _clamp(start + len(inserted) + cursor_offset, 0, len(self._text))
        self._start = self._end = caret
        return caret

    def splice_at(self, position: int, inserted: str, cursor_offset: int = 0) -> int:
        """Insert *inserted* at *position* without removing anything."""
        return self.splice(position, position, inserted, cursor_offset)

    # -- Typing ----------------------------------------------------------------

    def insert(self, text: str) -> None:
        """Type *text* at the caret, replacing any selected range."""
        self.splice(self._start, self._end, text)

    def delete_backward(self) -> None:
        if self._start != self._end:
            self.splice(self._start, self._end, "")
        elif self._start > 0:
            self.splice(self._start - 1, self._start, "")

    def delete_forward(self) -> None:
        if self._start != self._end:
            self.splice(self._start, self._end, "")
        elif self._start < len(self._text):
            self.splice(self._start, self._start + 1, "")

    # -- Snapshots -------------------------------------------------------------

    def snapshot(self) -> BufferState:
        return BufferState(self._text, self._start, self._end)

    def restore(self, state: BufferState) -> None:
        self._text = state.text
        self.set_selection(state.selection_start, state.selection_end)


class UndoHistory:
    """Bounded stack of buffer snapshots.

    Snapshots are cloned on push; popped ones are handed out directly since
    nothing else holds them.
    """

    def __init__(self, max_depth: int = 100) -> None:
        self._stack: list[BufferState] = []
        self._max_depth = max(1, max_depth)

    def push(self, state: BufferState) -> None:
        self._stack.append(copy.copy(state))
        if len(self._stack) > self._max_depth:
            del self._stack[0]

    def pop(self) -> BufferState | None:
        return self._stack.pop() if self._stack else None

    def clear(self) -> None:
        self._stack.clear()

    @property
    def length(self) -> int:
        return len(self._stack)
