"""Command menu state and its text rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol

from shelf.editor.commands import Command
from shelf.editor.metrics import ScreenPosition
from shelf.editor.utils import truncate_to_width, visible_width

HINT_TEXT = "Insert Markdown • ↑↓ to select • Enter to confirm"
NO_MATCH_TEXT = "No matching commands"


@dataclass
class MenuState:
    """Slash menu state.

    While ``open`` is true, ``trigger_offset`` indexes the ``/`` that opened
    the menu and ``filter_text`` is the text typed after it up to the caret.
    """

    open: bool = False
    trigger_offset: int | None = None
    filter_text: str = ""
    selected_index: int = 0
    screen_position: ScreenPosition = field(default_factory=ScreenPosition)


class MenuTheme(Protocol):
    hint: Callable[[str], str]
    selected_text: Callable[[str], str]
    command_id: Callable[[str], str]
    description: Callable[[str], str]
    scroll_info: Callable[[str], str]
    no_match: Callable[[str], str]


def _identity(text: str) -> str:
    return text


@dataclass
class PlainMenuTheme:
    """Theme that leaves every fragment unstyled."""

    hint: Callable[[str], str] = _identity
    selected_text: Callable[[str], str] = _identity
    command_id: Callable[[str], str] = _identity
    description: Callable[[str], str] = _identity
    scroll_info: Callable[[str], str] = _identity
    no_match: Callable[[str], str] = _identity


class CommandMenuView:
    """Renders the visible slice of a filtered command list as text rows."""

    def __init__(self, max_visible: int, theme: MenuTheme | None = None) -> None:
        self._max_visible = max(1, max_visible)
        self._theme: MenuTheme = theme or PlainMenuTheme()

    def render(self, commands: list[Command], selected_index: int, width: int) -> list[str]:
        lines = [self._theme.hint(truncate_to_width(HINT_TEXT, width, ""))]

        if not commands:
            lines.append(self._theme.no_match(truncate_to_width(f"  {NO_MATCH_TEXT}", width, "")))
            return lines

        # Keep the selection roughly centred when scrolling
        start_index = max(
            0,
            min(selected_index - self._max_visible // 2, len(commands) - self._max_visible),
        )
        end_index = min(start_index + self._max_visible, len(commands))

        for i in range(start_index, end_index):
            lines.append(self._render_row(commands[i], i == selected_index, width))

        if start_index > 0 or end_index < len(commands):
            scroll_text = f"  ({selected_index + 1}/{len(commands)})"
            lines.append(self._theme.scroll_info(truncate_to_width(scroll_text, width, "")))

        return lines

    def _render_row(self, cmd: Command, is_selected: bool, width: int) -> str:
        prefix = "→ " if is_selected else "  "
        slug = f"/{cmd.id}"
        label_width = min(20, max(1, width - len(prefix) - len(slug) - 1))
        label = truncate_to_width(cmd.label, label_width, "")
        head = f"{prefix}{label}{' ' * max(1, label_width + 1 - visible_width(label))}"

        remaining = width - visible_width(head) - len(slug)
        if remaining < 0:
            row = truncate_to_width(head.rstrip(), width, "")
            return self._theme.selected_text(row) if is_selected else row

        desc = ""
        if remaining > 12:
            desc = "  " + truncate_to_width(cmd.description, remaining - 2, "")

        if is_selected:
            return self._theme.selected_text(head + slug + desc)
        return head + self._theme.command_id(slug) + (self._theme.description(desc) if desc else "")
