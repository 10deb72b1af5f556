"""Markdown editor with a ``/`` command menu.

The editor is driven by the host text input: it receives the full text and
caret after every edit, navigation keys and pointer events on the popup, and
reports the resulting text and caret through ``on_change``. Typing ``/`` at
the start of a word opens the menu; the characters typed after it filter the
command list; choosing a command replaces the ``/`` and the filter with the
command's snippet.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Callable

from shelf.editor.buffer import TextBuffer, UndoHistory
from shelf.editor.commands import Command, CommandCatalog
from shelf.editor.keybindings import MenuKeybindingsManager, get_menu_keybindings
from shelf.editor.menu import CommandMenuView, MenuState, MenuTheme
from shelf.editor.metrics import CaretProjector, TextMetrics

logger = logging.getLogger(__name__)

TRIGGER_CHAR = "/"
# Characters after which a "/" starts a new word
_WORD_BREAKS = ("\n", " ")


@dataclass
class EditorOptions:
    """Presentation settings for the command menu."""

    menu_max_left: float = 100.0
    menu_vertical_offset: float = 24.0
    menu_max_visible: int = 8

    def __post_init__(self) -> None:
        max_vis = self.menu_max_visible
        if not math.isfinite(max_vis):
            max_vis = 8
        self.menu_max_visible = max(3, min(20, int(max_vis)))


class SlashCommandEditor:
    """Text buffer plus the slash-menu state machine.

    The menu is either closed or open with a trigger offset, filter text and
    selected index. All buffer mutations performed here are single splices,
    each followed by exactly one ``on_change`` notification.
    """

    def __init__(
        self,
        text: str = "",
        *,
        catalog: CommandCatalog | None = None,
        metrics: TextMetrics | None = None,
        options: EditorOptions | None = None,
        keybindings: MenuKeybindingsManager | None = None,
        theme: MenuTheme | None = None,
    ) -> None:
        if options is None:
            options = EditorOptions()

        self._buffer = TextBuffer(text)
        self._catalog = catalog or CommandCatalog()
        self._options = options
        self._projector = CaretProjector(metrics, options)
        self._keybindings = keybindings
        self._view = CommandMenuView(options.menu_max_visible, theme)
        self._menu = MenuState()
        self._undo = UndoHistory()

        self.on_change: Callable[[str, int], None] | None = None

    # -- Accessors -------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def caret(self) -> int:
        return self._buffer.caret

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def menu(self) -> MenuState:
        """A copy of the current menu state."""
        return dataclasses.replace(
            self._menu, screen_position=dataclasses.replace(self._menu.screen_position)
        )

    @property
    def filtered_commands(self) -> list[Command]:
        if not self._menu.open:
            return []
        return self._catalog.filter(self._menu.filter_text)

    def is_menu_open(self) -> bool:
        return self._menu.open

    def set_text(self, text: str, caret: int | None = None) -> None:
        """Load *text* programmatically, closing the menu.

        The caret goes to the end unless given. Does not notify ``on_change``.
        """
        self._close_menu()
        self._undo.clear()
        self._buffer.set_text(text)
        self._buffer.set_selection(len(text) if caret is None else caret)

    # -- Input surface -----------------------------------------------------------

    def handle_change(self, new_text: str, caret: int, selection_end: int | None = None) -> None:
        """Apply an edit reported by the host input.

        *new_text* is the complete text after the edit and *caret* the
        selection start at that moment.
        """
        old_length = len(self._buffer)
        if new_text != self._buffer.text:
            self._undo.clear()
        self._buffer.set_text(new_text)
        self._buffer.set_selection(caret, selection_end)
        self._after_edit(grew=len(new_text) > old_length)
        self._notify()

    def handle_selection(self, start: int, end: int | None = None) -> None:
        """The caret moved without an edit (arrow keys, click in the text)."""
        self._buffer.set_selection(start, end)
        if self._menu.open:
            self._refresh_filter()

    def type_text(self, text: str) -> None:
        """Type *text* at the caret one character at a time."""
        for char in text:
            self._undo.clear()
            self._buffer.insert(char)
            self._after_edit(grew=True)
            self._notify()

    def backspace(self) -> None:
        before = self._buffer.snapshot()
        self._buffer.delete_backward()
        if self._buffer.snapshot() == before:
            return
        self._undo.clear()
        self._after_edit(grew=False)
        self._notify()

    def handle_key(self, key: str) -> bool:
        """Handle a key-down event.

        Returns True when the key was consumed and the host should suppress
        its default action.
        """
        kb = self._keybindings or get_menu_keybindings()

        if not self._menu.open:
            if kb.matches(key, "undo") and self._undo.length > 0:
                self.undo()
                return True
            return False

        commands = self.filtered_commands

        if kb.matches(key, "selectDown"):
            if commands:
                self._menu.selected_index = (self._menu.selected_index + 1) % len(commands)
            return True

        if kb.matches(key, "selectUp"):
            if commands:
                self._menu.selected_index = (self._menu.selected_index - 1) % len(commands)
            return True

        if kb.matches(key, "selectConfirm"):
            if 0 <= self._menu.selected_index < len(commands):
                self.commit(commands[self._menu.selected_index])
            return True

        if kb.matches(key, "selectCancel"):
            self._close_menu()
            return True

        return False

    def handle_hover(self, index: int) -> None:
        """Pointer moved over the entry at *index*."""
        if self._menu.open and 0 <= index < len(self.filtered_commands):
            self._menu.selected_index = index

    def handle_click(self, index: int) -> None:
        """Pointer clicked the entry at *index*."""
        if not self._menu.open:
            return
        commands = self.filtered_commands
        if 0 <= index < len(commands):
            self.commit(commands[index])

    def handle_pointer_outside(self) -> None:
        """Pointer pressed outside the popup region."""
        self._close_menu()

    # -- Commands ----------------------------------------------------------------

    def commit(self, command: Command) -> None:
        """Replace the ``/`` and filter text with *command*'s snippet."""
        trigger = self._menu.trigger_offset
        if not self._menu.open or trigger is None:
            return

        self._undo.push(self._buffer.snapshot())
        caret = self._buffer.splice(
            trigger, self._buffer.caret, command.insert_text, command.cursor_offset
        )
        logger.debug("Inserted /%s at %d, caret now %d", command.id, trigger, caret)
        self._close_menu()
        self._notify()

    def undo(self) -> None:
        """Restore the text and caret from before the last command insertion.

        Any later edit clears the history, so this only reverts an insertion
        that is still the most recent change.
        """
        snapshot = self._undo.pop()
        if snapshot is None:
            return
        self._close_menu()
        self._buffer.restore(snapshot)
        self._notify()

    def render_menu(self, width: int) -> list[str]:
        """Text rows for the popup, or an empty list while it is closed."""
        if not self._menu.open:
            return []
        return self._view.render(self.filtered_commands, self._menu.selected_index, width)

    # -- Internals -----------------------------------------------------------------

    def _after_edit(self, *, grew: bool) -> None:
        caret = self._buffer.caret
        text = self._buffer.text

        if grew and caret > 0 and text[caret - 1] == TRIGGER_CHAR and self._is_word_start(caret - 1):
            self._open_menu(caret - 1)
            return

        if self._menu.open:
            self._refresh_filter()

    def _is_word_start(self, index: int) -> bool:
        return index == 0 or self._buffer.text[index - 1] in _WORD_BREAKS

    def _open_menu(self, trigger: int) -> None:
        # Position is fixed at open time; typing the filter does not move the popup
        position = self._projector.project(self._buffer.text, self._buffer.caret)
        self._menu = MenuState(
            open=True,
            trigger_offset=trigger,
            filter_text="",
            selected_index=0,
            screen_position=position,
        )
        logger.debug("Command menu opened at offset %d", trigger)

    def _refresh_filter(self) -> None:
        trigger = self._menu.trigger_offset
        caret = self._buffer.caret
        if trigger is None or caret <= trigger or self._buffer.char_at(trigger) != TRIGGER_CHAR:
            self._close_menu()
            return

        filter_text = self._buffer.text[trigger + 1 : caret]
        if " " in filter_text or "\n" in filter_text:
            self._close_menu()
            return

        if filter_text != self._menu.filter_text:
            self._menu.filter_text = filter_text
            self._menu.selected_index = 0

    def _close_menu(self) -> None:
        if self._menu.open:
            logger.debug("Command menu closed")
        self._menu = MenuState()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self._buffer.text, self._buffer.caret)
