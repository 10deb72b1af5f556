"""shelf.editor: Markdown text editing with a slash command menu."""

from shelf.editor.buffer import BufferState, TextBuffer, UndoHistory
from shelf.editor.commands import DEFAULT_COMMANDS, Command, CommandCatalog, filter_commands
from shelf.editor.editor import EditorOptions, SlashCommandEditor
from shelf.editor.keybindings import (
    DEFAULT_MENU_KEYBINDINGS,
    MenuAction,
    MenuKeybindingsManager,
    get_menu_keybindings,
    set_menu_keybindings,
)
from shelf.editor.menu import CommandMenuView, MenuState, MenuTheme, PlainMenuTheme
from shelf.editor.metrics import (
    BoxMetrics,
    CaretProjector,
    MonospaceMetrics,
    ScreenPosition,
    TextMetrics,
)
from shelf.editor.utils import truncate_to_width, visible_width, wrap_line

__all__ = [
    # Buffer
    "BufferState",
    "TextBuffer",
    "UndoHistory",
    # Commands
    "DEFAULT_COMMANDS",
    "Command",
    "CommandCatalog",
    "filter_commands",
    # Editor
    "EditorOptions",
    "SlashCommandEditor",
    # Keybindings
    "DEFAULT_MENU_KEYBINDINGS",
    "MenuAction",
    "MenuKeybindingsManager",
    "get_menu_keybindings",
    "set_menu_keybindings",
    # Menu
    "CommandMenuView",
    "MenuState",
    "MenuTheme",
    "PlainMenuTheme",
    # Metrics
    "BoxMetrics",
    "CaretProjector",
    "MonospaceMetrics",
    "ScreenPosition",
    "TextMetrics",
    # Utilities
    "truncate_to_width",
    "visible_width",
    "wrap_line",
]
