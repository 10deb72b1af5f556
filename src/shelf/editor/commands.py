"""Slash command catalog: the Markdown snippets the editor menu can insert."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class Command:
    """An insertable snippet.

    ``cursor_offset`` is applied to the caret after insertion, measured from
    the end of ``insert_text`` (negative values move it back into the snippet).
    """

    id: str
    label: str
    description: str
    insert_text: str
    cursor_offset: int = 0

    def matches(self, query: str) -> bool:
        needle = query.lower()
        return (
            needle in self.id.lower()
            or needle in self.label.lower()
            or needle in self.description.lower()
        )


DEFAULT_COMMANDS: tuple[Command, ...] = (
    Command("h1", "Heading 1", "Large section heading", "# "),
    Command("h2", "Heading 2", "Medium section heading", "## "),
    Command("h3", "Heading 3", "Small section heading", "### "),
    Command("bullet", "Bulleted list", "Simple bulleted list", "- "),
    Command("number", "Numbered list", "1. 2. 3.", "1. "),
    Command("todo", "To-do", "Unchecked task", "- [ ] "),
    Command("done", "Done", "Completed task", "- [x] "),
    Command("quote", "Quote", "Quotation block", "> "),
    Command("code", "Code block", "Fenced code block", "```\n\n```", -4),
    Command("bold", "Bold", "Strong emphasis", "****", -2),
    Command("italic", "Italic", "Emphasized text", "**", -1),
    Command("link", "Link", "Link to a URL", "[](URL)", -6),
    Command("hr", "Divider", "Horizontal rule", "\n---\n"),
    Command(
        "table",
        "Table",
        "Three-column table",
        "| Column 1 | Column 2 | Column 3 |\n| --- | --- | --- |\n| Data | Data | Data |",
    ),
)


def filter_commands(query: str, commands: Iterable[Command] = DEFAULT_COMMANDS) -> list[Command]:
    """Return the commands whose id, label or description contain *query*.

    Matching is case-insensitive; results keep declaration order. An empty
    query returns every command.
    """
    if not query:
        return list(commands)
    return [cmd for cmd in commands if cmd.matches(query)]


class CommandCatalog:
    """Read-only, ordered set of commands with unique ids."""

    def __init__(self, commands: Iterable[Command] | None = None) -> None:
        self._commands: tuple[Command, ...] = (
            tuple(commands) if commands is not None else DEFAULT_COMMANDS
        )
        seen: set[str] = set()
        for cmd in self._commands:
            if cmd.id in seen:
                raise ValueError(f"Duplicate command id: {cmd.id!r}")
            seen.add(cmd.id)

    def filter(self, query: str) -> list[Command]:
        return filter_commands(query, self._commands)

    def get(self, command_id: str) -> Command | None:
        for cmd in self._commands:
            if cmd.id == command_id:
                return cmd
        return None

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)
