"""Live Markdown preview for notes.

CommonMark plus the GitHub extensions notes rely on: tables,
strikethrough and task lists. Raw HTML in notes is escaped.
"""

from __future__ import annotations

from typing import Any, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.tasklists import tasklists_plugin


def _render_link_open(
    self: Any,
    tokens: Sequence[Token],
    idx: int,
    options: Any,
    env: Any,
) -> str:
    token = tokens[idx]
    token.attrSet("target", "_blank")
    token.attrSet("rel", "noopener noreferrer")
    return self.renderToken(tokens, idx, options, env)


def create_renderer() -> MarkdownIt:
    md = (
        MarkdownIt("commonmark", {"html": False})
        .enable(["table", "strikethrough"])
        .use(tasklists_plugin)
    )
    md.add_render_rule("link_open", _render_link_open)
    return md


_renderer: MarkdownIt | None = None


def render_markdown(text: str) -> str:
    """Render note Markdown to an HTML fragment."""
    global _renderer
    if _renderer is None:
        _renderer = create_renderer()
    return _renderer.render(text)
