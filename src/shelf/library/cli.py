"""Entry point for the shelf-notes CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path


def _cmd_preview(args: argparse.Namespace) -> int:
    from shelf.library.preview import render_markdown

    text = sys.stdin.read() if args.file == "-" else Path(args.file).read_text(encoding="utf-8")
    sys.stdout.write(render_markdown(text))
    return 0


def _cmd_commands(args: argparse.Namespace) -> int:
    from shelf.editor.editor import SlashCommandEditor
    from shelf.library.settings import load_settings

    settings = load_settings()
    editor = SlashCommandEditor(options=settings.editor_options(), keybindings=settings.keybindings())
    editor.type_text("/" + args.query)
    if not editor.is_menu_open():
        print(f"Not a command filter: {args.query!r}", file=sys.stderr)
        return 1
    for line in editor.render_menu(args.width):
        print(line)
    return 0


def _cmd_isbn(args: argparse.Namespace) -> int:
    from shelf.library.google_books import GoogleBooksClient, cover_image_url
    from shelf.library.settings import load_settings

    settings = load_settings()
    client = GoogleBooksClient(base_url=settings.google_books_url)
    info = asyncio.run(client.search_by_isbn(args.isbn))
    if info is None:
        print(f"No book found for ISBN {args.isbn}", file=sys.stderr)
        return 1

    data = info.model_dump(by_alias=True, exclude_none=True)
    cover = cover_image_url(info.image_links)
    if cover:
        data["coverImage"] = cover
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def _cmd_summarize(args: argparse.Namespace) -> int:
    from shelf.library.models import Note
    from shelf.library.settings import load_settings
    from shelf.library.summarize import NoteSummarizer, SummaryError

    settings = load_settings()
    notes = [
        Note(title=Path(path).stem, content=Path(path).read_text(encoding="utf-8"))
        for path in args.files
    ]
    summarizer = NoteSummarizer(model=settings.summary_model, max_tokens=settings.summary_max_tokens)
    try:
        summary = asyncio.run(summarizer.summarize(args.title, notes, book_author=args.author))
    except SummaryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(summary)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="shelf-notes", description="Book notes toolkit")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    sub = parser.add_subparsers(dest="command", required=True)

    p_preview = sub.add_parser("preview", help="Render a Markdown note to HTML")
    p_preview.add_argument("file", help="Markdown file, or - for stdin")
    p_preview.set_defaults(func=_cmd_preview)

    p_commands = sub.add_parser("commands", help="Show the slash command menu for a filter")
    p_commands.add_argument("query", nargs="?", default="", help="Text typed after /")
    p_commands.add_argument("--width", type=int, default=72)
    p_commands.set_defaults(func=_cmd_commands)

    p_isbn = sub.add_parser("isbn", help="Look up a book on Google Books")
    p_isbn.add_argument("isbn")
    p_isbn.set_defaults(func=_cmd_isbn)

    p_summarize = sub.add_parser("summarize", help="Summarise note files with Claude")
    p_summarize.add_argument("files", nargs="+", help="Markdown note files")
    p_summarize.add_argument("--title", required=True, help="Book title")
    p_summarize.add_argument("--author", default=None, help="Book author")
    p_summarize.set_defaults(func=_cmd_summarize)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
