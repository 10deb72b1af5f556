"""AI summaries of a book's notes via the Anthropic Messages API."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import anthropic

from shelf.library.models import Note
from shelf.library.settings import DEFAULT_SUMMARY_MODEL

logger = logging.getLogger(__name__)


class SummaryError(Exception):
    """A summary could not be produced."""


def format_notes(notes: Sequence[Note]) -> str:
    sections: list[str] = []
    for index, note in enumerate(notes, start=1):
        header = note.title or f"Note {index}"
        page = f" (p.{note.page_reference})" if note.page_reference else ""
        sections.append(f"### {header}{page}\n{note.content}")
    return "\n\n".join(sections)


def build_summary_prompt(book_title: str, book_author: str | None, notes: Sequence[Note]) -> str:
    author = f" (author: {book_author})" if book_author else ""
    return (
        f'The following are reading notes about the book "{book_title}"{author}.\n'
        "\n"
        "Analyse these notes and summarise them in this format:\n"
        "\n"
        "1. **Key points of the book** (3 to 5 bullet points)\n"
        "2. **Keywords and important concepts** (list the important terms and ideas)\n"
        "3. **Reader insights** (what the reader paid particular attention to or realised)\n"
        "4. **Overall summary** (2 to 3 sentences tying it together)\n"
        "\n"
        "---\n"
        f"{format_notes(notes)}\n"
        "---\n"
        "\n"
        "Keep the summary concise and easy to follow."
    )


class NoteSummarizer:
    """Asks a Claude model for a structured summary of a book's notes."""

    def __init__(
        self,
        model: str = DEFAULT_SUMMARY_MODEL,
        max_tokens: int = 1500,
        client: Any = None,
        api_key: str | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._client = client
        self._api_key = api_key

    def _get_client(self) -> Any:
        if self._client is None:
            # Without an explicit key the SDK reads ANTHROPIC_API_KEY itself
            if self._api_key:
                self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
            else:
                self._client = anthropic.AsyncAnthropic()
        return self._client

    async def summarize(
        self,
        book_title: str,
        notes: Sequence[Note],
        book_author: str | None = None,
    ) -> str:
        if not notes:
            raise SummaryError("There are no notes to summarise")

        prompt = build_summary_prompt(book_title, book_author, notes)
        try:
            message = await self._get_client().messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.exception("AI summary request failed for %r", book_title)
            raise SummaryError("Failed to generate the summary") from e

        if not message.content or message.content[0].type != "text":
            raise SummaryError("Unexpected response type")
        return message.content[0].text
