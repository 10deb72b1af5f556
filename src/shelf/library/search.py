"""Full-text search across a user's books and notes.

Books and notes are fetched once per user and kept in memory for a TTL,
then matched with case-insensitive substring search.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Literal, Protocol

from shelf.library.models import STATUS_LABELS, Book, Note

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 5 * 60.0


class LibrarySource(Protocol):
    """Read access to the document store."""

    async def list_books(self, user_id: str) -> list[Book]: ...

    async def list_notes(self, user_id: str, book_id: str) -> list[Note]: ...


@dataclass
class SearchOptions:
    search_title: bool = True
    search_author: bool = True
    search_publisher: bool = False
    search_description: bool = True
    search_notes: bool = True
    search_isbn: bool = False
    search_status: bool = False


@dataclass
class SearchResult:
    type: Literal["book", "note"]
    book: Book
    matched_field: str
    matched_text: str
    note: Note | None = None


def highlight_match(text: str, query: str, max_length: int = 100) -> str:
    """Cut an excerpt of *text* around the first occurrence of *query*.

    Keeps 30 characters before the match and 70 after it, marking cut ends
    with ``...``. Without a match the first *max_length* characters are
    returned.
    """
    index = text.lower().find(query.lower())
    if index == -1:
        return text[:max_length]

    start = max(0, index - 30)
    end = min(len(text), index + len(query) + 70)

    result = text[start:end]
    if start > 0:
        result = "..." + result
    if end < len(text):
        result = result + "..."
    return result


class SearchIndex:
    """Per-user cache of books and notes with substring search on top."""

    def __init__(
        self,
        source: LibrarySource,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl
        self._clock = clock
        self._books: list[Book] | None = None
        self._notes: dict[str, list[Note]] | None = None
        self._user_id: str | None = None
        self._timestamp = 0.0

    def clear(self) -> None:
        """Drop everything cached."""
        self._books = None
        self._notes = None
        self._user_id = None
        self._timestamp = 0.0

    def _is_fresh(self, user_id: str) -> bool:
        return self._user_id == user_id and self._clock() - self._timestamp < self._ttl

    async def _get_books(self, user_id: str) -> list[Book]:
        if self._books is not None and self._is_fresh(user_id):
            return self._books

        books = await self._source.list_books(user_id)
        logger.debug("Loaded %d books for %s", len(books), user_id)
        # Notes are keyed off this book list, so they reload with it
        self._notes = None
        self._books = books
        self._user_id = user_id
        self._timestamp = self._clock()
        return books

    async def _get_notes(self, user_id: str, books: list[Book]) -> dict[str, list[Note]]:
        if self._notes is not None and self._is_fresh(user_id):
            return self._notes

        book_ids = [book.id for book in books if book.id]
        note_lists = await asyncio.gather(
            *(self._source.list_notes(user_id, book_id) for book_id in book_ids)
        )
        notes = dict(zip(book_ids, note_lists))
        logger.debug("Loaded notes for %d books", len(notes))
        self._notes = notes
        return notes

    async def preload(self, user_id: str) -> None:
        """Warm the cache so the first search is fast."""
        books = await self._get_books(user_id)
        await self._get_notes(user_id, books)

    async def search(
        self,
        user_id: str,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search titles, authors, descriptions and note text.

        Each book contributes at most one result (its first matching field)
        and so does each note.
        """
        if not query.strip():
            return []
        if options is None:
            options = SearchOptions()

        lower_query = query.lower()
        results: list[SearchResult] = []
        books = await self._get_books(user_id)

        for book in books:
            book_fields: list[tuple[str, str | None, bool]] = [
                ("Title", book.title, options.search_title),
                ("Subtitle", book.subtitle, options.search_title),
                ("Author", book.author, options.search_author),
                ("Publisher", book.publisher, options.search_publisher),
                ("Description", book.description, options.search_description),
                ("ISBN", book.isbn13, options.search_isbn),
                ("Status", STATUS_LABELS.get(book.reading_status, ""), options.search_status),
            ]
            for field_name, value, enabled in book_fields:
                if enabled and value and lower_query in value.lower():
                    results.append(
                        SearchResult(
                            type="book",
                            book=book,
                            matched_field=field_name,
                            matched_text=highlight_match(value, query),
                        )
                    )
                    break

        if options.search_notes:
            notes_by_book = await self._get_notes(user_id, books)
            for book in books:
                for note in notes_by_book.get(book.id or "", []):
                    note_fields = [("Note title", note.title), ("Note content", note.content)]
                    for field_name, value in note_fields:
                        if value and lower_query in value.lower():
                            results.append(
                                SearchResult(
                                    type="note",
                                    book=book,
                                    note=note,
                                    matched_field=field_name,
                                    matched_text=highlight_match(value, query, 150),
                                )
                            )
                            break

        return results
