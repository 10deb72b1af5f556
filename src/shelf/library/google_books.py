"""Google Books volume lookup by ISBN or title."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from shelf.library.models import BookInfo, ImageLinks
from shelf.library.settings import DEFAULT_GOOGLE_BOOKS_URL

logger = logging.getLogger(__name__)


def _volume_to_info(volume_info: dict[str, Any], fallback_isbn13: str | None = None) -> BookInfo:
    isbn13: str | None = None
    isbn10: str | None = None
    for identifier in volume_info.get("industryIdentifiers") or []:
        if identifier.get("type") == "ISBN_13":
            isbn13 = identifier.get("identifier")
        elif identifier.get("type") == "ISBN_10":
            isbn10 = identifier.get("identifier")

    fields = {
        key: volume_info.get(key)
        for key in (
            "title",
            "subtitle",
            "authors",
            "publisher",
            "publishedDate",
            "description",
            "pageCount",
            "categories",
            "imageLinks",
        )
    }
    return BookInfo.model_validate({**fields, "isbn13": isbn13 or fallback_isbn13, "isbn10": isbn10})


def cover_image_url(image_links: ImageLinks | None) -> str | None:
    """Best cover URL from *image_links*, upgraded to HTTPS."""
    if image_links is None:
        return None
    url = image_links.thumbnail or image_links.small_thumbnail
    if not url:
        return None
    return url.replace("http://", "https://", 1)


class GoogleBooksClient:
    """Looks up book metadata; failures are logged and reported as no result."""

    def __init__(
        self,
        base_url: str = DEFAULT_GOOGLE_BOOKS_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    async def _get_volumes(self, params: dict[str, str]) -> list[dict[str, Any]]:
        url = f"{self._base_url}/volumes"
        if self._client is not None:
            resp = await self._client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                resp = await client.get(url, params=params)
        resp.raise_for_status()
        data = resp.json()
        return data.get("items") or []

    async def search_by_isbn(self, isbn: str) -> BookInfo | None:
        """Return the first volume matching *isbn* (hyphens ignored)."""
        clean_isbn = isbn.replace("-", "").strip()
        try:
            items = await self._get_volumes({"q": f"isbn:{clean_isbn}"})
            if not items:
                return None
            return _volume_to_info(items[0].get("volumeInfo") or {}, fallback_isbn13=clean_isbn)
        except (httpx.HTTPError, ValueError, ValidationError):
            logger.exception("Error fetching book info for ISBN %s", clean_isbn)
            return None

    async def search_by_title(self, title: str, max_results: int = 10) -> list[BookInfo]:
        try:
            items = await self._get_volumes({"q": title, "maxResults": str(max_results)})
        except (httpx.HTTPError, ValueError):
            logger.exception("Error searching books for %r", title)
            return []

        results: list[BookInfo] = []
        for item in items:
            try:
                results.append(_volume_to_info(item.get("volumeInfo") or {}))
            except ValidationError as e:
                logger.warning("Skipping malformed volume %s: %s", item.get("id"), e)
        return results
