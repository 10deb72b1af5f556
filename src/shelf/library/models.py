"""Book and note records.

Pydantic models with snake_case fields and camelCase aliases matching the
stored documents.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ReadingStatus = Literal["unread", "reading", "completed", "sold"]

STATUS_LABELS: dict[str, str] = {
    "unread": "Unread",
    "reading": "Reading",
    "completed": "Completed",
    "sold": "Sold",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Book(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    title: str
    subtitle: str | None = None
    author: str | None = None
    publisher: str | None = None
    published_date: str | None = Field(default=None, alias="publishedDate")
    isbn13: str | None = None
    isbn10: str | None = None
    page_count: int | None = Field(default=None, alias="pageCount")
    description: str | None = None
    category: str | None = None
    location: str | None = None
    cover_image: str | None = Field(default=None, alias="coverImage")
    reading_status: ReadingStatus = Field(default="unread", alias="readingStatus")
    rating: int | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=_now, alias="updatedAt")


class NoteImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str
    file_name: str = Field(alias="fileName")


class Note(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    book_id: str | None = Field(default=None, alias="bookId")
    title: str | None = None
    content: str
    page_reference: str | None = Field(default=None, alias="pageReference")
    summary: str | None = None
    display_order: int | None = Field(default=None, alias="displayOrder")
    images: list[NoteImage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=_now, alias="updatedAt")


class ImageLinks(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thumbnail: str | None = None
    small_thumbnail: str | None = Field(default=None, alias="smallThumbnail")


class BookInfo(BaseModel):
    """Volume metadata returned by a Google Books lookup."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    subtitle: str | None = None
    authors: list[str] | None = None
    publisher: str | None = None
    published_date: str | None = Field(default=None, alias="publishedDate")
    description: str | None = None
    page_count: int | None = Field(default=None, alias="pageCount")
    categories: list[str] | None = None
    image_links: ImageLinks | None = Field(default=None, alias="imageLinks")
    isbn13: str | None = None
    isbn10: str | None = None
