"""shelf.library: books, notes, search and the services around them."""

from shelf.library.models import STATUS_LABELS, Book, BookInfo, ImageLinks, Note, NoteImage

__all__ = [
    "STATUS_LABELS",
    "Book",
    "BookInfo",
    "ImageLinks",
    "Note",
    "NoteImage",
]
