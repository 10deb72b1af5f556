"""Note form: the editing session that hosts the Markdown editor.

Holds the note title, page reference, images and the editor with the note
body. Persistence and image storage are injected.
"""

from __future__ import annotations

import logging
from typing import Protocol

from shelf.editor.editor import SlashCommandEditor
from shelf.library.models import Note, NoteImage

logger = logging.getLogger(__name__)


class NoteValidationError(ValueError):
    """The form content cannot be saved as is."""


class NoteSaveError(Exception):
    """The store rejected a save; the form keeps its content for a retry."""


class NoteStore(Protocol):
    async def add_note(self, user_id: str, book_id: str, note: Note) -> Note: ...

    async def update_note(self, user_id: str, book_id: str, note_id: str, note: Note) -> Note: ...


class ImageStore(Protocol):
    async def upload_note_image(
        self,
        user_id: str,
        book_id: str,
        note_id: str,
        data: bytes,
        file_name: str,
        content_type: str,
    ) -> NoteImage: ...

    async def delete_note_image(self, user_id: str, book_id: str, note_id: str, file_name: str) -> None: ...


class NoteForm:
    """Create or edit one note of a book."""

    def __init__(
        self,
        user_id: str,
        book_id: str,
        store: NoteStore,
        images: ImageStore | None = None,
        note: Note | None = None,
        editor: SlashCommandEditor | None = None,
        draft_id: str | None = None,
    ) -> None:
        self.user_id = user_id
        self.book_id = book_id
        self._store = store
        self._image_store = images
        self._note = note

        self.title = (note.title if note else None) or ""
        self.page_reference = (note.page_reference if note else None) or ""
        self.images: list[NoteImage] = list(note.images) if note else []

        self.editor = editor or SlashCommandEditor()
        self.editor.set_text(note.content if note else "")

        # Images of an unsaved note are filed under a draft id
        self.note_id = (note.id if note and note.id else None) or draft_id or "draft"
        self._saving = False

    @property
    def is_editing(self) -> bool:
        return self._note is not None and self._note.id is not None

    @property
    def content(self) -> str:
        return self.editor.text

    def build_note(self) -> Note:
        """Note built from the trimmed form fields."""
        content = self.content.strip()
        if not content:
            raise NoteValidationError("Note content is required")

        return Note(
            id=self._note.id if self._note else None,
            book_id=self.book_id,
            title=self.title.strip() or None,
            content=content,
            page_reference=self.page_reference.strip() or None,
            images=list(self.images),
        )

    async def save(self) -> Note:
        """Persist the note.

        On failure the editor keeps its text and caret so the user can
        retry.
        """
        if self._saving:
            raise NoteSaveError("A save is already in progress")

        note = self.build_note()
        self._saving = True
        try:
            if note.id is not None:
                saved = await self._store.update_note(self.user_id, self.book_id, note.id, note)
            else:
                saved = await self._store.add_note(self.user_id, self.book_id, note)
        except Exception as e:
            logger.exception("Error saving note for book %s", self.book_id)
            raise NoteSaveError("Failed to save the note") from e
        finally:
            self._saving = False

        self._note = saved
        if saved.id:
            self.note_id = saved.id
        logger.info("Saved note %s for book %s", saved.id, self.book_id)
        return saved

    async def attach_image(self, data: bytes, file_name: str, content_type: str) -> NoteImage | None:
        """Upload an image and attach it; non-image files are skipped."""
        if not content_type.startswith("image/"):
            logger.debug("Skipping non-image attachment %s (%s)", file_name, content_type)
            return None
        if self._image_store is None:
            raise RuntimeError("No image store configured")

        image = await self._image_store.upload_note_image(
            self.user_id, self.book_id, self.note_id, data, file_name, content_type
        )
        self.images.append(image)
        return image

    async def remove_image(self, image_id: str) -> None:
        image = next((img for img in self.images if img.id == image_id), None)
        if image is None:
            return
        if self._image_store is None:
            raise RuntimeError("No image store configured")

        await self._image_store.delete_note_image(self.user_id, self.book_id, self.note_id, image.file_name)
        self.images = [img for img in self.images if img.id != image_id]
