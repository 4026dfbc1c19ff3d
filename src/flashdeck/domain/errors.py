"""Exceptions raised at the storage boundary.

The scheduler and the field codec never raise; everything that touches the
deck directory tree reports failures with one of these.
"""

from pathlib import Path


class FlashdeckError(Exception):
    """Base class for all flashdeck errors."""


class NotFound(FlashdeckError):
    """A deck or note location does not exist."""

    def __init__(self, path: Path, message: str | None = None):
        self.path = path
        super().__init__(message or f"Not found: {path}")


class DeckNotFound(NotFound):
    def __init__(self, deck_id: str, path: Path):
        self.deck_id = deck_id
        super().__init__(path, f"Deck '{deck_id}' not found at {path}")


class NoteNotFound(NotFound):
    def __init__(self, note_id: str, path: Path):
        self.note_id = note_id
        super().__init__(path, f"Note '{note_id}' not found at {path}")


class StorageError(FlashdeckError):
    """A read, write or append failed. The underlying OSError is chained."""

    def __init__(self, action: str, path: Path, reason: object):
        self.action = action
        self.path = path
        super().__init__(f"Failed to {action} {path}: {reason}")


class NoteConflict(FlashdeckError):
    """A freshly generated note id collides with an existing note."""

    def __init__(self, note_id: str, path: Path):
        self.note_id = note_id
        self.path = path
        super().__init__(f"Note '{note_id}' already exists at {path}")


class InvalidDeckName(FlashdeckError):
    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(f"Invalid deck name: {deck_id!r}")


class MalformedContent(FlashdeckError):
    """Stored content could not be decoded (only raised in strict mode)."""

    def __init__(self, path: Path, line_no: int, reason: object):
        self.path = path
        self.line_no = line_no
        super().__init__(f"{path}:{line_no}: {reason}")


class InvalidTemplateName(FlashdeckError):
    """Template names become the last ``_``-separated part of a note filename."""

    def __init__(self, template: str):
        self.template = template
        super().__init__(f"Invalid template name: {template!r}")
