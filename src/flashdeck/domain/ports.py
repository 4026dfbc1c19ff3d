"""
Ports (interfaces) for note and review storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
Only implementations of these ports write to a deck directory.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import Fields, Note, Review


class NoteRepository(ABC):
    """
    Port for reading and writing note content.

    Implementations:
        - FileNoteStore: One markdown file per note inside the deck directory.
    """

    @abstractmethod
    def deck_path(self, deck_id: str) -> Path:
        """Location of a deck's root."""

    @abstractmethod
    def list_notes(self, deck_id: str) -> list[Note]:
        """All notes currently stored in a deck, in storage order."""

    @abstractmethod
    def read(self, note: Note) -> Fields:
        """
        Load a note's fields.

        Raises:
            NoteNotFound: The backing file does not exist.
            StorageError: Any other read failure.
        """

    @abstractmethod
    def write(self, note: Note, fields: Fields) -> None:
        """Create or overwrite a note's content."""

    @abstractmethod
    def create(self, deck_id: str, template: str, fields: Fields) -> Note:
        """Store a new note under a freshly generated id."""


class ReviewLogRepository(ABC):
    """
    Port for the append-only review history of notes.

    Implementations:
        - FileReviewLog: One JSON-lines file per note under ``reviews/``.
    """

    @abstractmethod
    def append(self, deck_id: str, review: Review) -> None:
        """Append one review. Never rewrites existing entries."""

    @abstractmethod
    def read_all(self, deck_id: str, note_id: str) -> list[Review]:
        """
        All reviews of a note, oldest first.

        Returns an empty list when the note was never reviewed.
        """
