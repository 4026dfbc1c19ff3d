# Domain Package
from .errors import (
    DeckNotFound,
    FlashdeckError,
    InvalidDeckName,
    InvalidTemplateName,
    MalformedContent,
    NoteConflict,
    NoteNotFound,
    NotFound,
    StorageError,
)
from .models import Card, CardState, Fields, Note, Review, ReviewScore
from .ports import NoteRepository, ReviewLogRepository
from .templates import CardFace, Template

__all__ = [
    "Card",
    "CardFace",
    "CardState",
    "DeckNotFound",
    "Fields",
    "FlashdeckError",
    "InvalidDeckName",
    "InvalidTemplateName",
    "MalformedContent",
    "Note",
    "NoteConflict",
    "NoteNotFound",
    "NotFound",
    "NoteRepository",
    "Review",
    "ReviewLogRepository",
    "ReviewScore",
    "StorageError",
    "Template",
]
