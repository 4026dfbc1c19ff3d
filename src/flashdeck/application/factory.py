"""
Service factory.
Centralizes wiring of the filesystem adapters into the card service.
"""

from flashdeck.application.card_service import CardService
from flashdeck.application.config import AppConfig
from flashdeck.infrastructure.note_store import FileNoteStore
from flashdeck.infrastructure.review_log import FileReviewLog


def get_note_store(config: AppConfig) -> FileNoteStore:
    return FileNoteStore(root=config.decks_root)


def get_card_service(config: AppConfig, note_store: FileNoteStore | None = None) -> CardService:
    """
    Returns a CardService backed by the deck directories under config.decks_root.
    """
    return CardService(
        notes=note_store or get_note_store(config),
        reviews=FileReviewLog(root=config.decks_root, strict=config.strict_reviews),
    )
