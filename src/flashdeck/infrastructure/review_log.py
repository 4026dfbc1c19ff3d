"""
Append-only review log.

Each note has ``<deck>/reviews/<note_id>.jsonl`` holding one JSON-encoded
Review per line, oldest first. Entries are never rewritten or truncated.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from flashdeck.consts import REVIEW_LOG_SUFFIX, REVIEWS_DIR_NAME
from flashdeck.domain.errors import MalformedContent, StorageError
from flashdeck.domain.models import Review
from flashdeck.domain.ports import ReviewLogRepository
from flashdeck.infrastructure.note_store import validate_deck_id

logger = logging.getLogger(__name__)


class FileReviewLog(ReviewLogRepository):
    """
    Review history stored next to the notes of each deck.

    Args:
        root: The decks root directory.
        strict: Raise MalformedContent on undecodable lines instead of
            skipping them with a warning.
    """

    def __init__(self, root: Path, strict: bool = False):
        self.root = root
        self.strict = strict

    def reviews_dir(self, deck_id: str) -> Path:
        return self.root / validate_deck_id(deck_id) / REVIEWS_DIR_NAME

    def review_path(self, deck_id: str, note_id: str) -> Path:
        return self.reviews_dir(deck_id) / f"{note_id}{REVIEW_LOG_SUFFIX}"

    def append(self, deck_id: str, review: Review) -> None:
        path = self.review_path(deck_id, review.note_id)
        line = review.model_dump_json() + "\n"
        try:
            path.parent.mkdir(exist_ok=True)
            # One write per record so O_APPEND keeps concurrent records whole.
            with path.open("a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            raise StorageError("append review to", path, e) from e
        logger.info(
            f"[review] {deck_id}/{review.note_id} #{review.card_num}: "
            f"{review.score.value} -> {review.state.value}, due {review.due.isoformat()}"
        )

    def read_all(self, deck_id: str, note_id: str) -> list[Review]:
        path = self.review_path(deck_id, note_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError("read", path, e) from e

        reviews = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                reviews.append(Review.model_validate_json(line))
            except ValidationError as e:
                if self.strict:
                    raise MalformedContent(path, line_no, e) from e
                logger.warning(f"Skipping malformed review at {path}:{line_no}")
        return reviews
