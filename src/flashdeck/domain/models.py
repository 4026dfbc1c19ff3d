"""
Domain models for notes, cards and reviews.

These are pure data structures with no I/O. A Note is durable content, a Card
is a scheduling projection of a note, and a Review is one immutable scoring
event appended to the note's log.
"""

from datetime import datetime, timezone
from enum import Enum
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_CARD_NUM,
    DEFAULT_EASE,
    DEFAULT_INTERVAL,
    DEFAULT_TEMPLATE,
)

# Field name -> field body. Order only matters for serialization.
Fields = dict[str, str]


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CardState(str, Enum):
    NEW = "New"
    LEARNING = "Learning"
    REVIEW = "Review"
    RELEARNING = "Relearning"
    # A graduated card is a card in day-granularity review.
    GRADUATED = "Review"


@total_ordering
class ReviewScore(Enum):
    """Learner self-grade, ordered by increasing recall quality."""

    AGAIN = "Again"
    HARD = "Hard"
    GOOD = "Good"
    EASY = "Easy"

    @property
    def rank(self) -> int:
        return _SCORE_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ReviewScore):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def from_label(cls, label: str) -> "ReviewScore":
        """Case-insensitive lookup by name or value ("good", "GOOD", "Good")."""
        key = label.strip().lower()
        for score in cls:
            if score.value.lower() == key:
                return score
        raise ValueError(f"Unknown review score: {label!r}")


_SCORE_RANK = {
    ReviewScore.AGAIN: 0,
    ReviewScore.HARD: 1,
    ReviewScore.GOOD: 2,
    ReviewScore.EASY: 3,
}


class Note(BaseModel):
    """Identity of a note inside a deck. Field content lives on disk."""

    model_config = ConfigDict(frozen=True)

    deck_id: str
    note_id: str
    template: str = DEFAULT_TEMPLATE

    def to_card(
        self,
        *,
        card_num: int = DEFAULT_CARD_NUM,
        interval: int = DEFAULT_INTERVAL,
        ease: int = DEFAULT_EASE,
        state: CardState = CardState.NEW,
        steps: int = 0,
        due: datetime | None = None,
    ) -> "Card":
        return Card(
            deck_id=self.deck_id,
            note_id=self.note_id,
            template=self.template,
            card_num=card_num,
            interval=interval,
            ease=ease,
            state=state,
            steps=steps,
            due=due,
        )


class Card(BaseModel):
    """
    One reviewable unit derived from a note.

    Attributes:
        interval: Days until next due.
        ease: Scaled multiplier (250 = 2.50x).
        steps: Remaining sub-day learning steps before graduation.
        due: None means never reviewed, due immediately.
    """

    deck_id: str
    note_id: str
    card_num: int = DEFAULT_CARD_NUM
    interval: int = Field(default=DEFAULT_INTERVAL, ge=0)
    ease: int = Field(default=DEFAULT_EASE, ge=0)
    state: CardState = CardState.NEW
    steps: int = Field(default=0, ge=0)
    due: datetime | None = None
    template: str = DEFAULT_TEMPLATE

    @field_validator("due")
    @classmethod
    def _due_is_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    def to_note(self) -> Note:
        """Drops the scheduling fields."""
        return Note(deck_id=self.deck_id, note_id=self.note_id, template=self.template)

    def is_due(self, now: datetime) -> bool:
        return self.due is None or self.due < ensure_utc(now)

    def apply_review(self, review: "Review") -> "Card":
        """Return this card with the post-review scheduling state."""
        return self.model_copy(
            update={
                "interval": review.interval,
                "ease": review.ease,
                "state": review.state,
                "steps": review.steps,
                "due": review.due,
            }
        )


class Review(BaseModel):
    """An immutable record of one scoring event."""

    model_config = ConfigDict(frozen=True)

    note_id: str
    card_num: int
    due: datetime
    interval: int
    ease: int
    last_interval: int
    state: CardState
    score: ReviewScore
    steps: int
    reviewed_at: datetime | None = None

    @field_validator("due", "reviewed_at")
    @classmethod
    def _timestamps_are_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None
