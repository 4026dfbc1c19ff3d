"""
Card service — application layer orchestrator.

Derives cards from the notes of a deck, reconstructs their scheduling state
from the review log, answers "what is due now" and records reviews.
"""

import logging
from datetime import datetime

from flashdeck.domain.constants import LISTED_CARD_EASE, LISTED_CARD_INTERVAL
from flashdeck.domain.errors import NoteNotFound
from flashdeck.domain.models import Card, Note, Review, ReviewScore
from flashdeck.domain.ports import NoteRepository, ReviewLogRepository
from flashdeck.domain.templates import CardFace, Template

from .scheduler import Scheduler

logger = logging.getLogger(__name__)


class CardService:
    """
    Application service for enumerating and reviewing cards.

    Depends on the NoteRepository and ReviewLogRepository abstractions,
    not on the filesystem adapters.
    """

    def __init__(
        self,
        notes: NoteRepository,
        reviews: ReviewLogRepository,
        scheduler: Scheduler | None = None,
    ):
        """
        Args:
            notes: Where note content lives.
            reviews: The append-only review history.
            scheduler: Optional custom scheduler; uses default if not provided.
        """
        self._notes = notes
        self._reviews = reviews
        self._scheduler = scheduler or Scheduler()

    def list_notes(self, deck_id: str) -> list[Note]:
        return self._notes.list_notes(deck_id)

    def list_cards(self, deck_id: str) -> list[Card]:
        """
        Every card of every note in the deck, as if never reviewed.

        This is a plain directory scan: no review history is applied, so each
        card comes back with ``due=None``. Use current_card for live state.
        """
        cards = []
        for note in self._notes.list_notes(deck_id):
            template = Template.lookup(note.template)
            for card_num in range(1, template.cards_per_note + 1):
                cards.append(
                    note.to_card(
                        card_num=card_num,
                        interval=LISTED_CARD_INTERVAL,
                        ease=LISTED_CARD_EASE,
                    )
                )
        return cards

    def current_card(self, card: Card) -> Card:
        """
        Fold the review log into the card.

        The last review of this card number carries the current interval,
        ease, steps, state and due. With no reviews the card is returned as is.
        """
        history = [
            r
            for r in self._reviews.read_all(card.deck_id, card.note_id)
            if r.card_num == card.card_num
        ]
        if not history:
            return card
        return card.apply_review(history[-1])

    def list_due(self, deck_id: str, now: datetime) -> list[Card]:
        """
        Cards whose due time has passed, or that were never reviewed.

        No ordering is guaranteed beyond the directory scan order.
        """
        due = [c for c in map(self.current_card, self.list_cards(deck_id)) if c.is_due(now)]
        logger.debug(f"[due] {deck_id}: {len(due)} cards due at {now.isoformat()}")
        return due

    def find_card(self, deck_id: str, note_id: str, card_num: int = 1) -> Card:
        """Look up a card by note id with its review history applied."""
        for card in self.list_cards(deck_id):
            if card.note_id == note_id and card.card_num == card_num:
                return self.current_card(card)
        raise NoteNotFound(note_id, self._notes.deck_path(deck_id))

    def review(self, card: Card, score: ReviewScore, now: datetime) -> Review:
        """
        Score a card and append the outcome to its note's review log.

        The card's review history is folded in first, so a card taken straight
        from list_cards is scored from its logged state.
        """
        review = self._scheduler.score(self.current_card(card), now, score)
        self._reviews.append(card.deck_id, review)
        return review

    def history(self, deck_id: str, note_id: str) -> list[Review]:
        return self._reviews.read_all(deck_id, note_id)

    def card_face(self, card: Card) -> CardFace:
        """
        The front and back text of a card, for a renderer to display.

        Missing fields come back as empty text.
        """
        fields = self._notes.read(card.to_note())
        return Template.lookup(card.template).card_face(fields, card.card_num)
