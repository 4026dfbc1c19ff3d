"""
Spaced-repetition scheduler.

This is a pure computation module with no I/O. The current time is always
passed in by the caller; nothing here reads the wall clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from flashdeck.domain.constants import (
    AGAIN_EASE_PENALTY,
    AGAIN_STEPS,
    EASY_BONUS_PERCENT,
    EASY_EASE_BONUS,
    EASY_INTERVAL,
    GRADUATION_INTERVAL,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_PERCENT,
    LAPSE_INTERVAL_PERCENT,
    MINIMUM_EASE,
    MINIMUM_INTERVAL,
    RELEARN_STEPS,
    STEP_DELAY_MINUTES,
)
from flashdeck.domain.models import Card, CardState, Review, ReviewScore, ensure_utc


@dataclass
class _Outcome:
    """Mutable scratch state while a review is being computed."""

    interval: int
    ease: int
    state: CardState
    steps: int
    due: datetime


class Scheduler:
    """
    Maps (card, time, score) to a Review.

    Stateless and side-effect free. Every input is valid: the scheduler
    never raises.
    """

    def score(self, card: Card, now: datetime, score: ReviewScore) -> Review:
        now = ensure_utc(now)
        outcome = _Outcome(
            interval=card.interval,
            ease=card.ease,
            state=card.state,
            steps=card.steps,
            due=now,
        )
        # Overflowing date arithmetic keeps the card's previous due.
        fallback_due = card.due or now

        if card.state in (CardState.NEW, CardState.LEARNING):
            self._learn(outcome, card, now, score, fallback_due)
        elif card.state == CardState.REVIEW:
            self._review(outcome, card, now, score, fallback_due)
        elif card.state == CardState.RELEARNING:
            self._relearn(outcome, card, now, score, fallback_due)

        return Review(
            note_id=card.note_id,
            card_num=card.card_num,
            due=outcome.due,
            interval=outcome.interval,
            ease=outcome.ease,
            last_interval=card.interval,
            state=outcome.state,
            score=score,
            steps=outcome.steps,
            reviewed_at=now,
        )

    def _learn(
        self, out: _Outcome, card: Card, now: datetime, score: ReviewScore, fallback: datetime
    ) -> None:
        """New and Learning cards work through sub-day steps before graduating."""
        if score == ReviewScore.EASY:
            out.state = CardState.GRADUATED
            out.interval = EASY_INTERVAL
            out.due = _add_days(now, EASY_INTERVAL, fallback)
            out.steps = 0
        elif score in (ReviewScore.AGAIN, ReviewScore.HARD):
            out.steps = AGAIN_STEPS
            out.due = _add_step(now, fallback)
        elif card.steps <= 1:
            out.state = CardState.GRADUATED
            out.steps = 0
            out.due = _add_days(now, GRADUATION_INTERVAL, fallback)
        else:
            out.steps = card.steps - 1
            out.due = _add_step(now, fallback)

    def _review(
        self, out: _Outcome, card: Card, now: datetime, score: ReviewScore, fallback: datetime
    ) -> None:
        """Graduated cards grow their interval by the ease factor; Again is a lapse."""
        if score == ReviewScore.AGAIN:
            out.state = CardState.RELEARNING
            out.ease = max(MINIMUM_EASE, card.ease - AGAIN_EASE_PENALTY)
            out.interval = max(MINIMUM_INTERVAL, card.interval * LAPSE_INTERVAL_PERCENT // 100)
            out.steps = RELEARN_STEPS
            out.due = _add_step(now, fallback)
            return

        if score == ReviewScore.HARD:
            out.ease = max(MINIMUM_EASE, card.ease - HARD_EASE_PENALTY)
            grown = card.interval * HARD_INTERVAL_PERCENT // 100
        elif score == ReviewScore.GOOD:
            grown = card.interval * card.ease // 100
        else:
            out.ease = card.ease + EASY_EASE_BONUS
            grown = card.interval * out.ease * EASY_BONUS_PERCENT // 10000

        out.interval = max(card.interval + 1, grown)
        out.steps = 0
        out.due = _add_days(now, out.interval, fallback)

    def _relearn(
        self, out: _Outcome, card: Card, now: datetime, score: ReviewScore, fallback: datetime
    ) -> None:
        """Lapsed cards repeat short steps, then return to review at their reduced interval."""
        if score in (ReviewScore.AGAIN, ReviewScore.HARD):
            out.steps = RELEARN_STEPS
            out.due = _add_step(now, fallback)
        elif score == ReviewScore.EASY:
            out.state = CardState.REVIEW
            out.interval = card.interval + 1
            out.steps = 0
            out.due = _add_days(now, out.interval, fallback)
        elif card.steps <= 1:
            out.state = CardState.REVIEW
            out.steps = 0
            out.due = _add_days(now, card.interval, fallback)
        else:
            out.steps = card.steps - 1
            out.due = _add_step(now, fallback)


def _add(now: datetime, delta: timedelta, fallback: datetime) -> datetime:
    try:
        return now + delta
    except OverflowError:
        return fallback


def _add_days(now: datetime, days: int, fallback: datetime) -> datetime:
    try:
        delta = timedelta(days=days)
    except OverflowError:
        return fallback
    return _add(now, delta, fallback)


def _add_step(now: datetime, fallback: datetime) -> datetime:
    return _add(now, timedelta(minutes=STEP_DELAY_MINUTES), fallback)
