"""Spaced-repetition scheduling for flashcard reviews."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from .clock import Clock, SystemClock
from .errors import InvalidInputError
from .models import (
    MAX_CONFIDENCE,
    MAX_EASE_FACTOR,
    MAX_INTERVAL_DAYS,
    MIN_CONFIDENCE,
    MIN_EASE_FACTOR,
    Card,
    ReviewEntry,
    ReviewRating,
)


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ReviewSchedule:
    """Calculated review data for a flashcard after receiving a rating."""

    next_review_at: datetime
    ease_factor: float
    interval: int
    repetition: int


def calculate_next_schedule(
    *,
    rating: ReviewRating,
    current_ease: float,
    current_interval: int,
    current_repetition: int,
    now: datetime,
) -> ReviewSchedule:
    """Return the next review schedule using the SM-2 derived rules.

    New cards graduate through fixed steps (repetition 0 and 1) before the
    interval grows multiplicatively. Multiplicative steps always truncate.
    Note that ``hard`` multiplies by the ease *after* its own decrease while
    ``good`` and ``easy`` use the ease held before the review.
    """
    # Imported cards may carry an ease outside the scheduling range.
    ease = min(MAX_EASE_FACTOR, max(MIN_EASE_FACTOR, current_ease))
    repetition = current_repetition
    interval = current_interval

    if rating is ReviewRating.AGAIN:
        repetition = 0
        new_interval = 1
        ease = max(MIN_EASE_FACTOR, ease - 0.2)
    elif rating is ReviewRating.HARD:
        ease = max(MIN_EASE_FACTOR, ease - 0.15)
        if repetition == 0:
            new_interval = 1
        elif repetition == 1:
            new_interval = 3
        else:
            new_interval = math.floor(interval * 1.2 * ease)
        repetition += 1
    elif rating is ReviewRating.GOOD:
        if repetition == 0:
            new_interval = 1
        elif repetition == 1:
            new_interval = 4
        else:
            new_interval = math.floor(interval * ease)
        repetition += 1
    elif rating is ReviewRating.EASY:
        if repetition == 0:
            new_interval = 3
        elif repetition == 1:
            new_interval = 7
        else:
            new_interval = math.floor(interval * ease * 1.3)
        repetition += 1
        ease = min(MAX_EASE_FACTOR, ease + 0.15)
    else:  # pragma: no cover - exhaustive over ReviewRating
        raise InvalidInputError(f"Unsupported rating: {rating!r}")

    # Imported cards may also carry interval 0 with repetitions >= 2.
    new_interval = max(1, min(new_interval, MAX_INTERVAL_DAYS))

    return ReviewSchedule(
        next_review_at=now + timedelta(days=new_interval),
        ease_factor=ease,
        interval=new_interval,
        repetition=repetition,
    )


def derive_rating(level: int) -> ReviewRating:
    """Map a legacy 1-5 confidence level onto a review rating."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidInputError(f"Confidence level must be an integer, got {level!r}.")
    if level < MIN_CONFIDENCE or level > MAX_CONFIDENCE:
        raise InvalidInputError(
            f"Confidence level must be between {MIN_CONFIDENCE} and {MAX_CONFIDENCE}, got {level}."
        )
    if level == 1:
        return ReviewRating.AGAIN
    if level == 2:
        return ReviewRating.HARD
    if level == 3:
        return ReviewRating.GOOD
    return ReviewRating.EASY


class SchedulingEngine:
    """Applies review ratings to cards, producing their next scheduling state."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or SystemClock()

    @property
    def clock(self) -> Clock:
        return self._clock

    def update(
        self,
        card: Card,
        rating: ReviewRating,
        time_taken: Optional[float] = None,
    ) -> Card:
        """Return ``card`` rescheduled for ``rating``; the input card is left untouched."""
        if not isinstance(rating, ReviewRating):
            raise InvalidInputError(f"Expected a ReviewRating, got {rating!r}.")
        if time_taken is not None:
            if isinstance(time_taken, bool) or not isinstance(time_taken, (int, float)):
                raise InvalidInputError(f"Time taken must be a number of seconds, got {time_taken!r}.")
            if time_taken < 0 or math.isnan(time_taken):
                raise InvalidInputError(f"Time taken cannot be negative, got {time_taken}.")
            time_taken = float(time_taken)

        now = self._clock.now()
        schedule = calculate_next_schedule(
            rating=rating,
            current_ease=card.ease_factor,
            current_interval=card.interval,
            current_repetition=card.repetitions,
            now=now,
        )
        entry = ReviewEntry(
            date=now,
            rating=rating,
            time_taken=time_taken,
            prior_interval=card.interval,
            new_interval=schedule.interval,
        )

        LOGGER.debug(
            "Card %s rated %s: interval %s -> %s, ease %.2f -> %.2f, repetitions %s -> %s.",
            card.id,
            rating.value,
            card.interval,
            schedule.interval,
            card.ease_factor,
            schedule.ease_factor,
            card.repetitions,
            schedule.repetition,
        )

        return replace(
            card,
            interval=schedule.interval,
            ease_factor=schedule.ease_factor,
            repetitions=schedule.repetition,
            due_date=schedule.next_review_at,
            last_reviewed=now,
            confidence=rating.confidence,
            review_history=card.review_history + (entry,),
        )

    def apply_confidence(
        self,
        card: Card,
        level: int,
        time_taken: Optional[float] = None,
    ) -> Card:
        """Legacy entry point: rate a card with a 1-5 confidence level."""
        return self.update(card, derive_rating(level), time_taken)

    def reschedule_from_confidence(self, card: Card) -> Card:
        """Legacy entry point: re-run scheduling with the card's current confidence."""
        return self.update(card, derive_rating(card.confidence))
