"""Value types describing flashcards and their review history."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from functools import total_ordering
from typing import Optional, Tuple
from uuid import uuid4

from .errors import InvalidInputError


DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 3.0
MAX_INTERVAL_DAYS = 365

MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 5


@total_ordering
class ReviewRating(Enum):
    """User judgement of recall quality, ordered from worst to best."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def rank(self) -> int:
        return _RATING_ORDER.index(self)

    @property
    def confidence(self) -> int:
        """Legacy 1-5 confidence level mirrored by this rating."""
        return _RATING_CONFIDENCE[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ReviewRating):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def from_tag(cls, tag: str) -> "ReviewRating":
        """Return the rating for a serialized tag such as ``"good"``."""
        return cls(tag.strip().lower())


_RATING_ORDER = (ReviewRating.AGAIN, ReviewRating.HARD, ReviewRating.GOOD, ReviewRating.EASY)
_RATING_CONFIDENCE = {
    ReviewRating.AGAIN: 1,
    ReviewRating.HARD: 2,
    ReviewRating.GOOD: 3,
    ReviewRating.EASY: 5,
}


class CardColor(Enum):
    """Display colour chosen for a card."""

    BLUE = "blue"
    PURPLE = "purple"
    GREEN = "green"
    ORANGE = "orange"
    PINK = "pink"


@dataclass(frozen=True, slots=True)
class ReviewEntry:
    """A single completed review recorded in a card's history."""

    date: datetime
    rating: ReviewRating
    time_taken: Optional[float]
    prior_interval: int
    new_interval: int


EDITABLE_FIELDS = frozenset(
    {
        "question",
        "answer",
        "category",
        "color",
        "hint",
        "has_hint",
        "starred",
        "marked_for_later",
    }
)
_TEXT_FIELDS = frozenset({"question", "answer", "category", "hint"})
_FLAG_FIELDS = frozenset({"has_hint", "starred", "marked_for_later"})


@dataclass(frozen=True, slots=True)
class Card:
    """Scheduling state for one question/answer pair.

    Instances are immutable. Scheduling fields (``ease_factor``, ``interval``,
    ``repetitions``, ``due_date``, ``last_reviewed``, ``confidence`` and
    ``review_history``) are only changed by :class:`~flashdeck.cards.srs.SchedulingEngine`;
    everything else goes through :meth:`edit`.
    """

    id: str
    question: str
    answer: str
    category: str
    created_at: datetime
    due_date: datetime
    last_reviewed: Optional[datetime] = None
    confidence: int = MIN_CONFIDENCE
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    review_history: Tuple[ReviewEntry, ...] = field(default_factory=tuple)
    starred: bool = False
    marked_for_later: bool = False
    color: CardColor = CardColor.BLUE
    hint: str = ""
    has_hint: bool = False
    from_conversation_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        question: str,
        answer: str,
        category: str,
        *,
        now: Optional[datetime] = None,
        color: CardColor = CardColor.BLUE,
        hint: str = "",
        from_conversation_id: Optional[str] = None,
        card_id: Optional[str] = None,
    ) -> "Card":
        """Build a new card that is due immediately."""
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        return cls(
            id=card_id or str(uuid4()),
            question=question,
            answer=answer,
            category=category,
            created_at=now,
            due_date=now,
            color=color,
            hint=hint,
            has_hint=bool(hint),
            from_conversation_id=from_conversation_id,
        )

    def edit(self, **changes: object) -> "Card":
        """Return a copy with non-scheduling fields changed.

        ``color`` accepts a :class:`CardColor` or its tag. Editing ``hint``
        without an explicit ``has_hint`` keeps the flag in step with the text.
        """
        forbidden = sorted(set(changes) - EDITABLE_FIELDS)
        if forbidden:
            raise InvalidInputError(
                f"Fields {', '.join(forbidden)} cannot be edited directly."
            )

        for name, value in changes.items():
            if name in _TEXT_FIELDS and not isinstance(value, str):
                raise InvalidInputError(f"Field {name} must be a string, got {value!r}.")
            if name in _FLAG_FIELDS and not isinstance(value, bool):
                raise InvalidInputError(f"Field {name} must be a bool, got {value!r}.")

        if "color" in changes:
            try:
                changes["color"] = CardColor(changes["color"])
            except (TypeError, ValueError):
                raise InvalidInputError(f"Unknown card colour {changes['color']!r}.") from None
        if "hint" in changes and "has_hint" not in changes:
            changes["has_hint"] = bool(changes["hint"])
        return replace(self, **changes)

    def is_due(self, as_of: datetime) -> bool:
        """Return True when the card is due at or before ``as_of``; naive values are UTC."""
        if as_of.tzinfo is None:
            as_of = as_of.replace(tzinfo=timezone.utc)
        return self.due_date <= as_of
