"""In-memory collection of flashcards and the queries run against it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import CardNotFoundError
from .models import DEFAULT_EASE_FACTOR, MAX_CONFIDENCE, MIN_CONFIDENCE, Card


LOGGER = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 10


@dataclass(slots=True)
class ReviewStatistics:
    """Aggregate snapshot of a card collection."""

    total: int
    due: int
    mastered: int
    difficult: int
    average_ease: float

    @property
    def mastered_percentage(self) -> float:
        return self.mastered / self.total * 100.0 if self.total else 0.0

    @property
    def difficult_percentage(self) -> float:
        return self.difficult / self.total * 100.0 if self.total else 0.0


class CardStore:
    """Owns a collection of cards keyed by id.

    The store never performs scheduling itself; it only reads the fields the
    scheduling engine maintains. It assumes a single writer.
    """

    def __init__(self, cards: Iterable[Card] = ()) -> None:
        self._cards: Dict[str, Card] = {}
        for card in cards:
            self.upsert(card)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards.values()))

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def all(self) -> List[Card]:
        return list(self._cards.values())

    def get(self, card_id: str) -> Card:
        """Return the card with ``card_id`` or raise :class:`CardNotFoundError`."""
        try:
            return self._cards[card_id]
        except KeyError:
            raise CardNotFoundError(card_id) from None

    def upsert(self, card: Card) -> None:
        """Replace the card with the same id, or insert it when new."""
        self._cards[card.id] = card

    def remove(self, card_id: str) -> bool:
        """Remove a card; removing an unknown id is a no-op that returns False."""
        if self._cards.pop(card_id, None) is None:
            LOGGER.debug("Ignoring removal of unknown flashcard %s.", card_id)
            return False
        return True

    def by_category(self, name: str) -> List[Card]:
        return [card for card in self._cards.values() if card.category == name]

    def due(self, as_of: datetime) -> List[Card]:
        """Return every card whose due date is at or before ``as_of``."""
        return [card for card in self._cards.values() if card.is_due(as_of)]

    def starred(self) -> List[Card]:
        return [card for card in self._cards.values() if card.starred]

    def marked_for_later(self) -> List[Card]:
        return [card for card in self._cards.values() if card.marked_for_later]

    def by_confidence(self, level: int) -> List[Card]:
        return [card for card in self._cards.values() if card.confidence == level]

    def recently_added(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[Card]:
        """Return up to ``limit`` cards, newest first."""
        if limit <= 0:
            return []
        ordered = sorted(self._cards.values(), key=lambda card: card.created_at, reverse=True)
        return ordered[:limit]

    def categories(self) -> List[str]:
        """Return the distinct categories currently in use, sorted."""
        return sorted({card.category for card in self._cards.values()})

    def statistics(self, as_of: Optional[datetime] = None) -> ReviewStatistics:
        if as_of is None:
            as_of = datetime.now(timezone.utc)

        total = len(self._cards)
        if total:
            average_ease = sum(card.ease_factor for card in self._cards.values()) / total
        else:
            average_ease = DEFAULT_EASE_FACTOR
        return ReviewStatistics(
            total=total,
            due=len(self.due(as_of)),
            mastered=len(self.by_confidence(MAX_CONFIDENCE)),
            difficult=len(self.by_confidence(MIN_CONFIDENCE)),
            average_ease=average_ease,
        )
