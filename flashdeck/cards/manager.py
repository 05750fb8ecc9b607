"""Card operations addressed by id, combining the store and the scheduler."""

from __future__ import annotations

import logging
from typing import Optional

from .models import Card, ReviewRating
from .srs import SchedulingEngine
from .store import CardStore


LOGGER = logging.getLogger(__name__)


class FlashcardManager:
    """Coordinates edits and reviews for the cards held in a :class:`CardStore`."""

    def __init__(self, store: CardStore, engine: SchedulingEngine) -> None:
        self._store = store
        self._engine = engine

    @property
    def store(self) -> CardStore:
        return self._store

    @property
    def engine(self) -> SchedulingEngine:
        return self._engine

    def add_card(self, card: Card) -> Card:
        self._store.upsert(card)
        LOGGER.debug("Added flashcard %s in category %r.", card.id, card.category)
        return card

    def create_card(self, question: str, answer: str, category: str, **options: object) -> Card:
        """Create a card stamped with the engine's clock and add it to the store."""
        card = Card.create(question, answer, category, now=self._engine.clock.now(), **options)
        return self.add_card(card)

    def rate_card(
        self,
        card_id: str,
        rating: ReviewRating,
        time_taken: Optional[float] = None,
    ) -> Card:
        card = self._engine.update(self._store.get(card_id), rating, time_taken)
        self._store.upsert(card)
        return card

    def update_confidence(self, card_id: str, level: int) -> Card:
        """Legacy path: reschedule a card from a 1-5 confidence level."""
        card = self._engine.apply_confidence(self._store.get(card_id), level)
        self._store.upsert(card)
        return card

    def edit_card(self, card_id: str, **changes: object) -> Card:
        card = self._store.get(card_id).edit(**changes)
        self._store.upsert(card)
        return card

    def toggle_star(self, card_id: str) -> Card:
        card = self._store.get(card_id)
        return self.edit_card(card_id, starred=not card.starred)

    def toggle_marked_for_later(self, card_id: str) -> Card:
        card = self._store.get(card_id)
        return self.edit_card(card_id, marked_for_later=not card.marked_for_later)

    def delete_card(self, card_id: str) -> bool:
        return self._store.remove(card_id)
