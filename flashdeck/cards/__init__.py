"""Spaced-repetition scheduling core: cards, ratings, scheduler and store."""

from .clock import Clock, FixedClock, SystemClock
from .errors import CardNotFoundError, FlashdeckError, InvalidInputError, SerializationError
from .manager import FlashcardManager
from .models import Card, CardColor, ReviewEntry, ReviewRating
from .srs import SchedulingEngine, calculate_next_schedule, derive_rating
from .store import CardStore, ReviewStatistics

__all__ = [
    "Card",
    "CardColor",
    "CardNotFoundError",
    "CardStore",
    "Clock",
    "FixedClock",
    "FlashcardManager",
    "FlashdeckError",
    "InvalidInputError",
    "ReviewEntry",
    "ReviewRating",
    "ReviewStatistics",
    "SchedulingEngine",
    "SerializationError",
    "SystemClock",
    "calculate_next_schedule",
    "derive_rating",
]
