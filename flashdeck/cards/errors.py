"""Exceptions raised by the flashcard scheduling core."""

from __future__ import annotations


class FlashdeckError(Exception):
    """Base class for all flashdeck errors."""


class InvalidInputError(FlashdeckError, ValueError):
    """Raised when a caller supplies malformed input, e.g. a negative review time."""


class CardNotFoundError(FlashdeckError, KeyError):
    """Raised when a targeted operation references an unknown card id."""

    def __init__(self, card_id: str) -> None:
        super().__init__(card_id)
        self.card_id = card_id

    def __str__(self) -> str:
        return f"Flashcard {self.card_id!r} does not exist."


class SerializationError(FlashdeckError, ValueError):
    """Raised when a stored card document cannot be decoded."""
