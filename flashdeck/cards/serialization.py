"""JSON encoding for cards and their review history.

Timestamps are written as ISO-8601 strings with an explicit UTC offset and
ratings as their string tags, so stored documents keep their meaning if the
rating set grows.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import SerializationError
from .models import Card, CardColor, ReviewEntry, ReviewRating


SCHEMA_VERSION = 1


def _encode_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _decode_datetime(value: Any, field_name: str) -> datetime:
    if not isinstance(value, str):
        raise SerializationError(f"Field {field_name!r} must be an ISO-8601 string.")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise SerializationError(f"Field {field_name!r} is not a valid timestamp: {value!r}.") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _decode_optional_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value is None:
        return None
    return _decode_datetime(value, field_name)


def _decode_rating(value: Any) -> ReviewRating:
    if not isinstance(value, str):
        raise SerializationError(f"Rating must be a string tag, got {value!r}.")
    try:
        return ReviewRating.from_tag(value)
    except ValueError as exc:
        raise SerializationError(f"Unknown rating tag {value!r}.") from exc


def review_entry_to_dict(entry: ReviewEntry) -> Dict[str, Any]:
    return {
        "date": _encode_datetime(entry.date),
        "rating": entry.rating.value,
        "time_taken": entry.time_taken,
        "prior_interval": entry.prior_interval,
        "new_interval": entry.new_interval,
    }


def _typed(value: Any, field_name: str, expected: Tuple[type, ...]) -> Any:
    # bool is an int subclass; only accept it where it is asked for.
    if isinstance(value, bool) and bool not in expected or not isinstance(value, expected):
        names = " or ".join(kind.__name__ for kind in expected)
        raise SerializationError(f"Field {field_name!r} must be {names}, got {value!r}.")
    return value


def _require_object(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SerializationError(f"{what} must be a JSON object, got {value!r}.")
    return value


def review_entry_from_dict(data: Mapping[str, Any]) -> ReviewEntry:
    data = _require_object(data, "Review entry")
    try:
        time_taken = data.get("time_taken")
        if time_taken is not None:
            time_taken = float(_typed(time_taken, "time_taken", (int, float)))
        return ReviewEntry(
            date=_decode_datetime(data["date"], "date"),
            rating=_decode_rating(data["rating"]),
            time_taken=time_taken,
            prior_interval=_typed(data["prior_interval"], "prior_interval", (int,)),
            new_interval=_typed(data["new_interval"], "new_interval", (int,)),
        )
    except KeyError as exc:
        raise SerializationError(f"Review entry is missing field {exc.args[0]!r}.") from exc


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Return a JSON-compatible mapping holding every field of ``card``."""
    return {
        "id": card.id,
        "question": card.question,
        "answer": card.answer,
        "category": card.category,
        "created_at": _encode_datetime(card.created_at),
        "last_reviewed": _encode_datetime(card.last_reviewed),
        "confidence": card.confidence,
        "ease_factor": float(card.ease_factor),
        "interval": card.interval,
        "repetitions": card.repetitions,
        "review_history": [review_entry_to_dict(entry) for entry in card.review_history],
        "due_date": _encode_datetime(card.due_date),
        "starred": card.starred,
        "marked_for_later": card.marked_for_later,
        "color": card.color.value,
        "hint": card.hint,
        "has_hint": card.has_hint,
        "from_conversation_id": card.from_conversation_id,
    }


def card_from_dict(data: Mapping[str, Any]) -> Card:
    """Rebuild a card from :func:`card_to_dict` output.

    Every field is type checked; anything that does not match the shape
    written by :func:`card_to_dict` raises :class:`SerializationError`.
    """
    data = _require_object(data, "Card document")
    try:
        color_tag = data.get("color", CardColor.BLUE.value)
        try:
            color = CardColor(color_tag)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Unknown card colour {color_tag!r}.") from exc

        history = _typed(data.get("review_history", []), "review_history", (list, tuple))
        conversation_id = data.get("from_conversation_id")
        if conversation_id is not None:
            _typed(conversation_id, "from_conversation_id", (str,))

        return Card(
            id=str(_typed(data["id"], "id", (str, int))),
            question=_typed(data["question"], "question", (str,)),
            answer=_typed(data["answer"], "answer", (str,)),
            category=_typed(data["category"], "category", (str,)),
            created_at=_decode_datetime(data["created_at"], "created_at"),
            due_date=_decode_datetime(data["due_date"], "due_date"),
            last_reviewed=_decode_optional_datetime(data.get("last_reviewed"), "last_reviewed"),
            confidence=_typed(data["confidence"], "confidence", (int,)),
            ease_factor=float(_typed(data["ease_factor"], "ease_factor", (int, float))),
            interval=_typed(data["interval"], "interval", (int,)),
            repetitions=_typed(data["repetitions"], "repetitions", (int,)),
            review_history=tuple(review_entry_from_dict(entry) for entry in history),
            starred=_typed(data.get("starred", False), "starred", (bool,)),
            marked_for_later=_typed(data.get("marked_for_later", False), "marked_for_later", (bool,)),
            color=color,
            hint=_typed(data.get("hint", ""), "hint", (str,)),
            has_hint=_typed(data.get("has_hint", False), "has_hint", (bool,)),
            from_conversation_id=conversation_id,
        )
    except KeyError as exc:
        raise SerializationError(f"Card document is missing field {exc.args[0]!r}.") from exc


def dumps_cards(cards: Iterable[Card]) -> str:
    """Serialize a collection of cards into a versioned JSON document."""
    document = {
        "schema_version": SCHEMA_VERSION,
        "cards": [card_to_dict(card) for card in cards],
    }
    return json.dumps(document, ensure_ascii=False)


def loads_cards(raw: str) -> List[Card]:
    """Parse a document produced by :func:`dumps_cards`."""
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SerializationError("Card document is not valid JSON.") from exc

    if not isinstance(document, dict):
        raise SerializationError("Card document must be a JSON object.")

    version = document.get("schema_version")
    if version != SCHEMA_VERSION:
        raise SerializationError(f"Unsupported card schema version: {version!r}.")

    cards = document.get("cards")
    if not isinstance(cards, list):
        raise SerializationError("Card document must contain a 'cards' list.")
    return [card_from_dict(item) for item in cards]
