"""Helpers for persisting cards and their review ledger."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flashdeck.cards.models import Card, CardColor, ReviewEntry, ReviewRating
from flashdeck.cards.store import CardStore

from . import CardRecord, CardReviewRecord


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _optional_utc(value: Optional[datetime]) -> Optional[datetime]:
    return _to_utc(value) if value is not None else None


def _review_record(position: int, entry: ReviewEntry) -> CardReviewRecord:
    return CardReviewRecord(
        position=position,
        rating=entry.rating.value,
        reviewed_at=_to_utc(entry.date),
        time_taken=entry.time_taken,
        prior_interval=entry.prior_interval,
        new_interval=entry.new_interval,
    )


def _apply_card_fields(record: CardRecord, card: Card) -> None:
    record.question = card.question
    record.answer = card.answer
    record.category = card.category
    record.created_at = _to_utc(card.created_at)
    record.last_reviewed = _optional_utc(card.last_reviewed)
    record.confidence = card.confidence
    record.ease_factor = card.ease_factor
    record.interval = card.interval
    record.repetitions = card.repetitions
    record.due_date = _to_utc(card.due_date)
    record.starred = card.starred
    record.marked_for_later = card.marked_for_later
    record.color = card.color.value
    record.hint = card.hint
    record.has_hint = card.has_hint
    record.from_conversation_id = card.from_conversation_id


def record_to_card(record: CardRecord) -> Card:
    """Convert a loaded :class:`CardRecord` (reviews included) into a domain card."""
    history = tuple(
        ReviewEntry(
            date=_to_utc(review.reviewed_at),
            rating=ReviewRating.from_tag(review.rating),
            time_taken=review.time_taken,
            prior_interval=review.prior_interval,
            new_interval=review.new_interval,
        )
        for review in sorted(record.reviews, key=lambda review: review.position)
    )
    return Card(
        id=record.id,
        question=record.question,
        answer=record.answer,
        category=record.category,
        created_at=_to_utc(record.created_at),
        due_date=_to_utc(record.due_date),
        last_reviewed=_optional_utc(record.last_reviewed),
        confidence=record.confidence,
        ease_factor=record.ease_factor,
        interval=record.interval,
        repetitions=record.repetitions,
        review_history=history,
        starred=record.starred,
        marked_for_later=record.marked_for_later,
        color=CardColor(record.color),
        hint=record.hint,
        has_hint=record.has_hint,
        from_conversation_id=record.from_conversation_id,
    )


async def _load_record(session: AsyncSession, card_id: str) -> Optional[CardRecord]:
    stmt = (
        select(CardRecord)
        .options(selectinload(CardRecord.reviews))
        .where(CardRecord.id == card_id)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def save_card(session: AsyncSession, card: Card) -> CardRecord:
    """Insert or update a card, appending only ledger entries not yet stored."""
    record = await _load_record(session, card.id)

    if record is None:
        record = CardRecord(id=card.id)
        _apply_card_fields(record, card)
        record.reviews = [
            _review_record(position, entry) for position, entry in enumerate(card.review_history)
        ]
        session.add(record)
        await session.flush()
        return record

    _apply_card_fields(record, card)
    stored = len(record.reviews)
    for position, entry in enumerate(card.review_history[stored:], start=stored):
        record.reviews.append(_review_record(position, entry))
    await session.flush()
    return record


async def get_card(session: AsyncSession, card_id: str) -> Optional[Card]:
    """Return the stored card with ``card_id``, or ``None`` when absent."""
    record = await _load_record(session, card_id)
    if record is None:
        return None
    return record_to_card(record)


async def list_cards(session: AsyncSession) -> List[Card]:
    """Return every stored card, oldest first."""
    stmt = (
        select(CardRecord)
        .options(selectinload(CardRecord.reviews))
        .order_by(CardRecord.created_at, CardRecord.id)
    )
    result = await session.execute(stmt)
    return [record_to_card(record) for record in result.scalars().all()]


async def delete_card(session: AsyncSession, card_id: str) -> bool:
    """Delete a card and its ledger. Returns False when the card does not exist."""
    record = await _load_record(session, card_id)
    if record is None:
        return False

    # Loaded reviews are removed through the ORM cascade.
    await session.delete(record)
    await session.flush()
    return True


async def load_store(session: AsyncSession) -> CardStore:
    """Build an in-memory :class:`CardStore` from every stored card."""
    return CardStore(await list_cards(session))


async def save_store(session: AsyncSession, store: CardStore) -> None:
    """Persist every card held by ``store``."""
    for card in store:
        await save_card(session, card)
