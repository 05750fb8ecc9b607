from __future__ import annotations

from datetime import timedelta

import pytest

from flashdeck.cards import (
    CardColor,
    CardNotFoundError,
    CardStore,
    FixedClock,
    FlashcardManager,
    InvalidInputError,
    ReviewRating,
    SchedulingEngine,
)
from flashdeck.cards.serialization import card_to_dict


@pytest.fixture
def manager(engine: SchedulingEngine) -> FlashcardManager:
    return FlashcardManager(CardStore(), engine)


def test_create_card_uses_engine_clock(manager: FlashcardManager, clock: FixedClock) -> None:
    card = manager.create_card("What is DNA?", "Deoxyribonucleic acid", "Biology", color=CardColor.GREEN)

    assert card.created_at == clock.now()
    assert card.due_date == clock.now()
    assert card.color is CardColor.GREEN
    assert manager.store.get(card.id) == card


def test_rate_card_persists_into_store(manager: FlashcardManager, clock: FixedClock) -> None:
    card = manager.create_card("What is RNA?", "Ribonucleic acid", "Biology")

    rated = manager.rate_card(card.id, ReviewRating.GOOD, time_taken=2.0)

    assert manager.store.get(card.id) is rated
    assert rated.interval == 1
    assert rated.due_date == clock.now() + timedelta(days=1)
    assert manager.store.due(clock.now()) == []


def test_rate_card_with_invalid_time_leaves_store_untouched(manager: FlashcardManager) -> None:
    card = manager.create_card("What is ATP?", "Adenosine triphosphate", "Biology")

    with pytest.raises(InvalidInputError):
        manager.rate_card(card.id, ReviewRating.EASY, time_taken=-0.5)

    assert manager.store.get(card.id) is card


def test_update_confidence_routes_through_engine(manager: FlashcardManager) -> None:
    card = manager.create_card("What is a gene?", "A unit of heredity", "Biology")

    updated = manager.update_confidence(card.id, 2)

    assert updated.confidence == 2
    assert updated.ease_factor == pytest.approx(2.35)
    assert len(updated.review_history) == 1


def test_toggle_flags(manager: FlashcardManager) -> None:
    card = manager.create_card("What is mitosis?", "Cell division", "Biology")

    assert manager.toggle_star(card.id).starred is True
    assert manager.toggle_star(card.id).starred is False
    assert manager.toggle_marked_for_later(card.id).marked_for_later is True
    assert manager.store.marked_for_later()[0].id == card.id


def test_edit_card_rejects_scheduling_fields(manager: FlashcardManager) -> None:
    card = manager.create_card("What is osmosis?", "Diffusion of water", "Biology")

    edited = manager.edit_card(card.id, category="Chemistry")
    assert edited.category == "Chemistry"

    with pytest.raises(InvalidInputError):
        manager.edit_card(card.id, interval=30)
    assert manager.store.get(card.id).interval == 0


def test_edit_card_coerces_colour_and_tracks_hint(manager: FlashcardManager) -> None:
    card = manager.create_card("What is a ribosome?", "Protein factory", "Biology")

    edited = manager.edit_card(card.id, color="pink", hint="Think of a factory")

    assert edited.color is CardColor.PINK
    assert edited.has_hint is True
    assert card_to_dict(edited)["color"] == "pink"

    cleared = manager.edit_card(card.id, hint="")
    assert cleared.has_hint is False
    assert manager.edit_card(card.id, hint="Kept", has_hint=False).has_hint is False


@pytest.mark.parametrize(
    "changes",
    [
        {"color": "teal"},
        {"color": 3},
        {"starred": "yes"},
        {"question": None},
    ],
)
def test_edit_card_rejects_invalid_values(manager: FlashcardManager, changes: dict) -> None:
    card = manager.create_card("What is a vacuole?", "A storage organelle", "Biology")

    with pytest.raises(InvalidInputError):
        manager.edit_card(card.id, **changes)

    assert manager.store.get(card.id) is card


def test_unknown_card_operations(manager: FlashcardManager) -> None:
    with pytest.raises(CardNotFoundError):
        manager.rate_card("missing", ReviewRating.GOOD)
    with pytest.raises(CardNotFoundError):
        manager.toggle_star("missing")

    assert manager.delete_card("missing") is False
