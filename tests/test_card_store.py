from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from typing import Callable

import pytest

from flashdeck.cards import (
    Card,
    CardNotFoundError,
    CardStore,
    FixedClock,
    ReviewRating,
    SchedulingEngine,
)


CardFactory = Callable[..., Card]


@pytest.fixture
def make_card(clock: FixedClock) -> CardFactory:
    def _make(question: str, category: str = "Science", *, minutes: int = 0) -> Card:
        created = clock.now() + timedelta(minutes=minutes)
        return Card.create(question, f"answer to {question}", category, now=created)

    return _make


def test_upsert_replaces_existing_card_by_id(make_card: CardFactory) -> None:
    store = CardStore()
    card = make_card("What is H2O?")
    store.upsert(card)

    edited = card.edit(answer="Water")
    store.upsert(edited)

    assert len(store) == 1
    assert store.get(card.id).answer == "Water"


def test_remove_is_idempotent(make_card: CardFactory) -> None:
    card = make_card("What is a photon?")
    store = CardStore([card])

    assert store.remove(card.id) is True
    assert store.remove(card.id) is False
    assert card.id not in store


def test_get_unknown_card_raises() -> None:
    store = CardStore()

    with pytest.raises(CardNotFoundError) as excinfo:
        store.get("missing")

    assert excinfo.value.card_id == "missing"


def test_category_and_flag_queries(make_card: CardFactory) -> None:
    physics = make_card("What is inertia?", "Physics")
    history = make_card("Who was Ashoka?", "History").edit(starred=True)
    marked = make_card("What is a quark?", "Physics").edit(marked_for_later=True)
    store = CardStore([physics, history, marked])

    assert store.by_category("Physics") == [physics, marked]
    assert store.by_category("physics") == []
    assert store.starred() == [history]
    assert store.marked_for_later() == [marked]
    assert store.categories() == ["History", "Physics"]


def test_due_includes_cards_due_exactly_now(make_card: CardFactory, clock: FixedClock) -> None:
    now = clock.now()
    due_now = make_card("Due now?")
    reviewed = replace(make_card("Reviewed?"), due_date=now + timedelta(days=3))
    store = CardStore([due_now, reviewed])

    assert store.due(now) == [due_now]
    assert store.due(now + timedelta(days=3)) == [due_now, reviewed]
    assert store.due(now - timedelta(seconds=1)) == []


def test_naive_as_of_is_read_as_utc(make_card: CardFactory, clock: FixedClock) -> None:
    tomorrow = clock.now() + timedelta(days=1)
    due_now = make_card("Due now?")
    later = replace(make_card("Later?"), due_date=tomorrow + timedelta(hours=1))
    store = CardStore([due_now, later])

    naive = tomorrow.replace(tzinfo=None)

    assert store.due(naive) == [due_now]
    assert store.statistics(naive).due == 1
    assert later.is_due(naive + timedelta(hours=1)) is True


def test_by_confidence_matches_exact_level(make_card: CardFactory) -> None:
    low = make_card("Low?")
    mastered = replace(make_card("High?"), confidence=5)
    store = CardStore([low, mastered])

    assert store.by_confidence(1) == [low]
    assert store.by_confidence(5) == [mastered]
    assert store.by_confidence(4) == []


def test_recently_added_sorts_newest_first_and_truncates(make_card: CardFactory) -> None:
    cards = [make_card(f"Question {index}?", minutes=index) for index in range(5)]
    store = CardStore(cards)

    recent = store.recently_added(3)

    assert [card.question for card in recent] == ["Question 4?", "Question 3?", "Question 2?"]
    assert store.recently_added(0) == []
    assert len(store.recently_added()) == 5


def test_statistics_on_empty_store_uses_neutral_ease(clock: FixedClock) -> None:
    stats = CardStore().statistics(clock.now())

    assert stats.total == 0
    assert stats.due == 0
    assert stats.average_ease == 2.5
    assert stats.mastered_percentage == 0.0


def test_statistics_aggregate_collection(
    make_card: CardFactory, engine: SchedulingEngine, clock: FixedClock
) -> None:
    single = CardStore([replace(make_card("Only?"), ease_factor=2.0)])
    assert single.statistics(clock.now()).average_ease == 2.0

    easy = engine.update(make_card("Easy?"), ReviewRating.EASY)
    again = engine.update(make_card("Again?"), ReviewRating.AGAIN)
    store = CardStore([easy, again, make_card("New?")])

    stats = store.statistics(clock.now())

    assert stats.total == 3
    assert stats.due == 1
    assert stats.mastered == 1
    assert stats.difficult == 2
    assert stats.average_ease == pytest.approx((2.65 + 2.3 + 2.5) / 3)
    assert stats.mastered_percentage == pytest.approx(100 / 3)
