import random
from datetime import timedelta

import pytest

from cardwise.application.session import ReviewSession
from cardwise.domain.exceptions import (
    CardNotFoundError,
    DuplicateCardError,
    InvalidCardError,
    NoCurrentCardError,
)
from cardwise.domain.models import Quality
from cardwise.infrastructure.adapters.memory_store import MemoryCardStore


@pytest.fixture
def seeded_store(make_card, now):
    return MemoryCardStore(
        [
            make_card(id="new1", front="un", back="one"),
            make_card(id="new2", front="deux", back="two"),
            make_card(id="later", front="trois", back="three", last_reviewed=now, interval=6, repetitions=2),
        ]
    )


def _start(store, now):
    return ReviewSession.start(store, now=now, rng=random.Random(7))


def test_start_queues_due_cards_only(seeded_store, now):
    session = _start(seeded_store, now)
    assert {c.id for c in session.queue} == {"new1", "new2"}
    assert session.remaining == 2
    assert session.current is None
    assert not session.finished


def test_start_with_limit(seeded_store, now):
    session = ReviewSession.start(seeded_store, now=now, limit=1)
    assert session.remaining == 1


def test_next_card_is_stable_until_rated(seeded_store, now):
    session = _start(seeded_store, now)
    first = session.next_card()
    assert session.next_card() is first
    assert session.remaining == 1


def test_rate_without_card_raises(seeded_store, now):
    session = _start(seeded_store, now)
    with pytest.raises(NoCurrentCardError):
        session.rate(3, now=now)


def test_good_rating_retires_card_and_saves(seeded_store, now):
    session = _start(seeded_store, now)
    card = session.next_card()

    outcome = session.rate(Quality.GOOD, now=now)

    assert outcome.requeued is False
    assert outcome.saved is True
    assert outcome.card.interval == 1
    assert card.id not in {c.id for c in session.queue}
    assert seeded_store.save_count == 1
    stored = {c.id: c for c in seeded_store.load_all()}
    assert stored[card.id].repetitions == 1
    assert stored[card.id].last_reviewed == now
    assert session.reviewed_count == 1


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_low_rating_requeues_updated_card_at_back(seeded_store, now, quality):
    session = _start(seeded_store, now)
    card = session.next_card()

    outcome = session.rate(quality, now=now)

    assert outcome.requeued is True
    assert session.queue[-1].id == card.id
    assert session.queue[-1].last_reviewed == now
    assert session.remaining == 2


def test_session_ends_when_queue_empties(seeded_store, now):
    session = _start(seeded_store, now)
    ratings = iter([0, 3, 4])
    shown = []
    while (card := session.next_card()) is not None:
        shown.append(card.id)
        session.rate(next(ratings), now=now)

    assert session.finished
    assert len(shown) == 3
    assert shown[0] == shown[2]  # the failed card came back
    assert session.reviewed_count == 3
    assert seeded_store.save_count == 3


def test_out_of_range_rating_is_clamped(seeded_store, now):
    session = _start(seeded_store, now)
    session.next_card()
    outcome = session.rate(99, now=now)
    assert outcome.quality is Quality.EASY
    assert outcome.requeued is False


def test_review_by_id(seeded_store, now):
    session = ReviewSession(seeded_store, seeded_store.load_all())
    outcome = session.review("later", 4, now=now + timedelta(days=6))
    assert outcome.card.interval == 15
    assert session.find("later").repetitions == 3
    assert not session.queue


def test_review_unknown_id(seeded_store, now):
    session = ReviewSession(seeded_store, seeded_store.load_all())
    with pytest.raises(CardNotFoundError):
        session.review("nope", 3, now=now)


def test_add_card(seeded_store, now):
    session = _start(seeded_store, now)
    card = session.add_card("  quatre ", " four", now=now)

    assert (card.front, card.back) == ("quatre", "four")
    assert card.id.startswith("card_")
    assert session.queue[-1] is card
    assert len(seeded_store.load_all()) == 4


def test_duplicate_card_rejected(seeded_store, now):
    session = _start(seeded_store, now)
    saves = seeded_store.save_count

    with pytest.raises(DuplicateCardError):
        session.add_card(" un", "one ", now=now)

    assert len(session.cards) == 3
    assert len(seeded_store.load_all()) == 3
    assert seeded_store.save_count == saves


@pytest.mark.parametrize("front, back", [("", "x"), ("x", "   "), (" ", "")])
def test_blank_card_rejected(seeded_store, now, front, back):
    session = _start(seeded_store, now)
    with pytest.raises(InvalidCardError):
        session.add_card(front, back, now=now)
    assert len(session.cards) == 3


def test_failed_save_is_reported(make_card, now):
    class BrokenStore(MemoryCardStore):
        def save_all(self, cards):
            return False

    session = ReviewSession.start(BrokenStore([make_card()]), now=now)
    session.next_card()
    outcome = session.rate(3, now=now)
    assert outcome.saved is False
    assert session.cards[0].repetitions == 1


def test_negative_limit_is_ignored(seeded_store, now):
    session = ReviewSession.start(seeded_store, now=now, limit=-1)
    assert session.remaining == 2
