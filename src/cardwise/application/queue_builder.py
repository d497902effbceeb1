"""
Queue builder for review sessions.

Builds the review queue by:
1. Filtering the collection down to cards due today (day granularity)
2. Shuffling the due set uniformly
"""

import logging
import random
from datetime import date, datetime, timedelta

from cardwise.domain.models import Card

logger = logging.getLogger(__name__)


def next_due_date(card: Card) -> date | None:
    """
    Calendar day on which the card becomes due.

    Returns None for a card that has never been reviewed (always due).
    """
    if card.last_reviewed is None:
        return None
    try:
        return (card.last_reviewed + timedelta(days=card.interval)).date()
    except (OverflowError, ValueError):
        logger.warning(f"Card {card.id} has an out-of-range interval ({card.interval} days)")
        return date.max


def is_due(card: Card, now: datetime | None = None) -> bool:
    """
    Check whether a card should be reviewed today.

    A card becomes due at the start of its due calendar day, regardless of
    the time of day it was last reviewed.
    """
    due_on = next_due_date(card)
    if due_on is None:
        return True
    today = (now or datetime.now()).date()
    return due_on <= today


def due_cards(cards: list[Card], now: datetime | None = None) -> list[Card]:
    """Return the due subset of `cards`, preserving collection order."""
    now = now or datetime.now()
    return [card for card in cards if is_due(card, now)]


def build_review_queue(
    cards: list[Card],
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Build a shuffled review queue containing exactly the due cards.

    Args:
        cards: The full collection.
        now: Reference time for the due check (defaults to now).
        rng: Random source for the shuffle; pass a seeded one for reproducible order.

    Returns:
        A new list; order carries no meaning.
    """
    queue = due_cards(cards, now)
    (rng or random).shuffle(queue)
    logger.debug(f"Built review queue: {len(queue)}/{len(cards)} cards due")
    return queue
