"""
Review session controller.

A ReviewSession owns everything a study session needs: the store handle,
the in-memory collection, the review queue and the card currently shown.
Each rating runs the scheduler once, saves the whole collection once and
mutates the queue once.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from cardwise.application.importer import new_card
from cardwise.application.loader import load_collection
from cardwise.application.queue_builder import build_review_queue, is_due
from cardwise.application.scheduler import schedule
from cardwise.domain.constants import PASSING_QUALITY
from cardwise.domain.exceptions import (
    CardNotFoundError,
    DuplicateCardError,
    InvalidCardError,
    NoCurrentCardError,
)
from cardwise.domain.models import Card, Quality, card_key
from cardwise.domain.ports import CardStore

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    card: Card  # Updated card, as saved
    quality: Quality  # Rating after clamping
    requeued: bool
    saved: bool


class ReviewSession:
    def __init__(
        self,
        store: CardStore,
        cards: list[Card],
        queue: list[Card] | None = None,
    ):
        self.store = store
        self.cards = cards
        self.queue: deque[Card] = deque(queue or [])
        self.current: Card | None = None
        self.reviewed_count = 0

    @classmethod
    def start(
        cls,
        store: CardStore,
        source: Path | None = None,
        now: datetime | None = None,
        rng: random.Random | None = None,
        limit: int | None = None,
    ) -> "ReviewSession":
        """
        Load the collection (merging `source` if given) and queue today's due cards.

        Args:
            limit: Cap on the number of distinct cards queued at the start.
        """
        report = load_collection(store, source)
        queue = build_review_queue(report.cards, now=now, rng=rng)
        if limit is not None and limit >= 0:
            queue = queue[:limit]
        logger.info(f"Session started: {len(queue)} due of {len(report.cards)} cards")
        return cls(store, report.cards, queue)

    @property
    def remaining(self) -> int:
        return len(self.queue)

    @property
    def finished(self) -> bool:
        return self.current is None and not self.queue

    def next_card(self) -> Card | None:
        """
        Advance to the next queued card.

        The card on display stays current until it is rated, so calling this
        twice without a rating returns the same card.
        """
        if self.current is None and self.queue:
            self.current = self.queue.popleft()
        return self.current

    def rate(self, quality: int, now: datetime | None = None) -> ReviewOutcome:
        """
        Rate the current card.

        The updated card is written back and saved. Ratings below 3 send the
        card to the back of the queue so it comes up again this session.
        """
        if self.current is None:
            raise NoCurrentCardError("No card is being reviewed")

        outcome = self._apply(self.current, quality, now)
        self.current = None
        if outcome.requeued:
            self.queue.append(outcome.card)
        return outcome

    def review(self, card_id: str, quality: int, now: datetime | None = None) -> ReviewOutcome:
        """Rate a card by id, outside the queue flow."""
        card = self.find(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return self._apply(card, quality, now)

    def add_card(self, front: str, back: str, now: datetime | None = None) -> Card:
        """
        Create a card from user input.

        Raises:
            InvalidCardError: front or back is blank.
            DuplicateCardError: a card with the same trimmed text already exists.
        """
        front, back = front.strip(), back.strip()
        if not front or not back:
            raise InvalidCardError("Card front and back must not be empty")

        key = card_key(front, back)
        if any(c.key == key for c in self.cards):
            raise DuplicateCardError(front, back)

        card = new_card(front, back)
        self.cards.append(card)
        if not self.store.save_all(self.cards):
            logger.warning(f"Card {card.id} added but the collection could not be saved")
        if is_due(card, now):
            self.queue.append(card)
        logger.info(f"Added card {card.id}")
        return card

    def find(self, card_id: str) -> Card | None:
        return next((c for c in self.cards if c.id == card_id), None)

    def _apply(self, card: Card, quality: int, now: datetime | None) -> ReviewOutcome:
        q = Quality.clamp(quality)
        updated = schedule(card, q, now=now)
        self._write_back(updated)
        saved = self.store.save_all(self.cards)
        if not saved:
            logger.warning(f"Review of {card.id} could not be saved")
        self.reviewed_count += 1
        logger.debug(
            f"Reviewed {card.id}: q={int(q)} interval={updated.interval} "
            f"ease={updated.ease_factor:.2f} reps={updated.repetitions}"
        )
        return ReviewOutcome(
            card=updated, quality=q, requeued=q < PASSING_QUALITY, saved=saved
        )

    def _write_back(self, updated: Card) -> None:
        for i, c in enumerate(self.cards):
            if c.id == updated.id:
                self.cards[i] = updated
                return
        self.cards.append(updated)
