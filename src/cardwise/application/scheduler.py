"""
Modified SM-2 scheduler.

Maps (card, quality) to the card's next scheduling state. Pure computation:
the only input besides the card and rating is the review timestamp.

Differences from classical SM-2:
- Ratings run 0-4 instead of 0-5, so the ease update is centred on 4.
- Quality 2 ("partial") keeps the repetition count, halves the interval
  and takes a fixed ease penalty instead of resetting the card.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime

from cardwise.domain.constants import (
    FIRST_INTERVAL,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    PARTIAL_EASE_PENALTY,
    PARTIAL_INTERVAL_MULTIPLIER,
    PASSING_QUALITY,
    SECOND_INTERVAL,
)
from cardwise.domain.models import Card, Quality

logger = logging.getLogger(__name__)


def schedule(card: Card, quality: int, now: datetime | None = None) -> Card:
    """
    Compute the card's scheduling state after a review.

    Args:
        card: The card as it was before the review. Not modified.
        quality: Rating 0-4. Out-of-range values are clamped, never rejected.
        now: Review timestamp (defaults to the current local time).

    Returns:
        A new Card with updated interval, ease_factor, repetitions and last_reviewed.
    """
    q = Quality.clamp(quality)
    if q != quality:
        logger.debug(f"Clamped quality {quality} to {int(q)}")

    repetitions = card.repetitions
    interval = card.interval
    ease_factor = card.ease_factor

    if q >= PASSING_QUALITY:
        repetitions += 1
        if repetitions == 1:
            interval = FIRST_INTERVAL
        elif repetitions == 2:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up(interval * ease_factor)
        ease_factor += ease_delta(q)
    elif q <= Quality.HARD:
        repetitions = 0
        interval = FIRST_INTERVAL
    else:
        interval = max(FIRST_INTERVAL, round_half_up(interval * PARTIAL_INTERVAL_MULTIPLIER))
        ease_factor -= PARTIAL_EASE_PENALTY

    if not ease_factor >= MIN_EASE_FACTOR:  # also catches NaN
        ease_factor = MIN_EASE_FACTOR

    return replace(
        card,
        repetitions=repetitions,
        interval=interval,
        ease_factor=ease_factor,
        last_reviewed=now or datetime.now(),
    )


def ease_delta(quality: int) -> float:
    """
    Ease factor change for a passing rating.

    +0.1 at quality 4; the penalty term cancels it out at quality 3.
    """
    miss = MAX_QUALITY - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


def round_half_up(value: float) -> int:
    # Python's round() uses banker's rounding; intervals round .5 upwards.
    return int(math.floor(value + 0.5))
