"""
Domain models for flashcards and their scheduling state.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

from .constants import INITIAL_EASE_FACTOR, MAX_QUALITY, MIN_QUALITY


class Quality(IntEnum):
    """Recall rating given after a review (0 = worst, 4 = best)."""

    AGAIN = 0
    HARD = 1
    PARTIAL = 2
    GOOD = 3
    EASY = 4

    @classmethod
    def clamp(cls, value: int) -> "Quality":
        """Clamp any integer into the valid rating range."""
        return cls(max(MIN_QUALITY, min(MAX_QUALITY, int(value))))

    @classmethod
    def parse(cls, text: str) -> "Quality":
        """
        Parse user input: either a number or a rating name (case-insensitive).

        Numbers outside the range are clamped; unknown names raise ValueError.
        """
        text = text.strip()
        try:
            return cls.clamp(int(text))
        except ValueError:
            pass
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown rating: {text!r}") from None


@dataclass
class Card:
    """
    A flashcard plus its SM-2 scheduling state.

    Attributes:
        id: Stable unique identity, assigned once at creation.
        front: Prompt text.
        back: Expected answer.
        last_reviewed: Local time of the most recent review (None if never reviewed).
        interval: Days until the next review (0 for a never-reviewed card).
        ease_factor: Interval growth multiplier, never below 1.3.
        repetitions: Consecutive reviews rated 3 or higher.
    """

    id: str
    front: str
    back: str
    last_reviewed: datetime | None = None
    interval: int = 0
    ease_factor: float = INITIAL_EASE_FACTOR
    repetitions: int = 0

    @property
    def key(self) -> tuple[str, str]:
        """Content key used for merging and duplicate detection."""
        return card_key(self.front, self.back)

    @property
    def is_new(self) -> bool:
        return self.last_reviewed is None


def card_key(front: str, back: str) -> tuple[str, str]:
    return (front.strip(), back.strip())
