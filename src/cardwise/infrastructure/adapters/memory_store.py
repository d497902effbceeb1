"""In-memory CardStore, used for ephemeral sessions and tests."""

from dataclasses import replace

from cardwise.domain.models import Card
from cardwise.domain.ports import CardStore


class MemoryCardStore(CardStore):
    def __init__(self, cards: list[Card] | None = None):
        self._cards = [replace(c) for c in cards or []]
        self.save_count = 0

    def load_all(self) -> list[Card]:
        return [replace(c) for c in self._cards]

    def save_all(self, cards: list[Card]) -> bool:
        self._cards = [replace(c) for c in cards]
        self.save_count += 1
        return True
