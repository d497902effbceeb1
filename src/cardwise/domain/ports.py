"""
Ports (interfaces) for card persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card


class CardStore(ABC):
    """
    Port for loading and saving the whole card collection.

    Implementations:
        - JsonCardStore: A JSON file on disk, replaced atomically on save.
        - MemoryCardStore: An in-process list (tests, ephemeral sessions).
    """

    @abstractmethod
    def load_all(self) -> list[Card]:
        """
        Load every stored card in stored order.

        Never raises for missing or unreadable data; returns an empty list instead.
        """
        pass

    @abstractmethod
    def save_all(self, cards: list[Card]) -> bool:
        """
        Replace the stored collection with `cards`.

        Returns:
            True if the write succeeded, False otherwise.
        """
        pass
