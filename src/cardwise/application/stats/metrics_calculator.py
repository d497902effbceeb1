"""
Metrics calculator for collection progress.

This is a pure computation module with no I/O.
"""

from dataclasses import asdict, dataclass
from datetime import datetime

from cardwise.application.queue_builder import is_due
from cardwise.domain.constants import MATURE_INTERVAL
from cardwise.domain.models import Card


@dataclass
class CollectionStats:
    """
    Progress breakdown of a card collection.

    The categories are independent filters, not a partition: a card with no
    repetitions but a long interval counts as both new and mature.
    """

    new: int  # repetitions == 0
    learning: int  # repetitions > 0 and interval below the mature threshold
    mature: int  # interval at or above the mature threshold
    due: int
    total: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class MetricsCalculator:
    """
    Computes progress metrics over a collection.

    Stateless and side-effect free.
    """

    def __init__(self, mature_interval: int = MATURE_INTERVAL):
        self.mature_interval = mature_interval

    def collection_stats(self, cards: list[Card], now: datetime | None = None) -> CollectionStats:
        now = now or datetime.now()
        return CollectionStats(
            new=sum(1 for c in cards if c.repetitions == 0),
            learning=sum(
                1 for c in cards if c.repetitions > 0 and c.interval < self.mature_interval
            ),
            mature=sum(1 for c in cards if c.interval >= self.mature_interval),
            due=sum(1 for c in cards if is_due(c, now)),
            total=len(cards),
        )
