# Application Stats Package
from .metrics_calculator import CollectionStats, MetricsCalculator

__all__ = ["MetricsCalculator", "CollectionStats"]
