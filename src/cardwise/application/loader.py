"""
Collection loading: import source + stored collection.

The import source is optional and may be unreachable; the stored collection
is always the fallback, and an empty collection is a valid result.
"""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path

from cardwise.application.importer import merge_cards, parse_import_text
from cardwise.domain.models import Card
from cardwise.domain.ports import CardStore

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    cards: list[Card]
    imported: bool = False  # True if the import source was read and merged
    added: int = 0
    updated: int = 0
    skipped_rows: int = 0


def load_collection(store: CardStore, source: Path | None = None) -> LoadReport:
    """
    Load the card collection, merging in an import source if one is given.

    On a successful import the merged collection is saved back to the store.
    If the source cannot be read, the stored collection is used as-is.
    """
    if source is None:
        return LoadReport(cards=_load_stored(store))

    try:
        text = Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to load import source {source}: {e}")
        return LoadReport(cards=_load_stored(store))

    try:
        parsed = parse_import_text(text)
    except csv.Error as e:
        logger.error(f"Failed to parse import source {source}: {e}")
        return LoadReport(cards=_load_stored(store))

    logger.info(f"Loaded {len(parsed.cards)} cards from {source}")

    merged = merge_cards(store.load_all(), parsed.cards)
    if not store.save_all(merged.cards):
        logger.warning("Merged collection could not be saved; continuing in memory")

    return LoadReport(
        cards=merged.cards,
        imported=True,
        added=merged.added,
        updated=merged.updated,
        skipped_rows=len(parsed.skipped_rows),
    )


def _load_stored(store: CardStore) -> list[Card]:
    cards = store.load_all()
    if not cards:
        logger.warning("No import source loaded and no stored cards found. Start by adding a card.")
    return cards
