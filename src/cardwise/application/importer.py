"""
Import of card text from row-oriented source files, and merging of imported
cards into the stored collection.
"""

import csv
import io
import logging
from dataclasses import dataclass, field, replace

from cardwise.application.id_service import generate_card_id
from cardwise.domain.constants import BACK_FIELD, FRONT_FIELD, IMPORT_DELIMITER
from cardwise.domain.models import Card, card_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportedCard:
    """Card text read from an import source (no scheduling history)."""

    front: str
    back: str


@dataclass
class ParseResult:
    cards: list[ImportedCard] = field(default_factory=list)
    skipped_rows: list[int] = field(default_factory=list)  # 1-based line numbers


@dataclass
class MergeResult:
    cards: list[Card]
    added: int = 0
    updated: int = 0


def parse_import_text(text: str, delimiter: str = IMPORT_DELIMITER) -> ParseResult:
    """
    Parse import text into card text.

    The first non-blank line is a header naming the fields; each following row
    maps positionally onto the header. Rows with the wrong field count are
    skipped and reported. Only rows with a non-empty front and back are kept.
    """
    result = ParseResult()
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), delimiter=delimiter)

    headers: list[str] | None = None
    for row in reader:
        if not any(value.strip() for value in row):
            continue

        if headers is None:
            headers = [h.strip() for h in row]
            continue

        if len(row) != len(headers):
            logger.warning(
                f"Skipping malformed row {reader.line_num}: "
                f"expected {len(headers)} columns, got {len(row)}"
            )
            result.skipped_rows.append(reader.line_num)
            continue

        data = {name: value.strip() for name, value in zip(headers, row)}
        front = data.get(FRONT_FIELD, "")
        back = data.get(BACK_FIELD, "")
        if front and back:
            result.cards.append(ImportedCard(front=front, back=back))

    if headers is None:
        logger.warning("Import source is empty")
    elif FRONT_FIELD not in headers or BACK_FIELD not in headers:
        logger.warning(f"Import header has no '{FRONT_FIELD}'/'{BACK_FIELD}' columns: {headers}")

    return result


def new_card(front: str, back: str) -> Card:
    """Create a card with default scheduling state and a fresh identity."""
    return Card(id=generate_card_id(), front=front, back=back)


def merge_cards(stored: list[Card], imported: list[ImportedCard]) -> MergeResult:
    """
    Merge imported card text into the stored collection.

    Cards are matched on their trimmed (front, back) text, not on identity.
    A matched stored card keeps its identity and scheduling state and takes
    the imported text; unmatched imports become new cards appended in source
    order. Stored cards absent from the import are kept.
    """
    merged: dict[tuple[str, str], Card] = {}
    for card in stored:
        merged[card.key] = card

    added = 0
    updated = 0
    for item in imported:
        key = card_key(item.front, item.back)
        existing = merged.get(key)
        if existing is not None:
            merged[key] = replace(existing, front=item.front, back=item.back)
            updated += 1
        else:
            merged[key] = new_card(item.front, item.back)
            added += 1

    logger.debug(f"Merged import: {added} added, {updated} matched, {len(merged)} total")
    return MergeResult(cards=list(merged.values()), added=added, updated=updated)
