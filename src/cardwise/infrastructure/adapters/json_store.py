"""
JSON Card Store — Infrastructure adapter for a card collection kept in a JSON file.

Implements CardStore. The file holds a JSON array of card records:

    {"id": ..., "front": ..., "back": ..., "lastReviewed": <epoch ms | null>,
     "interval": 0, "easeFactor": 2.5, "repetitions": 0}

Saves replace the whole file atomically.
"""

import json
import logging
import math
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from cardwise.application.id_service import generate_card_id
from cardwise.domain.constants import INITIAL_EASE_FACTOR
from cardwise.domain.models import Card
from cardwise.domain.ports import CardStore

logger = logging.getLogger(__name__)


class JsonCardStore(CardStore):
    """
    Stores the collection in a single JSON file.

    Records written by older versions may lack scheduling fields or an id;
    those are filled with defaults on load.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_all(self) -> list[Card]:
        if not self.path.exists():
            logger.debug(f"No card file at {self.path}")
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Could not read card file {self.path}: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(f"Card file {self.path} does not contain a list")
            return []

        cards: list[Card] = []
        for i, record in enumerate(raw):
            card = card_from_record(record)
            if card is None:
                logger.warning(f"Skipping invalid record #{i} in {self.path}")
                continue
            cards.append(card)
        return cards

    def save_all(self, cards: list[Card]) -> bool:
        payload = json.dumps([card_to_record(c) for c in cards], ensure_ascii=False, indent=2)
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.error(f"Failed to save {len(cards)} cards to {self.path}: {e}")
            return False
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug(f"Saved {len(cards)} cards to {self.path}")
        return True


def card_to_record(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "front": card.front,
        "back": card.back,
        "lastReviewed": _to_epoch_ms(card.last_reviewed),
        "interval": card.interval,
        "easeFactor": card.ease_factor,
        "repetitions": card.repetitions,
    }


def card_from_record(record: Any) -> Card | None:
    """
    Build a Card from a stored record, filling missing fields with defaults.

    Returns None if the record is not an object or has no usable front/back text.
    """
    if not isinstance(record, dict):
        return None

    front = record.get("front")
    back = record.get("back")
    if not isinstance(front, str) or not isinstance(back, str):
        return None

    card_id = record.get("id")
    try:
        return Card(
            id=str(card_id) if card_id not in (None, "") else generate_card_id(),
            front=front,
            back=back,
            last_reviewed=_from_timestamp(record.get("lastReviewed")),
            interval=int(record.get("interval") or 0),
            ease_factor=_ease_factor(record.get("easeFactor")),
            repetitions=int(record.get("repetitions") or 0),
        )
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _to_epoch_ms(value: datetime | None) -> int | None:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


def _from_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is not None:
            # Due dates are computed on local calendar days
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed
    raise TypeError(f"Unsupported timestamp: {value!r}")


def _ease_factor(value: Any) -> float:
    ease = float(value or INITIAL_EASE_FACTOR)
    if not math.isfinite(ease):
        logger.warning(f"Non-finite easeFactor {value!r}; using {INITIAL_EASE_FACTOR}")
        return INITIAL_EASE_FACTOR
    return ease
