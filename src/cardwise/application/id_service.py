"""Service for generating stable card identities."""

from ulid import ULID

from cardwise.domain.constants import ID_PREFIX


def generate_card_id() -> str:
    """Generate a stable card ID using ULID."""
    return f"{ID_PREFIX}{ULID()}"
