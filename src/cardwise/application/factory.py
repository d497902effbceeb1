"""
Card Store Factory
Centralizes the logic for selecting the card store adapter.
"""

from cardwise.application.config import AppConfig
from cardwise.domain.ports import CardStore
from cardwise.infrastructure.adapters.json_store import JsonCardStore


def get_card_store(config: AppConfig) -> CardStore:
    """Returns the CardStore backing the configured data file."""
    return JsonCardStore(config.data_file)
