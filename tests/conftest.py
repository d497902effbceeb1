from datetime import datetime

import pytest

from cardwise.domain.models import Card
from cardwise.infrastructure.adapters.memory_store import MemoryCardStore


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for var in ("CARDWISE_DATA_FILE", "CARDWISE_SOURCE_FILE", "CARDWISE_LOG_DIR"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def data_file(tmp_path, mock_home, monkeypatch):
    """Points the configured card collection at a temp JSON file."""
    path = tmp_path / "cards.json"
    monkeypatch.setenv("CARDWISE_DATA_FILE", str(path))
    monkeypatch.setenv("CARDWISE_LOG_DIR", str(tmp_path / "logs"))
    return path


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 14, 30)


@pytest.fixture
def make_card():
    counter = iter(range(1, 10_000))

    def _make(front=None, back=None, **kwargs) -> Card:
        n = next(counter)
        return Card(
            id=kwargs.pop("id", f"card_{n}"),
            front=front or f"front {n}",
            back=back or f"back {n}",
            **kwargs,
        )

    return _make


@pytest.fixture
def store():
    return MemoryCardStore()
