from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from cardwise.consts import VERSION
from cardwise.infrastructure.adapters.json_store import JsonCardStore
from cardwise.server import app

client = TestClient(app)


@pytest.fixture
def seeded(data_file, make_card):
    JsonCardStore(data_file).save_all(
        [
            make_card(id="c1", front="un", back="one"),
            make_card(
                id="c2", front="deux", back="two", repetitions=2, interval=6,
                last_reviewed=datetime.now(),
            ),
        ]
    )
    return data_file


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version():
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_list_cards(seeded):
    response = client.get("/cards")
    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data] == ["c1", "c2"]
    assert data[0]["last_reviewed"] is None
    assert data[1]["ease_factor"] == 2.5


def test_list_due(seeded):
    response = client.get("/due")
    assert [c["id"] for c in response.json()] == ["c1"]

    shuffled = client.get("/due", params={"shuffle": True})
    assert [c["id"] for c in shuffled.json()] == ["c1"]


def test_create_card(seeded):
    response = client.post("/cards", json={"front": " trois ", "back": "three"})
    assert response.status_code == 201
    assert response.json()["front"] == "trois"
    assert len(JsonCardStore(seeded).load_all()) == 3


def test_create_duplicate_conflicts(seeded):
    response = client.post("/cards", json={"front": "un ", "back": " one"})
    assert response.status_code == 409
    assert len(JsonCardStore(seeded).load_all()) == 2


def test_create_blank_rejected(seeded):
    response = client.post("/cards", json={"front": "  ", "back": "x"})
    assert response.status_code == 422


def test_review_card(seeded):
    response = client.post("/cards/c1/review", json={"quality": 3})
    assert response.status_code == 200
    data = response.json()
    assert data["requeue"] is False
    assert data["card"]["interval"] == 1
    assert data["card"]["repetitions"] == 1

    stored = {c.id: c for c in JsonCardStore(seeded).load_all()}
    assert stored["c1"].last_reviewed is not None


def test_review_low_quality_requests_requeue(seeded):
    response = client.post("/cards/c2/review", json={"quality": -3})
    data = response.json()
    assert data["quality"] == 0
    assert data["requeue"] is True
    assert (data["card"]["repetitions"], data["card"]["interval"]) == (0, 1)


def test_review_unknown_card(seeded):
    response = client.post("/cards/nope/review", json={"quality": 3})
    assert response.status_code == 404


def test_review_save_failure(seeded):
    with patch.object(JsonCardStore, "save_all", return_value=False):
        response = client.post("/cards/c1/review", json={"quality": 3})
    assert response.status_code == 500


def test_stats(seeded):
    response = client.get("/stats")
    assert response.json() == {"new": 1, "learning": 1, "mature": 0, "due": 1, "total": 2}


def test_stats_empty_collection(data_file):
    response = client.get("/stats")
    assert response.json()["total"] == 0
