import logging
import threading
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from cardwise.consts import VERSION
from cardwise.domain.models import Card

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cardwise.server")

# One writer at a time: every mutating request loads, updates and saves the whole collection.
_store_lock = threading.Lock()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"cardwise server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("cardwise server shutting down...")


app = FastAPI(
    title="cardwise",
    description="Local API for reviewing and managing flashcards.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CardResponse(BaseModel):
    id: str
    front: str
    back: str
    last_reviewed: datetime | None
    interval: int
    ease_factor: float
    repetitions: int

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            last_reviewed=card.last_reviewed,
            interval=card.interval,
            ease_factor=card.ease_factor,
            repetitions=card.repetitions,
        )


class NewCardRequest(BaseModel):
    front: str
    back: str


class ReviewRequest(BaseModel):
    quality: int


class ReviewResponse(BaseModel):
    card: CardResponse
    quality: int
    requeue: bool


class StatsResponse(BaseModel):
    new: int
    learning: int
    mature: int
    due: int
    total: int


start_time = time.time()


def _open_session():
    from cardwise.application.config import resolve_config
    from cardwise.application.factory import get_card_store
    from cardwise.application.session import ReviewSession

    config = resolve_config()
    store = get_card_store(config)
    return ReviewSession(store, store.load_all()), config


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/cards", response_model=list[CardResponse])
def list_cards():
    session, _ = _open_session()
    return [CardResponse.from_card(c) for c in session.cards]


@app.post("/cards", response_model=CardResponse, status_code=201)
def create_card(req: NewCardRequest):
    """Add a card. Duplicate text is rejected with 409."""
    from cardwise.domain.exceptions import DuplicateCardError, InvalidCardError

    with _store_lock:
        session, _ = _open_session()
        try:
            card = session.add_card(req.front, req.back)
        except DuplicateCardError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        except InvalidCardError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
    return CardResponse.from_card(card)


@app.get("/due", response_model=list[CardResponse])
def list_due(shuffle: bool = False):
    """Cards due today. With shuffle=true, in review-queue order."""
    from cardwise.application.queue_builder import build_review_queue, due_cards

    session, _ = _open_session()
    cards = build_review_queue(session.cards) if shuffle else due_cards(session.cards)
    return [CardResponse.from_card(c) for c in cards]


@app.post("/cards/{card_id}/review", response_model=ReviewResponse)
def review_card(card_id: str, req: ReviewRequest):
    """
    Record a rating for a card. `requeue` tells the client to show the card
    again before the session ends.
    """
    from cardwise.domain.exceptions import CardNotFoundError

    with _store_lock:
        session, _ = _open_session()
        try:
            outcome = session.review(card_id, req.quality)
        except CardNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e

    if not outcome.saved:
        logger.error(f"Review of {card_id} was not persisted")
        raise HTTPException(status_code=500, detail="Failed to save review")

    return ReviewResponse(
        card=CardResponse.from_card(outcome.card),
        quality=int(outcome.quality),
        requeue=outcome.requeued,
    )


@app.get("/stats", response_model=StatsResponse)
def get_stats():
    from cardwise.application.stats import MetricsCalculator

    session, config = _open_session()
    result = MetricsCalculator(config.mature_interval).collection_stats(session.cards)
    return StatsResponse(**result.to_dict())
