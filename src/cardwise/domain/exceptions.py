"""Domain exceptions for cardwise."""


class CardwiseError(Exception):
    """Base class for all cardwise errors."""


class DuplicateCardError(CardwiseError):
    """A card with the same trimmed front and back already exists."""

    def __init__(self, front: str, back: str):
        super().__init__(f"Card already exists: {front!r} / {back!r}")
        self.front = front
        self.back = back


class InvalidCardError(CardwiseError):
    """Card text is empty after trimming."""


class NoCurrentCardError(CardwiseError):
    """A rating was submitted while no card was being shown."""


class CardNotFoundError(CardwiseError):
    def __init__(self, card_id: str):
        super().__init__(f"No card with id {card_id!r}")
        self.card_id = card_id
