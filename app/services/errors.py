# app/services/errors.py


class MarketError(Exception):
    """Base exception for ownership, listing, trade and purchase operations."""
    status_code = 400


class InvalidTradeError(MarketError):
    """A trade proposal violates a precondition."""
    status_code = 400


class InvalidStateError(MarketError):
    """The target is not in a state that allows the operation."""
    status_code = 409


class InvalidOperationError(MarketError):
    status_code = 400


class NotListedError(MarketError):
    """Purchase attempted on an item that is not on the marketplace."""
    status_code = 400


class UnauthorizedError(MarketError):
    """Acting user is not a participant (or not the owner)."""
    status_code = 403


class NotFoundError(MarketError):
    status_code = 404


class OwnershipMismatchError(MarketError):
    """
    The expected owner no longer holds the item: someone else moved it first.
    Raised by the ownership store's conditional transfer.
    """
    status_code = 409

    def __init__(self, item_id: int, expected_owner_id: int):
        self.item_id = item_id
        self.expected_owner_id = expected_owner_id
        super().__init__(f"Item {item_id} is no longer owned by user {expected_owner_id}")


class ConflictError(MarketError):
    """A concurrent request changed the state this request relied on."""
    status_code = 409


class TradeConflictError(ConflictError):
    """Dual acceptance reached but an offered item has moved since the proposal."""

    def __init__(self, trade_id: int, item_id: int):
        self.trade_id = trade_id
        self.item_id = item_id
        super().__init__(
            f"Trade {trade_id} cannot complete: item {item_id} changed hands since it was proposed"
        )
