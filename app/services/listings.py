# app/services/listings.py
"""
Listing registry: marketplace visibility and price of items.

Like the ownership store, these helpers only flush; the caller commits.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from app.models.item import Item
from app.services import trade_ledger
from app.services.errors import NotFoundError, InvalidStateError

logger = logging.getLogger("itemvault.listings")
logger.setLevel(logging.INFO)

Price = Union[Decimal, float, int, str]


def _get_item(db: Session, item_id: int) -> Item:
    item = db.get(Item, item_id)
    if item is None:
        raise NotFoundError(f"Item {item_id} not found")
    return item


def _to_price(price: Price) -> Decimal:
    try:
        value = Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise InvalidStateError(f"Invalid price {price!r}")
    if not value.is_finite():
        raise InvalidStateError(f"Invalid price {price!r}")
    if value < 0:
        raise InvalidStateError("Price cannot be negative")
    return value.quantize(Decimal("0.01"))


def is_listed(db: Session, item_id: int) -> bool:
    return _get_item(db, item_id).listed


def list_item(db: Session, item_id: int, price: Price) -> Item:
    item = _get_item(db, item_id)
    value = _to_price(price)

    pending = trade_ledger.pending_trades_with_item(db, item_id)
    if pending:
        raise InvalidStateError(
            f"Item {item_id} is offered in pending trade {pending[0].id} and cannot be listed"
        )

    item.price = value
    item.is_listed = True
    db.flush()
    logger.info(f"Item {item_id} listed at {value}")
    return item


def unlist_item(db: Session, item_id: int) -> Item:
    item = _get_item(db, item_id)
    if item.is_listed:
        item.is_listed = False
        db.flush()
        logger.info(f"Item {item_id} unlisted")
    return item


def update_price(db: Session, item_id: int, price: Price) -> Item:
    item = _get_item(db, item_id)
    item.price = _to_price(price)
    db.flush()
    logger.info(f"Item {item_id} repriced to {item.price}")
    return item


def listed_items(db: Session, game_id: Optional[int] = None) -> List[Item]:
    q = db.query(Item).filter(Item.is_listed.is_(True), Item.price.isnot(None))
    if game_id is not None:
        q = q.filter(Item.game_id == game_id)
    return q.order_by(Item.game_id.asc(), Item.price.asc(), Item.id.asc()).all()


def claim_listing(db: Session, item_id: int) -> bool:
    """
    Take a listed item off the market for a purchase. Conditional on the row
    still being listed, so of two buyers racing on one listing only the first
    gets True.
    """
    claimed = (
        db.query(Item)
        .filter(Item.id == item_id, Item.is_listed.is_(True), Item.price.isnot(None))
        .update({Item.is_listed: False}, synchronize_session="fetch")
    )
    if claimed:
        logger.info(f"Item {item_id} taken off the market for purchase")
    return claimed == 1
