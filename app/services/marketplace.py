# app/services/marketplace.py
"""
Marketplace purchase engine plus the owner-facing listing operations.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.database import unit_of_work
from app.models.item import Item
from app.services import listings, ownership
from app.services.errors import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    NotListedError,
    OwnershipMismatchError,
    UnauthorizedError,
)

logger = logging.getLogger("itemvault.marketplace")
logger.setLevel(logging.INFO)


def buy(db: Session, item_id: int, buyer_id: int) -> Item:
    """
    Move a listed item from its current owner to `buyer_id` and unlist it, in
    one unit of work. If the item changes hands between reading the owner and
    the transfer, or the listing is taken by another request before this one
    claims it, ConflictError is raised and nothing is written. Not retried:
    an item sold to someone else is final for this request.
    """
    with unit_of_work(db):
        if not listings.is_listed(db, item_id):
            raise NotListedError(f"Item {item_id} is not listed for sale")

        seller_id = ownership.owner_of(db, item_id)
        if seller_id == buyer_id:
            raise InvalidOperationError(f"User {buyer_id} already owns item {item_id}")

        try:
            ownership.transfer_ownership(db, item_id, seller_id, buyer_id)
        except OwnershipMismatchError as e:
            logger.warning(f"Purchase of item {item_id} by user {buyer_id} lost a race; aborted")
            raise ConflictError(f"Item {item_id} was sold or traded by another request") from e

        if not listings.claim_listing(db, item_id):
            logger.warning(f"Listing of item {item_id} already taken; purchase by user {buyer_id} aborted")
            raise ConflictError(f"Item {item_id} was sold or withdrawn by another request")
        item = db.get(Item, item_id)

    logger.info(f"Item {item_id} bought by user {buyer_id} from user {seller_id} for {item.price}")
    return item


def _owned_item(db: Session, item_id: int, user_id: int) -> Item:
    item = db.get(Item, item_id)
    if item is None:
        raise NotFoundError(f"Item {item_id} not found")
    if not ownership.is_owned_by(db, item_id, user_id):
        raise UnauthorizedError(f"User {user_id} does not own item {item_id}")
    return item


def list_for_sale(db: Session, item_id: int, seller_id: int, price) -> Item:
    with unit_of_work(db):
        _owned_item(db, item_id, seller_id)
        item = listings.list_item(db, item_id, price)
    return item


def withdraw(db: Session, item_id: int, seller_id: int) -> Item:
    with unit_of_work(db):
        _owned_item(db, item_id, seller_id)
        item = listings.unlist_item(db, item_id)
    return item


def reprice(db: Session, item_id: int, seller_id: int, price) -> Item:
    with unit_of_work(db):
        _owned_item(db, item_id, seller_id)
        item = listings.update_price(db, item_id, price)
    return item


def listings_for(db: Session, game_id: Optional[int] = None) -> List[Item]:
    return listings.listed_items(db, game_id)
