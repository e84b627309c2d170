# app/services/ownership.py
"""
Ownership store: the only code allowed to change who holds an item.

Every function works inside the caller's session and never commits; callers
group several calls into one unit of work (app.core.database.unit_of_work).
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.inventory import UserInventory
from app.models.item import Item
from app.services.errors import NotFoundError, InvalidStateError, OwnershipMismatchError

logger = logging.getLogger("itemvault.ownership")
logger.setLevel(logging.INFO)


def owner_of(db: Session, item_id: int) -> int:
    owner_id = (
        db.query(UserInventory.user_id)
        .filter(UserInventory.item_id == item_id)
        .scalar()
    )
    if owner_id is None:
        raise NotFoundError(f"Item {item_id} has no owner")
    return owner_id


def is_owned_by(db: Session, item_id: int, user_id: int) -> bool:
    return db.query(UserInventory.item_id).filter(
        UserInventory.item_id == item_id,
        UserInventory.user_id == user_id,
    ).first() is not None


def items_owned_by(db: Session, user_id: int, game_id: Optional[int] = None) -> List[int]:
    q = db.query(UserInventory.item_id).filter(UserInventory.user_id == user_id)
    if game_id is not None:
        q = q.filter(UserInventory.game_id == game_id)
    return [r.item_id for r in q.order_by(UserInventory.item_id.asc()).all()]


def grant(db: Session, item_id: int, user_id: int) -> UserInventory:
    """Record the first owner of an item (catalog intake / seeding)."""
    item = db.get(Item, item_id)
    if item is None:
        raise NotFoundError(f"Item {item_id} not found")
    if db.query(UserInventory.item_id).filter(UserInventory.item_id == item_id).first():
        raise InvalidStateError(f"Item {item_id} already has an owner")

    row = UserInventory(item_id=item_id, user_id=user_id, game_id=item.game_id)
    db.add(row)
    db.flush()
    return row


def transfer_ownership(db: Session, item_id: int, expected_owner_id: int, new_owner_id: int) -> None:
    """
    Conditional delete of (item, expected owner) followed by an insert of
    (item, new owner). Zero deleted rows means another request moved the item
    first: raise OwnershipMismatchError and let the caller roll back.
    """
    game_id = (
        db.query(UserInventory.game_id)
        .filter(UserInventory.item_id == item_id, UserInventory.user_id == expected_owner_id)
        .scalar()
    )
    deleted = (
        db.query(UserInventory)
        .filter(UserInventory.item_id == item_id, UserInventory.user_id == expected_owner_id)
        .delete(synchronize_session="fetch")
    )
    if deleted == 0 or game_id is None:
        logger.warning(f"Ownership mismatch on item {item_id}: expected owner {expected_owner_id}")
        raise OwnershipMismatchError(item_id, expected_owner_id)

    db.add(UserInventory(item_id=item_id, user_id=new_owner_id, game_id=game_id))
    db.flush()
    logger.info(f"Item {item_id} moved from user {expected_owner_id} to user {new_owner_id}")
