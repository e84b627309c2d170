# app/routes/marketplace.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.item import ItemOut, ListingIn, PriceUpdateIn
from app.services import catalog, marketplace
from app.services.deps import get_db, get_current_user, http_error
from app.services.errors import MarketError

logger = logging.getLogger("itemvault.routes.marketplace")
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


def _run(db: Session, action: str, fn, *args) -> ItemOut:
    try:
        item = fn(db, *args)
    except MarketError as e:
        raise http_error(e) from e
    except SQLAlchemyError as e:
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to {action}") from e
    return catalog.to_item_out(item, catalog.owner_map(db, [item.id]).get(item.id))


@router.get("/listings", response_model=List[ItemOut])
def list_listings(
    game_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return catalog.to_item_out_list(db, marketplace.listings_for(db, game_id))


@router.post("/items/{item_id}/list", response_model=ItemOut)
def list_item(
    item_id: int,
    payload: ListingIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _run(db, "list item", marketplace.list_for_sale, item_id, user.id, payload.price)


@router.post("/items/{item_id}/unlist", response_model=ItemOut)
def unlist_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _run(db, "unlist item", marketplace.withdraw, item_id, user.id)


@router.patch("/items/{item_id}/price", response_model=ItemOut)
def update_price(
    item_id: int,
    payload: PriceUpdateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _run(db, "update price", marketplace.reprice, item_id, user.id, payload.price)


@router.post("/items/{item_id}/buy", response_model=ItemOut)
def buy_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _run(db, "complete purchase", marketplace.buy, item_id, user.id)
