# app/routes/inventory.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.inventory import InventoryOut
from app.services import catalog
from app.services.deps import get_db, get_current_user, http_error
from app.services.errors import MarketError

router = APIRouter(prefix="/inventory", tags=["inventory"])


def _inventory_out(db: Session, user_id: int, game_id: Optional[int]) -> InventoryOut:
    try:
        items = catalog.inventory_for(db, user_id, game_id)
    except MarketError as e:
        raise http_error(e) from e
    return InventoryOut(
        user_id=user_id,
        game_id=game_id,
        items=[catalog.to_item_out(i, owner_id=user_id) for i in items],
    )


@router.get("/me", response_model=InventoryOut)
def my_inventory(
    game_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _inventory_out(db, user.id, game_id)


@router.get("/{user_id}", response_model=InventoryOut)
def user_inventory(
    user_id: int,
    game_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    # Inventories are public so traders can pick what to ask for
    return _inventory_out(db, user_id, game_id)
