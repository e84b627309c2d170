# app/routes/games.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.item import GameOut, ItemOut
from app.services import catalog
from app.services.deps import get_db, get_current_user, http_error
from app.services.errors import MarketError

router = APIRouter(prefix="/games", tags=["games"])


@router.get("", response_model=List[GameOut])
def list_games(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [catalog.to_game_out(g) for g in catalog.list_games(db)]


@router.get("/{game_id}", response_model=GameOut)
def get_game(game_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        return catalog.to_game_out(catalog.get_game(db, game_id))
    except MarketError as e:
        raise http_error(e) from e


@router.get("/{game_id}/items", response_model=List[ItemOut])
def list_game_items(game_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        items = catalog.items_for_game(db, game_id)
    except MarketError as e:
        raise http_error(e) from e
    return catalog.to_item_out_list(db, items)
