# app/routes/trades.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.trade import ItemTrade
from app.models.user import User
from app.schemas.trade import TradeCreate, TradeItemOut, TradeOut
from app.schemas.user import UserBrief
from app.services import escrow
from app.services.deps import get_db, get_current_user, http_error
from app.services.errors import MarketError

logger = logging.getLogger("itemvault.routes.trades")
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/trades", tags=["Trades"])


def _detail_to_schema(d) -> TradeItemOut:
    """Single place to serialize a trade detail (so we don't forget fields)."""
    return TradeItemOut(
        item_id=d.item_id,
        name=d.item.name if d.item is not None else "",
        price=float(d.item.price) if d.item is not None and d.item.price is not None else None,
        is_source_user_item=d.is_source_user_item,
    )


def _build_trade_out(t: ItemTrade) -> TradeOut:
    given = [d for d in t.details if d.is_source_user_item]
    requested = [d for d in t.details if not d.is_source_user_item]
    return TradeOut(
        id=t.id,
        source_user=UserBrief(id=t.source_user.id, username=t.source_user.username),
        destination_user=UserBrief(id=t.destination_user.id, username=t.destination_user.username),
        game_id=t.game_id,
        game_title=t.game.title if t.game is not None else None,
        description=t.description,
        status=t.status,
        accepted_by_source=t.accepted_by_source,
        accepted_by_destination=t.accepted_by_destination,
        created_at=t.created_at,
        closed_at=t.closed_at,
        source_items=[_detail_to_schema(d) for d in given],
        destination_items=[_detail_to_schema(d) for d in requested],
    )


def _transition(db: Session, action: str, fn, *args) -> TradeOut:
    try:
        trade = fn(db, *args)
    except MarketError as e:
        raise http_error(e) from e
    except SQLAlchemyError as e:
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to {action}") from e
    return _build_trade_out(trade)


@router.post("", response_model=TradeOut, status_code=status.HTTP_201_CREATED)
def create_trade(
    payload: TradeCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Propose a trade from the caller to `destination_user_id`.
    The caller's acceptance is recorded immediately; no item moves until the
    other party accepts.
    """
    return _transition(
        db,
        "create trade",
        escrow.propose,
        user.id,
        payload.destination_user_id,
        payload.game_id,
        payload.description,
        payload.source_item_ids,
        payload.destination_item_ids,
    )


@router.get("/active", response_model=List[TradeOut])
def list_active_trades(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [_build_trade_out(t) for t in escrow.active_trades(db, user.id)]


@router.get("/history", response_model=List[TradeOut])
def list_trade_history(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [_build_trade_out(t) for t in escrow.trade_history(db, user.id)]


@router.get("/{trade_id}", response_model=TradeOut)
def get_trade(trade_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        return _build_trade_out(escrow.get_trade_for(db, trade_id, user.id))
    except MarketError as e:
        raise http_error(e) from e


@router.post("/{trade_id}/accept", response_model=TradeOut)
def accept_trade(trade_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _transition(db, "accept trade", escrow.accept, trade_id, user.id)


@router.post("/{trade_id}/decline", response_model=TradeOut)
def decline_trade(trade_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _transition(db, "decline trade", escrow.decline, trade_id, user.id)
