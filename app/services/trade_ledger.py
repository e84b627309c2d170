# app/services/trade_ledger.py
"""
Durable record of trade proposals and their lifecycle.

Storage only: no ownership checks live here. The two setters still refuse to
touch a trade that has reached Completed or Declined.
"""
from datetime import datetime, timezone
from typing import List, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.models.trade import (
    ItemTrade,
    TRADE_PENDING,
    TRADE_COMPLETED,
    TERMINAL_STATUSES,
    TradeStatus,
)
from app.models.trade_line import ItemTradeDetail
from app.services.errors import NotFoundError, InvalidStateError, ConflictError

SOURCE = "source"
DESTINATION = "destination"
PARTIES = (SOURCE, DESTINATION)


def create(
    db: Session,
    source_user_id: int,
    destination_user_id: int,
    game_id: int,
    description: str,
    source_item_ids: Sequence[int],
    destination_item_ids: Sequence[int],
) -> ItemTrade:
    trade = ItemTrade(
        source_user_id=source_user_id,
        destination_user_id=destination_user_id,
        game_id=game_id,
        description=description or "",
        status=TRADE_PENDING,
        accepted_by_source=True,  # the initiator accepts by proposing
        accepted_by_destination=False,
    )
    position = 0
    for item_id in source_item_ids:
        trade.details.append(ItemTradeDetail(item_id=item_id, is_source_user_item=True, position=position))
        position += 1
    for item_id in destination_item_ids:
        trade.details.append(ItemTradeDetail(item_id=item_id, is_source_user_item=False, position=position))
        position += 1

    db.add(trade)
    db.flush()  # get trade.id
    return trade


def get(db: Session, trade_id: int) -> ItemTrade:
    trade = (
        db.query(ItemTrade)
        .options(selectinload(ItemTrade.details))
        .filter(ItemTrade.id == trade_id)
        .first()
    )
    if trade is None:
        raise NotFoundError(f"Trade {trade_id} not found")
    return trade


def _ensure_open(trade: ItemTrade) -> None:
    if trade.status in TERMINAL_STATUSES:
        raise InvalidStateError(f"Trade {trade.id} is already {trade.status}")


def set_acceptance(db: Session, trade: ItemTrade, party: str, accepted: bool) -> ItemTrade:
    _ensure_open(trade)
    if party == SOURCE:
        trade.accepted_by_source = accepted
    elif party == DESTINATION:
        trade.accepted_by_destination = accepted
    else:
        raise ValueError(f"Unknown trade party {party!r}")
    db.flush()
    return trade


def set_status(db: Session, trade: ItemTrade, status: str) -> ItemTrade:
    """
    Move a Pending trade to `status`. The UPDATE is conditional on the row
    still being Pending, so a concurrent decline and completion cannot both win.
    """
    if status not in TradeStatus:
        raise ValueError(f"Unknown trade status {status!r}")
    _ensure_open(trade)
    if status == TRADE_COMPLETED and not (trade.accepted_by_source and trade.accepted_by_destination):
        raise InvalidStateError(f"Trade {trade.id} cannot complete without both acceptances")

    now = datetime.now(timezone.utc)
    values = {ItemTrade.status: status, ItemTrade.updated_at: now}
    if status in TERMINAL_STATUSES:
        values[ItemTrade.closed_at] = now
    updated = (
        db.query(ItemTrade)
        .filter(ItemTrade.id == trade.id, ItemTrade.status == TRADE_PENDING)
        .update(values, synchronize_session="fetch")
    )
    if updated == 0:
        raise ConflictError(f"Trade {trade.id} was closed by another request")
    db.flush()
    return trade


def _participant_query(db: Session, user_id: int):
    return (
        db.query(ItemTrade)
        .options(selectinload(ItemTrade.details))
        .filter(or_(
            ItemTrade.source_user_id == user_id,
            ItemTrade.destination_user_id == user_id,
        ))
    )


def active_trades_for(db: Session, user_id: int) -> List[ItemTrade]:
    return (
        _participant_query(db, user_id)
        .filter(ItemTrade.status == TRADE_PENDING)
        .order_by(ItemTrade.created_at.desc(), ItemTrade.id.desc())
        .all()
    )


def history_for(db: Session, user_id: int) -> List[ItemTrade]:
    return (
        _participant_query(db, user_id)
        .filter(ItemTrade.status.in_(TERMINAL_STATUSES))
        .order_by(ItemTrade.created_at.desc(), ItemTrade.id.desc())
        .all()
    )


def pending_trades_with_item(db: Session, item_id: int) -> List[ItemTrade]:
    return (
        db.query(ItemTrade)
        .join(ItemTradeDetail, ItemTradeDetail.trade_id == ItemTrade.id)
        .filter(ItemTradeDetail.item_id == item_id, ItemTrade.status == TRADE_PENDING)
        .order_by(ItemTrade.id.asc())
        .all()
    )
