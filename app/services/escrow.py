# app/services/escrow.py
"""
Escrow engine for peer-to-peer item trades.

    Pending --accept (both flags true)--> Completed
    Pending --decline (either party)----> Declined

Completed and Declined are terminal. Every public operation runs as one unit
of work: it either commits entirely or leaves the store untouched.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.database import unit_of_work
from app.models.game import Game
from app.models.item import Item
from app.models.trade import ItemTrade, TRADE_COMPLETED, TRADE_DECLINED, TERMINAL_STATUSES
from app.models.user import User
from app.services import ownership, trade_ledger
from app.services.errors import (
    InvalidTradeError,
    InvalidStateError,
    NotFoundError,
    OwnershipMismatchError,
    TradeConflictError,
    UnauthorizedError,
)

logger = logging.getLogger("itemvault.escrow")
logger.setLevel(logging.INFO)


def _as_id_list(item_ids: Optional[Iterable[int]]) -> List[int]:
    return [int(i) for i in (item_ids or [])]


def _validate_item_sets(source_ids: Sequence[int], destination_ids: Sequence[int]) -> None:
    if len(set(source_ids)) != len(source_ids):
        raise InvalidTradeError("An item is offered more than once by the source user")
    if len(set(destination_ids)) != len(destination_ids):
        raise InvalidTradeError("An item is requested more than once from the destination user")
    overlap = set(source_ids) & set(destination_ids)
    if overlap:
        raise InvalidTradeError(f"Items {sorted(overlap)} appear on both sides of the trade")
    if not source_ids and not destination_ids:
        raise InvalidTradeError("A trade must move at least one item")


def _validate_offer(db: Session, item_ids: Sequence[int], owner_id: int, game_id: int, side: str) -> None:
    for item_id in item_ids:
        item = db.get(Item, item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        if item.game_id != game_id:
            raise InvalidTradeError(f"Item {item_id} does not belong to game {game_id}")
        if not ownership.is_owned_by(db, item_id, owner_id):
            raise InvalidTradeError(f"Item {item_id} is not owned by the {side} user {owner_id}")
        if item.listed:
            raise InvalidTradeError(f"Item {item_id} is listed on the marketplace and cannot be traded")


def _party_of(trade: ItemTrade, user_id: int) -> str:
    if user_id == trade.source_user_id:
        return trade_ledger.SOURCE
    if user_id == trade.destination_user_id:
        return trade_ledger.DESTINATION
    raise UnauthorizedError(f"User {user_id} is not a participant of trade {trade.id}")


def _load_open_trade(db: Session, trade_id: int, acting_user_id: int) -> tuple[ItemTrade, str]:
    trade = trade_ledger.get(db, trade_id)
    party = _party_of(trade, acting_user_id)
    if trade.status in TERMINAL_STATUSES:
        raise InvalidStateError(f"Trade {trade_id} is already {trade.status}")
    return trade, party


def propose(
    db: Session,
    source_user_id: int,
    destination_user_id: int,
    game_id: int,
    description: str,
    source_item_ids: Optional[Iterable[int]],
    destination_item_ids: Optional[Iterable[int]],
) -> ItemTrade:
    """
    Open a Pending trade. The initiator (source) has accepted by proposing;
    nothing changes hands until the destination user accepts too.
    """
    source_ids = _as_id_list(source_item_ids)
    destination_ids = _as_id_list(destination_item_ids)

    with unit_of_work(db):
        if source_user_id == destination_user_id:
            raise InvalidTradeError("Cannot trade with yourself")
        for user_id in (source_user_id, destination_user_id):
            if db.get(User, user_id) is None:
                raise NotFoundError(f"User {user_id} not found")
        if db.get(Game, game_id) is None:
            raise NotFoundError(f"Game {game_id} not found")

        _validate_item_sets(source_ids, destination_ids)
        _validate_offer(db, source_ids, source_user_id, game_id, "source")
        _validate_offer(db, destination_ids, destination_user_id, game_id, "destination")

        trade = trade_ledger.create(
            db,
            source_user_id=source_user_id,
            destination_user_id=destination_user_id,
            game_id=game_id,
            description=description,
            source_item_ids=source_ids,
            destination_item_ids=destination_ids,
        )

    logger.info(
        f"Trade {trade.id} proposed: user {source_user_id} -> user {destination_user_id}, "
        f"offered={source_ids} requested={destination_ids}"
    )
    return trade


def accept(db: Session, trade_id: int, acting_user_id: int) -> ItemTrade:
    """
    Record the acting party's acceptance. When both flags are set the trade
    completes inside the same unit of work; if any item moved since the
    proposal the whole unit rolls back (acceptance included) and
    TradeConflictError is raised with the trade still Pending.
    """
    with unit_of_work(db):
        trade, party = _load_open_trade(db, trade_id, acting_user_id)
        trade_ledger.set_acceptance(db, trade, party, True)
        if trade.accepted_by_source and trade.accepted_by_destination:
            _complete(db, trade)

    logger.info(f"Trade {trade_id} accepted by {party} user {acting_user_id} (status={trade.status})")
    return trade


def decline(db: Session, trade_id: int, acting_user_id: int) -> ItemTrade:
    with unit_of_work(db):
        trade, party = _load_open_trade(db, trade_id, acting_user_id)
        trade_ledger.set_status(db, trade, TRADE_DECLINED)

    logger.info(f"Trade {trade_id} declined by {party} user {acting_user_id}")
    return trade


def _complete(db: Session, trade: ItemTrade) -> None:
    # Items are disjoint, so transfer order does not matter.
    transfers = [
        (item_id, trade.source_user_id, trade.destination_user_id) for item_id in trade.source_item_ids
    ] + [
        (item_id, trade.destination_user_id, trade.source_user_id) for item_id in trade.destination_item_ids
    ]
    for item_id, from_user_id, to_user_id in transfers:
        try:
            ownership.transfer_ownership(db, item_id, from_user_id, to_user_id)
        except OwnershipMismatchError as e:
            logger.warning(f"Trade {trade.id} conflict on item {item_id}; completion aborted")
            raise TradeConflictError(trade.id, item_id) from e

    trade_ledger.set_status(db, trade, TRADE_COMPLETED)
    logger.info(f"Trade {trade.id} completed: {len(transfers)} item(s) transferred")


def active_trades(db: Session, user_id: int) -> List[ItemTrade]:
    return trade_ledger.active_trades_for(db, user_id)


def trade_history(db: Session, user_id: int) -> List[ItemTrade]:
    return trade_ledger.history_for(db, user_id)


def get_trade_for(db: Session, trade_id: int, user_id: int) -> ItemTrade:
    trade = trade_ledger.get(db, trade_id)
    _party_of(trade, user_id)
    return trade
