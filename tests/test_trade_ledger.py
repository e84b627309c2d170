import pytest

from app.core.database import unit_of_work
from app.models.trade import TRADE_COMPLETED, TRADE_DECLINED, TRADE_PENDING
from app.services import trade_ledger
from app.services.errors import ConflictError, InvalidStateError, NotFoundError


def _create(db, world, source_items=None, destination_items=None):
    with unit_of_work(db):
        trade = trade_ledger.create(
            db,
            source_user_id=world.alice,
            destination_user_id=world.bob,
            game_id=world.cs,
            description="swap",
            source_item_ids=source_items if source_items is not None else [world.sword],
            destination_item_ids=destination_items if destination_items is not None else [world.bow],
        )
    return trade


def test_create_records_pending_trade_with_initiator_accepted(db, world):
    trade = _create(db, world, [world.sword, world.shield], [world.bow])

    stored = trade_ledger.get(db, trade.id)
    assert stored.status == TRADE_PENDING
    assert stored.accepted_by_source is True
    assert stored.accepted_by_destination is False
    assert stored.source_item_ids == [world.sword, world.shield]
    assert stored.destination_item_ids == [world.bow]
    assert stored.closed_at is None


def test_get_unknown_trade(db, world):
    with pytest.raises(NotFoundError):
        trade_ledger.get(db, 12345)


def test_set_status_closes_trade(db, world):
    trade = _create(db, world)
    with unit_of_work(db):
        trade_ledger.set_status(db, trade, TRADE_DECLINED)

    db.expire_all()
    stored = trade_ledger.get(db, trade.id)
    assert stored.status == TRADE_DECLINED
    assert stored.closed_at is not None


def test_completion_requires_both_acceptances(db, world):
    trade = _create(db, world)
    with pytest.raises(InvalidStateError):
        trade_ledger.set_status(db, trade, TRADE_COMPLETED)


def test_terminal_trade_is_immutable(db, world):
    trade = _create(db, world)
    with unit_of_work(db):
        trade_ledger.set_status(db, trade, TRADE_DECLINED)

    with pytest.raises(InvalidStateError):
        trade_ledger.set_status(db, trade, TRADE_PENDING)
    with pytest.raises(InvalidStateError):
        trade_ledger.set_acceptance(db, trade, trade_ledger.DESTINATION, True)


def test_status_change_loses_to_concurrent_close(session_factory, world):
    first = session_factory()
    second = session_factory()
    try:
        trade = _create(first, world)
        stale = trade_ledger.get(second, trade.id)

        with unit_of_work(first):
            trade_ledger.set_status(first, trade_ledger.get(first, trade.id), TRADE_DECLINED)

        with pytest.raises(ConflictError):
            with unit_of_work(second):
                trade_ledger.set_status(second, stale, TRADE_DECLINED)
    finally:
        first.close()
        second.close()

    check = session_factory()
    try:
        assert trade_ledger.get(check, trade.id).status == TRADE_DECLINED
    finally:
        check.close()


def test_unknown_party_and_status(db, world):
    trade = _create(db, world)
    with pytest.raises(ValueError):
        trade_ledger.set_acceptance(db, trade, "observer", True)
    with pytest.raises(ValueError):
        trade_ledger.set_status(db, trade, "Cancelled")


def test_active_and_history_views(db, world):
    open_trade = _create(db, world)
    closed = _create(db, world, [world.shield], [world.helm])
    with unit_of_work(db):
        trade_ledger.set_status(db, closed, TRADE_DECLINED)

    assert [t.id for t in trade_ledger.active_trades_for(db, world.alice)] == [open_trade.id]
    assert [t.id for t in trade_ledger.active_trades_for(db, world.bob)] == [open_trade.id]
    assert [t.id for t in trade_ledger.history_for(db, world.bob)] == [closed.id]
    assert trade_ledger.active_trades_for(db, world.carol) == []
    assert trade_ledger.history_for(db, world.carol) == []


def test_pending_trades_with_item(db, world):
    first = _create(db, world)
    second = _create(db, world, [world.sword], [world.helm])
    assert [t.id for t in trade_ledger.pending_trades_with_item(db, world.sword)] == [first.id, second.id]

    with unit_of_work(db):
        trade_ledger.set_status(db, first, TRADE_DECLINED)
    assert [t.id for t in trade_ledger.pending_trades_with_item(db, world.sword)] == [second.id]
    assert trade_ledger.pending_trades_with_item(db, world.gem) == []
