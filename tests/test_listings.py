from decimal import Decimal

import pytest

from app.core.database import unit_of_work
from app.services import escrow, listings
from app.services.errors import InvalidStateError, NotFoundError

from conftest import fresh_item


def test_list_sets_flag_and_price(db, world):
    with unit_of_work(db):
        listings.list_item(db, world.sword, 12.5)

    item = fresh_item(db, world.sword)
    assert item.is_listed is True
    assert item.price == Decimal("12.50")
    assert listings.is_listed(db, world.sword)


def test_list_accepts_zero_price(db, world):
    listings.list_item(db, world.sword, 0)
    assert listings.is_listed(db, world.sword)


def test_list_rejects_negative_price(db, world):
    with pytest.raises(InvalidStateError):
        listings.list_item(db, world.sword, -1)
    assert not listings.is_listed(db, world.sword)


def test_list_rejects_item_in_pending_trade(db, world):
    trade = escrow.propose(db, world.alice, world.bob, world.cs, "swap", [world.sword], [world.bow])

    with pytest.raises(InvalidStateError) as exc:
        listings.list_item(db, world.bow, 20)
    assert str(trade.id) in str(exc.value)
    assert not listings.is_listed(db, world.bow)


def test_item_can_be_listed_once_trade_is_declined(db, world):
    trade = escrow.propose(db, world.alice, world.bob, world.cs, "swap", [world.sword], [world.bow])
    escrow.decline(db, trade.id, world.bob)

    with unit_of_work(db):
        listings.list_item(db, world.sword, 4)
    assert listings.is_listed(db, world.sword)


def test_unlist_is_idempotent(db, world):
    with unit_of_work(db):
        listings.unlist_item(db, world.gem)
    first = fresh_item(db, world.gem)
    state = (first.is_listed, first.price)

    with unit_of_work(db):
        listings.unlist_item(db, world.gem)
    second = fresh_item(db, world.gem)

    assert (second.is_listed, second.price) == state == (False, Decimal("10.00"))


def test_unlist_never_listed_item(db, world):
    listings.unlist_item(db, world.sword)
    listings.unlist_item(db, world.sword)
    assert not listings.is_listed(db, world.sword)


def test_listed_requires_a_price(db, world):
    item = fresh_item(db, world.sword)
    item.is_listed = True
    item.price = None
    db.commit()
    assert not listings.is_listed(db, world.sword)
    assert world.sword not in [i.id for i in listings.listed_items(db)]


def test_update_price(db, world):
    with unit_of_work(db):
        listings.update_price(db, world.gem, "12.346")
    assert fresh_item(db, world.gem).price == Decimal("12.35")

    with pytest.raises(InvalidStateError):
        listings.update_price(db, world.gem, -5)


def test_listed_items_by_game(db, world):
    with unit_of_work(db):
        listings.list_item(db, world.courier, 3)

    assert [i.id for i in listings.listed_items(db)] == [world.gem, world.courier]
    assert [i.id for i in listings.listed_items(db, game_id=world.dota)] == [world.courier]


def test_unknown_item(db, world):
    with pytest.raises(NotFoundError):
        listings.is_listed(db, 404)
    with pytest.raises(NotFoundError):
        listings.list_item(db, 404, 1)
    with pytest.raises(NotFoundError):
        listings.unlist_item(db, 404)


def test_claim_listing_only_once(db, world):
    assert listings.claim_listing(db, world.gem) is True
    assert listings.claim_listing(db, world.gem) is False
    assert listings.claim_listing(db, world.sword) is False
    assert not listings.is_listed(db, world.gem)
