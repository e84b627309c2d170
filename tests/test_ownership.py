import pytest

from app.core.database import unit_of_work
from app.models import Item
from app.services import ownership
from app.services.errors import InvalidStateError, NotFoundError, OwnershipMismatchError

from conftest import current_owner, ownership_rows


def test_owner_of_returns_current_holder(db, world):
    assert ownership.owner_of(db, world.sword) == world.alice
    assert ownership.owner_of(db, world.gem) == world.carol


def test_owner_of_unknown_item(db, world):
    with pytest.raises(NotFoundError):
        ownership.owner_of(db, 999)


def test_transfer_moves_the_single_record(db, world):
    with unit_of_work(db):
        ownership.transfer_ownership(db, world.sword, world.alice, world.bob)

    assert current_owner(db, world.sword) == world.bob
    assert ownership_rows(db, world.sword) == 1
    assert world.sword in ownership.items_owned_by(db, world.bob)
    assert world.sword not in ownership.items_owned_by(db, world.alice)


def test_transfer_with_wrong_expected_owner_changes_nothing(db, world):
    with pytest.raises(OwnershipMismatchError) as exc:
        with unit_of_work(db):
            ownership.transfer_ownership(db, world.sword, world.bob, world.carol)

    assert exc.value.item_id == world.sword
    assert exc.value.expected_owner_id == world.bob
    assert current_owner(db, world.sword) == world.alice


def test_transfer_of_unowned_item_is_a_mismatch(db, world):
    with pytest.raises(OwnershipMismatchError):
        ownership.transfer_ownership(db, 999, world.alice, world.bob)


def test_failed_second_transfer_rolls_back_the_first(db, world):
    with pytest.raises(OwnershipMismatchError):
        with unit_of_work(db):
            ownership.transfer_ownership(db, world.sword, world.alice, world.bob)
            ownership.transfer_ownership(db, world.bow, world.alice, world.bob)

    assert current_owner(db, world.sword) == world.alice
    assert current_owner(db, world.bow) == world.bob


def test_items_owned_by_filters_by_game(db, world):
    assert ownership.items_owned_by(db, world.alice) == [world.sword, world.shield, world.courier]
    assert ownership.items_owned_by(db, world.alice, game_id=world.dota) == [world.courier]


def test_grant_records_first_owner(db, world):
    db.add(Item(id=10, name="Knife", game_id=world.cs, description="new"))
    db.flush()
    with unit_of_work(db):
        ownership.grant(db, 10, world.carol)
    assert current_owner(db, 10) == world.carol


def test_grant_refuses_second_owner(db, world):
    with pytest.raises(InvalidStateError):
        ownership.grant(db, world.sword, world.bob)


def test_racing_transfers_only_one_wins(session_factory, world):
    first, second = session_factory(), session_factory()
    try:
        # both callers observe the same pre-transfer owner
        seen_by_first = ownership.owner_of(first, world.gem)
        seen_by_second = ownership.owner_of(second, world.gem)
        assert seen_by_first == seen_by_second == world.carol

        with unit_of_work(first):
            ownership.transfer_ownership(first, world.gem, seen_by_first, world.alice)

        with pytest.raises(OwnershipMismatchError):
            with unit_of_work(second):
                ownership.transfer_ownership(second, world.gem, seen_by_second, world.bob)

        assert current_owner(second, world.gem) == world.alice
        assert ownership_rows(second, world.gem) == 1
    finally:
        first.close()
        second.close()
