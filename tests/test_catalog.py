import pytest
from jose import JWTError

from app.core.security import (
    create_jwt_token,
    hash_password,
    user_id_from_token,
    validate_password_strength,
    verify_password,
)
from app.models import Game, Item, User, UserInventory
from app.services import catalog, seed


def test_game_folder_aliases_and_slug():
    assert catalog.game_folder("Counter-Strike 2") == "cs2"
    assert catalog.game_folder("  dota 2 ") == "dota2"
    assert catalog.game_folder("Rocket League") == "rocketleague"


def test_item_image_path(db, world):
    item = db.get(Item, world.sword)
    assert catalog.item_image_path(item) == f"/static/img/games/cs2/{world.sword}.png"
    assert catalog.item_image_path(Item(name="Unsaved", game_id=world.cs)) == catalog.DEFAULT_ITEM_IMAGE


def test_inventory_orders_by_game_then_price(db, world):
    items = catalog.inventory_for(db, world.alice)
    assert [i.id for i in items] == [world.shield, world.sword, world.courier]


def test_owner_map(db, world):
    assert catalog.owner_map(db, [world.sword, world.bow, 404]) == {world.sword: world.alice, world.bow: world.bob}
    assert catalog.owner_map(db, []) == {}


def test_to_item_out_reports_effective_listing(db, world):
    out = catalog.to_item_out(db.get(Item, world.gem), owner_id=world.carol)
    assert out.is_listed is True
    assert out.price == 10.0
    assert out.game_title == "Counter-Strike 2"


def test_seed_is_idempotent(db):
    seed.seed_demo_data(db)
    counts = (db.query(Game).count(), db.query(User).count(), db.query(Item).count())
    seed.seed_demo_data(db)

    assert (db.query(Game).count(), db.query(User).count(), db.query(Item).count()) == counts
    assert db.query(UserInventory).count() == db.query(Item).count()
    alice = db.query(User).filter(User.username == "alice").one()
    assert verify_password("alice1234", alice.hashed_password)


def test_password_helpers():
    assert validate_password_strength("abc12345")[0]
    assert not validate_password_strength("abcdefgh")[0]
    assert not validate_password_strength("1234567")[0]
    assert not verify_password("anything", None)
    assert verify_password("s3cretpass", hash_password("s3cretpass"))


def test_user_id_from_token():
    assert user_id_from_token(create_jwt_token({"sub": "7"})) == 7
    with pytest.raises(JWTError):
        user_id_from_token(create_jwt_token({"username": "nobody"}))
    with pytest.raises(JWTError):
        user_id_from_token(create_jwt_token({"sub": "alice"}))
    with pytest.raises(JWTError):
        user_id_from_token(create_jwt_token({"sub": "7"}, expires_minutes=-1))
