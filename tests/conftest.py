from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, make_engine
from app.core.security import create_jwt_token, hash_password
from app.main import app
from app.models import Game, Item, User, UserInventory
from app.services.deps import get_db


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'itemvault_test.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def world(db):
    """
    Three users and two games.

    item 1 Sword   alice   unlisted      item 4 Helm    bob    unlisted
    item 2 Bow     bob     unlisted      item 5 Gem     carol  listed at 10.00
    item 3 Shield  alice   unlisted      item 6 Courier alice  (second game)
    """
    cs = Game(id=1, title="Counter-Strike 2", price=Decimal("0"), genre="FPS", description="Shooter")
    dota = Game(id=2, title="Dota 2", price=Decimal("0"), genre="MOBA", description="Arena")
    alice = User(id=1, username="alice", hashed_password=hash_password("alice1234"), wallet_balance=Decimal("50"))
    bob = User(id=2, username="bob", hashed_password=hash_password("bob12345"))
    carol = User(id=3, username="carol")
    db.add_all([cs, dota, alice, bob, carol])
    db.flush()

    items = [
        (1, "Sword", cs, Decimal("5.00"), False, alice),
        (2, "Bow", cs, Decimal("7.00"), False, bob),
        (3, "Shield", cs, Decimal("3.00"), False, alice),
        (4, "Helm", cs, Decimal("2.00"), False, bob),
        (5, "Gem", cs, Decimal("10.00"), True, carol),
        (6, "Courier", dota, Decimal("1.00"), False, alice),
    ]
    for item_id, name, game, price, listed, owner in items:
        db.add(Item(id=item_id, name=name, game_id=game.id, price=price, description=f"{name} skin", is_listed=listed))
        db.flush()
        db.add(UserInventory(item_id=item_id, user_id=owner.id, game_id=game.id))
    db.commit()

    return SimpleNamespace(
        cs=cs.id, dota=dota.id,
        alice=alice.id, bob=bob.id, carol=carol.id,
        sword=1, bow=2, shield=3, helm=4, gem=5, courier=6,
    )


def current_owner(db, item_id):
    row = db.query(UserInventory.user_id).filter(UserInventory.item_id == item_id).all()
    assert len(row) <= 1
    return row[0].user_id if row else None


def ownership_rows(db, item_id):
    return db.query(UserInventory).filter(UserInventory.item_id == item_id).count()


def fresh_item(db, item_id):
    db.expire_all()
    return db.get(Item, item_id)


def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_jwt_token({'sub': str(user_id)})}"}


@pytest.fixture
def client(session_factory, world):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
