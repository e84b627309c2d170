# app/services/seed.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.game import Game
from app.models.inventory import UserInventory
from app.models.item import Item
from app.models.user import User
from app.services import ownership

# ---------- Constants ----------

GAMES: list[tuple[str, Decimal, str, str]] = [
    ("Counter-Strike 2", Decimal("0.00"), "FPS", "Tactical team shooter"),
    ("Dota 2", Decimal("0.00"), "MOBA", "Five versus five battle arena"),
    ("Team Fortress 2", Decimal("0.00"), "FPS", "Class-based team shooter"),
]

# (username, password, wallet, points, is_developer)
USERS: list[tuple[str, str, Decimal, int, bool]] = [
    ("alice", "alice1234", Decimal("100.00"), 50, False),
    ("bob", "bob12345", Decimal("75.00"), 20, False),
    ("devon", "devon1234", Decimal("500.00"), 0, True),
]

# (game title, item name, price, description, owner username, listed)
ITEMS: list[tuple[str, str, Decimal, str, str, bool]] = [
    ("Counter-Strike 2", "AK-47 | Redline", Decimal("12.50"), "Field-tested rifle skin", "alice", False),
    ("Counter-Strike 2", "AWP | Asiimov", Decimal("45.00"), "Battle-scarred sniper skin", "bob", False),
    ("Counter-Strike 2", "Karambit | Fade", Decimal("320.00"), "Factory new knife", "devon", True),
    ("Dota 2", "Arcana: Manifold Paradox", Decimal("28.00"), "Phantom Assassin arcana", "alice", True),
    ("Dota 2", "Dragonclaw Hook", Decimal("600.00"), "Pudge hook", "bob", False),
    ("Team Fortress 2", "Unusual Team Captain", Decimal("95.00"), "Burning flames effect", "devon", False),
    ("Team Fortress 2", "Australium Rocket Launcher", Decimal("40.00"), "Strange quality", "alice", False),
]


# ---------- Helpers ----------

def _get_or_create_game(db: Session, title: str, price: Decimal, genre: str, description: str) -> Game:
    game = db.query(Game).filter(Game.title == title).first()
    if game is None:
        game = Game(title=title, price=price, genre=genre, description=description)
        db.add(game)
        db.flush()
    return game


def _get_or_create_user(
    db: Session, username: str, password: Optional[str], wallet: Decimal, points: int, is_developer: bool
) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        user = User(
            username=username,
            hashed_password=hash_password(password) if password else None,
            wallet_balance=wallet,
            point_balance=points,
            is_developer=is_developer,
        )
        db.add(user)
        db.flush()
    return user


def _get_or_create_item(
    db: Session, game: Game, name: str, price: Decimal, description: str, listed: bool
) -> Item:
    item = db.query(Item).filter(Item.game_id == game.id, Item.name == name).first()
    if item is None:
        item = Item(game_id=game.id, name=name, price=price, description=description, is_listed=listed)
        db.add(item)
        db.flush()
    return item


# ---------- Entry point ----------

def seed_demo_data(db: Session) -> None:
    """
    Idempotent demo seed:
      - games
      - users (with passwords so they can log in)
      - items, some already listed on the marketplace
      - one ownership record per item
    """
    games = {title: _get_or_create_game(db, title, price, genre, desc) for title, price, genre, desc in GAMES}
    users = {
        name: _get_or_create_user(db, name, pw, wallet, points, dev)
        for name, pw, wallet, points, dev in USERS
    }

    for title, name, price, desc, owner, listed in ITEMS:
        item = _get_or_create_item(db, games[title], name, price, desc, listed)
        if not db.query(UserInventory.item_id).filter(UserInventory.item_id == item.id).first():
            ownership.grant(db, item.id, users[owner].id)

    db.commit()
