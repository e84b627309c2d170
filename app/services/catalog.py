# app/services/catalog.py
"""Read-only queries over games, items, users and inventories."""
from typing import List, Optional

from slugify import slugify
from sqlalchemy.orm import Session

from app.models.game import Game
from app.models.inventory import UserInventory
from app.models.item import Item
from app.models.user import User
from app.schemas.item import GameOut, ItemOut
from app.schemas.user import UserOut
from app.services.errors import NotFoundError

# Asset folders that do not follow the title slug
GAME_FOLDERS = {
    "counter-strike 2": "cs2",
    "dota 2": "dota2",
    "team fortress 2": "tf2",
}

DEFAULT_ITEM_IMAGE = "/static/img/games/default-item.png"


def game_folder(title: str) -> str:
    key = (title or "").strip().lower()
    return GAME_FOLDERS.get(key) or slugify(key, separator="")


def item_image_path(item: Item) -> str:
    if item.id is None or item.game is None:
        return DEFAULT_ITEM_IMAGE
    return f"/static/img/games/{game_folder(item.game.title)}/{item.id}.png"


def list_games(db: Session) -> List[Game]:
    return db.query(Game).order_by(Game.title.asc()).all()


def get_game(db: Session, game_id: int) -> Game:
    game = db.get(Game, game_id)
    if game is None:
        raise NotFoundError(f"Game {game_id} not found")
    return game


def items_for_game(db: Session, game_id: int) -> List[Item]:
    get_game(db, game_id)
    return db.query(Item).filter(Item.game_id == game_id).order_by(Item.name.asc(), Item.id.asc()).all()


def get_item(db: Session, item_id: int) -> Item:
    item = db.get(Item, item_id)
    if item is None:
        raise NotFoundError(f"Item {item_id} not found")
    return item


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.username.asc()).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def inventory_for(db: Session, user_id: int, game_id: Optional[int] = None) -> List[Item]:
    """Items the user owns, grouped by game title then cheapest first."""
    get_user(db, user_id)
    q = (
        db.query(Item)
        .join(UserInventory, UserInventory.item_id == Item.id)
        .join(Game, Game.id == Item.game_id)
        .filter(UserInventory.user_id == user_id)
    )
    if game_id is not None:
        q = q.filter(Item.game_id == game_id)
    return q.order_by(Game.title.asc(), Item.price.asc(), Item.id.asc()).all()


def owner_map(db: Session, item_ids: List[int]) -> dict[int, int]:
    if not item_ids:
        return {}
    rows = (
        db.query(UserInventory.item_id, UserInventory.user_id)
        .filter(UserInventory.item_id.in_(item_ids))
        .all()
    )
    return {r.item_id: r.user_id for r in rows}


def to_item_out(item: Item, owner_id: Optional[int] = None) -> ItemOut:
    """Single place to serialize an item (so we don't forget fields)."""
    return ItemOut(
        id=item.id,
        name=item.name,
        game_id=item.game_id,
        game_title=item.game.title if item.game is not None else None,
        price=float(item.price) if item.price is not None else None,
        description=item.description,
        is_listed=item.listed,
        image_path=item_image_path(item),
        owner_id=owner_id,
    )


def to_item_out_list(db: Session, items: List[Item]) -> List[ItemOut]:
    owners = owner_map(db, [i.id for i in items])
    return [to_item_out(i, owners.get(i.id)) for i in items]


def to_game_out(game: Game) -> GameOut:
    return GameOut(
        id=game.id,
        title=game.title,
        price=float(game.price or 0),
        genre=game.genre,
        description=game.description,
        status=game.status,
    )


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        wallet_balance=float(user.wallet_balance or 0),
        point_balance=int(user.point_balance or 0),
        is_developer=bool(user.is_developer),
        created_at=user.created_at,
    )
