# app/models/__init__.py
from app.core.database import Base  # re-export for convenience

# Import all model modules so their tables attach to Base.metadata
from app.models.user import User
from app.models.game import Game
from app.models.item import Item
from app.models.inventory import UserInventory
from app.models.trade import ItemTrade
from app.models.trade_line import ItemTradeDetail

__all__ = [
    "Base",
    "User",
    "Game",
    "Item",
    "UserInventory",
    "ItemTrade",
    "ItemTradeDetail",
]
