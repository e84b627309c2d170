# app/models/inventory.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index
from app.core.database import Base


class UserInventory(Base):
    """
    Ownership record: which user holds which item.

    item_id is the primary key, so the store itself refuses a second owner row
    for the same item.
    """
    __tablename__ = "user_inventory"

    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="RESTRICT"), nullable=False)
    acquired_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_user_inventory_user_game", "user_id", "game_id"),
    )

    def __repr__(self) -> str:
        return f"<UserInventory item={self.item_id} user={self.user_id}>"
