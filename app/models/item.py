from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Numeric, Text
from sqlalchemy.orm import relationship
from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="RESTRICT"), nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=True)  # marketplace price; None means never priced
    description = Column(Text, nullable=True)
    is_listed = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    game = relationship("Game", lazy="joined")

    @property
    def listed(self) -> bool:
        return bool(self.is_listed) and self.price is not None

    def __repr__(self) -> str:
        return f"<Item id={self.id} name={self.name} listed={self.is_listed}>"
