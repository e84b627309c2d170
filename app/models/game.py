from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric
from app.core.database import Base


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True)
    title = Column(String(120), nullable=False, unique=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    genre = Column(String(60), nullable=False, default="")
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="Available")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
