from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric
from app.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)  # seeded users may have none
    wallet_balance = Column(Numeric(12, 2), nullable=False, default=0)
    point_balance = Column(Integer, nullable=False, default=0)
    is_developer = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username}>"
