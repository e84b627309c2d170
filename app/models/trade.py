from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Boolean, ForeignKey, DateTime, Enum, Text, CheckConstraint, Index
from sqlalchemy.orm import relationship

from app.core.database import Base

TRADE_PENDING = "Pending"
TRADE_COMPLETED = "Completed"
TRADE_DECLINED = "Declined"

TradeStatus = (TRADE_PENDING, TRADE_COMPLETED, TRADE_DECLINED)
TERMINAL_STATUSES = (TRADE_COMPLETED, TRADE_DECLINED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemTrade(Base):
    __tablename__ = "item_trades"

    id = Column(Integer, primary_key=True, index=True)
    source_user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    destination_user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="RESTRICT"), nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(Enum(*TradeStatus, name="tradestatus"), nullable=False, default=TRADE_PENDING, index=True)
    accepted_by_source = Column(Boolean, nullable=False, default=True)
    accepted_by_destination = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    source_user = relationship("User", foreign_keys=[source_user_id])
    destination_user = relationship("User", foreign_keys=[destination_user_id])
    game = relationship("Game")
    details = relationship(
        "ItemTradeDetail",
        back_populates="trade",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ItemTradeDetail.position",
    )

    __table_args__ = (
        CheckConstraint("source_user_id <> destination_user_id", name="ck_item_trades_distinct_parties"),
        CheckConstraint(
            "status <> 'Completed' OR (accepted_by_source AND accepted_by_destination)",
            name="ck_item_trades_completed_accepted",
        ),
        Index("ix_item_trades_status_created", "status", "created_at"),
    )

    @property
    def source_item_ids(self) -> list[int]:
        return [d.item_id for d in self.details if d.is_source_user_item]

    @property
    def destination_item_ids(self) -> list[int]:
        return [d.item_id for d in self.details if not d.is_source_user_item]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def __repr__(self) -> str:
        return (
            f"<ItemTrade id={self.id} {self.source_user_id}->{self.destination_user_id} "
            f"status={self.status}>"
        )
