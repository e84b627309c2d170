from sqlalchemy import Column, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base


class ItemTradeDetail(Base):
    __tablename__ = "item_trade_details"

    id = Column(Integer, primary_key=True, index=True)
    trade_id = Column(Integer, ForeignKey("item_trades.id", ondelete="CASCADE"), nullable=False)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True)

    # True when the source (initiating) user offers the item, False for the destination side
    is_source_user_item = Column(Boolean, nullable=False)

    # Preserves the order in which the items were offered
    position = Column(Integer, nullable=False, default=0)

    trade = relationship("ItemTrade", back_populates="details")
    item = relationship("Item")

    # An item sits on exactly one side of a trade, once
    __table_args__ = (
        UniqueConstraint("trade_id", "item_id", name="uq_item_trade_details_trade_item"),
    )
