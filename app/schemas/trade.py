from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime

from app.schemas.user import UserBrief

Status = Literal["Pending", "Completed", "Declined"]


class TradeCreate(BaseModel):
    destination_user_id: int
    game_id: int
    description: str = Field("", max_length=2000)
    source_item_ids: List[int] = []        # offered by the caller
    destination_item_ids: List[int] = []   # requested from destination_user_id


class TradeItemOut(BaseModel):
    item_id: int
    name: str
    price: Optional[float] = None
    is_source_user_item: bool


class TradeOut(BaseModel):
    id: int
    source_user: UserBrief
    destination_user: UserBrief
    game_id: int
    game_title: Optional[str] = None
    description: str
    status: Status
    accepted_by_source: bool
    accepted_by_destination: bool
    created_at: datetime
    closed_at: Optional[datetime] = None
    source_items: List[TradeItemOut]
    destination_items: List[TradeItemOut]
