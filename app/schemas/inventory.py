from pydantic import BaseModel
from typing import List, Optional

from app.schemas.item import ItemOut


class InventoryOut(BaseModel):
    user_id: int
    game_id: Optional[int] = None
    items: List[ItemOut]
