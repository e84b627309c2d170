# app/schemas/item.py
from pydantic import BaseModel, Field
from typing import Optional


class GameOut(BaseModel):
    id: int
    title: str
    price: float
    genre: str
    description: Optional[str] = None
    status: str


class ItemOut(BaseModel):
    id: int
    name: str
    game_id: int
    game_title: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    is_listed: bool
    image_path: str
    owner_id: Optional[int] = None


class ListingIn(BaseModel):
    # sign is validated by the listing registry so a negative price is a 409, not a 422
    price: float = Field(..., description="Marketplace price")


class PriceUpdateIn(BaseModel):
    price: float
