# app/schemas/user.py
from datetime import datetime
from pydantic import BaseModel, constr
from typing import Optional


class UserCreate(BaseModel):
    username: constr(min_length=3, max_length=50)
    password: constr(min_length=8, max_length=128)


class UserOut(BaseModel):
    id: int
    username: str
    wallet_balance: float
    point_balance: int
    is_developer: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserBrief(BaseModel):
    id: int
    username: str
