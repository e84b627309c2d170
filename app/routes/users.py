# app/routes/users.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.services import catalog
from app.services.deps import get_db, get_current_user, http_error
from app.services.errors import MarketError
from app.models.user import User
from app.schemas.user import UserOut

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [catalog.to_user_out(u) for u in catalog.list_users(db)]


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    try:
        return catalog.to_user_out(catalog.get_user(db, user_id))
    except MarketError as e:
        raise http_error(e) from e
