# app/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.services.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.user import UserCreate, UserOut
from app.services.catalog import to_user_out
from app.core.security import (
    verify_password,
    hash_password,
    create_jwt_token,
    validate_password_strength,
)

logger = logging.getLogger("itemvault.auth")
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/auth", tags=["auth"])


def build_jwt_for_user(user: User) -> str:
    """Helper to build JWT token for user."""
    return create_jwt_token({
        "sub": str(user.id),
        "username": user.username,
        "isDeveloper": bool(user.is_developer),
    })


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    ok, msg = validate_password_strength(payload.password)
    if not ok:
        raise HTTPException(status_code=400, detail=msg)
    if db.query(User.id).filter(User.username == payload.username).first():
        raise HTTPException(status_code=409, detail="Username already exists")

    user = User(username=payload.username, hashed_password=hash_password(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.username})")
    return to_user_out(user)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Password login.
    Returns a bearer JWT whose `sub` is the user id every other route acts as.
    """
    user = db.query(User).filter(User.username == payload.username).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        logger.warning(f"Failed login for username={payload.username}")
        raise HTTPException(status_code=401, detail="Invalid username or password")

    return LoginResponse(access_token=build_jwt_for_user(user), user=to_user_out(user))


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return to_user_out(user)
