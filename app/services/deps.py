import logging
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from app.core.database import SessionLocal
from app.core.security import user_id_from_token
from app.models.user import User
from app.services.errors import MarketError

logger = logging.getLogger("itemvault.deps")
logger.setLevel(logging.INFO)

bearer_scheme = HTTPBearer()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the acting trader from the bearer token."""
    try:
        user_id = user_id_from_token(credentials.credentials)
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise HTTPException(401, "Invalid token")

    user = db.get(User, user_id)
    if user is None:
        # token outlived its account
        raise HTTPException(404, "User not found")
    return user


def http_error(e: MarketError) -> HTTPException:
    """Surface an engine error to the caller verbatim with its status code."""
    if e.status_code >= 409:
        logger.warning(f"{type(e).__name__}: {e}")
    return HTTPException(status_code=e.status_code, detail=str(e))
