from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import JWT_SECRET, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

# pbkdf2 keeps passlib independent of the bcrypt wheel
pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def hash_password(p: str) -> str:
    return pwd_ctx.hash(p)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Accounts created without a password can never log in."""
    if not hashed:
        return False
    return pwd_ctx.verify(plain, hashed)


def create_jwt_token(claims: dict, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode({**claims, "exp": expire}, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_jwt_token(token: str) -> dict:
    """Raises JWTError for a bad signature or an expired token."""
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])


def user_id_from_token(token: str) -> int:
    """
    The acting user for every request is the token's `sub`.
    Raises JWTError when the token is invalid or carries no usable subject.
    """
    sub = decode_jwt_token(token).get("sub")
    if sub is None:
        raise JWTError("Token has no subject")
    try:
        return int(sub)
    except (TypeError, ValueError) as e:
        raise JWTError(f"Token subject {sub!r} is not a user id") from e


def validate_password_strength(password: str) -> tuple[bool, str]:
    """Returns (is_valid, error_message)."""
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if not any(c.isalpha() for c in password):
        return False, "Password must contain at least one letter"
    if not any(c.isdigit() for c in password):
        return False, "Password must contain at least one number"
    return True, ""
