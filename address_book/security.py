"""Password hashing and session token signing."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from .core import get_settings
from .errors import HashingError, InvalidToken

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_SCOPE = "access"


def get_password_hash(password: str) -> str:
    """Generate a salted password hash using the configured context."""
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError, MemoryError) as exc:
        raise HashingError("Password hashing failed") from exc


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plain password with its hashed value.

    Raises:
        HashingError: If the stored hash is malformed or unsupported.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as exc:
        raise HashingError("Password verification failed") from exc


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT access token for ``user_id``."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "iat": now, "exp": expire, "scope": ACCESS_SCOPE}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> int:
    """Verify ``token`` and return the user id it was issued for.

    Raises:
        InvalidToken: If the signature, structure, scope or expiry is wrong.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc

    if payload.get("scope") != ACCESS_SCOPE:
        raise InvalidToken("Invalid token scope")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidToken("Invalid token subject") from exc
