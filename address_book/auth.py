"""Authentication routes and the request-authentication dependency."""

import logging

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import schemas, crud
from .database import get_db
from .errors import (
    Forbidden,
    HashingError,
    InternalFault,
    InvalidCredentials,
    InvalidToken,
)
from .models import User
from .security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
router = APIRouter(prefix="/users", tags=["auth"])


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Dependency that resolves the bearer token into the authenticated user.

    Raises:
        Forbidden: If the token is missing, invalid or expired, or its user
            no longer exists.
    """

    if credentials is None:
        raise Forbidden("Not authenticated")
    try:
        user_id = decode_access_token(credentials.credentials)
    except InvalidToken as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise Forbidden("Invalid or expired token")

    user = crud.get_user_by_id(db, user_id)
    if user is None:
        logger.info("Rejected token for unknown user %s", user_id)
        raise Forbidden("Invalid or expired token")
    return user


@router.post("", response_model=schemas.UserResponse)
def register(user_in: schemas.UserCreate, db: Session = Depends(get_db)):
    """Register a new user account."""

    try:
        hashed_password = get_password_hash(user_in.password)
    except HashingError:
        logger.exception("Password hashing failed during registration")
        raise InternalFault()

    user = crud.create_user(db, user_in.email, hashed_password)
    logger.info("Registered user %s", user.id)
    return {"item": user}


@router.post("/tokens", response_model=schemas.TokenResponse)
def login(credentials: schemas.LoginRequest, db: Session = Depends(get_db)):
    """Authenticate user and return a session token.

    Unknown email and wrong password produce the same response.
    """

    user = crud.get_user_by_email(db, credentials.email)
    if user is None:
        logger.warning("Login failed for unknown email %s", credentials.email)
        raise InvalidCredentials()
    try:
        valid = verify_password(credentials.password, user.hashed_password)
    except HashingError:
        logger.exception("Stored password hash for user %s is unusable", user.id)
        valid = False
    if not valid:
        logger.warning("Login failed for user %s", user.id)
        raise InvalidCredentials()

    return schemas.TokenResponse(token=create_access_token(user.id))
