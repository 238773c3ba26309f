"""Persistence wiring for users and their favorite addresses.

Every request gets its own session from :func:`get_db`; no ORM state is
shared between requests. Email uniqueness and address ownership are
enforced by the database itself (see :mod:`address_book.models` and
:mod:`address_book.crud`).
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .core import get_settings


settings = get_settings()


# FastAPI runs sync handlers in a threadpool, so SQLite connections must be
# usable from a thread other than the one that opened them.
engine = create_engine(
    settings.DATABASE_URL,
    connect_args=(
        {"check_same_thread": False}
        if settings.DATABASE_URL.startswith("sqlite")
        else {}
    ),
    future=True,
)
"""Engine for ``Settings.DATABASE_URL`` (SQLite by default, any SQLAlchemy URL)."""


SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
)
"""Session factory; one session per request."""


Base = declarative_base()
"""Declarative base shared by ``User`` and ``Address``."""


def get_db():
    """
    Yield a request-scoped session for the address book tables.

    Used as a FastAPI dependency by the auth and address routers; tests
    override it with a session bound to an in-memory database. The session
    is closed once the response has been produced.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
