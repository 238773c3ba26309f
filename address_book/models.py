"""Database models for the Address Book API.

This module defines SQLAlchemy ORM models used by the application.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    SQLAlchemy model representing an application user.

    Email uniqueness is enforced by the database so that concurrent
    registrations cannot both succeed.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    #: Favorite addresses owned by the user
    addresses = relationship(
        "Address",
        back_populates="owner",
        cascade="all, delete",
    )


class Address(Base):
    """
    SQLAlchemy model representing a favorite address.

    Each address belongs to exactly one user. Coordinates are resolved
    once at creation time and never change afterwards.
    """

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=False, default="")
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    #: Identifier of the owning user
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    #: Reference to the owning User object
    owner = relationship("User", back_populates="addresses")
