"""CRUD operations for users and addresses.

This module contains database interaction logic for user and address
entities, isolated from FastAPI route handlers. Address access always goes
through :func:`for_user`, so every statement is filtered by owner in SQL.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .errors import DuplicateEmail
from .geo import Coordinate, distance_km

logger = logging.getLogger(__name__)

EDITABLE_ADDRESS_FIELDS = frozenset({"name", "description"})


def create_user(db: Session, email: str, hashed_password: str) -> models.User:
    """
    Create and persist a new user.

    Uniqueness is left to the database constraint on ``users.email`` so two
    concurrent registrations cannot both succeed.

    Args:
        db (Session): SQLAlchemy database session.
        email (str): User email, stored as given.
        hashed_password (str): Securely hashed password.

    Raises:
        DuplicateEmail: If a user with the same email already exists.

    Returns:
        User: Newly created user instance.
    """
    user = models.User(email=email, hashed_password=hashed_password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Registration rejected, email already in use: %s", email)
        raise DuplicateEmail() from exc
    db.refresh(user)
    return user


def get_user_by_email(db: Session, email: str) -> models.User | None:
    """
    Retrieve a user by email address.

    Args:
        db (Session): Database session.
        email (str): User email.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.email == email)
    ).scalar_one_or_none()


def get_user_by_id(db: Session, user_id: int) -> models.User | None:
    """
    Retrieve a user by primary key.

    Args:
        db (Session): Database session.
        user_id (int): User identifier.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.id == user_id)
    ).scalar_one_or_none()


class AddressScope:
    """Address queries bound to a single owner.

    Every method filters on ``addresses.user_id`` in the statement itself;
    records of other users are indistinguishable from missing ones.
    """

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    def _select(self):
        return select(models.Address).where(models.Address.user_id == self.user_id)

    def create(
        self, name: str, coordinate: Coordinate, description: str = ""
    ) -> models.Address:
        """
        Persist a new address for the owner.

        Args:
            name (str): Display name.
            coordinate (Coordinate): Resolved location.
            description (str): Optional free text.

        Returns:
            Address: Newly created address.
        """
        address = models.Address(
            user_id=self.user_id,
            name=name,
            description=description,
            lat=coordinate.lat,
            lng=coordinate.lng,
        )
        self.db.add(address)
        self.db.commit()
        self.db.refresh(address)
        return address

    def all(self) -> list[models.Address]:
        """Return all of the owner's addresses in ascending id order."""
        return list(self.db.scalars(self._select().order_by(models.Address.id)).all())

    def address(self, address_id: int) -> models.Address | None:
        """Return the owner's address with ``address_id``, or ``None``."""
        return self.db.execute(
            self._select().where(models.Address.id == address_id)
        ).scalar_one_or_none()

    def update(self, address_id: int, changes: dict) -> models.Address | None:
        """
        Apply ``changes`` to the owner's address.

        Only ``name`` and ``description`` may change; coordinates are fixed
        at creation.

        Args:
            address_id (int): Address identifier.
            changes (dict): Fields to update.

        Raises:
            ValueError: If ``changes`` names a non-editable field.

        Returns:
            Address | None: Updated address, or ``None`` if the owner has no
            such address.
        """
        unknown = set(changes) - EDITABLE_ADDRESS_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if not changes:
            return self.address(address_id)

        result = self.db.execute(
            update(models.Address)
            .where(
                models.Address.id == address_id,
                models.Address.user_id == self.user_id,
            )
            .values(**changes)
        )
        self.db.commit()
        if result.rowcount == 0:
            return None
        return self.address(address_id)

    def delete(self, address_id: int) -> bool:
        """
        Permanently remove the owner's address.

        Returns:
            bool: ``True`` if a row was deleted, ``False`` if none matched.
        """
        result = self.db.execute(
            delete(models.Address).where(
                models.Address.id == address_id,
                models.Address.user_id == self.user_id,
            )
        )
        self.db.commit()
        return result.rowcount > 0

    def within(self, origin, radius_km: float) -> list[models.Address]:
        """
        Return the owner's addresses at most ``radius_km`` from ``origin``.

        Args:
            origin: Any object with ``lat`` and ``lng`` in degrees.
            radius_km (float): Search radius in kilometres.

        Returns:
            list[Address]: Matching addresses in ascending id order.
        """
        return [a for a in self.all() if distance_km(origin, a) <= radius_km]


def for_user(db: Session, user: models.User) -> AddressScope:
    """Return the address scope of ``user``."""
    return AddressScope(db, user.id)
