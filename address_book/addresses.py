"""Favorite address routes for the Address Book API."""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from . import schemas, crud
from .auth import get_current_user
from .database import get_db
from .errors import GeocodingError, InternalFault, NotFound, ValidationFailed
from .geocoding import Geocoder, get_geocoder
from .models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/addresses", tags=["addresses"])

# largest value a BIGINT primary key can hold
MAX_ID = 2**63 - 1


def parse_address_id(raw: str) -> int:
    """
    Validate an address id path segment.

    Args:
        raw (str): Path segment as received.

    Raises:
        ValidationFailed: If ``raw`` is not a positive decimal integer.

    Returns:
        int: Parsed identifier.
    """
    if (
        not (raw.isascii() and raw.isdigit())
        or len(raw) > len(str(MAX_ID))
        or not 0 < int(raw) <= MAX_ID
    ):
        raise ValidationFailed("Invalid address id")
    return int(raw)


@router.post("", response_model=schemas.AddressResponse)
def create_address(
    address_in: schemas.AddressCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    geocoder: Geocoder = Depends(get_geocoder),
):
    """
    Create a new address owned by the current user.

    The search phrase is geocoded once; the stored coordinates are never
    re-resolved.

    Args:
        address_in (AddressCreate): Name, search phrase and description.
        db (Session): Database session.
        current_user (User): Authenticated user.
        geocoder (Geocoder): Location lookup service.

    Raises:
        NotFound: If the search phrase cannot be resolved.
        InternalFault: If the geocoding service fails.

    Returns:
        AddressResponse: Created address.
    """
    try:
        coordinate = geocoder.geocode(address_in.search_word)
    except GeocodingError:
        raise InternalFault("Location lookup failed")
    if coordinate is None:
        raise NotFound("Location not found")

    address = crud.for_user(db, current_user).create(
        name=address_in.name,
        coordinate=coordinate,
        description=address_in.description,
    )
    logger.info("User %s created address %s", current_user.id, address.id)
    return {"item": address}


@router.get("", response_model=schemas.AddressListResponse)
def list_addresses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Retrieve all addresses belonging to the current user.

    Returns:
        AddressListResponse: Addresses in ascending id order.
    """
    return {"items": crud.for_user(db, current_user).all()}


@router.post("/searches", response_model=schemas.AddressListResponse)
def search_addresses(
    search: schemas.AddressSearch,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Find the current user's addresses within a radius of a point.

    Args:
        search (AddressSearch): Radius in kilometres and origin coordinate.
        db (Session): Database session.
        current_user (User): Authenticated user.

    Returns:
        AddressListResponse: Matching addresses; empty when none qualify.
    """
    items = crud.for_user(db, current_user).within(search.origin, search.radius)
    return {"items": items}


@router.put("/{address_id}", response_model=schemas.AddressResponse)
def update_address(
    address_id: str,
    changes: schemas.AddressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update the name and/or description of an address.

    Args:
        address_id (str): Address identifier.
        changes (AddressUpdate): Fields to update.
        db (Session): Database session.
        current_user (User): Authenticated user.

    Raises:
        ValidationFailed: If the id is not a valid identifier.
        NotFound: If the current user owns no such address.

    Returns:
        AddressResponse: Updated address.
    """
    parsed_id = parse_address_id(address_id)
    address = crud.for_user(db, current_user).update(
        parsed_id, changes.model_dump(exclude_unset=True, exclude_none=True)
    )
    if address is None:
        raise NotFound("Address not found")
    return {"item": address}


@router.delete(
    "/{address_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def remove_address(
    address_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Permanently delete an address owned by the current user.

    Raises:
        ValidationFailed: If the id is not a valid identifier.
        NotFound: If the current user owns no such address.
    """
    parsed_id = parse_address_id(address_id)
    if not crud.for_user(db, current_user).delete(parsed_id):
        raise NotFound("Address not found")
    logger.info("User %s deleted address %s", current_user.id, parsed_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
