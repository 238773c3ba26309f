from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

BCRYPT_MAX_BYTES = 72


class UserCreate(BaseModel):
    """Payload for registering a new user."""

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    class Config:
        extra = "forbid"

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """bcrypt rejects NUL bytes and ignores everything past 72 bytes."""
        if "\x00" in value:
            raise ValueError("password must not contain NUL characters")
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Credentials exchanged for a session token."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    class Config:
        extra = "forbid"


class UserOut(BaseModel):
    """Response schema for user data (never includes the password hash)."""

    id: int
    email: str
    created_at: datetime = Field(serialization_alias="createdAt")

    class Config:
        from_attributes = True  # allow SQLAlchemy objects


class UserResponse(BaseModel):
    item: UserOut


class TokenResponse(BaseModel):
    """Signed session token returned by login."""

    token: str


class CoordinateIn(BaseModel):
    """A point in degrees; both components are required."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    class Config:
        extra = "forbid"


class AddressCreate(BaseModel):
    """Schema for creating a new address from a free-text search phrase."""

    name: str = Field(min_length=1, max_length=255)
    search_word: str = Field(alias="searchWord", min_length=1)
    description: str = Field("", max_length=1000)

    class Config:
        extra = "forbid"


class AddressUpdate(BaseModel):
    """Schema for updating an address (coordinates are not editable)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)

    class Config:
        extra = "forbid"


class AddressSearch(BaseModel):
    """Proximity search payload: radius in kilometres around ``from``."""

    radius: float = Field(gt=0, allow_inf_nan=False)
    origin: CoordinateIn = Field(alias="from")

    class Config:
        extra = "forbid"


class AddressOut(BaseModel):
    """Schema for returning an address."""

    id: int
    name: str
    description: str
    lat: float
    lng: float
    created_at: datetime = Field(serialization_alias="createdAt")

    class Config:
        from_attributes = True


class AddressResponse(BaseModel):
    item: AddressOut


class AddressListResponse(BaseModel):
    items: List[AddressOut]
