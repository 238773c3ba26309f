from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from address_book.core import get_settings
from address_book.errors import HashingError, InvalidToken
from address_book.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hashing_roundtrip():
    password = "secret123"
    hashed = get_password_hash(password)
    assert hashed != password
    assert verify_password(password, hashed)
    assert not verify_password("wrong-password", hashed)


def test_password_hash_is_salted():
    assert get_password_hash("secret123") != get_password_hash("secret123")


def test_verify_rejects_malformed_hash():
    with pytest.raises(HashingError):
        verify_password("secret123", "not-a-hash")


def test_token_resolves_to_user_id():
    token = create_access_token(42)
    assert decode_access_token(token) == 42


def test_expired_token_is_rejected():
    token = create_access_token(42, expires_delta=timedelta(minutes=-1))
    with pytest.raises(InvalidToken):
        decode_access_token(token)


def test_tampered_token_is_rejected():
    header, payload, signature = create_access_token(42).split(".")
    forged = jwt.encode(
        {"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "another-secret",
    ).split(".")[1]
    with pytest.raises(InvalidToken):
        decode_access_token(f"{header}.{forged}.{signature}")


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidToken):
        decode_access_token(token)


def _sign(claims):
    settings = get_settings()
    claims = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5), **claims}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def test_token_with_other_scope_is_rejected():
    with pytest.raises(InvalidToken):
        decode_access_token(_sign({"sub": "42", "scope": "refresh"}))


@pytest.mark.parametrize("claims", [{"scope": "access"}, {"sub": "abc", "scope": "access"}])
def test_token_without_numeric_subject_is_rejected(claims):
    with pytest.raises(InvalidToken):
        decode_access_token(_sign(claims))
