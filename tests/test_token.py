from datetime import timedelta

import pytest

from app.core.auth import (
    InvalidTokenError, TokenExpiredError, create_access_token, decode_token,
    hash_password, student_claims, verify_password,
)


def test_token_round_trip_carries_claims():
    claims = student_claims({"id": 4, "email": "ada@example.com", "firstName": "Ada"})
    decoded = decode_token(create_access_token(claims))

    assert decoded["id"] == 4
    assert decoded["email"] == "ada@example.com"
    assert decoded["name"] == "Ada"
    assert decoded["role"] == "student"


def test_default_expiry_is_about_an_hour():
    decoded = decode_token(create_access_token({"id": 1}))
    token_without_exp = dict(decoded)
    exp = token_without_exp.pop("exp")

    fresh = decode_token(create_access_token({"id": 1}, expires_delta=timedelta(minutes=60)))
    assert abs(fresh["exp"] - exp) <= 5


def test_expired_token_raises_expired():
    token = create_access_token({"id": 1}, expires_delta=timedelta(seconds=-1))
    with pytest.raises(TokenExpiredError):
        decode_token(token)


def test_garbage_token_raises_invalid():
    with pytest.raises(InvalidTokenError):
        decode_token("abc.def.ghi")


def test_password_hash_verifies_only_the_original():
    hashed = hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)
    assert not verify_password("s3cret-pass", "not-a-bcrypt-hash")
