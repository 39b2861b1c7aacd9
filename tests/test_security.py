import pytest

from app.core.security import (
    TokenExpiredError,
    TokenValidationError,
    create_access_token,
    decode_token,
    hash_password,
    validate_password_strength,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_access_token_carries_subject_and_role():
    payload = decode_token(create_access_token("42", "manager"))
    assert payload["sub"] == "42"
    assert payload["role"] == "manager"
    assert payload["type"] == "access"
    assert payload["exp"] > payload["iat"]


def test_expired_token_rejected():
    token = create_access_token("1", "user", expires_minutes=-1)
    with pytest.raises(TokenExpiredError):
        decode_token(token)


def test_tampered_token_rejected():
    token = create_access_token("1", "user")
    with pytest.raises(TokenValidationError):
        decode_token(token[:-2] + ("AA" if token[-2:] != "AA" else "BB"))


def test_password_strength():
    validate_password_strength("123456")
    with pytest.raises(ValueError):
        validate_password_strength("12345")
