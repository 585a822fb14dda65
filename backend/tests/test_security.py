"""
Unit tests for tokens, password hashing and PII encryption.
"""

import pytest

from airline.core.crypto import decrypt_value, encrypt_value, mask, mask_encrypted
from airline.core.errors import AppError, AuthenticationError
from airline.core.security import (
    REFRESH_TOKEN,
    CurrentUser,
    create_access_token,
    create_token_pair,
    decode_token,
    hash_password,
    verify_password,
)


def test_password_hashing():
    hashed = hash_password("Password123")
    assert hashed != "Password123"
    assert verify_password("Password123", hashed)
    assert not verify_password("password123", hashed)


def test_token_pair_types():
    pair = create_token_pair({"sub": "7", "username": "malee", "role": "admin"})
    access = decode_token(pair["access_token"])
    refresh = decode_token(pair["refresh_token"], expected_type=REFRESH_TOKEN)
    assert access["type"] == "access"
    assert refresh["type"] == "refresh"

    user = CurrentUser.from_claims(access)
    assert user.client_id == 7
    assert user.is_admin


def test_tampered_token_is_rejected():
    header, _, signature = create_access_token({"sub": "1"}).split(".")
    forged_payload = create_access_token({"sub": "2", "role": "admin"}).split(".")[1]
    with pytest.raises(AuthenticationError) as exc_info:
        decode_token(f"{header}.{forged_payload}.{signature}")
    assert exc_info.value.code == "INVALID_TOKEN"


def test_token_without_subject_is_rejected():
    with pytest.raises(AuthenticationError):
        decode_token(create_access_token({"username": "ghost"}))


def test_encryption_round_trip_and_masking():
    sealed = encrypt_value("AA1234567")
    assert b"AA1234567" not in sealed
    assert decrypt_value(sealed) == "AA1234567"
    assert mask_encrypted(sealed) == "*****4567"
    assert mask_encrypted(None) is None


def test_mask_short_values():
    assert mask("123") == "123"
    assert mask("") == ""


def test_corrupted_ciphertext():
    with pytest.raises(AppError) as exc_info:
        decrypt_value(b"not-a-fernet-token")
    assert exc_info.value.code == "DECRYPTION_FAILED"
