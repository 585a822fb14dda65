"""
Encryption for personally identifiable data (passport and card numbers).

Values are sealed with Fernet (AES-128-CBC + HMAC-SHA256), so tampered
ciphertext fails to decrypt instead of yielding garbage. Only masked values
ever leave the service.
"""

import base64
import hashlib
from functools import lru_cache
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from airline.core.config import get_settings
from airline.core.errors import AppError


@lru_cache()
def _fernet() -> Fernet:
    settings = get_settings()
    key = settings.PII_ENCRYPTION_KEY
    if not key:
        digest = hashlib.sha256(settings.SECRET_KEY.encode("utf-8")).digest()
        key = base64.urlsafe_b64encode(digest).decode("ascii")
    return Fernet(key)


def encrypt_value(plaintext: str) -> bytes:
    return _fernet().encrypt(plaintext.encode("utf-8"))


def decrypt_value(token: bytes) -> str:
    try:
        return _fernet().decrypt(bytes(token)).decode("utf-8")
    except InvalidToken:
        raise AppError("Stored value could not be decrypted", code="DECRYPTION_FAILED")


def mask(value: Optional[str], visible: int = 4) -> Optional[str]:
    if not value:
        return value
    return "*" * max(len(value) - visible, 0) + value[-visible:]


def mask_encrypted(token: Optional[bytes], visible: int = 4) -> Optional[str]:
    if token is None:
        return None
    return mask(decrypt_value(token), visible)
