"""
Password hashing and JWT issuance/verification.

Access and refresh tokens share the signing key but carry a `type` claim,
so a refresh token is never accepted where an access token is expected.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from airline.core.config import get_settings
from airline.core.errors import AuthenticationError
from airline.models.enums import Role

settings = get_settings()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(claims: dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        data,
        ACCESS_TOKEN,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(data: dict[str, Any]) -> str:
    return _encode(data, REFRESH_TOKEN, timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES))


def create_token_pair(data: dict[str, Any]) -> dict[str, str]:
    return {
        "access_token": create_access_token(data),
        "refresh_token": create_refresh_token(data),
        "token_type": "bearer",
    }


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> dict[str, Any]:
    """Decode and verify a token. Raises AuthenticationError on any failure."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED")
    except JWTError:
        raise AuthenticationError("Invalid token", code="INVALID_TOKEN")

    if payload.get("type") != expected_type or "sub" not in payload:
        raise AuthenticationError("Invalid token", code="INVALID_TOKEN")
    return payload


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a verified access token."""

    client_id: int
    username: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @classmethod
    def from_claims(cls, payload: dict[str, Any]) -> "CurrentUser":
        return cls(
            client_id=int(payload["sub"]),
            username=payload.get("username", ""),
            email=payload.get("email", ""),
            role=payload.get("role", Role.USER.value),
        )
