"""
Request dependencies: bearer-token identity and admin gating.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from airline.core.errors import AuthenticationError, AuthorizationError
from airline.core.security import CurrentUser, decode_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token is required", code="MISSING_TOKEN")
    return CurrentUser.from_claims(decode_token(credentials.credentials))


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise AuthorizationError("Admin access required", code="ADMIN_ACCESS_REQUIRED")
    return user
