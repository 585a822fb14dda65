"""
Authentication endpoints: register, login, token refresh and profile.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from airline.api.deps import get_current_user
from airline.core.security import CurrentUser
from airline.db.session import get_db
from airline.schemas.auth import (
    AuthResult,
    ClientLogin,
    ClientRegister,
    ClientResponse,
    PasswordChange,
    ProfileUpdate,
    RefreshRequest,
    Tokens,
)
from airline.schemas.common import ApiResponse
from airline.services import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ApiResponse[AuthResult], status_code=status.HTTP_201_CREATED)
async def register(data: ClientRegister, db: AsyncSession = Depends(get_db)):
    """Register a new client account and sign it in."""
    client, tokens = await auth_service.register_client(db, data)
    return ApiResponse(
        message="Client registered successfully",
        data=AuthResult(client=ClientResponse.model_validate(client), tokens=Tokens(**tokens)),
    )


@router.post("/login", response_model=ApiResponse[AuthResult])
async def login(data: ClientLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive an access/refresh token pair."""
    client, tokens = await auth_service.authenticate_client(db, data)
    return ApiResponse(
        message="Login successful",
        data=AuthResult(
            client=ClientResponse.model_validate(client),
            tokens=Tokens(**tokens),
            is_admin=client.is_admin,
        ),
    )


@router.post("/refresh", response_model=ApiResponse[Tokens])
async def refresh(data: RefreshRequest, db: AsyncSession = Depends(get_db)):
    tokens = await auth_service.refresh_tokens(db, data.refresh_token)
    return ApiResponse(message="Token refreshed", data=Tokens(**tokens))


@router.post("/logout", response_model=ApiResponse[None])
async def logout(user: CurrentUser = Depends(get_current_user)):
    """Tokens are stateless; the client discards them."""
    return ApiResponse(message="Logged out successfully")


@router.get("/profile", response_model=ApiResponse[ClientResponse])
async def get_profile(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    client = await auth_service.get_client(db, user.client_id)
    return ApiResponse(data=ClientResponse.model_validate(client))


@router.put("/profile", response_model=ApiResponse[ClientResponse])
async def update_profile(
    data: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    client = await auth_service.update_profile(db, user.client_id, data)
    return ApiResponse(message="Profile updated successfully", data=ClientResponse.model_validate(client))


@router.put("/password", response_model=ApiResponse[None])
async def change_password(
    data: PasswordChange,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(db, user.client_id, data)
    return ApiResponse(message="Password changed successfully")
