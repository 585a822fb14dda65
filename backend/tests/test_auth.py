"""
Tests for authentication endpoints: registration, login, tokens and profile.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from airline.core.security import create_access_token, create_refresh_token

REGISTRATION = {
    "username": "newuser",
    "password": "SecurePass123",
    "email": "new@example.com",
    "phone_no": "+66 81 234 5678",
    "firstname": "Malee",
    "lastname": "Srisuk",
    "street": "99 Silom Road",
    "city": "Bangkok",
    "province": "Bangkok",
    "country": "Thailand",
    "postalcode": "10500",
    "card_no": "4111111111111111",
    "four_digit": "1234",
    "payment_type": "VISA",
}


@pytest.mark.asyncio
async def test_register_client(client: AsyncClient):
    """Registration returns the client and a token pair, never secrets."""
    response = await client.post("/api/v1/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["client"]["username"] == "newuser"
    assert data["client"]["card_last4"] == "1111"
    assert "password" not in data["client"]
    assert "card_no" not in data["client"]
    assert data["tokens"]["access_token"]
    assert data["tokens"]["refresh_token"]


@pytest.mark.asyncio
async def test_register_duplicate_username(client: AsyncClient, test_user):
    response = await client.post(
        "/api/v1/auth/register",
        json={**REGISTRATION, "username": "testuser"},
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USERNAME_EXISTS"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    response = await client.post(
        "/api/v1/auth/register",
        json={**REGISTRATION, "email": "test@example.com"},
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_EXISTS"


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Password needs lower, upper and a digit."""
    response = await client.post(
        "/api/v1/auth/register",
        json={**REGISTRATION, "password": "alllowercase1"},
    )
    assert response.status_code == 422
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert any(d["field"] == "password" for d in body["error"]["details"])


@pytest.mark.asyncio
async def test_register_invalid_username(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register",
        json={**REGISTRATION, "username": "bad name!"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "username": "testuser",
        "password": "Password123",
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tokens"]["token_type"] == "bearer"
    assert data["is_admin"] is False


@pytest.mark.asyncio
async def test_login_admin_flag(client: AsyncClient, admin_user):
    response = await client.post("/api/v1/auth/login", json={
        "username": "adminuser",
        "password": "Password123",
    })
    assert response.status_code == 200
    assert response.json()["data"]["is_admin"] is True


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "username": "testuser",
        "password": "WrongPassword1",
    })
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_nonexistent_user(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "username": "nobody",
        "password": "Password123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_disabled_account(client: AsyncClient, db_session, test_user):
    test_user.is_active = False
    await db_session.commit()

    response = await client.post("/api/v1/auth/login", json={
        "username": "testuser",
        "password": "Password123",
    })
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_DISABLED"


@pytest.mark.asyncio
async def test_refresh_issues_new_pair(client: AsyncClient, test_user):
    refresh = create_refresh_token({"sub": str(test_user.client_id), "username": "testuser", "role": "user"})
    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
    assert response.status_code == 200
    assert response.json()["data"]["access_token"]


@pytest.mark.asyncio
async def test_access_token_rejected_for_refresh(client: AsyncClient, auth_headers):
    access = auth_headers["Authorization"].split(" ", 1)[1]
    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": access})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_refresh_token_rejected_as_access(client: AsyncClient, test_user):
    refresh = create_refresh_token({"sub": str(test_user.client_id)})
    response = await client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {refresh}"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/profile")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "MISSING_TOKEN"


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient, test_user):
    token = create_access_token({"sub": str(test_user.client_id)}, expires_delta=timedelta(seconds=-1))
    response = await client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_profile_roundtrip(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/v1/auth/profile",
        json={"city": "Chiang Mai", "firstname": "Updated"},
        headers=auth_headers,
    )
    assert response.status_code == 200

    response = await client.get("/api/v1/auth/profile", headers=auth_headers)
    data = response.json()["data"]
    assert data["city"] == "Chiang Mai"
    assert data["firstname"] == "Updated"


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/v1/auth/password",
        json={"current_password": "Password123", "new_password": "NewPassword456"},
        headers=auth_headers,
    )
    assert response.status_code == 200

    response = await client.post("/api/v1/auth/login", json={
        "username": "testuser",
        "password": "NewPassword456",
    })
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_current(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/v1/auth/password",
        json={"current_password": "NotMyPassword1", "new_password": "NewPassword456"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True
