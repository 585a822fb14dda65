"""
Authentication service: client registration, login, token refresh and
profile maintenance.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from airline import repositories as repo
from airline.core.crypto import encrypt_value
from airline.core.errors import AuthenticationError, AuthorizationError, BadRequestError, ConflictError
from airline.core.logging import get_logger
from airline.core.metrics import record_login
from airline.core.security import REFRESH_TOKEN, create_token_pair, decode_token, hash_password, verify_password
from airline.models import Client
from airline.models.enums import Role
from airline.schemas.auth import ClientAdminUpdate, ClientLogin, ClientRegister, PasswordChange, ProfileUpdate

logger = get_logger(__name__)


def token_claims(client: Client) -> dict:
    return {
        "sub": str(client.client_id),
        "username": client.username,
        "email": client.email,
        "role": client.role,
    }


async def register_client(db: AsyncSession, data: ClientRegister) -> tuple[Client, dict]:
    """
    Register a new client with a hashed password and encrypted card number.
    Raises 409 if the username or email is already taken.
    """
    if await repo.clients.exists(db, username=data.username):
        logger.warning("registration_failed", reason="username_exists", username=data.username)
        raise ConflictError("Username already exists", code="USERNAME_EXISTS")

    if await repo.clients.exists(db, email=data.email):
        logger.warning("registration_failed", reason="email_exists", email=data.email)
        raise ConflictError("Email already exists", code="EMAIL_EXISTS")

    values = data.model_dump(exclude={"password", "card_no", "payment_type"})
    try:
        client = await repo.clients.create(
            db,
            **values,
            password=hash_password(data.password),
            card_no=encrypt_value(data.card_no) if data.card_no else None,
            card_last4=data.card_no[-4:] if data.card_no else None,
            payment_type=data.payment_type.value if data.payment_type else None,
            role=Role.USER.value,
        )
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        await db.rollback()
        raise ConflictError("Username or email already exists", code="CLIENT_EXISTS")

    logger.info("client_registered", client_id=client.client_id, username=client.username)
    return client, create_token_pair(token_claims(client))


async def authenticate_client(db: AsyncSession, data: ClientLogin) -> tuple[Client, dict]:
    client = await repo.clients.find_one(db, username=data.username)

    if not client or not verify_password(data.password, client.password):
        record_login(success=False)
        logger.warning("login_failed", username=data.username)
        raise AuthenticationError("Invalid username or password", code="INVALID_CREDENTIALS")

    if not client.is_active:
        record_login(success=False)
        raise AuthorizationError("Account is disabled", code="ACCOUNT_DISABLED")

    record_login(success=True)
    logger.info("client_logged_in", client_id=client.client_id)
    return client, create_token_pair(token_claims(client))


async def refresh_tokens(db: AsyncSession, refresh_token: str) -> dict:
    payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN)
    client = await repo.clients.get(db, int(payload["sub"]))
    if client is None or not client.is_active:
        raise AuthenticationError("Invalid token", code="INVALID_TOKEN")
    return create_token_pair(token_claims(client))


async def get_client(db: AsyncSession, client_id: int) -> Client:
    return await repo.clients.get_or_404(db, client_id, code="CLIENT_NOT_FOUND")


async def update_profile(db: AsyncSession, client_id: int, data: ProfileUpdate) -> Client:
    client = await get_client(db, client_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and changes["email"] != client.email:
        if await repo.clients.exists(db, email=changes["email"]):
            raise ConflictError("Email already exists", code="EMAIL_EXISTS")

    await repo.clients.update(db, client, **changes)
    await db.commit()
    logger.info("profile_updated", client_id=client_id, fields=sorted(changes))
    return client


async def change_password(db: AsyncSession, client_id: int, data: PasswordChange) -> None:
    client = await get_client(db, client_id)
    if not verify_password(data.current_password, client.password):
        raise BadRequestError("Current password is incorrect", code="INVALID_PASSWORD")

    await repo.clients.update(db, client, password=hash_password(data.new_password))
    await db.commit()
    logger.info("password_changed", client_id=client_id)


async def list_clients(db: AsyncSession, page: int, limit: int) -> tuple[list[Client], int]:
    return await repo.clients.paginate(db, page, limit, order_by=(Client.client_id.desc(),))


async def admin_update_client(db: AsyncSession, client_id: int, data: ClientAdminUpdate) -> Client:
    client = await get_client(db, client_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    await repo.clients.update(db, client, **changes)
    await db.commit()
    logger.info("client_updated_by_admin", client_id=client_id, fields=sorted(changes))
    return client
