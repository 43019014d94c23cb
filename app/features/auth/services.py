"""
Registration and login flows.

Registration and first-time OAuth login create a user, its account, a
personal workspace and the OWNER membership in one transaction: either all
of them persist or none do.
"""
from dataclasses import dataclass
from datetime import datetime
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.base import utcnow
from app.core.database.engine import atomic
from app.core.errors import EmailAlreadyExistsError, NotFoundError, UnauthorizedError
from app.features.users.auth import create_access_token, hash_password, verify_password
from app.features.users.models import Account, Provider, User
from app.features.workspaces.services import DEFAULT_WORKSPACE_NAME, provision_workspace
from app.utils import get_logger


log = get_logger(__name__)


@dataclass
class Registration:
    user: User
    workspace_id: str
    token: str


async def _create_user_with_workspace(
    db: AsyncSession,
    *,
    email: str,
    name: str,
    provider: Provider,
    provider_id: str,
    password: str | None = None,
    picture: str | None = None,
    refresh_token: str | None = None,
    token_expiry: datetime | None = None,
) -> tuple[User, str]:
    """User, Account, "My Workspace" and OWNER membership. Caller commits."""
    user = User(
        email=email,
        name=name,
        password_hash=hash_password(password) if password else None,
        profile_picture=picture,
    )
    db.add(user)
    await db.flush()

    db.add(Account(
        user_id=user.id,
        provider=provider,
        provider_id=provider_id,
        refresh_token=refresh_token,
        token_expiry=token_expiry,
    ))
    await db.flush()

    workspace = await provision_workspace(
        db, user, DEFAULT_WORKSPACE_NAME, f"Workspace created for {user.name}"
    )
    return user, workspace.id


async def register_user(db: AsyncSession, email: str, name: str, password: str) -> Registration:
    """
    Register a local account.

    Raises:
        EmailAlreadyExistsError: if a user with this email exists
        RoleNotFoundError: if the OWNER role was never seeded; nothing persists
    """
    try:
        async with atomic(db):
            existing = await db.scalar(select(User.id).where(User.email == email))
            if existing is not None:
                raise EmailAlreadyExistsError()

            user, workspace_id = await _create_user_with_workspace(
                db,
                email=email,
                name=name,
                password=password,
                provider=Provider.EMAIL,
                provider_id=email,
            )
    except IntegrityError:
        # Concurrent registration of the same email
        raise EmailAlreadyExistsError() from None

    log.info("Registered user %s with workspace %s", user.id, workspace_id)
    return Registration(user=user, workspace_id=workspace_id, token=create_access_token(user.id))


async def login_or_create_account(
    db: AsyncSession,
    *,
    provider: Provider,
    provider_id: str,
    display_name: str,
    email: str,
    picture: str | None = None,
    refresh_token: str | None = None,
    token_expiry: datetime | None = None,
) -> tuple[User, str]:
    """
    Sign in through an external provider, creating the user on first sight.

    Users are keyed by email. An existing user is signed in as-is: a provider
    identity seen for the first time is not linked to them. When the exact
    (provider, provider_id) account exists, a newly supplied refresh token
    replaces the stored one.

    Returns:
        The user and an access token
    """
    async with atomic(db):
        user = await db.scalar(select(User).where(User.email == email))

        if user is None:
            user, workspace_id = await _create_user_with_workspace(
                db,
                email=email,
                name=display_name,
                picture=picture,
                provider=provider,
                provider_id=provider_id,
                refresh_token=refresh_token,
                token_expiry=token_expiry,
            )
            log.info("Created user %s from %s login with workspace %s", user.id, provider.value, workspace_id)
        else:
            if refresh_token is not None:
                account = await db.scalar(
                    select(Account).where(
                        Account.provider == provider,
                        Account.provider_id == provider_id,
                        Account.user_id == user.id,
                    )
                )
                if account is not None:
                    account.refresh_token = refresh_token
                    account.token_expiry = token_expiry
            user.last_login_at = utcnow()

    return user, create_access_token(user.id)


async def verify_user(db: AsyncSession, email: str, password: str, provider: Provider = Provider.EMAIL) -> User:
    """
    Check local credentials.

    Raises:
        UnauthorizedError: on unknown email or wrong password
    """
    account = await db.scalar(
        select(Account).where(Account.provider == provider, Account.provider_id == email)
    )
    if account is None:
        raise UnauthorizedError("Invalid email or password", "AUTH_NOT_FOUND")

    user = await db.scalar(select(User).where(User.id == account.user_id))
    if user is None:
        raise NotFoundError("User not found for the given account", "AUTH_USER_NOT_FOUND")

    if not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    async with atomic(db):
        user.last_login_at = utcnow()
    return user
