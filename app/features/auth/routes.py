"""
Authentication routes: local registration and login.

OAuth provider callbacks are handled by the identity integration, which
calls ``login_or_create_account`` with the verified profile.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.rate_limit import limiter, limit_by_address
from app.core.database.engine import get_db
from app.features.auth.schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from app.features.auth.services import register_user, verify_user
from app.features.users.auth import create_access_token


router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(config.RATE_LIMIT, key_func=limit_by_address)
async def register(
    request: Request,
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a user with a personal workspace and return an access token."""
    registration = await register_user(db, body.email, body.name, body.password)
    return {
        "message": "User created successfully",
        "user_id": registration.user.id,
        "workspace_id": registration.workspace_id,
        "access_token": registration.token,
    }


@router.post("/login", response_model=LoginResponse)
@limiter.limit(config.RATE_LIMIT, key_func=limit_by_address)
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Exchange email and password for an access token."""
    user = await verify_user(db, body.email, body.password)
    return {
        "message": "Logged in successfully",
        "user": user,
        "access_token": create_access_token(user.id),
    }
