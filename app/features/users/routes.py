"""
User feature routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.users.models import User
from app.features.users.schemas import CurrentUserResponse
from app.features.users.dependencies import get_current_user
from app.features.users.services import get_current_user_with_workspace


router = APIRouter(tags=["users"])


@router.get("/current", response_model=CurrentUserResponse)
async def get_current_user_profile(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get current authenticated user's profile and current workspace."""
    user, workspace = await get_current_user_with_workspace(db, user.id)
    return {
        "message": "User fetch successfully",
        "user": user,
        "current_workspace": workspace,
    }
