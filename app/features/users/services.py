"""
User profile operations.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.features.users.models import User
from app.features.workspaces.models import Workspace


async def get_current_user_with_workspace(db: AsyncSession, user_id: str) -> tuple[User, Workspace | None]:
    """Return the user and the workspace their current-workspace pointer resolves to."""
    user = await db.scalar(select(User).where(User.id == user_id))
    if user is None:
        raise NotFoundError("User not found", "AUTH_USER_NOT_FOUND")

    workspace = None
    if user.current_workspace_id is not None:
        workspace = await db.scalar(select(Workspace).where(Workspace.id == user.current_workspace_id))
    return user, workspace
