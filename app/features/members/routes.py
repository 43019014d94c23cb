"""
Membership routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.members.schemas import JoinWorkspaceResponse
from app.features.members.services import join_workspace
from app.features.users.dependencies import get_current_user
from app.features.users.models import User


router = APIRouter(tags=["members"])


@router.post("/workspace/{invite_code}/join", response_model=JoinWorkspaceResponse)
async def join_workspace_by_invite(
    invite_code: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Join a workspace as MEMBER using its invite code."""
    member = await join_workspace(db, user.id, invite_code)
    return {
        "message": "Successfully joined the workspace",
        "workspace_id": member.workspace_id,
        "role": member.role.name,
    }
