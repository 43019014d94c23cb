"""
Workspace feature routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.users.models import User
from app.features.users.dependencies import get_current_user
from app.features.workspaces import services
from app.features.workspaces.schemas import (
    AnalyticsEnvelope,
    ChangeRoleEnvelope,
    ChangeRoleRequest,
    CurrentWorkspaceEnvelope,
    MemberResponse,
    SwitchWorkspaceRequest,
    WorkspaceCreate,
    WorkspaceDetailEnvelope,
    WorkspaceEnvelope,
    WorkspaceListEnvelope,
    WorkspaceMembersEnvelope,
    WorkspaceResponse,
    WorkspaceUpdate,
    WorkspaceWithMembers,
)


router = APIRouter(tags=["workspaces"])


@router.post("/", response_model=WorkspaceEnvelope, status_code=status.HTTP_201_CREATED)
async def create_workspace(
    body: WorkspaceCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a workspace owned by the current user and switch to it."""
    workspace = await services.create_workspace(db, user.id, body)
    return {"message": "Workspace created successfully", "workspace": workspace}


@router.get("/", response_model=WorkspaceListEnvelope)
async def get_my_workspaces(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get all workspaces the current user is a member of."""
    workspaces = await services.get_user_workspaces(db, user.id)
    return {"message": "User workspaces fetched successfully", "workspaces": workspaces}


@router.post("/switch", response_model=CurrentWorkspaceEnvelope)
async def switch_workspace(
    body: SwitchWorkspaceRequest,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Switch to a different workspace."""
    user = await services.switch_current_workspace(db, user.id, body.workspace_id)
    return {"message": "Workspace switched successfully", "current_workspace_id": user.current_workspace_id}


@router.get("/{workspace_id}", response_model=WorkspaceDetailEnvelope)
async def get_workspace(
    workspace_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    workspace, members = await services.get_workspace_with_members(db, user.id, workspace_id)
    detail = WorkspaceWithMembers(
        **WorkspaceResponse.model_validate(workspace).model_dump(),
        members=[MemberResponse.model_validate(member) for member in members],
    )
    return {"message": "Workspace fetched successfully", "workspace": detail}


@router.get("/{workspace_id}/members", response_model=WorkspaceMembersEnvelope)
async def get_workspace_members(
    workspace_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    members, roles = await services.get_workspace_members(db, user.id, workspace_id)
    return {"message": "Workspace members retrieved successfully", "members": members, "roles": roles}


@router.get("/{workspace_id}/analytics", response_model=AnalyticsEnvelope)
async def get_workspace_analytics(
    workspace_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    analytics = await services.get_workspace_analytics(db, user.id, workspace_id)
    return {"message": "Workspace analytics retrieved successfully", "analytics": analytics}


@router.put("/{workspace_id}/member-role", response_model=ChangeRoleEnvelope)
async def change_member_role(
    workspace_id: str,
    body: ChangeRoleRequest,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    member = await services.change_member_role(db, user.id, workspace_id, body.member_id, body.role)
    return {"message": "Member Role changed successfully", "member": member}


@router.put("/{workspace_id}", response_model=WorkspaceEnvelope)
async def update_workspace(
    workspace_id: str,
    body: WorkspaceUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    workspace = await services.update_workspace(db, user.id, workspace_id, body)
    return {"message": "Workspace updated successfully", "workspace": workspace}


@router.post("/{workspace_id}/invite-code/reset", response_model=WorkspaceEnvelope)
async def reset_invite_code(
    workspace_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Regenerate the invite code. The previous code stops working immediately."""
    workspace = await services.reset_invite_code(db, user.id, workspace_id)
    return {"message": "Invite code reset successfully", "workspace": workspace}


@router.delete("/{workspace_id}", response_model=CurrentWorkspaceEnvelope)
async def delete_workspace(
    workspace_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Delete a workspace and everything in it (owner only)."""
    current_workspace_id = await services.delete_workspace(db, user.id, workspace_id)
    return {"message": "Workspace deleted successfully", "current_workspace_id": current_workspace_id}
