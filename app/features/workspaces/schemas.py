"""
Pydantic schemas for workspace-related requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field

from app.features.permissions.registry import RoleName


class WorkspaceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class WorkspaceUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class WorkspaceResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    owner_id: str
    invite_code: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MemberUser(BaseModel):
    id: str
    name: str
    email: str
    profile_picture: str | None = None

    model_config = {"from_attributes": True}


class MemberRole(BaseModel):
    id: str
    name: RoleName

    model_config = {"from_attributes": True}


class MemberResponse(BaseModel):
    id: str
    user_id: str
    workspace_id: str
    joined_at: datetime
    role: MemberRole
    user: MemberUser

    model_config = {"from_attributes": True}


class WorkspaceWithMembers(WorkspaceResponse):
    members: list[MemberResponse] = Field(default_factory=list)


class WorkspaceEnvelope(BaseModel):
    message: str
    workspace: WorkspaceResponse


class WorkspaceDetailEnvelope(BaseModel):
    message: str
    workspace: WorkspaceWithMembers


class WorkspaceListEnvelope(BaseModel):
    message: str
    workspaces: list[WorkspaceResponse]


class WorkspaceMembersEnvelope(BaseModel):
    message: str
    members: list[MemberResponse]
    roles: list[MemberRole]


class Analytics(BaseModel):
    total_tasks: int
    overdue_tasks: int
    completed_tasks: int


class AnalyticsEnvelope(BaseModel):
    message: str
    analytics: Analytics


class ChangeRoleRequest(BaseModel):
    member_id: str = Field(..., min_length=1, description="User id of the member whose role changes")
    role: RoleName


class ChangeRoleEnvelope(BaseModel):
    message: str
    member: MemberResponse


class SwitchWorkspaceRequest(BaseModel):
    workspace_id: str = Field(..., min_length=1)


class CurrentWorkspaceEnvelope(BaseModel):
    message: str
    current_workspace_id: str | None = None
