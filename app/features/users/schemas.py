"""
Pydantic schemas for user-related responses.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr

from app.features.workspaces.schemas import WorkspaceResponse


class UserPublic(BaseModel):
    """Public user information (limited fields)."""
    id: str
    name: str
    email: EmailStr
    profile_picture: str | None = None

    model_config = {"from_attributes": True}


class UserResponse(UserPublic):
    """Schema for the authenticated user's own profile."""
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    current_workspace_id: str | None = None

    model_config = {"from_attributes": True}


class CurrentUserResponse(BaseModel):
    message: str
    user: UserResponse
    current_workspace: WorkspaceResponse | None = None
