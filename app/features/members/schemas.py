"""
Pydantic schemas for the join flow.
"""
from pydantic import BaseModel

from app.features.permissions.registry import RoleName


class JoinWorkspaceResponse(BaseModel):
    message: str
    workspace_id: str
    role: RoleName
