"""
Pydantic schemas for project requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field

from app.core.pagination import Pagination


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    emoji: str | None = Field(None, max_length=16)


class ProjectUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    emoji: str | None = Field(None, max_length=16)


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    emoji: str
    workspace_id: str
    created_by_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectEnvelope(BaseModel):
    message: str
    project: ProjectResponse


class ProjectListEnvelope(BaseModel):
    message: str
    projects: list[ProjectResponse]
    pagination: Pagination
