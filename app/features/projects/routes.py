"""
Project routes, nested under a workspace.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.pagination import PageParams
from app.features.projects import services
from app.features.projects.schemas import ProjectCreate, ProjectEnvelope, ProjectListEnvelope, ProjectUpdate
from app.features.users.dependencies import get_current_user
from app.features.users.models import User
from app.features.workspaces.schemas import AnalyticsEnvelope


router = APIRouter(tags=["projects"])


@router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
async def create_project(
    workspace_id: str,
    body: ProjectCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    project = await services.create_project(db, user.id, workspace_id, body)
    return {"message": "Project created successfully", "project": project}


@router.get("", response_model=ProjectListEnvelope)
async def list_projects(
    workspace_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page_size: int = Query(10, ge=1, le=100),
    page_number: int = Query(1, ge=1),
):
    """List the workspace's projects, newest first."""
    page = PageParams(page_size=page_size, page_number=page_number)
    projects, pagination = await services.list_projects(db, user.id, workspace_id, page)
    return {"message": "Projects fetched successfully", "projects": projects, "pagination": pagination}


@router.get("/{project_id}", response_model=ProjectEnvelope)
async def get_project(
    workspace_id: str,
    project_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    project = await services.get_project(db, user.id, workspace_id, project_id)
    return {"message": "Project fetched successfully", "project": project}


@router.get("/{project_id}/analytics", response_model=AnalyticsEnvelope)
async def get_project_analytics(
    workspace_id: str,
    project_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    analytics = await services.get_project_analytics(db, user.id, workspace_id, project_id)
    return {"message": "Project analytics retrieved successfully", "analytics": analytics}


@router.put("/{project_id}", response_model=ProjectEnvelope)
async def update_project(
    workspace_id: str,
    project_id: str,
    body: ProjectUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    project = await services.update_project(db, user.id, workspace_id, project_id, body)
    return {"message": "Project updated successfully", "project": project}


@router.delete("/{project_id}")
async def delete_project(
    workspace_id: str,
    project_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Delete a project together with all of its tasks."""
    await services.delete_project(db, user.id, workspace_id, project_id)
    return {"message": "Project deleted successfully"}
