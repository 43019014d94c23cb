"""
Task routes, nested under a workspace.
"""
from datetime import date
from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.pagination import PageParams
from app.features.tasks import services
from app.features.tasks.schemas import TaskCreate, TaskEnvelope, TaskFilters, TaskListEnvelope, TaskUpdate
from app.features.users.dependencies import get_current_user
from app.features.users.models import User


router = APIRouter(tags=["tasks"])


def _split(value: str | None) -> list[str]:
    """Comma-separated query value to a list."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@router.post("/projects/{project_id}/tasks", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_task(
    workspace_id: str,
    project_id: str,
    body: TaskCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    task = await services.create_task(db, user.id, workspace_id, project_id, body)
    return {"message": "Task created successfully", "task": task}


@router.put("/projects/{project_id}/tasks/{task_id}", response_model=TaskEnvelope)
async def update_task(
    workspace_id: str,
    project_id: str,
    task_id: str,
    body: TaskUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    task = await services.update_task(db, user.id, workspace_id, project_id, task_id, body)
    return {"message": "Task updated successfully", "task": task}


@router.get("/projects/{project_id}/tasks/{task_id}", response_model=TaskEnvelope)
async def get_task(
    workspace_id: str,
    project_id: str,
    task_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    task = await services.get_task(db, user.id, workspace_id, project_id, task_id)
    return {"message": "Task fetched successfully", "task": task}


@router.get("/tasks", response_model=TaskListEnvelope)
async def list_tasks(
    workspace_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    project_id: str | None = None,
    status_filter: Annotated[str | None, Query(alias="status", description="Comma-separated statuses")] = None,
    priority: Annotated[str | None, Query(description="Comma-separated priorities")] = None,
    assigned_to: Annotated[str | None, Query(description="Comma-separated user ids")] = None,
    keyword: str | None = None,
    due_date: date | None = None,
    page_size: int = Query(10, ge=1, le=100),
    page_number: int = Query(1, ge=1),
):
    """List tasks in the workspace with optional filters, newest first."""
    try:
        filters = TaskFilters(
            project_id=project_id,
            status=_split(status_filter),
            priority=_split(priority),
            assigned_to=_split(assigned_to),
            keyword=keyword,
            due_date=due_date,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    page = PageParams(page_size=page_size, page_number=page_number)
    tasks, pagination = await services.list_tasks(db, user.id, workspace_id, filters, page)
    return {"message": "All tasks fetched successfully", "tasks": tasks, "pagination": pagination}


@router.delete("/tasks/{task_id}")
async def delete_task(
    workspace_id: str,
    task_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    await services.delete_task(db, user.id, workspace_id, task_id)
    return {"message": "Task deleted successfully"}
