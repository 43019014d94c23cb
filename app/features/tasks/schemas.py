"""
Pydantic schemas for task requests and responses.
"""
from datetime import date, datetime
from pydantic import BaseModel, Field

from app.core.pagination import Pagination
from app.features.tasks.models import TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    assigned_to: str | None = Field(None, description="User id of the assignee, must be a workspace member")
    due_date: datetime | None = None


class TaskUpdate(BaseModel):
    """Only fields present in the request are applied; ``assigned_to: null`` unassigns."""
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None


class TaskFilters(BaseModel):
    project_id: str | None = None
    status: list[TaskStatus] = Field(default_factory=list)
    priority: list[TaskPriority] = Field(default_factory=list)
    assigned_to: list[str] = Field(default_factory=list)
    keyword: str | None = None
    due_date: date | None = None


class TaskResponse(BaseModel):
    id: str
    task_code: str
    title: str
    description: str | None = None
    project_id: str
    workspace_id: str
    status: TaskStatus
    priority: TaskPriority
    assigned_to_id: str | None = None
    created_by_id: str
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskEnvelope(BaseModel):
    message: str
    task: TaskResponse


class TaskListEnvelope(BaseModel):
    message: str
    tasks: list[TaskResponse]
    pagination: Pagination
