"""
Task operations.

A task always lives in a project of the workspace named in the request, and
its assignee, when set, must be a member of that workspace.
"""
from datetime import datetime, time, timedelta, timezone
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import atomic
from app.core.errors import InvalidReferenceError, NotFoundError
from app.core.pagination import PageParams, Pagination
from app.features.members.services import is_member, resolve_role
from app.features.permissions.dependencies import require_permission
from app.features.permissions.registry import Permission
from app.features.projects.services import get_project_in_workspace
from app.features.tasks.models import Task
from app.features.tasks.schemas import TaskCreate, TaskFilters, TaskUpdate
from app.utils import get_logger


log = get_logger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


async def ensure_assignee_is_member(db: AsyncSession, assignee_id: str, workspace_id: str) -> None:
    """
    Raises:
        InvalidReferenceError: if the assignee has no membership in the workspace
    """
    if not await is_member(db, assignee_id, workspace_id):
        raise InvalidReferenceError("Assigned user is not a member of this workspace")


async def get_task_in_project(db: AsyncSession, task_id: str, project_id: str, workspace_id: str) -> Task:
    task = await db.scalar(
        select(Task).where(
            Task.id == task_id,
            Task.project_id == project_id,
            Task.workspace_id == workspace_id,
        )
    )
    if task is None:
        raise NotFoundError("Task not found or does not belong to this project")
    return task


async def create_task(
    db: AsyncSession, user_id: str, workspace_id: str, project_id: str, data: TaskCreate
) -> Task:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.CREATE_TASK])

    project = await get_project_in_workspace(db, project_id, workspace_id)
    if data.assigned_to is not None:
        await ensure_assignee_is_member(db, data.assigned_to, workspace_id)

    async with atomic(db):
        task = Task(
            title=data.title,
            description=data.description,
            priority=data.priority,
            status=data.status,
            assigned_to_id=data.assigned_to,
            created_by_id=user_id,
            workspace_id=project.workspace_id,
            project_id=project.id,
            due_date=_as_utc(data.due_date),
        )
        db.add(task)
        await db.flush()

    log.info("Task %s created in project %s", task.id, project.id)
    return task


async def update_task(
    db: AsyncSession,
    user_id: str,
    workspace_id: str,
    project_id: str,
    task_id: str,
    data: TaskUpdate,
) -> Task:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.EDIT_TASK])

    await get_project_in_workspace(db, project_id, workspace_id)
    task = await get_task_in_project(db, task_id, project_id, workspace_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("assigned_to") is not None:
        await ensure_assignee_is_member(db, changes["assigned_to"], workspace_id)

    async with atomic(db):
        for field, value in changes.items():
            if field == "assigned_to":
                task.assigned_to_id = value
            elif field == "due_date":
                task.due_date = _as_utc(value)
            elif value is not None:
                setattr(task, field, value)
    return task


async def list_tasks(
    db: AsyncSession,
    user_id: str,
    workspace_id: str,
    filters: TaskFilters,
    page: PageParams,
) -> tuple[list[Task], Pagination]:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    criteria = [Task.workspace_id == workspace_id]
    if filters.project_id:
        criteria.append(Task.project_id == filters.project_id)
    if filters.status:
        criteria.append(Task.status.in_(filters.status))
    if filters.priority:
        criteria.append(Task.priority.in_(filters.priority))
    if filters.assigned_to:
        criteria.append(Task.assigned_to_id.in_(filters.assigned_to))
    if filters.keyword:
        criteria.append(Task.title.ilike(f"%{filters.keyword}%"))
    if filters.due_date:
        day_start = datetime.combine(filters.due_date, time.min, tzinfo=timezone.utc)
        criteria.append(Task.due_date >= day_start)
        criteria.append(Task.due_date < day_start + timedelta(days=1))

    total_count = await db.scalar(select(func.count(Task.id)).where(*criteria)) or 0
    result = await db.execute(
        select(Task)
        .where(*criteria)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .offset(page.skip)
        .limit(page.page_size)
    )
    return list(result.scalars().all()), Pagination.build(page, total_count)


async def get_task(db: AsyncSession, user_id: str, workspace_id: str, project_id: str, task_id: str) -> Task:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    await get_project_in_workspace(db, project_id, workspace_id)
    return await get_task_in_project(db, task_id, project_id, workspace_id)


async def delete_task(db: AsyncSession, user_id: str, workspace_id: str, task_id: str) -> None:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.DELETE_TASK])

    task = await db.scalar(select(Task).where(Task.id == task_id, Task.workspace_id == workspace_id))
    if task is None:
        raise NotFoundError("Task not found or does not belong to the specified workspace")

    async with atomic(db):
        await db.delete(task)

    log.info("Task %s deleted from workspace %s", task_id, workspace_id)
