"""
Project operations. Every entry point resolves the caller's workspace role
and checks it before touching project rows.
"""
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import atomic
from app.core.errors import NotFoundError
from app.core.pagination import PageParams, Pagination
from app.features.members.services import resolve_role
from app.features.permissions.dependencies import require_permission
from app.features.permissions.registry import Permission
from app.features.projects.models import Project, DEFAULT_PROJECT_EMOJI
from app.features.projects.schemas import ProjectCreate, ProjectUpdate
from app.features.tasks.analytics import count_task_analytics
from app.features.tasks.models import Task
from app.features.workspaces.schemas import Analytics
from app.utils import get_logger


log = get_logger(__name__)


async def get_project_in_workspace(db: AsyncSession, project_id: str, workspace_id: str) -> Project:
    """
    Fetch a project scoped to a workspace.

    A project in another workspace is reported as missing so its existence
    does not leak across tenants.
    """
    project = await db.scalar(
        select(Project).where(Project.id == project_id, Project.workspace_id == workspace_id)
    )
    if project is None:
        raise NotFoundError("Project not found or does not belong to the specified workspace")
    return project


async def create_project(db: AsyncSession, user_id: str, workspace_id: str, data: ProjectCreate) -> Project:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.CREATE_PROJECT])

    async with atomic(db):
        project = Project(
            name=data.name,
            description=data.description,
            emoji=data.emoji or DEFAULT_PROJECT_EMOJI,
            workspace_id=workspace_id,
            created_by_id=user_id,
        )
        db.add(project)
        await db.flush()

    log.info("Project %s created in workspace %s", project.id, workspace_id)
    return project


async def list_projects(
    db: AsyncSession, user_id: str, workspace_id: str, page: PageParams
) -> tuple[list[Project], Pagination]:
    """Newest projects first, one page at a time."""
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    total_count = await db.scalar(
        select(func.count(Project.id)).where(Project.workspace_id == workspace_id)
    ) or 0
    result = await db.execute(
        select(Project)
        .where(Project.workspace_id == workspace_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
        .offset(page.skip)
        .limit(page.page_size)
    )
    return list(result.scalars().all()), Pagination.build(page, total_count)


async def get_project(db: AsyncSession, user_id: str, workspace_id: str, project_id: str) -> Project:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    return await get_project_in_workspace(db, project_id, workspace_id)


async def get_project_analytics(db: AsyncSession, user_id: str, workspace_id: str, project_id: str) -> Analytics:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    project = await get_project_in_workspace(db, project_id, workspace_id)
    return await count_task_analytics(db, Task.project_id == project.id)


async def update_project(
    db: AsyncSession, user_id: str, workspace_id: str, project_id: str, data: ProjectUpdate
) -> Project:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.EDIT_PROJECT])

    project = await get_project_in_workspace(db, project_id, workspace_id)
    async with atomic(db):
        if data.emoji:
            project.emoji = data.emoji
        if data.name:
            project.name = data.name
        if data.description:
            project.description = data.description
    return project


async def delete_project(db: AsyncSession, user_id: str, workspace_id: str, project_id: str) -> None:
    """
    Delete a project and every task in it.

    Tasks go first, then the project, in one transaction, so no task ever
    outlives its project. Repeating the task delete is harmless.
    """
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.DELETE_PROJECT])

    project = await get_project_in_workspace(db, project_id, workspace_id)
    async with atomic(db):
        result = await db.execute(delete(Task).where(Task.project_id == project.id))
        await db.delete(project)
        await db.flush()

    log.info("Project %s deleted with %d tasks", project_id, result.rowcount)
