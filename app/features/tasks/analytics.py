"""
Task counters shared by workspace and project analytics.
"""
from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.base import utcnow
from app.features.tasks.models import Task, TaskStatus
from app.features.workspaces.schemas import Analytics


async def _count(db: AsyncSession, *criteria: ColumnElement[bool]) -> int:
    return await db.scalar(select(func.count(Task.id)).where(*criteria)) or 0


async def count_task_analytics(db: AsyncSession, scope: ColumnElement[bool]) -> Analytics:
    """
    Count total, overdue and completed tasks matching ``scope``.

    A task is overdue when its due date has passed and it is not DONE.
    """
    return Analytics(
        total_tasks=await _count(db, scope),
        overdue_tasks=await _count(db, scope, Task.due_date < utcnow(), Task.status != TaskStatus.DONE),
        completed_tasks=await _count(db, scope, Task.status == TaskStatus.DONE),
    )
