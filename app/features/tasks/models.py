"""
Task model.

``workspace_id`` duplicates the project's workspace for cheap workspace-wide
queries and must always equal it.
"""
import enum
import secrets
import string
from datetime import datetime
from sqlalchemy import String, Text, ForeignKey, DateTime, Index, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin

_CODE_ALPHABET = string.ascii_lowercase + string.digits


def generate_task_code() -> str:
    """Short human-facing code such as ``task-x7k``."""
    return "task-" + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(3))


class TaskStatus(str, enum.Enum):
    BACKLOG = "BACKLOG"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(Base, UlidPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "tasks"

    task_code: Mapped[str] = mapped_column(String(16), nullable=False, default=generate_task_code)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    project_id: Mapped[str] = mapped_column(String(26), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    workspace_id: Mapped[str] = mapped_column(String(26), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)

    status: Mapped[TaskStatus] = mapped_column(SQLEnum(TaskStatus), nullable=False, default=TaskStatus.TODO, index=True)
    priority: Mapped[TaskPriority] = mapped_column(SQLEnum(TaskPriority), nullable=False, default=TaskPriority.MEDIUM)

    assigned_to_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_tasks_workspace_status", "workspace_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, code={self.task_code}, project_id={self.project_id})>"
