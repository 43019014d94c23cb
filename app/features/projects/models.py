"""
Project model. Every project belongs to exactly one workspace.
"""
from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin

DEFAULT_PROJECT_EMOJI = "📊"


class Project(Base, UlidPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    emoji: Mapped[str] = mapped_column(String(16), nullable=False, default=DEFAULT_PROJECT_EMOJI)

    workspace_id: Mapped[str] = mapped_column(String(26), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), nullable=False)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name!r}, workspace_id={self.workspace_id})>"
