"""
Member model: a user's membership of a workspace with exactly one role.
"""
from datetime import datetime
from sqlalchemy import String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin, utcnow
from app.features.permissions.models import Role
from app.features.users.models import User


class Member(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """
    Join entity between User and Workspace.

    At most one row exists per (user, workspace); the unique constraint is
    what makes concurrent joins safe.
    """
    __tablename__ = "members"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    workspace_id: Mapped[str] = mapped_column(String(26), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id: Mapped[str] = mapped_column(String(26), ForeignKey("roles.id"), nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    role: Mapped[Role] = relationship(Role, lazy="selectin")
    user: Mapped[User] = relationship(User, lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "workspace_id", name="uq_members_user_workspace"),
    )

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, user_id={self.user_id}, workspace_id={self.workspace_id})>"
