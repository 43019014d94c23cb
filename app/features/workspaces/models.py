"""
Workspace model.

A workspace is the tenant boundary: projects, tasks and memberships are all
scoped to one. It is owned by the user who created it and can be joined with
its invite code.
"""
import uuid
from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin

INVITE_CODE_LENGTH = 8


def generate_invite_code() -> str:
    """Random 8-character hex invite code."""
    return uuid.uuid4().hex[:INVITE_CODE_LENGTH]


class Workspace(Base, UlidPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    owner_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    invite_code: Mapped[str] = mapped_column(
        String(INVITE_CODE_LENGTH),
        unique=True,
        nullable=False,
        index=True,
        default=generate_invite_code
    )

    def __repr__(self) -> str:
        return f"<Workspace(id={self.id}, name={self.name!r}, owner_id={self.owner_id})>"
