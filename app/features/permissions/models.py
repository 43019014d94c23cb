"""
Role model.

Rows are seed data mirroring ``registry.ROLE_PERMISSIONS``; members reference
them by id. Permission checks read the registry, not this table.
"""
from sqlalchemy import JSON, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin
from app.features.permissions.registry import RoleName


class Role(Base, UlidPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "roles"

    name: Mapped[RoleName] = mapped_column(SQLEnum(RoleName), unique=True, nullable=False, index=True)

    # Stored copy of the registry set, list of Permission values
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name.value})>"
