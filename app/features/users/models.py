"""
User and Account models with ULID primary keys.
"""
import enum
from datetime import datetime
from sqlalchemy import String, Boolean, ForeignKey, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin


class User(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """
    User model representing registered people.

    ``password_hash`` is empty for accounts created through an OAuth provider.
    ``current_workspace_id`` is a weak reference: it points at a workspace the
    user is a member of but does not own it, and is repointed explicitly when
    that workspace is deleted.
    """
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String(500), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    current_workspace_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
        index=True
    )

    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"


class Provider(str, enum.Enum):
    """Identity providers an account can be bound to."""
    GOOGLE = "GOOGLE"
    GITHUB = "GITHUB"
    FACEBOOK = "FACEBOOK"
    EMAIL = "EMAIL"


class Account(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """
    Binding between a user and a login identity.

    For EMAIL accounts ``provider_id`` is the email address. One user may own
    several accounts; each (provider, provider_id) pair appears once.
    """
    __tablename__ = "accounts"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider: Mapped[Provider] = mapped_column(SQLEnum(Provider), nullable=False)
    provider_id: Mapped[str] = mapped_column(String(255), nullable=False)

    refresh_token: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    token_expiry: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_accounts_provider_provider_id"),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, user_id={self.user_id}, provider={self.provider.value})>"
