"""
Role lookups against the seeded Role table.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import RoleNotFoundError
from app.features.permissions.models import Role
from app.features.permissions.registry import RoleName


async def get_role(db: AsyncSession, name: RoleName | str) -> Role:
    """
    Fetch the seeded Role row for ``name``.

    Raises:
        RoleNotFoundError: if the role was never seeded
        ValueError: if ``name`` is not a defined role
    """
    role_name = RoleName(name)
    role = await db.scalar(select(Role).where(Role.name == role_name))
    if role is None:
        raise RoleNotFoundError(role_name.value)
    return role


async def list_roles(db: AsyncSession) -> list[Role]:
    result = await db.execute(select(Role).order_by(Role.name))
    return list(result.scalars().all())
