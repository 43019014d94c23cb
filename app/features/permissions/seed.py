"""
Role seed data.

Upserts one Role row per RoleName carrying the registry permission set.
Safe to run repeatedly.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import atomic
from app.features.permissions.models import Role
from app.features.permissions.registry import ROLE_PERMISSIONS, RoleName
from app.utils import get_logger


log = get_logger(__name__)


async def seed_roles(db: AsyncSession, roles: list[RoleName] | None = None) -> dict[RoleName, Role]:
    """
    Create missing roles and refresh the stored permissions of existing ones.

    Args:
        db: Database session
        roles: Subset of roles to seed, all roles when omitted

    Returns:
        Dictionary mapping role names to Role rows
    """
    roles_map: dict[RoleName, Role] = {}

    async with atomic(db):
        for role_name in roles or list(RoleName):
            permissions = sorted(p.value for p in ROLE_PERMISSIONS[role_name])
            existing = await db.scalar(select(Role).where(Role.name == role_name))

            if existing:
                if existing.permissions != permissions:
                    existing.permissions = permissions
                    log.info("Updated permissions of role %s", role_name.value)
                roles_map[role_name] = existing
                continue

            role = Role(name=role_name, permissions=permissions)
            db.add(role)
            roles_map[role_name] = role
            log.info("Created role %s with %d permissions", role_name.value, len(permissions))

    return roles_map
