"""
Seed script to populate the workspace roles.

Run this after pointing DATABASE_URL at a fresh database. Application
startup performs the same seeding, so this is only needed for databases
that are provisioned separately.

Usage:
    python -m scripts.seed_roles
"""
import asyncio

from app.core.database.engine import AsyncSessionLocal, create_tables, engine
from app.features.permissions.seed import seed_roles
from app.utils import get_logger


log = get_logger(__name__)


async def main():
    log.info("Initializing database tables...")
    await create_tables(engine)

    async with AsyncSessionLocal() as db:
        try:
            roles = await seed_roles(db)
        except Exception as e:
            log.error("Error seeding roles: %s", e, exc_info=True)
            raise

    for role_name, role in roles.items():
        log.info("  - %s: %s", role_name.value, ", ".join(role.permissions))
    log.info("Role seeding completed successfully")


if __name__ == "__main__":
    asyncio.run(main())
