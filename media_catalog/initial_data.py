import asyncio
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from .database import AsyncSessionLocal, close_db
from .repositories.users import RolesRepository, UsersRepository
from .schemas.user import RoleCreate
from .config import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ADMIN_ROLE_NAME = "admin"


async def init_db(db: AsyncSession) -> None:
    """Create the all-permissions admin role and the first superuser"""
    roles = RolesRepository(db, logger)
    role = await roles.find_by_name(ADMIN_ROLE_NAME)
    if role is None:
        role = await roles.create(RoleCreate(
            name=ADMIN_ROLE_NAME,
            can_edit_projects=True,
            can_edit_categories=True,
            can_edit_users=True,
            can_edit_roles=True,
            can_edit_genres=True,
            can_edit_ages=True,
        ))
    else:
        logger.info("Admin role already exists")

    if not settings.FIRST_SUPERUSER_EMAIL or not settings.FIRST_SUPERUSER_PASSWORD:
        logger.warning("FIRST_SUPERUSER_EMAIL / FIRST_SUPERUSER_PASSWORD not set, skipping superuser")
        return

    users = UsersRepository(db, logger)
    user = await users.find_by_email(settings.FIRST_SUPERUSER_EMAIL)
    if user is None:
        await users.create(
            settings.FIRST_SUPERUSER_EMAIL,
            settings.FIRST_SUPERUSER_PASSWORD,
            name="Super Admin",
            role_id=role.id,
        )
        logger.info(f"Superuser created: {settings.FIRST_SUPERUSER_EMAIL}")
    else:
        logger.info("Superuser already exists")


async def main() -> None:
    logger.info("Creating initial data")
    async with AsyncSessionLocal() as db:
        await init_db(db)
    await close_db()
    logger.info("Initial data created")


if __name__ == "__main__":
    asyncio.run(main())
