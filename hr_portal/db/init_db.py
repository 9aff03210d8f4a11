"""
Create all tables and the first administrator account.

Run once against a fresh database with env set:
  INITIAL_ADMIN_EMAIL=admin@example.com
  INITIAL_ADMIN_PASSWORD=ChangeMe123

  python -m hr_portal.db.init_db
"""
import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from hr_portal.auth.models import User
from hr_portal.auth.security import hash_password
from hr_portal.core.config import settings
from hr_portal.core.enums import Role
import hr_portal.core.models  # noqa: F401  registers every table on Base.metadata
from hr_portal.db.session import AsyncSessionLocal, Base, engine


async def create_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_admin(db: AsyncSession) -> None:
    email = settings.initial_admin_email
    password = settings.initial_admin_password
    if not email or not password:
        print("INITIAL_ADMIN_EMAIL / INITIAL_ADMIN_PASSWORD not set; skipping admin user.")
        return

    existing = (
        await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    ).scalar_one_or_none()
    if existing:
        existing.role = Role.ADMIN.value
        await db.commit()
        print("Admin user already exists:", email)
        return

    db.add(
        User(
            name=settings.initial_admin_name,
            email=email,
            password_hash=hash_password(password),
            role=Role.ADMIN.value,
        )
    )
    await db.commit()
    print("Created admin user:", email)


async def main() -> None:
    await create_tables(engine)
    print("Tables created.")
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
