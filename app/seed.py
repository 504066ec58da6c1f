"""초기 데이터 시드 스크립트 — 관리자 역할 및 관리자 계정 생성.

Seed script — Creates the administrator role and an administrator account.

Usage:
    python -m app.seed

Creates:
    - 역할: settings.ADMIN_ROLE_NAME (default "Admin")
    - 관리자 계정: settings.SEED_ADMIN_USERNAME / SEED_ADMIN_PASSWORD
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import async_session, engine, Base
from app.models import Role, User  # noqa: F401 — register all models with metadata
from app.repositories.user_repository import user_repository
from app.utils.password import hash_password


async def seed_admin(db: AsyncSession) -> bool:
    """관리자 역할과 계정을 생성합니다.

    Ensure the administrator role exists and is held by the seed account.
    Idempotent: 이미 존재하면 건너뜁니다 (Existing rows are reused).

    Returns:
        bool: 새 계정을 만들었으면 True (True if the admin account was created)
    """
    role: Role = await user_repository.get_or_create_role(db, settings.ADMIN_ROLE_NAME)

    admin: User | None = await user_repository.get_by_username(db, settings.SEED_ADMIN_USERNAME)
    if admin is not None:
        if settings.ADMIN_ROLE_NAME not in admin.role_names:
            await user_repository.assign_role(db, admin, role)
        return False

    admin = await user_repository.create(
        db,
        {
            "username": settings.SEED_ADMIN_USERNAME,
            "email": settings.SEED_ADMIN_EMAIL,
            "password_hash": hash_password(settings.SEED_ADMIN_PASSWORD),
        },
    )
    await user_repository.assign_role(db, admin, role)
    return True


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create tables if they don't exist, then seed the administrator.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        created: bool = await seed_admin(db)
        await db.commit()

    if created:
        print(f"Seeded: admin user={settings.SEED_ADMIN_USERNAME}")
    else:
        print("Already seeded. Skipping.")


if __name__ == "__main__":
    asyncio.run(seed())
