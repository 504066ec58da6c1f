"""사용자 레포지토리 — 사용자 및 역할 조회.

User Repository — User lookup and role association queries.
Extends BaseRepository with eager loading of assigned roles.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.user import Role, User, UserRole
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    def _with_roles(self) -> Select:
        # populate_existing: 세션에 이미 있는 사용자도 역할을 다시 로드
        return (
            select(User)
            .options(selectinload(User.user_roles).selectinload(UserRole.role))
            .execution_options(populate_existing=True)
        )

    async def get_with_roles(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> User | None:
        """사용자를 역할과 함께 조회합니다.

        Retrieve a user with its role associations eagerly loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User UUID)

        Returns:
            User | None: 역할이 로드된 사용자 또는 None (User with roles, or None)
        """
        result = await db.execute(self._with_roles().where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> User | None:
        """사용자명으로 사용자를 역할과 함께 조회합니다.

        Retrieve a user by username with roles eagerly loaded.
        """
        result = await db.execute(self._with_roles().where(User.username == username))
        return result.scalar_one_or_none()

    async def list_with_roles(self, db: AsyncSession) -> list[User]:
        """전체 사용자 목록을 역할과 함께 조회합니다 (List all users with roles)."""
        result = await db.execute(self._with_roles().order_by(User.created_at))
        return list(result.scalars().all())

    async def get_role_names(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> list[str]:
        """사용자의 역할 이름 목록을 DB에서 직접 조회합니다.

        Fetch the names of the user's roles straight from the database, so
        role changes take effect on the very next request.
        """
        query: Select = (
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_or_create_role(self, db: AsyncSession, name: str) -> Role:
        """이름으로 역할을 조회하고, 없으면 생성합니다 (Get a role by name, creating it if missing)."""
        result = await db.execute(select(Role).where(Role.name == name))
        role: Role | None = result.scalar_one_or_none()
        if role is None:
            role = Role(name=name)
            db.add(role)
            await db.flush()
        return role

    async def assign_role(self, db: AsyncSession, user: User, role: Role) -> None:
        """사용자에게 역할을 부여합니다 (Assign a role to a user)."""
        db.add(UserRole(user_id=user.id, role_id=role.id))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
