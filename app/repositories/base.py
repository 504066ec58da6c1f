"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic Create, Read, Delete operations with optional owner scoping.

Usage:
    class TodoRepository(BaseRepository[Todo]):
        def __init__(self) -> None:
            super().__init__(Todo)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    Queries are scoped by owner_id when the model supports it and an owner
    filter is given.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def _scoped(self, query: Select, owner_id: UUID | None) -> Select:
        # 모델에 owner_id 컬럼이 있고, 필터가 제공된 경우 소유자 범위 적용
        if owner_id is not None and hasattr(self.model, "owner_id"):
            query = query.where(self.model.owner_id == owner_id)
        return query

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID | str,
        owner_id: UUID | None = None,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its identifier.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 ID (Identifier of the record to retrieve)
            owner_id: 소유자 범위 필터, None이면 소유자 필터 미적용
                      (Owner scope filter; None skips owner filtering)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        query = self._scoped(query, owner_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_all(
        self,
        db: AsyncSession,
        owner_id: UUID | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """모든 레코드를 조회합니다.

        Retrieve all records, optionally restricted to one owner.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            owner_id: 소유자 범위 필터 (Owner scope filter)
            order_by: 정렬 기준 컬럼 (Column to order by)

        Returns:
            Sequence[ModelType]: 조회된 레코드 목록 (List of matching records)
        """
        query: Select = self._scoped(select(self.model), owner_id)
        if order_by is not None:
            query = query.order_by(order_by)

        result = await db.execute(query)
        return result.scalars().all()

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """레코드를 추가하고 flush 후 서버 기본값을 다시 읽습니다 (Insert, flush, refresh)."""
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, db_obj: ModelType) -> None:
        """이미 조회된 레코드를 삭제합니다.

        Delete a record that has already been loaded.
        """
        await db.delete(db_obj)
        await db.flush()

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
    ) -> bool:
        """컬럼=값 조건에 맞는 레코드 존재 여부. 모델에 없는 컬럼은 무시됩니다."""
        query: Select = select(func.count()).select_from(self.model)
        for column_name, value in filters.items():
            if hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)

        count: int = (await db.execute(query)).scalar() or 0
        return count > 0
