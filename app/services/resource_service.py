"""소유 레코드 서비스 — 소유권 기반 CRUD 비즈니스 로직.

Owned Record Service — Ownership-scoped CRUD business logic, written once
and instantiated per record kind (Todo, Apple).

Rules:
    - 일반 조회는 호출자 소유 레코드로 제한 (Reads are scoped to the caller's records)
    - 관리자는 모든 레코드 조회/수정/삭제 가능 (Administrators bypass ownership)
    - 생성 시 id/owner_id는 서버가 지정 (Server mints id and owner on create)
    - 존재 여부를 소유권 검사보다 먼저 확인 (Not-found is decided before ownership)
    - 커밋 이후에만 알림 전송, 알림 실패 시 롤백 없음
      (Notifications go out strictly after commit and never roll it back)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.record import Apple, OwnedRecord, Todo
from app.models.user import User
from app.repositories.record_repository import RecordRepository, apple_repository, todo_repository
from app.repositories.user_repository import user_repository
from app.schemas.record import AppleResponse, TodoResponse
from app.services.notification_hub import NotificationHub
from app.utils.exceptions import ForbiddenError, NotFoundError, NotificationError, PersistenceError

logger = logging.getLogger(__name__)

RecordType = TypeVar("RecordType", bound=OwnedRecord)


class ResourceService(Generic[RecordType]):
    """레코드 종류 하나에 대한 CRUD 서비스.

    CRUD service for a single record kind.

    Attributes:
        repository: 레코드 레포지토리 (Repository for this kind)
        response_model: 응답 스키마 (Response schema for this kind)
    """

    def __init__(
        self,
        repository: RecordRepository[RecordType],
        response_model: type[BaseModel],
    ) -> None:
        self.repository: RecordRepository[RecordType] = repository
        self.response_model: type[BaseModel] = response_model

    @property
    def kind(self) -> str:
        return self.repository.kind

    def _to_response(self, record: RecordType) -> BaseModel:
        return self.response_model.model_validate(record)

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.kind} not found")

    @asynccontextmanager
    async def _storage(self, db: AsyncSession) -> AsyncIterator[None]:
        """DB 오류를 PersistenceError로 변환합니다.

        Roll back and surface any persistence failure as PersistenceError.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("%s storage failure: %s", self.kind, exc)
            raise PersistenceError() from exc

    async def _is_admin(self, db: AsyncSession, caller: User) -> bool:
        # 매 요청마다 DB에서 역할을 다시 읽음 (Roles are re-read on every call)
        role_names: list[str] = await user_repository.get_role_names(db, caller.id)
        return settings.ADMIN_ROLE_NAME in role_names

    async def _may_modify(self, db: AsyncSession, caller: User, record: RecordType) -> bool:
        if record.owner_id == caller.id:
            return True
        return await self._is_admin(db, caller)

    async def _notify(self, hub: NotificationHub, action: str, payload: BaseModel) -> None:
        """커밋 이후 변경 이벤트를 전송합니다.

        Broadcast ``<Kind><action>``. Called only after a successful commit;
        on failure the write stays committed and NotificationError is raised.
        """
        event_name = f"{self.kind}{action}"
        try:
            await hub.broadcast(event_name, payload.model_dump(mode="json"))
        except Exception as exc:
            logger.error("Failed to broadcast %s: %s", event_name, exc)
            raise NotificationError() from exc

    async def list_mine(self, db: AsyncSession, caller: User) -> list[BaseModel]:
        """호출자 소유의 모든 레코드를 조회합니다 (All records owned by the caller)."""
        async with self._storage(db):
            records = await self.repository.get_all(db, owner_id=caller.id)
        return [self._to_response(r) for r in records]

    async def get_mine(self, db: AsyncSession, caller: User, record_id: str) -> BaseModel:
        """호출자 소유의 레코드 하나를 조회합니다.

        Retrieve one of the caller's records. A record owned by someone else
        is reported exactly like a missing one.

        Raises:
            NotFoundError: 없거나 다른 사용자 소유일 때 (Missing or not owned by caller)
        """
        async with self._storage(db):
            record = await self.repository.get_by_id(db, record_id, owner_id=caller.id)
        if record is None:
            raise self._not_found()
        return self._to_response(record)

    async def list_all(self, db: AsyncSession) -> list[BaseModel]:
        """모든 사용자의 레코드를 조회합니다 — 관리자 전용 (Every record; admin routes only)."""
        async with self._storage(db):
            records = await self.repository.get_all(db)
        return [self._to_response(r) for r in records]

    async def get_any(self, db: AsyncSession, record_id: str) -> BaseModel:
        """소유자와 무관하게 레코드를 조회합니다 — 관리자 전용.

        Raises:
            NotFoundError: 레코드가 없을 때 (Record does not exist)
        """
        async with self._storage(db):
            record = await self.repository.get_by_id(db, record_id)
        if record is None:
            raise self._not_found()
        return self._to_response(record)

    async def create(
        self,
        db: AsyncSession,
        hub: NotificationHub,
        caller: User,
        draft: BaseModel,
    ) -> BaseModel:
        """새 레코드를 생성합니다.

        Create a record owned by the caller with a freshly minted id, commit,
        read it back from storage, then broadcast ``<Kind>Added``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            hub: 알림 허브 (Notification hub)
            caller: 현재 사용자 (Authenticated caller)
            draft: 생성 스키마 (Create schema; carries no id/owner)

        Returns:
            BaseModel: 저장소에서 다시 읽은 레코드 (Record as read back from storage)

        Raises:
            PersistenceError: 저장 실패 또는 저장 후 조회 불일치
                              (Write failed, or the record could not be read back)
        """
        fields = draft.model_dump(include=set(self.repository.model.copy_fields))
        async with self._storage(db):
            record = await self.repository.create(db, {**fields, "owner_id": caller.id})
            await db.commit()
            stored = await self.repository.get_by_id(db, record.id)
            if stored is not None:
                # 세션에 캐시된 값이 아니라 저장소의 컬럼 값을 다시 읽음
                await db.refresh(stored)
        if stored is None:
            raise PersistenceError(f"{self.kind} was not readable after write")

        response = self._to_response(stored)
        await self._notify(hub, "Added", response)
        return response

    async def update(
        self,
        db: AsyncSession,
        hub: NotificationHub,
        caller: User,
        draft: BaseModel,
    ) -> BaseModel:
        """레코드의 모든 스칼라 필드를 교체합니다.

        Replace every scalar field of the record identified by ``draft.id``.
        The id and owner are never changed.

        Raises:
            NotFoundError: 레코드가 없을 때 (Record does not exist)
            ForbiddenError: 소유자도 관리자도 아닐 때 (Caller is neither owner nor admin)
        """
        async with self._storage(db):
            record = await self.repository.get_by_id(db, draft.id)
            if record is None:
                raise self._not_found()
            if not await self._may_modify(db, caller, record):
                raise ForbiddenError("")

            record.copy_from(draft)
            await db.flush()
            await db.commit()

        response = self._to_response(record)
        await self._notify(hub, "Updated", response)
        return response

    async def delete(
        self,
        db: AsyncSession,
        hub: NotificationHub,
        caller: User,
        record_id: str,
    ) -> BaseModel:
        """레코드를 삭제하고 삭제된 레코드를 반환합니다.

        Delete the record and return it as it was before deletion.

        Raises:
            NotFoundError: 레코드가 없을 때 (Record does not exist)
            ForbiddenError: 소유자도 관리자도 아닐 때 (Caller is neither owner nor admin)
        """
        async with self._storage(db):
            record = await self.repository.get_by_id(db, record_id)
            if record is None:
                raise self._not_found()
            if not await self._may_modify(db, caller, record):
                raise ForbiddenError("")

            response = self._to_response(record)
            await self.repository.delete(db, record)
            await db.commit()

        await self._notify(hub, "Removed", response)
        return response


# 싱글턴 인스턴스 — Singleton instances
todo_service: ResourceService[Todo] = ResourceService(todo_repository, TodoResponse)
apple_service: ResourceService[Apple] = ResourceService(apple_repository, AppleResponse)
