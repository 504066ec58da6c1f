"""소유 레코드 레포지토리 — 레코드 종류별 CRUD 쿼리.

Owned Record Repository — CRUD queries shared by every record kind.
One instance exists per kind (Todo, Apple).
"""

from typing import TypeVar

from app.models.record import Apple, OwnedRecord, Todo
from app.repositories.base import BaseRepository

RecordType = TypeVar("RecordType", bound=OwnedRecord)


class RecordRepository(BaseRepository[RecordType]):
    """소유 레코드 테이블에 대한 레포지토리.

    Repository for a table of owned records. Owner scoping is provided by
    BaseRepository through the ``owner_id`` column every kind carries.
    """

    @property
    def kind(self) -> str:
        """레코드 종류 이름 (Record kind name, e.g. "Todo")."""
        return self.model.kind_name()


# 싱글턴 인스턴스 — Singleton instances
todo_repository: RecordRepository[Todo] = RecordRepository(Todo)
apple_repository: RecordRepository[Apple] = RecordRepository(Apple)
