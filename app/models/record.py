"""소유 레코드 모델 — 사용자별로 범위가 지정된 엔티티.

Owned record models — Entities scoped to a single owning user.
Every record kind implements the same capability surface
(``id``, ``owner_id``, ``copy_from``, ``kind_name``) so the CRUD service and
router are written once and reused for each kind.

Tables:
    - todos: 할 일 (Todo items: title + hours)
    - apples: 사과 (Apples: a single name field)
"""

import uuid
from typing import Any, ClassVar

from sqlalchemy import ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _new_record_id() -> str:
    return str(uuid.uuid4())


class OwnedRecord:
    """소유 레코드 믹스인 — 식별자, 소유자, 필드 복사.

    Mixin providing the identifier and owner columns shared by every record
    kind. ``id`` and ``owner_id`` are assigned by the server only;
    ``copy_from`` never touches them.

    Subclasses list their scalar columns in ``copy_fields``.
    """

    copy_fields: ClassVar[tuple[str, ...]] = ()

    # 레코드 식별자 — Opaque string id (UUID4 text), minted at creation
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_record_id)
    # 소유자 FK — Owning user (CASCADE: 사용자 삭제 시 레코드도 삭제)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    @classmethod
    def kind_name(cls) -> str:
        """이벤트 이름에 쓰이는 종류 이름 (Kind name used in event names, e.g. "Todo")."""
        return cls.__name__

    def copy_from(self, source: Any) -> None:
        """다른 객체의 스칼라 필드를 복사합니다 (id/owner_id 제외).

        Copy every scalar field listed in ``copy_fields`` from ``source``.
        The identifier and owner are never modified.

        Args:
            source: 같은 필드를 가진 객체 (Any object exposing the same attribute names,
                    e.g. an update schema)
        """
        for field in self.copy_fields:
            setattr(self, field, getattr(source, field))


class Todo(OwnedRecord, Base):
    """할 일 모델.

    Attributes:
        title: 제목 (Title, max 100 chars)
        hours: 예상 소요 시간 (Estimated hours)
    """

    __tablename__ = "todos"

    copy_fields = ("title", "hours")

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)


class Apple(OwnedRecord, Base):
    """사과 모델.

    Attributes:
        apple_name: 사과 이름 (Apple name)
    """

    __tablename__ = "apples"

    copy_fields = ("apple_name",)

    apple_name: Mapped[str] = mapped_column(String(255), nullable=False)
