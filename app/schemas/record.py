"""소유 레코드 Pydantic 요청/응답 스키마 정의.

Owned record Pydantic request/response schema definitions.
Create schemas carry no ``id`` or ``owner_id``: any such keys sent by a
client are ignored, the server mints both.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# === 할 일 (Todo) 스키마 ===

class TodoCreate(BaseModel):
    """할 일 생성 요청 스키마.

    Attributes:
        title: 제목 (Title, max 100 chars)
        hours: 예상 소요 시간 (Estimated hours)
    """

    title: str = Field(max_length=100)
    hours: int


class TodoUpdate(TodoCreate):
    """할 일 수정 요청 스키마 — 전체 필드 교체, 기존 id 필수.

    Todo update request. Replaces every scalar field of the stored record
    identified by ``id``.
    """

    id: str  # 수정할 레코드 ID (Identifier of the record to replace)


class TodoResponse(BaseModel):
    """할 일 응답 스키마."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: UUID
    title: str
    hours: int


# === 사과 (Apple) 스키마 ===

class AppleCreate(BaseModel):
    """사과 생성 요청 스키마."""

    apple_name: str


class AppleUpdate(AppleCreate):
    """사과 수정 요청 스키마 — 기존 id 필수 (Requires the existing id)."""

    id: str


class AppleResponse(BaseModel):
    """사과 응답 스키마."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: UUID
    apple_name: str
