"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 역할, 사용자, 사용자-역할 연결 (Role, User, UserRole)
    token: 리프레시 토큰 (Refresh tokens)
    record: 소유 레코드 (Owned records: Todo, Apple)
"""

from app.models.user import Role, User, UserRole
from app.models.token import RefreshToken
from app.models.record import OwnedRecord, Todo, Apple

__all__ = [
    "Role", "User", "UserRole",
    "RefreshToken",
    "OwnedRecord", "Todo", "Apple",
]
