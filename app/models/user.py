"""사용자 및 역할 관련 SQLAlchemy ORM 모델 정의.

User and Role SQLAlchemy ORM model definitions.
Roles are attached to users through a many-to-many association so that a
user may hold the administrator role in addition to any others.

Tables:
    - roles: 역할 (Named roles, e.g. "Admin")
    - users: 사용자 계정 (User accounts)
    - user_roles: 사용자-역할 연결 (User-Role association)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Role(Base):
    """역할 모델 — 이름으로 식별되는 권한 그룹.

    Role model — A named permission group. The role named by
    ``settings.ADMIN_ROLE_NAME`` bypasses ownership scoping.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 역할 이름 (Role name, globally unique)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 역할 이름 — Role display name (e.g. "Admin")
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user_roles = relationship("UserRole", back_populates="role", cascade="all, delete-orphan")


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Every record (Todo, Apple) is owned by exactly one user.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Login username, globally unique)
        email: 이메일 (Email address)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        is_active: 활성 상태 (Active status)
        created_at: 생성 일시 UTC (Creation timestamp)

    Relationships:
        user_roles: 역할 연결 (Role associations, cascade delete)
        refresh_tokens: 리프레시 토큰 목록 (Active refresh tokens, cascade delete)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username (전역 고유, globally unique)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user_roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def role_names(self) -> list[str]:
        """연결된 역할 이름 목록 (Names of assigned roles; user_roles must be loaded)."""
        return [ur.role.name for ur in self.user_roles]


class UserRole(Base):
    """사용자-역할 연결 테이블.

    User-Role association table for many-to-many relationships.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        user_id: 사용자 ID (User UUID)
        role_id: 역할 ID (Role UUID)
    """

    __tablename__ = "user_roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    role_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )

    user = relationship("User", back_populates="user_roles")
    role = relationship("Role", back_populates="user_roles")
