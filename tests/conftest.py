"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database, session,
notification hub and httpx client fixtures.
Each test gets a fresh schema on its own engine.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEBUG", "false")

from collections.abc import AsyncGenerator  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import *  # noqa: F401,F403,E402 — register all models with metadata
from app.models.user import Role, User, UserRole  # noqa: E402
from app.services.notification_hub import NotificationHub, get_notification_hub  # noqa: E402
from app.utils.jwt import create_access_token  # noqa: E402
from app.utils.password import hash_password  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingHub(NotificationHub):
    """브로드캐스트된 이벤트를 기록하는 허브 (Hub that also records every broadcast)."""

    def __init__(self) -> None:
        super().__init__(queue_size=100)
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def broadcast(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))
        await super().broadcast(event_name, data)

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 허브, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 매 테스트마다 스키마를 새로 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def hub() -> RecordingHub:
    return RecordingHub()


@pytest_asyncio.fixture
async def client(db: AsyncSession, hub: RecordingHub) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션과 알림 허브를 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_notification_hub] = lambda: hub

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 사용자 생성
# ---------------------------------------------------------------------------
async def make_user(db: AsyncSession, username: str, password: str = "secret123!") -> User:
    user = User(
        username=username,
        email=f"{username}@test.com",
        password_hash=hash_password(password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_role(db: AsyncSession) -> Role:
    role = Role(name="Admin")
    db.add(role)
    await db.flush()
    return role


@pytest_asyncio.fixture
async def alice(db: AsyncSession) -> User:
    user = await make_user(db, "alice")
    await db.commit()
    return user


@pytest_asyncio.fixture
async def bob(db: AsyncSession) -> User:
    user = await make_user(db, "bob")
    await db.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, admin_role: Role) -> User:
    """관리자 역할을 가진 사용자를 생성합니다."""
    user = await make_user(db, "admin", "admin123!")
    db.add(UserRole(user_id=user.id, role_id=admin_role.id))
    await db.commit()
    return user


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id)})


@pytest.fixture
def alice_token(alice: User) -> str:
    return make_token(alice)


@pytest.fixture
def bob_token(bob: User) -> str:
    return make_token(bob)


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return make_token(admin_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
