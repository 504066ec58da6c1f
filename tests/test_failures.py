"""저장/알림 실패 처리 테스트.

Failure handling tests — persistence errors roll back and become 503,
notification errors after commit become 502 while the write stays committed.
"""

from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.record_repository import todo_repository
from app.services.notification_hub import get_notification_hub
from app.main import app
from tests.conftest import auth_header

URL = "/api/v1/app/todo"


class BrokenHub:
    async def broadcast(self, event_name: str, data: dict[str, Any]) -> None:
        raise ConnectionError("transport down")


async def _fail(*args: Any, **kwargs: Any) -> None:
    raise OperationalError("statement", {}, Exception("database is gone"))


async def create_todo(client: AsyncClient, token: str, title: str = "buy milk") -> dict:
    res = await client.post(URL, json={"title": title, "hours": 1}, headers=auth_header(token))
    assert res.status_code == 201
    return res.json()


class TestPersistenceFailure:
    """저장 실패 — 롤백 후 503, 알림 없음."""

    async def test_read_failure_is_503(self, client: AsyncClient, alice_token, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(todo_repository, "get_all", _fail)
        res = await client.get(URL, headers=auth_header(alice_token))
        assert res.status_code == 503

    async def test_delete_failure_rolls_back(
        self, client: AsyncClient, alice_token, hub, monkeypatch: pytest.MonkeyPatch
    ):
        todo = await create_todo(client, alice_token)

        monkeypatch.setattr(todo_repository, "delete", _fail)
        res = await client.delete(f"{URL}/{todo['id']}", headers=auth_header(alice_token))
        assert res.status_code == 503
        assert res.json() == {"detail": "Storage unavailable"}

        monkeypatch.undo()
        still = await client.get(f"{URL}/{todo['id']}", headers=auth_header(alice_token))
        assert still.status_code == 200
        assert hub.names() == ["TodoAdded"]

    async def test_update_flush_failure_rolls_back(
        self, client: AsyncClient, db: AsyncSession, alice_token, hub, monkeypatch: pytest.MonkeyPatch
    ):
        todo = await create_todo(client, alice_token)

        monkeypatch.setattr(db, "flush", _fail)
        res = await client.put(URL, json={
            "id": todo["id"], "title": "never stored", "hours": 7,
        }, headers=auth_header(alice_token))
        assert res.status_code == 503

        monkeypatch.undo()
        still = await client.get(f"{URL}/{todo['id']}", headers=auth_header(alice_token))
        assert still.json()["title"] == "buy milk"
        assert still.json()["hours"] == 1
        assert hub.names() == ["TodoAdded"]


class TestNotificationFailure:
    """알림 실패 — 커밋된 변경은 유지되고 502."""

    async def test_create_keeps_write(self, client: AsyncClient, alice_token):
        app.dependency_overrides[get_notification_hub] = lambda: BrokenHub()

        res = await client.post(URL, json={"title": "saved anyway", "hours": 1}, headers=auth_header(alice_token))
        assert res.status_code == 502

        listed = await client.get(URL, headers=auth_header(alice_token))
        assert [t["title"] for t in listed.json()] == ["saved anyway"]

    async def test_update_keeps_write(self, client: AsyncClient, alice_token):
        todo = await create_todo(client, alice_token)
        app.dependency_overrides[get_notification_hub] = lambda: BrokenHub()

        res = await client.put(URL, json={
            "id": todo["id"], "title": "b", "hours": 2,
        }, headers=auth_header(alice_token))
        assert res.status_code == 502

        stored = await client.get(f"{URL}/{todo['id']}", headers=auth_header(alice_token))
        assert stored.json()["title"] == "b"
        assert stored.json()["hours"] == 2

    async def test_delete_keeps_write(self, client: AsyncClient, alice_token):
        todo = await create_todo(client, alice_token)
        app.dependency_overrides[get_notification_hub] = lambda: BrokenHub()

        res = await client.delete(f"{URL}/{todo['id']}", headers=auth_header(alice_token))
        assert res.status_code == 502

        gone = await client.get(f"{URL}/{todo['id']}", headers=auth_header(alice_token))
        assert gone.status_code == 404


async def test_create_response_is_read_from_storage(
    client: AsyncClient, alice_token, monkeypatch: pytest.MonkeyPatch
):
    """생성 응답은 세션 캐시가 아니라 저장된 행의 값."""
    original_get_by_id = todo_repository.get_by_id

    async def _rewrite_then_get(db: AsyncSession, record_id: str, owner_id: Any = None):
        # 세션 동기화 없이 행을 직접 변경 (raw SQL bypasses the identity map)
        await db.execute(text("UPDATE todos SET title = 'stored title' WHERE id = :id"), {"id": record_id})
        return await original_get_by_id(db, record_id, owner_id)

    monkeypatch.setattr(todo_repository, "get_by_id", _rewrite_then_get)
    res = await client.post(URL, json={"title": "draft title", "hours": 1}, headers=auth_header(alice_token))
    assert res.status_code == 201
    assert res.json()["title"] == "stored title"
