"""관리자 API 테스트.

Admin API tests — every-owner listing, any-record lookup and user listing,
all gated on the administrator role.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Role, UserRole
from tests.conftest import auth_header

URL = "/api/v1/admin/todo"
APP_URL = "/api/v1/app/todo"


class TestAdminRecords:
    """관리자 레코드 조회 테스트."""

    async def test_list_all(self, client: AsyncClient, alice_token, bob_token, admin_token):
        for token in (alice_token, bob_token):
            res = await client.post(APP_URL, json={"title": "t", "hours": 1}, headers=auth_header(token))
            assert res.status_code == 201

        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert len(res.json()) == 2

    async def test_list_all_forbidden_for_non_admin(self, client: AsyncClient, alice_token):
        res = await client.get(URL, headers=auth_header(alice_token))
        assert res.status_code == 403

    async def test_get_any_forbidden_for_non_admin(self, client: AsyncClient, alice_token):
        created = await client.post(APP_URL, json={"title": "t", "hours": 1}, headers=auth_header(alice_token))
        res = await client.get(f"{URL}/{created.json()['id']}", headers=auth_header(alice_token))
        assert res.status_code == 403

    async def test_get_any_nonexistent(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_role_change_applies_to_next_request(
        self, client: AsyncClient, db: AsyncSession, alice, alice_token,
    ):
        """역할은 토큰이 아닌 DB에서 매 요청 조회."""
        assert (await client.get(URL, headers=auth_header(alice_token))).status_code == 403

        role = Role(name="Admin")
        db.add(role)
        await db.flush()
        db.add(UserRole(user_id=alice.id, role_id=role.id))
        await db.commit()

        assert (await client.get(URL, headers=auth_header(alice_token))).status_code == 200


class TestAdminUsers:
    """관리자 사용자 목록 테스트."""

    async def test_list_users(self, client: AsyncClient, alice, admin_token):
        res = await client.get("/api/v1/admin/users", headers=auth_header(admin_token))
        assert res.status_code == 200
        by_name = {u["username"]: u for u in res.json()}
        assert by_name["admin"]["roles"] == ["Admin"]
        assert by_name["alice"]["roles"] == []

    async def test_list_users_forbidden(self, client: AsyncClient, alice_token):
        res = await client.get("/api/v1/admin/users", headers=auth_header(alice_token))
        assert res.status_code == 403
