"""인증 API 테스트.

Auth API tests — registration, login, token refresh, logout and profile.
"""

from httpx import AsyncClient

from app.repositories.user_repository import user_repository
from app.utils.jwt import create_refresh_token
from tests.conftest import auth_header

URL = "/api/v1/auth"


async def login(client: AsyncClient, username: str, password: str) -> dict:
    res = await client.post(f"{URL}/login", json={"username": username, "password": password})
    assert res.status_code == 200
    return res.json()


class TestRegister:
    """회원가입 테스트."""

    async def test_register(self, client: AsyncClient):
        res = await client.post(f"{URL}/register", json={
            "username": "carol", "email": "carol@test.com", "password": "pw123456",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["username"] == "carol"
        assert data["email"] == "carol@test.com"
        assert data["roles"] == []
        assert "password" not in data

    async def test_register_duplicate(self, client: AsyncClient, alice):
        res = await client.post(f"{URL}/register", json={
            "username": "alice", "email": "other@test.com", "password": "pw",
        })
        assert res.status_code == 409

    async def test_register_invalid_email(self, client: AsyncClient):
        res = await client.post(f"{URL}/register", json={
            "username": "dave", "email": "not-an-email", "password": "pw",
        })
        assert res.status_code == 422

    async def test_registered_user_can_login(self, client: AsyncClient):
        await client.post(f"{URL}/register", json={
            "username": "erin", "email": "erin@test.com", "password": "pw123456",
        })
        tokens = await login(client, "erin", "pw123456")
        assert tokens["token_type"] == "bearer"

        me = await client.get(f"{URL}/me", headers=auth_header(tokens["access_token"]))
        assert me.status_code == 200
        assert me.json()["username"] == "erin"


class TestLogin:
    """로그인 테스트."""

    async def test_login_wrong_password(self, client: AsyncClient, alice):
        res = await client.post(f"{URL}/login", json={"username": "alice", "password": "wrong"})
        assert res.status_code == 401

    async def test_login_unknown_user(self, client: AsyncClient):
        res = await client.post(f"{URL}/login", json={"username": "nobody", "password": "x"})
        assert res.status_code == 401

    async def test_me_includes_roles(self, client: AsyncClient, admin_user):
        tokens = await login(client, "admin", "admin123!")
        res = await client.get(f"{URL}/me", headers=auth_header(tokens["access_token"]))
        assert res.json()["roles"] == ["Admin"]

    async def test_refresh_token_rejected_as_access(self, client: AsyncClient, alice):
        tokens = await login(client, "alice", "secret123!")
        res = await client.get(f"{URL}/me", headers=auth_header(tokens["refresh_token"]))
        assert res.status_code == 401


class TestRefresh:
    """토큰 갱신 및 로그아웃 테스트."""

    async def test_refresh(self, client: AsyncClient, alice):
        tokens = await login(client, "alice", "secret123!")
        res = await client.post(f"{URL}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        new_tokens = res.json()
        assert new_tokens["refresh_token"] != tokens["refresh_token"]

        # 이전 리프레시 토큰은 폐기됨 (The old refresh token is rotated out)
        res2 = await client.post(f"{URL}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res2.status_code == 401

    async def test_refresh_unknown_token(self, client: AsyncClient, alice):
        forged = create_refresh_token({"sub": str(alice.id)})
        res = await client.post(f"{URL}/refresh", json={"refresh_token": forged})
        assert res.status_code == 401

    async def test_refresh_garbage(self, client: AsyncClient):
        res = await client.post(f"{URL}/refresh", json={"refresh_token": "garbage"})
        assert res.status_code == 401

    async def test_logout_revokes(self, client: AsyncClient, alice):
        tokens = await login(client, "alice", "secret123!")
        res = await client.post(f"{URL}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204

        res2 = await client.post(f"{URL}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res2.status_code == 401


async def test_health(client: AsyncClient):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


class TestRegisterRace:
    """동시 가입 — 사전 확인을 통과한 중복 삽입도 409."""

    async def test_unique_violation_is_conflict(self, client: AsyncClient, alice, monkeypatch):
        async def _not_found(*args, **kwargs) -> bool:
            return False

        monkeypatch.setattr(user_repository, "exists", _not_found)
        res = await client.post(f"{URL}/register", json={
            "username": "alice", "email": "twin@test.com", "password": "pw123456",
        })
        assert res.status_code == 409

        monkeypatch.undo()
        token = (await login(client, "alice", "secret123!"))["access_token"]
        me = await client.get(f"{URL}/me", headers=auth_header(token))
        assert me.json()["email"] == "alice@test.com"
