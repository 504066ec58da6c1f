"""인증 레포지토리 — 리프레시 토큰 저장소.

Auth Repository — Persisted refresh tokens. A user holds at most one live
refresh token; issuing a new pair replaces the stored one.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.token import RefreshToken


class AuthRepository:
    """리프레시 토큰 쿼리 (Refresh token queries)."""

    async def create_refresh_token(
        self, db: AsyncSession, user_id: UUID, token: str, expires_at: datetime
    ) -> RefreshToken:
        stored: RefreshToken = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        db.add(stored)
        await db.flush()
        return stored

    async def get_refresh_token(self, db: AsyncSession, token: str) -> RefreshToken | None:
        result = await db.execute(select(RefreshToken).where(RefreshToken.token == token))
        return result.scalar_one_or_none()

    async def delete_refresh_token(self, db: AsyncSession, token: str) -> bool:
        """토큰 문자열로 삭제합니다. 존재하지 않으면 False (False when no such token)."""
        result = await db.execute(delete(RefreshToken).where(RefreshToken.token == token))
        await db.flush()
        return bool(result.rowcount)

    async def delete_user_refresh_tokens(self, db: AsyncSession, user_id: UUID) -> None:
        """사용자의 모든 리프레시 토큰 삭제 (Revoke every refresh token of a user)."""
        await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        await db.flush()


auth_repository: AuthRepository = AuthRepository()
