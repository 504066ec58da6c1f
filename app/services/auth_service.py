"""인증 서비스 — 회원가입, 로그인, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for registration, login, token refresh and
user profile retrieval.
"""

from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.token import RefreshToken
from app.models.user import User
from app.repositories.auth_repository import auth_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.utils.exceptions import DuplicateError, UnauthorizedError
from app.utils.jwt import create_access_token, create_refresh_token, decode_token
from app.utils.password import hash_password, verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def to_user_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다 (user_roles must be loaded)."""
        return UserResponse(
            id=user.id,
            username=user.username,
            email=user.email,
            roles=user.role_names,
        )

    async def _generate_tokens(self, db: AsyncSession, user: User) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh token pair and persist the refresh token,
        replacing any the user already had.
        """
        payload: dict[str, str | list[str]] = {
            "sub": str(user.id),
            "roles": user.role_names,
        }
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 기존 리프레시 토큰 정리 — Clean up old refresh tokens to prevent accumulation
        await auth_repository.delete_user_refresh_tokens(db, user.id)

        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )
        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def register(self, db: AsyncSession, data: RegisterRequest) -> UserResponse:
        """회원가입을 처리합니다.

        Create a user account without any roles.

        Raises:
            DuplicateError: 같은 사용자명이 이미 존재할 때 (Username already taken)
        """
        if await user_repository.exists(db, {"username": data.username}):
            raise DuplicateError("Username already exists")

        try:
            user: User = await user_repository.create(
                db,
                {
                    "username": data.username,
                    "email": data.email,
                    "password_hash": hash_password(data.password),
                },
            )
        except IntegrityError as exc:
            # 동시 가입 — exists() 확인 이후 다른 요청이 먼저 삽입한 경우
            await db.rollback()
            raise DuplicateError("Username already exists") from exc
        created: User | None = await user_repository.get_with_roles(db, user.id)
        assert created is not None
        return self.to_user_response(created)

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """로그인을 처리합니다.

        Raises:
            UnauthorizedError: 잘못된 인증 정보이거나 비활성 계정일 때
                               (Invalid credentials or deactivated account)
        """
        user: User | None = await user_repository.get_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid username or password")
        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")

        return await self._generate_tokens(db, user)

    async def refresh_tokens(self, db: AsyncSession, data: RefreshRequest) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Exchange a stored, unexpired refresh token for a new token pair.

        Raises:
            UnauthorizedError: 토큰이 유효하지 않거나 폐기/만료되었을 때
                               (Token invalid, revoked or expired)
        """
        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid or expired refresh token")
        if payload.get("type") != "refresh":
            raise UnauthorizedError("Invalid token type")

        stored: RefreshToken | None = await auth_repository.get_refresh_token(db, data.refresh_token)
        if stored is None:
            raise UnauthorizedError("Refresh token has been revoked")
        expires_at: datetime = stored.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token expired")

        user: User | None = await user_repository.get_with_roles(db, stored.user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")

        return await self._generate_tokens(db, user)

    async def logout(self, db: AsyncSession, refresh_token: str) -> None:
        """리프레시 토큰을 폐기합니다 (Revoke a refresh token; unknown tokens are ignored)."""
        await auth_repository.delete_refresh_token(db, refresh_token)

    async def get_me(self, db: AsyncSession, current_user: User) -> UserResponse:
        user: User | None = await user_repository.get_with_roles(db, current_user.id)
        if user is None:
            raise UnauthorizedError("User not found or inactive")
        return self.to_user_response(user)

    async def list_users(self, db: AsyncSession) -> list[UserResponse]:
        """전체 사용자 목록을 역할과 함께 조회합니다 — 관리자 전용."""
        users: list[User] = await user_repository.list_with_roles(db)
        return [self.to_user_response(u) for u in users]


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
