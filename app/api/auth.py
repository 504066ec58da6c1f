"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 프로필 조회.

Auth Router — Registration, login, token refresh, logout and profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """회원가입 — 역할 없는 일반 계정 생성.

    Register a new account without roles.
    """
    result: UserResponse = await auth_service.register(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 액세스/리프레시 토큰 발급."""
    result: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """로그아웃 — 리프레시 토큰 폐기."""
    await auth_service.logout(db, data.refresh_token)
    await db.commit()


@router.get("/me", response_model=UserResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """현재 사용자 프로필 조회 (Profile of the authenticated user, with roles)."""
    return await auth_service.get_me(db, current_user)
