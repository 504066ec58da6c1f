"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header; the event stream
       also accepts an ``access_token`` query parameter)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    3. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (Only the "sub" claim is read; the local user row is looked up)
    4. 사용자 활성 상태를 확인 (User active status is verified)

Authorization Flow (require_admin):
    역할 목록을 매 요청마다 DB에서 조회하여 관리자 역할 포함 여부를 확인
    (Role names are read from the database on every request and must include
    settings.ADMIN_ROLE_NAME, otherwise 403)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — Authorization 헤더에서 JWT 토큰 추출
security: HTTPBearer = HTTPBearer()
optional_security: HTTPBearer = HTTPBearer(auto_error=False)


async def resolve_user(db: AsyncSession, token: str) -> User:
    """액세스 토큰에서 사용자를 조회합니다.

    Decode an access token and return the active user named by its "sub".

    Raises:
        HTTPException(401): 토큰이 유효하지 않거나 사용자가 없거나 비활성
                            (Invalid/expired token, or user missing/inactive)
    """
    try:
        payload: dict = decode_token(token)
        # 토큰 타입 검증 — Reject refresh tokens used as access tokens
        if payload.get("type") != "access":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")
        subject: str | None = payload.get("sub")
        if subject is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        user_id = UUID(subject)
    except HTTPException:
        raise
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Authorization 헤더의 JWT로 현재 사용자를 반환합니다 (Current user from the bearer header)."""
    return await resolve_user(db, credentials.credentials)


async def get_stream_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_security)] = None,
    access_token: Annotated[str | None, Query()] = None,
) -> User:
    """이벤트 스트림용 사용자 인증 — 헤더 또는 쿼리 파라미터.

    EventSource clients cannot set headers, so the stream also accepts the
    token as ``?access_token=``.
    """
    token: str | None = credentials.credentials if credentials is not None else access_token
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return await resolve_user(db, token)


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """관리자 역할 검사 의존성.

    Allow the request only if the caller currently holds the administrator
    role.

    Raises:
        HTTPException(403): 관리자가 아닐 때 (Caller is not an administrator)
    """
    role_names: list[str] = await user_repository.get_role_names(db, current_user.id)
    if settings.ADMIN_ROLE_NAME not in role_names:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    return current_user
