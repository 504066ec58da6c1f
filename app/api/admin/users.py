"""관리자 사용자 라우터 — 사용자 목록 조회.

Admin User Router — Lists every account with its roles.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.auth import UserResponse
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[UserResponse]:
    """전체 사용자 목록을 조회합니다 (List all users with their roles)."""
    return await auth_service.list_users(db)
