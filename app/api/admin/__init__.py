"""관리자 API 라우터 패키지 — 관리자 전용 엔드포인트 통합.

Admin API Router package — Aggregates administrator-only endpoints.

Included routers:
    - users: 사용자 목록 (User listing)
    - todo: 전체 할 일 조회 (Every Todo, any owner)
    - apple: 전체 사과 조회 (Every Apple, any owner)
"""

from fastapi import APIRouter

from app.api.admin.users import router as users_router
from app.api.resources import build_admin_router
from app.schemas.record import AppleResponse, TodoResponse
from app.services.resource_service import apple_service, todo_service

admin_router: APIRouter = APIRouter()

admin_router.include_router(users_router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(build_admin_router(todo_service, TodoResponse))
admin_router.include_router(build_admin_router(apple_service, AppleResponse))
