"""앱 API 라우터 패키지 — 소유자 범위 레코드 엔드포인트 통합.

App API Router package — Aggregates the owner-scoped record endpoints.

Included routers:
    - todo: 내 할 일 (/todo)
    - apple: 내 사과 (/apple)
"""

from fastapi import APIRouter

from app.api.resources import build_owner_router
from app.schemas.record import (
    AppleCreate,
    AppleResponse,
    AppleUpdate,
    TodoCreate,
    TodoResponse,
    TodoUpdate,
)
from app.services.resource_service import apple_service, todo_service

app_router: APIRouter = APIRouter()

app_router.include_router(build_owner_router(todo_service, TodoCreate, TodoUpdate, TodoResponse))
app_router.include_router(build_owner_router(apple_service, AppleCreate, AppleUpdate, AppleResponse))
