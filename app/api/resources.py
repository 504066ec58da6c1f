"""소유 레코드 라우터 팩토리 — 레코드 종류별 CRUD 엔드포인트 생성.

Owned Record Router factory — Builds the CRUD endpoints for one record kind.
The same endpoint set is generated for every kind; the route segment is the
lower-cased kind name (``/todo``, ``/apple``).

Owner routes (mounted under /api/v1/app):
    GET    /{kind}           내 레코드 목록 (List mine)
    GET    /{kind}/{id}      내 레코드 조회 (Get mine)
    POST   /{kind}           레코드 생성 (Create)
    PUT    /{kind}           레코드 수정, 본문에 id 포함 (Update, id in body)
    DELETE /{kind}/{id}      레코드 삭제 (Delete)

Admin routes (mounted under /api/v1/admin):
    GET    /{kind}           전체 레코드 목록 (List all)
    GET    /{kind}/{id}      임의 레코드 조회 (Get any)
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_admin
from app.database import get_db
from app.models.user import User
from app.services.notification_hub import NotificationHub, get_notification_hub
from app.services.resource_service import ResourceService


def build_owner_router(
    service: ResourceService,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    response_schema: type[BaseModel],
) -> APIRouter:
    """소유자용 CRUD 라우터를 생성합니다.

    Build the owner-scoped router for one record kind.

    Args:
        service: 레코드 서비스 (Service for the kind)
        create_schema: 생성 요청 스키마 (Create request schema)
        update_schema: 수정 요청 스키마 (Update request schema, carries id)
        response_schema: 응답 스키마 (Response schema)

    Returns:
        APIRouter: /{kind} 접두사가 붙은 라우터 (Router prefixed with /{kind})
    """
    kind: str = service.kind
    router: APIRouter = APIRouter(prefix=f"/{kind.lower()}", tags=[kind])

    @router.get("", response_model=list[response_schema], summary=f"List my {kind} records")
    async def list_mine(
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> list[BaseModel]:
        return await service.list_mine(db, current_user)

    @router.get("/{record_id}", response_model=response_schema, summary=f"Get one of my {kind} records")
    async def get_mine(
        record_id: str,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> BaseModel:
        return await service.get_mine(db, current_user, record_id)

    @router.post("", response_model=response_schema, status_code=201, summary=f"Create a {kind}")
    async def create(
        data: create_schema,  # type: ignore[valid-type]
        db: Annotated[AsyncSession, Depends(get_db)],
        hub: Annotated[NotificationHub, Depends(get_notification_hub)],
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> BaseModel:
        return await service.create(db, hub, current_user, data)

    @router.put("", response_model=response_schema, summary=f"Replace a {kind}")
    async def update(
        data: update_schema,  # type: ignore[valid-type]
        db: Annotated[AsyncSession, Depends(get_db)],
        hub: Annotated[NotificationHub, Depends(get_notification_hub)],
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> BaseModel:
        return await service.update(db, hub, current_user, data)

    @router.delete("/{record_id}", response_model=response_schema, summary=f"Delete a {kind}")
    async def delete(
        record_id: str,
        db: Annotated[AsyncSession, Depends(get_db)],
        hub: Annotated[NotificationHub, Depends(get_notification_hub)],
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> BaseModel:
        return await service.delete(db, hub, current_user, record_id)

    return router


def build_admin_router(
    service: ResourceService,
    response_schema: type[BaseModel],
) -> APIRouter:
    """관리자용 조회 라우터를 생성합니다 (Admin-only read router for one record kind)."""
    kind: str = service.kind
    router: APIRouter = APIRouter(prefix=f"/{kind.lower()}", tags=[f"Admin {kind}"])

    @router.get("", response_model=list[response_schema], summary=f"List every {kind}")
    async def list_all(
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
    ) -> list[BaseModel]:
        return await service.list_all(db)

    @router.get("/{record_id}", response_model=response_schema, summary=f"Get any {kind}")
    async def get_any(
        record_id: str,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_admin)],
    ) -> BaseModel:
        return await service.get_any(db, record_id)

    return router
