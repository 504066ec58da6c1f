"""실시간 이벤트 라우터 — Server-Sent Events 스트림.

Realtime event router — Server-Sent Events stream of record changes.
Every authenticated subscriber receives every ``<Kind>Added``,
``<Kind>Removed`` and ``<Kind>Updated`` event, regardless of record owner.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_stream_user
from app.database import get_db
from app.models.user import User
from app.services.notification_hub import NotificationHub, get_notification_hub

router: APIRouter = APIRouter()


@router.get("/events")
async def event_stream(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_stream_user)],
    hub: Annotated[NotificationHub, Depends(get_notification_hub)],
) -> StreamingResponse:
    """레코드 변경 이벤트 스트림에 연결합니다.

    Clients connect via EventSource and receive change events until they
    disconnect or the server shuts down.
    """
    # 스트림이 열려 있는 동안 DB 연결을 점유하지 않도록 반환
    await db.close()
    return StreamingResponse(
        hub.subscribe(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
