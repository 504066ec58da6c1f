"""실시간 알림 허브 — 모든 구독자에게 레코드 변경 이벤트를 전송.

Notification hub — in-process broadcaster for record change events.

Every committed mutation is announced as ``<Kind>Added``, ``<Kind>Removed``
or ``<Kind>Updated`` carrying the JSON record. The channel is not scoped by
owner: every subscriber receives every event for every user's records.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from app.config import settings

logger = logging.getLogger(__name__)


def format_event(event_name: str, data: dict[str, Any]) -> str:
    """SSE 프레임 문자열을 만듭니다 (Render one Server-Sent Events frame)."""
    return f"event: {event_name}\ndata: {json.dumps(data)}\n\n"


class NotificationHub:
    """구독자 연결을 관리하고 이벤트를 브로드캐스트합니다.

    Each subscriber gets its own bounded asyncio.Queue. Broadcasting pushes
    the frame to all queues without waiting for acknowledgement; a subscriber
    whose queue is full is disconnected.
    """

    def __init__(self, queue_size: int | None = None) -> None:
        self._queue_size: int = queue_size if queue_size is not None else settings.HUB_QUEUE_SIZE
        self._queues: list[asyncio.Queue[str | None]] = []

    def connect(self) -> asyncio.Queue[str | None]:
        """새 구독자 큐를 등록합니다 (Register a subscriber queue)."""
        queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=self._queue_size)
        self._queues.append(queue)
        return queue

    def disconnect(self, queue: asyncio.Queue[str | None]) -> None:
        if queue in self._queues:
            self._queues.remove(queue)

    async def subscribe(self) -> AsyncGenerator[str, None]:
        """이벤트를 구독합니다. SSE 형식 문자열을 yield합니다.

        Subscribe to events. The generator unsubscribes when the client
        disconnects or the hub shuts down.
        """
        queue = self.connect()
        try:
            while True:
                frame = await queue.get()
                if frame is None:
                    break
                yield frame
        finally:
            self.disconnect(queue)

    async def broadcast(self, event_name: str, data: dict[str, Any]) -> None:
        """모든 구독자에게 이벤트를 전송합니다 (Fire-and-forget fan-out to every subscriber)."""
        frame = format_event(event_name, data)
        dead_queues: list[asyncio.Queue[str | None]] = []

        for queue in self._queues:
            try:
                queue.put_nowait(frame)
            except asyncio.QueueFull:
                dead_queues.append(queue)
                logger.warning("Hub subscriber queue full, disconnecting")

        for queue in dead_queues:
            self.disconnect(queue)
            # 가득 찬 큐에서 하나를 비우고 종료 신호를 넣음
            queue.get_nowait()
            queue.put_nowait(None)

        logger.debug("Broadcast %s to %d subscribers", event_name, len(self._queues))

    async def shutdown(self) -> None:
        """모든 구독자 연결을 종료합니다 (Disconnect every subscriber)."""
        for queue in self._queues:
            try:
                queue.put_nowait(None)
            except asyncio.QueueFull:
                queue.get_nowait()
                queue.put_nowait(None)
        self._queues.clear()

    @property
    def client_count(self) -> int:
        return len(self._queues)


# 싱글턴 인스턴스 — Singleton instance
notification_hub: NotificationHub = NotificationHub()


def get_notification_hub() -> NotificationHub:
    """FastAPI 의존성 — 애플리케이션 허브 반환 (Dependency returning the application hub)."""
    return notification_hub
