"""알림 허브 및 이벤트 스트림 테스트.

Notification hub tests — fan-out to every subscriber, slow-subscriber
disconnection, shutdown, and authentication of the event stream route.
"""

import asyncio
import json

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.hub import event_stream
from app.services.notification_hub import NotificationHub, format_event


class TestNotificationHub:
    """허브 단위 테스트."""

    async def test_broadcast_reaches_every_subscriber(self):
        hub = NotificationHub(queue_size=10)
        first, second = hub.connect(), hub.connect()

        await hub.broadcast("TodoAdded", {"id": "1", "title": "buy milk"})

        expected = format_event("TodoAdded", {"id": "1", "title": "buy milk"})
        assert first.get_nowait() == expected
        assert second.get_nowait() == expected

    async def test_frame_format(self):
        frame = format_event("AppleRemoved", {"id": "a"})
        event_line, data_line, _, _ = frame.split("\n")
        assert event_line == "event: AppleRemoved"
        assert json.loads(data_line.removeprefix("data: ")) == {"id": "a"}

    async def test_broadcast_without_subscribers(self):
        hub = NotificationHub()
        await hub.broadcast("TodoUpdated", {"id": "1"})
        assert hub.client_count == 0

    async def test_full_queue_disconnects_subscriber(self):
        hub = NotificationHub(queue_size=1)
        slow = hub.connect()

        await hub.broadcast("TodoAdded", {"id": "1"})
        await hub.broadcast("TodoAdded", {"id": "2"})

        assert hub.client_count == 0
        assert slow.get_nowait() is None

    async def test_subscribe_yields_frames_until_shutdown(self):
        hub = NotificationHub()
        stream = hub.subscribe()
        pending = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0.01)
        assert hub.client_count == 1

        await hub.broadcast("TodoAdded", {"id": "1"})
        assert (await pending).startswith("event: TodoAdded")

        await hub.shutdown()
        frames = [frame async for frame in stream]
        assert frames == []
        assert hub.client_count == 0


class TestEventStreamRoute:
    """이벤트 스트림 라우트 테스트 — 인증과 프레임 수신."""

    async def test_requires_token(self, client: AsyncClient):
        res = await client.get("/api/v1/hub/events")
        assert res.status_code == 401

    async def test_rejects_invalid_query_token(self, client: AsyncClient):
        res = await client.get("/api/v1/hub/events", params={"access_token": "bogus"})
        assert res.status_code == 401

    async def test_connected_stream_receives_frames(self, db: AsyncSession, alice, hub):
        response = await event_stream(db=db, current_user=alice, hub=hub)
        assert response.media_type == "text/event-stream"

        frames = response.body_iterator
        pending = asyncio.ensure_future(frames.__anext__())
        await asyncio.sleep(0.01)
        assert hub.client_count == 1

        await hub.broadcast("TodoAdded", {"id": "x"})
        assert (await pending).startswith("event: TodoAdded\n")

        await hub.shutdown()
        await frames.aclose()
        assert hub.client_count == 0
