"""
End-to-end conversation flow over HTTP.

Runs the real application against in-memory SQLite, a live EventHub,
local file storage and a Bark client on a mock transport.

System role: Verification of the visitor/staff round trip
"""

import httpx
import pytest

from support_desk.api.deps import get_event_hub, get_notification_service, get_upload_service
from support_desk.application.services import NotificationService, UploadService
from support_desk.boundary.db import get_async_db
from support_desk.boundary.push.bark_client import BarkClient
from support_desk.boundary.storage.local_storage import LocalFileStorage
from support_desk.configs.storage import StorageSettings
from support_desk.core.realtime import EventHub
from support_desk.main import create_app
from support_desk.models.streaming import StreamEventType


@pytest.fixture
def bark_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def event_hub() -> EventHub:
    return EventHub(write_timeout=0.5)


@pytest.fixture
async def api_client(test_async_db, event_hub, bark_requests, tmp_path):
    """HTTP client bound to the app with test backends wired in."""

    def bark_handler(request: httpx.Request) -> httpx.Response:
        bark_requests.append(request)
        return httpx.Response(200, json={"code": 200})

    async def override_db():
        yield test_async_db

    upload_service = UploadService(LocalFileStorage(tmp_path), StorageSettings(upload_dir=str(tmp_path)))
    notification_service = NotificationService(
        BarkClient(key="device", api_url="https://bark.test", transport=httpx.MockTransport(bark_handler)),
        staff_url_base="https://desk.test/staff",
    )

    app = create_app()
    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[get_event_hub] = lambda: event_hub
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    app.dependency_overrides[get_notification_service] = lambda: notification_service

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def drain(connection) -> list:
    events = []
    while (event := await connection.receive(timeout=0.05)) is not None:
        events.append(event)
    return events


class TestConversationFlow:
    """Visitor writes, staff reads and replies, queue moves."""

    @pytest.mark.asyncio
    async def test_full_round_trip(self, api_client, event_hub, bark_requests) -> None:
        # Visitor opens a session and joins the queue
        response = await api_client.post("/api/chat/session", json={"visitorName": "Ana"})
        assert response.status_code == 200
        chat = response.json()["data"]
        session_id = chat["id"]
        assert chat["visitorName"] == "Ana"
        assert chat["queuePosition"] == 1

        staff_stream = event_hub.add_staff_client()
        visitor_stream = event_hub.add_session_client(session_id)
        await drain(staff_stream)
        await drain(visitor_stream)

        # Visitor writes; staff hear about it live and by push
        response = await api_client.post(
            "/api/chat/messages", json={"sessionId": session_id, "content": "Can you build a shop?"}
        )
        assert response.status_code == 200
        staff_events = await drain(staff_stream)
        assert [e.event for e in staff_events] == [StreamEventType.MESSAGE, StreamEventType.SESSION_UPDATE]
        assert staff_events[1].data["session"]["unreadByStaff"] == 1
        assert len(await drain(visitor_stream)) == 2

        [push] = bark_requests
        assert push.url.path == "/device/💬 Ana/Can you build a shop?"
        assert push.url.params["url"] == f"https://desk.test/staff?s={session_id}"

        unread = await api_client.get("/api/staff/unread")
        assert unread.json()["data"]["count"] == 1

        # Staff read and reply
        assert (await api_client.put(f"/api/staff/read/{session_id}")).json() == {"success": True}
        assert (await api_client.get("/api/staff/unread")).json()["data"]["count"] == 0

        reply = await api_client.post(
            "/api/staff/messages", json={"sessionId": session_id, "content": "Yes, let's talk scope."}
        )
        assert reply.status_code == 200
        assert len(bark_requests) == 1

        history = (await api_client.get("/api/chat/messages", params={"sessionId": session_id})).json()
        assert [m["senderType"] for m in history["data"]] == ["visitor", "staff"]
        assert [m["isRead"] for m in history["data"]] == [True, False]
        assert history["hasMore"] is False

        resumed = (await api_client.post("/api/chat/session", json={"sessionId": session_id})).json()["data"]
        assert resumed["unreadByVisitor"] == 1
        assert resumed["visitorName"] == "Ana"

        # Work starts; the session leaves the queue
        status = await api_client.put(
            f"/api/staff/sessions/{session_id}/status", json={"taskStatus": "in_progress"}
        )
        assert status.status_code == 200
        queue = (await api_client.get(f"/api/chat/queue/{session_id}")).json()["data"]
        assert queue == {"position": 0, "estimatedWaitMinutes": 0, "totalInQueue": 0}

        staff_queue = (await api_client.get("/api/staff/queue")).json()["data"]
        assert [(q["sessionId"], q["position"]) for q in staff_queue] == [(session_id, 0)]

    @pytest.mark.asyncio
    async def test_upload_round_trip(self, api_client) -> None:
        session_id = (await api_client.post("/api/chat/session")).json()["data"]["id"]

        response = await api_client.post(
            "/api/chat/upload",
            data={"sessionId": session_id},
            files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 200
        message = response.json()["data"]
        assert message["contentType"] == "file"
        assert message["fileName"] == "notes.pdf"
        assert message["fileSize"] == 8

        download = await api_client.get(message["content"])
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4"
        assert download.headers["content-type"] == "application/pdf"
        assert download.headers["cache-control"] == "public, max-age=31536000"

    @pytest.mark.asyncio
    async def test_message_to_unknown_session_is_404(self, api_client, session_id) -> None:
        response = await api_client.post(
            "/api/chat/messages", json={"sessionId": str(session_id), "content": "hello?"}
        )

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Session not found"}

    @pytest.mark.asyncio
    async def test_missing_upload_is_404(self, api_client) -> None:
        response = await api_client.get("/uploads/does-not-exist.png")

        assert response.status_code == 404
        assert response.json()["error"] == "File not found"

    @pytest.mark.asyncio
    async def test_timestamps_are_utc_instants(self, api_client, event_hub) -> None:
        # Arrange
        chat = (await api_client.post("/api/chat/session", json={"visitorName": "Ana"})).json()["data"]
        staff_stream = event_hub.add_staff_client()
        await drain(staff_stream)

        # Act
        sent = (
            await api_client.post("/api/chat/messages", json={"sessionId": chat["id"], "content": "hi"})
        ).json()["data"]
        history = (await api_client.get("/api/chat/messages", params={"sessionId": chat["id"]})).json()["data"]
        listed = (await api_client.get("/api/staff/sessions")).json()["data"]
        message_event, update_event = await drain(staff_stream)

        # Assert
        stamps = [
            chat["createdAt"],
            chat["updatedAt"],
            sent["createdAt"],
            history[0]["createdAt"],
            listed[0]["lastMessageAt"],
            listed[0]["lastMessage"]["createdAt"],
            message_event.data["message"]["createdAt"],
            update_event.data["session"]["lastMessageAt"],
        ]
        for stamp in stamps:
            assert stamp.endswith(("Z", "+00:00")), stamp
