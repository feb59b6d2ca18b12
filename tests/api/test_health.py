"""
Test suite for health check endpoints.

System role: Verification of liveness and dependency probes
"""

from unittest.mock import AsyncMock

from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.boundary.db import get_async_db


class TestHealth:
    """Test suite for /health routes."""

    def test_health_check(self, client) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "message": "Server Healthy"}

    def test_db_health_ok(self, client) -> None:
        db = AsyncMock(spec=AsyncSession)
        client.app.dependency_overrides[get_async_db] = lambda: db

        response = client.get("/health/db")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        db.execute.assert_awaited_once()

    def test_db_health_failure_is_503(self, client) -> None:
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = ConnectionError("refused")
        client.app.dependency_overrides[get_async_db] = lambda: db

        response = client.get("/health/db")

        assert response.status_code == 503
        assert response.json() == {"status": "unhealthy", "message": "Database unavailable"}

    def test_realtime_reports_connection_counts(self, client, mock_event_hub) -> None:
        mock_event_hub.get_connection_stats.return_value = {
            "sessionConnections": 3,
            "staffConnections": 1,
            "totalSessions": 2,
        }

        response = client.get("/health/realtime")

        assert response.status_code == 200
        body = response.json()
        assert body["session_connections"] == 3
        assert body["staff_connections"] == 1
        assert body["total_sessions"] == 2

    def test_correlation_id_is_echoed(self, client) -> None:
        response = client.get("/health", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_correlation_id_is_generated(self, client) -> None:
        response = client.get("/health")

        assert response.headers["X-Correlation-ID"]
