"""
Bark push notification client.

Bark delivers iOS notifications through a GET request whose path holds
the device key, title and body:
`{api}/{key}/{title}/{body}?sound=...&group=...&url=...`

Transport failures (connect errors, timeouts) are retried with
exponential backoff; HTTP error responses are not.

Dependencies: httpx, tenacity
System role: Outbound HTTP adapter for staff push alerts
"""

import logging
from urllib.parse import quote

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from support_desk.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class BarkClient:
    """Thin async client for a Bark server."""

    def __init__(
        self,
        key: str,
        api_url: str = "https://api.day.app",
        sound: str = "minuet",
        group: str = "chat-message",
        timeout: float = 10.0,
        max_attempts: int = 3,
        retry_wait: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            key: Bark device key
            api_url: Bark server base URL
            sound: Notification sound name
            group: Notification group
            timeout: Request timeout in seconds
            max_attempts: Tries per push on transport errors
            retry_wait: Initial backoff in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self._key = key
        self._api_url = api_url.rstrip("/")
        self._sound = sound
        self._group = group
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._retry_wait = retry_wait
        self._transport = transport

    def build_url(self, title: str, body: str) -> str:
        """Path portion of a push request with title and body URL-encoded."""
        return f"{self._api_url}/{quote(self._key, safe='')}/{quote(title, safe='')}/{quote(body, safe='')}"

    async def push(self, title: str, body: str, url: str | None = None) -> None:
        """
        Send one notification.

        Args:
            title: Notification title
            body: Notification body
            url: Link opened when the notification is tapped

        Raises:
            NotificationError: On transport failure or non-2xx response
        """
        params = {"sound": self._sound, "group": self._group}
        if url:
            params["url"] = url

        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._retry_wait, max=5) + wait_random(0, self._retry_wait),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:push - Retry {retry_state.attempt_number}/{self._max_attempts} after transport error"
            ),
            reraise=True,
        )
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                async for attempt in retrying:
                    with attempt:
                        response = await client.get(self.build_url(title, body), params=params)
                        response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                "Bark rejected notification",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise NotificationError(
                "Bark request failed",
                details={"error": str(e)},
            ) from e
