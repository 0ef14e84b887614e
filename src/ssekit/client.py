"""HTTP client for a running ssekit server.

Wraps the push API: listing sessions, pushing events and closing sessions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ServerError(Exception):
    """Raised when a server API call fails."""

    def __init__(self, message: str, status_code: int = 0, detail: str = ""):
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ServerClient:
    """HTTP client for the ssekit server API.

    All methods are async and raise ServerError on failure.
    """

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(30.0),
            transport=transport,
        )

    async def list_sessions(self) -> dict[str, Any]:
        """GET /api/events/sessions"""
        return await self._request("GET", "/api/events/sessions")

    async def push(self, session_id: str, event: str, data: Any) -> dict[str, Any]:
        """Push one event to an open session.

        POST /api/events/{session_id}

        Returns:
            Dict with 'status', 'session_id' and 'message_id' keys.

        Raises:
            ServerError: 404 for unknown sessions, 410 for closed ones.
        """
        return await self._request(
            "POST",
            f"/api/events/{session_id}",
            json={"event": event, "data": data},
        )

    async def close_session(self, session_id: str) -> None:
        """DELETE /api/events/{session_id}"""
        await self._request("DELETE", f"/api/events/{session_id}")

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/api/health")

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ServerError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            detail = ""
            try:
                detail = response.json().get("detail", "")
            except ValueError:
                detail = response.text
            raise ServerError(
                f"{method} {path} failed with {response.status_code}",
                status_code=response.status_code,
                detail=str(detail),
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()
