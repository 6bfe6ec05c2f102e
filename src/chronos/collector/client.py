"""Async HTTP client for POST /sync."""
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class SyncError(RuntimeError):
    """Upload failed (network error or non-2xx response)."""


class SyncAuthError(SyncError):
    """Server rejected the token (401). A new token is needed."""


class SyncClient:
    """
    Uploads batches to the Chronos server.

    `transport` is passed through to httpx (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        server_url: str,
        token: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._server_url = server_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    async def push(self, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        POST one batch. Returns the server's {"message", "saved", "total"}.

        Raises:
            SyncAuthError: on 401.
            SyncError: on any other failure; the whole batch should be retried.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._server_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(
                    "/sync",
                    json={"logs": entries},
                    headers={"Authorization": f"Bearer {self._token}"},
                )
        except httpx.HTTPError as exc:
            raise SyncError(f"Sync request failed: {exc}") from exc

        if resp.status_code == 401:
            raise SyncAuthError("Sync token rejected; run `python -m chronos setup` again")
        if resp.is_error:
            raise SyncError(f"Sync failed: HTTP {resp.status_code}")
        return resp.json()
