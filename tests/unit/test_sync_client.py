"""Tests for the collector's HTTP sync client."""
import json

import httpx
import pytest

from chronos.collector.client import SyncAuthError, SyncClient, SyncError

ENTRIES = [{"timestamp": "2025-09-02T13:02:55", "type": "keyboard", "data": {}}]


def make_client(handler) -> SyncClient:
    return SyncClient("https://chronos.test/", "tok-123", transport=httpx.MockTransport(handler))


class TestPush:
    @pytest.mark.asyncio
    async def test_posts_batch_with_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": "ok", "saved": 1, "total": 1})

        result = await make_client(handler).push(ENTRIES)

        assert seen["url"] == "https://chronos.test/sync"
        assert seen["auth"] == "Bearer tok-123"
        assert seen["body"] == {"logs": ENTRIES}
        assert result["saved"] == 1

    @pytest.mark.asyncio
    async def test_401_raises_auth_error(self):
        client = make_client(lambda request: httpx.Response(401, json={"detail": "Invalid token"}))
        with pytest.raises(SyncAuthError):
            await client.push(ENTRIES)

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        client = make_client(lambda request: httpx.Response(500))
        with pytest.raises(SyncError):
            await client.push(ENTRIES)

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SyncError):
            await make_client(handler).push(ENTRIES)
