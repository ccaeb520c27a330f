"""
Unit tests for the shared JSON transport: status mapping and error conversion.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from app.services.lookup.interfaces import ProviderError, ProviderRateLimitError, ProviderTimeoutError
from app.services.lookup.transport import JsonHttpClient


def session_returning(status=200, payload=None, reason="OK", json_error=None):
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.json = AsyncMock(return_value=payload, side_effect=json_error)

    session = MagicMock()
    session.get.return_value.__aenter__.return_value = response
    return session


def failing_session(error):
    session = MagicMock()
    session.get.return_value.__aenter__.side_effect = error
    return session


@pytest.fixture
def client():
    return JsonHttpClient("primary_catalog", timeout=1.0)


class TestJsonHttpClient:

    @pytest.mark.asyncio
    async def test_decodes_body(self, client):
        session = session_returning(payload={"product": {"product_name": "Syrup"}})

        with patch.object(client, "_get_session", AsyncMock(return_value=session)):
            data = await client.get_json("https://off/product/1.json", params={"a": "b"})

        assert data == {"product": {"product_name": "Syrup"}}
        session.get.assert_called_once_with("https://off/product/1.json", params={"a": "b"}, headers=None)

    @pytest.mark.asyncio
    async def test_404_is_none(self, client):
        with patch.object(client, "_get_session", AsyncMock(return_value=session_returning(404))):
            assert await client.get_json("https://off/missing.json") is None

    @pytest.mark.asyncio
    async def test_429_is_rate_limit(self, client):
        with patch.object(client, "_get_session", AsyncMock(return_value=session_returning(429))):
            with pytest.raises(ProviderRateLimitError):
                await client.get_json("https://off/1.json", barcode="1")

    @pytest.mark.asyncio
    async def test_server_error(self, client):
        session = session_returning(503, reason="Service Unavailable")

        with patch.object(client, "_get_session", AsyncMock(return_value=session)):
            with pytest.raises(ProviderError) as exc_info:
                await client.get_json("https://off/1.json", barcode="1")

        assert "HTTP 503" in str(exc_info.value)
        assert exc_info.value.source == "primary_catalog"

    @pytest.mark.asyncio
    async def test_network_error(self, client):
        session = failing_session(aiohttp.ClientConnectionError("refused"))

        with patch.object(client, "_get_session", AsyncMock(return_value=session)):
            with pytest.raises(ProviderError):
                await client.get_json("https://off/1.json")

    @pytest.mark.asyncio
    async def test_timeout(self, client):
        with patch.object(client, "_get_session", AsyncMock(return_value=failing_session(asyncio.TimeoutError()))):
            with pytest.raises(ProviderTimeoutError):
                await client.get_json("https://off/1.json")

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        session = session_returning(json_error=ValueError("Expecting value"))

        with patch.object(client, "_get_session", AsyncMock(return_value=session)):
            with pytest.raises(ProviderError):
                await client.get_json("https://off/1.json")

    @pytest.mark.asyncio
    async def test_close_without_session(self, client):
        await client.close()
