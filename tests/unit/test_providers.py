"""
Unit tests for structured source adapters.
The HTTP transport is mocked; adapters must never raise.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from app.services.lookup.config import LookupConfig
from app.services.lookup.interfaces import (
    ProviderError,
    ProviderRateLimitError,
    SourceTag,
)
from app.services.lookup.providers import (
    CacheProvider,
    GoUPCProvider,
    OpenFoodFactsProvider,
    UPCDatabaseProvider,
)
from app.services.lookup.transport import JsonHttpClient
from tests.doubles import InMemoryGateway, make_record

BARCODE = "0064100000015"


def mock_client(return_value=None, side_effect=None) -> Mock:
    client = Mock(spec=JsonHttpClient)
    client.get_json = AsyncMock(return_value=return_value, side_effect=side_effect)
    client.close = AsyncMock()
    return client


class TestCacheProvider:

    @pytest.mark.asyncio
    async def test_hit_keeps_stored_provenance(self):
        stored = make_record(source=SourceTag.WEB_SEARCH)
        provider = CacheProvider(InMemoryGateway({BARCODE: stored}))

        outcome = await provider.fetch(BARCODE)

        assert outcome.record is stored
        assert outcome.record.provenance.source == SourceTag.WEB_SEARCH

    @pytest.mark.asyncio
    async def test_miss(self):
        outcome = await CacheProvider(InMemoryGateway()).fetch(BARCODE)
        assert outcome.record is None
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_storage_error_becomes_failed_outcome(self):
        gateway = Mock()
        gateway.get_by_barcode = AsyncMock(side_effect=ConnectionError("db down"))

        outcome = await CacheProvider(gateway).fetch(BARCODE)

        assert isinstance(outcome.error, ProviderError)
        assert outcome.error.source == "cache"


class TestOpenFoodFactsProvider:

    @pytest.mark.asyncio
    async def test_hit(self):
        client = mock_client({"status": "success", "product": {"product_name": "Syrup", "countries": "Canada"}})
        provider = OpenFoodFactsProvider(LookupConfig(), client=client)

        outcome = await provider.fetch(BARCODE)

        assert outcome.record.name == "Syrup"
        assert outcome.record.source == SourceTag.PRIMARY_CATALOG
        assert outcome.record.is_canadian is True
        url = client.get_json.call_args.args[0]
        assert url == f"https://world.openfoodfacts.org/api/v3/product/{BARCODE}.json"

    @pytest.mark.asyncio
    async def test_not_found_is_miss(self):
        provider = OpenFoodFactsProvider(LookupConfig(), client=mock_client(None))
        outcome = await provider.fetch(BARCODE)
        assert outcome.record is None and outcome.error is None

    @pytest.mark.asyncio
    async def test_empty_product_is_miss(self):
        provider = OpenFoodFactsProvider(LookupConfig(), client=mock_client({"status": "failure"}))
        outcome = await provider.fetch(BARCODE)
        assert outcome.record is None and outcome.error is None

    @pytest.mark.asyncio
    async def test_transport_error(self):
        error = ProviderError("HTTP 503: Service Unavailable", source="primary_catalog")
        provider = OpenFoodFactsProvider(LookupConfig(), client=mock_client(side_effect=error))

        outcome = await provider.fetch(BARCODE)

        assert outcome.error is error

    @pytest.mark.asyncio
    async def test_malformed_product_is_error(self):
        provider = OpenFoodFactsProvider(LookupConfig(), client=mock_client({"product": "oops"}))
        outcome = await provider.fetch(BARCODE)
        assert isinstance(outcome.error, ProviderError)

    def test_always_configured(self):
        assert OpenFoodFactsProvider(LookupConfig(), client=mock_client()).is_configured is True


class TestUPCDatabaseProvider:

    @pytest.mark.asyncio
    async def test_hit_passes_credentials(self, lookup_config):
        client = mock_client({"success": True, "data": {"title": "Oats", "country": "Canada"}})
        provider = UPCDatabaseProvider(lookup_config, client=client)

        outcome = await provider.fetch(BARCODE)

        assert outcome.record.name == "Oats"
        assert outcome.record.source == SourceTag.SECONDARY_A
        assert client.get_json.call_args.kwargs["params"] == {"upc": BARCODE, "apikey": "upc-key"}

    @pytest.mark.asyncio
    async def test_unsuccessful_lookup_is_miss(self, lookup_config):
        provider = UPCDatabaseProvider(lookup_config, client=mock_client({"success": False}))
        outcome = await provider.fetch(BARCODE)
        assert outcome.record is None and outcome.error is None

    @pytest.mark.asyncio
    async def test_rate_limit(self, lookup_config):
        error = ProviderRateLimitError("Rate limit exceeded", source="secondary_a")
        provider = UPCDatabaseProvider(lookup_config, client=mock_client(side_effect=error))
        outcome = await provider.fetch(BARCODE)
        assert isinstance(outcome.error, ProviderRateLimitError)

    def test_disabled_without_key(self):
        assert UPCDatabaseProvider(LookupConfig(), client=mock_client()).is_configured is False


class TestGoUPCProvider:

    @pytest.mark.asyncio
    async def test_hit(self, lookup_config):
        client = mock_client({"code": BARCODE, "product": {"name": "Ketchup", "region": "Canada"}})
        provider = GoUPCProvider(lookup_config, client=client)

        outcome = await provider.fetch(BARCODE)

        assert outcome.record.name == "Ketchup"
        assert outcome.record.source == SourceTag.SECONDARY_B
        assert client.get_json.call_args.args[0] == f"https://api.go-upc.com/v1/code/{BARCODE}"

    @pytest.mark.asyncio
    async def test_missing_product_is_miss(self, lookup_config):
        provider = GoUPCProvider(lookup_config, client=mock_client({"code": BARCODE}))
        outcome = await provider.fetch(BARCODE)
        assert outcome.record is None and outcome.error is None

    def test_disabled_without_key(self):
        assert GoUPCProvider(LookupConfig(), client=mock_client()).is_configured is False

    def test_bearer_header(self, lookup_config):
        provider = GoUPCProvider(lookup_config)
        assert provider.client.headers["Authorization"] == "Bearer go-key"
