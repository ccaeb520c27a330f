"""
Test configuration and fixtures for the lookup service.
Providers and stores are replaced with in-memory doubles.
"""

import pytest

from app.services.lookup.config import LookupConfig
from app.services.lookup.interfaces import ProductRecord
from tests.doubles import InMemoryGateway, make_record


@pytest.fixture
def lookup_config() -> LookupConfig:
    """Config with every optional source enabled."""
    return LookupConfig(
        upc_database_api_key="upc-key",
        go_upc_api_key="go-key",
        google_api_key="google-key",
        google_search_engine_id="engine-id",
        structured_timeout=1.0,
        web_search_timeout=1.0,
    )


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def sample_record() -> ProductRecord:
    return make_record(countries="Canada")
