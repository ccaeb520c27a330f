"""
Source secondaire A : UPC Database (SearchUPC).
Activée uniquement si une clé API est configurée.
"""

import structlog

from ..config import LookupConfig
from ..interfaces import FetchResult, ISourceProvider, ProviderError, SourceTag
from ..normalizers import normalize_upc_database
from ..transport import JsonHttpClient

logger = structlog.get_logger(__name__)


class UPCDatabaseProvider(ISourceProvider):
    """Lookup via /lookup?upc=...&apikey=..., succès signalé par `success`."""

    def __init__(self, config: LookupConfig, client: JsonHttpClient = None):
        self.base_url = config.upc_database_api.rstrip("/")
        self.api_key = config.upc_database_api_key
        self._configured = config.upc_database_enabled
        self._timeout = config.structured_timeout
        self.client = client or JsonHttpClient(
            source=SourceTag.SECONDARY_A.value,
            timeout=config.structured_timeout,
            user_agent=config.user_agent
        )

    @property
    def source(self) -> SourceTag:
        return SourceTag.SECONDARY_A

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def timeout(self) -> float:
        return self._timeout

    async def close(self):
        await self.client.close()

    async def fetch(self, barcode: str) -> FetchResult:
        try:
            data = await self.client.get_json(
                f"{self.base_url}/lookup",
                barcode=barcode,
                params={"upc": barcode, "apikey": self.api_key}
            )

            if not isinstance(data, dict) or not data.get("success") or not data.get("data"):
                logger.debug("Product not found", source=self.source.value, barcode=barcode)
                return FetchResult.miss()

            return FetchResult.hit(normalize_upc_database(barcode, data))

        except ProviderError as e:
            return FetchResult.failed(e)
