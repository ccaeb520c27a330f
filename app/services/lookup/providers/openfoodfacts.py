"""
Source catalogue principal : Open Food Facts.
Service gratuit et open source, consulté en premier après le cache.

API Documentation : https://openfoodfacts.github.io/openfoodfacts-server/api/
"""

from urllib.parse import quote
import structlog

from ..config import LookupConfig
from ..interfaces import FetchResult, ISourceProvider, ProviderError, SourceTag
from ..normalizers import normalize_open_food_facts
from ..transport import JsonHttpClient

logger = structlog.get_logger(__name__)


class OpenFoodFactsProvider(ISourceProvider):
    """Lookup par code-barres via /product/{barcode}.json."""

    def __init__(self, config: LookupConfig, client: JsonHttpClient = None):
        self.base_url = config.open_food_facts_api.rstrip("/")
        self._timeout = config.structured_timeout
        self.client = client or JsonHttpClient(
            source=SourceTag.PRIMARY_CATALOG.value,
            timeout=config.structured_timeout,
            user_agent=config.user_agent
        )

    @property
    def source(self) -> SourceTag:
        return SourceTag.PRIMARY_CATALOG

    @property
    def is_configured(self) -> bool:
        return True

    @property
    def timeout(self) -> float:
        return self._timeout

    async def close(self):
        await self.client.close()

    async def fetch(self, barcode: str) -> FetchResult:
        url = f"{self.base_url}/product/{quote(barcode, safe='')}.json"

        try:
            data = await self.client.get_json(url, barcode=barcode)

            if not isinstance(data, dict) or not data.get("product"):
                logger.debug("Product not found", source=self.source.value, barcode=barcode)
                return FetchResult.miss()

            return FetchResult.hit(normalize_open_food_facts(barcode, data["product"]))

        except ProviderError as e:
            return FetchResult.failed(e)
