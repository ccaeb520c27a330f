"""
Source secondaire B : Go-UPC.
Service payant, à utiliser avec parcimonie : activé seulement si la clé est présente.
"""

from urllib.parse import quote
import structlog

from ..config import LookupConfig
from ..interfaces import FetchResult, ISourceProvider, ProviderError, SourceTag
from ..normalizers import normalize_go_upc
from ..transport import JsonHttpClient

logger = structlog.get_logger(__name__)


class GoUPCProvider(ISourceProvider):
    """Lookup via /code/{barcode}, authentification Bearer."""

    def __init__(self, config: LookupConfig, client: JsonHttpClient = None):
        self.base_url = config.go_upc_api.rstrip("/")
        self._configured = config.go_upc_enabled
        self._timeout = config.structured_timeout
        self.client = client or JsonHttpClient(
            source=SourceTag.SECONDARY_B.value,
            timeout=config.structured_timeout,
            user_agent=config.user_agent,
            headers={"Authorization": f"Bearer {config.go_upc_api_key or ''}"}
        )

    @property
    def source(self) -> SourceTag:
        return SourceTag.SECONDARY_B

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
                f"{self.base_url}/code/{quote(barcode, safe='')}",
                barcode=barcode
            )

            if not isinstance(data, dict) or not data.get("product"):
                logger.debug("Product not found", source=self.source.value, barcode=barcode)
                return FetchResult.miss()

            return FetchResult.hit(normalize_go_upc(barcode, data["product"]))

        except ProviderError as e:
            return FetchResult.failed(e)
