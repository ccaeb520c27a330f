"""
Source cache : produits déjà résolus, lus depuis le stockage persistant.
"""

import structlog

from ..interfaces import FetchResult, IPersistenceGateway, ISourceProvider, ProviderError, SourceTag

logger = structlog.get_logger(__name__)


class CacheProvider(ISourceProvider):
    """
    Lecture du stockage par code-barres.

    La provenance enregistrée est conservée telle quelle : un produit
    résolu par recherche web reste tagué web_search à la relecture.
    """

    def __init__(self, gateway: IPersistenceGateway, timeout: float = 5.0):
        self.gateway = gateway
        self._timeout = timeout

    @property
    def source(self) -> SourceTag:
        return SourceTag.CACHE

    @property
    def is_configured(self) -> bool:
        return True

    @property
    def timeout(self) -> float:
        return self._timeout

    async def fetch(self, barcode: str) -> FetchResult:
        try:
            record = await self.gateway.get_by_barcode(barcode)
        except ProviderError as e:
            return FetchResult.failed(e)
        except Exception as e:
            logger.warning("Cache read failed", barcode=barcode, error=str(e))
            return FetchResult.failed(ProviderError(
                f"Storage read failed: {str(e)}",
                source=self.source.value,
                barcode=barcode,
                original_error=e
            ))

        if record is None:
            return FetchResult.miss()
        return FetchResult.hit(record)
