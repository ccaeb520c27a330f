"""
Redis persistence gateway for resolved products.
"""

from typing import List, Optional
import structlog

from app.cache.redis_client import RedisClient, CacheKeys, CacheTTL
from app.services.lookup.catalog import (
    ALTERNATIVES_LIMIT, SEARCH_LIMIT, alternative_criteria, is_alternative, matches_query
)
from app.services.lookup.interfaces import (
    IProductCatalog, NormalizationError, PersistenceError, ProductRecord
)
from app.services.lookup.normalizers import normalize_cached

logger = structlog.get_logger(__name__)


class RedisProductStore(IProductCatalog):
    """Products stored as JSON under product:barcode:{barcode}."""

    def __init__(self, client: RedisClient, ttl: Optional[int] = CacheTTL.PRODUCT_DATA):
        self.redis = client
        self.ttl = ttl

    async def get_by_barcode(self, barcode: str) -> Optional[ProductRecord]:
        """Get cached product by barcode."""
        payload = await self.redis.get_json(CacheKeys.product(barcode))
        if payload is None:
            return None
        return normalize_cached(payload)

    async def upsert(self, record: ProductRecord) -> ProductRecord:
        """Cache product, replacing any previous value."""
        try:
            await self.redis.set_json(CacheKeys.product(record.barcode), record.to_dict(), ttl=self.ttl)
        except Exception as e:
            raise PersistenceError(
                f"Failed to cache product: {str(e)}",
                barcode=record.barcode,
                original_error=e
            )
        logger.debug("Product cached", barcode=record.barcode, ttl=self.ttl)
        return record

    async def _all_records(self) -> List[ProductRecord]:
        """Every stored product; unreadable entries are skipped."""
        records = []
        for payload in await self.redis.scan_json(CacheKeys.product_pattern()):
            try:
                records.append(normalize_cached(payload))
            except NormalizationError as e:
                logger.warning("Skipping invalid cached product", error=str(e))
        return sorted(records, key=lambda r: r.name)

    async def count_products(self) -> int:
        return len(await self._all_records())

    async def count_canadian_products(self) -> int:
        return sum(1 for r in await self._all_records() if r.is_canadian)

    async def search_products(self, query: str, canadian_only: bool = False) -> List[ProductRecord]:
        """Case-insensitive search over name, brand and category."""
        products = [
            r for r in await self._all_records()
            if matches_query(r, query) and (r.is_canadian or not canadian_only)
        ][:SEARCH_LIMIT]
        logger.info("Product search", query=query, canadian_only=canadian_only, count=len(products))
        return products

    async def find_canadian_alternatives(self, barcode: str) -> Optional[List[ProductRecord]]:
        """Canadian products sharing a category or the main brand of a stored product."""
        original = await self.get_by_barcode(barcode)
        if original is None:
            return None

        categories, brand = alternative_criteria(original)
        alternatives = [
            r for r in await self._all_records()
            if is_alternative(r, barcode, categories, brand)
        ][:ALTERNATIVES_LIMIT]
        logger.info("Canadian alternatives found", barcode=barcode, count=len(alternatives))
        return alternatives
