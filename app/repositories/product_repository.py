"""
Product repository: SQL persistence gateway for resolved lookups.
Keyed by barcode; upsert is last-write-wins.
"""

from typing import Callable, List, Optional
from sqlalchemy import select, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.db.models.product import Product
from app.services.lookup.catalog import ALTERNATIVES_LIMIT, SEARCH_LIMIT, alternative_criteria
from app.services.lookup.interfaces import IProductCatalog, PersistenceError, ProductRecord
from app.services.lookup.normalizers import normalize_cached

logger = structlog.get_logger(__name__)


def product_to_payload(product: Product) -> dict:
    """Serialized ProductRecord shape of a stored row."""
    return {
        "barcode": product.barcode,
        "name": product.name,
        "brand": product.brand,
        "image_url": product.image_url,
        "category": product.category,
        "description": product.description,
        "ingredients": product.ingredients,
        "countries": product.countries,
        "manufacturing_places": product.manufacturing_places,
        "origins": product.origins,
        "web_origin_signal": product.web_origin_signal,
        "provenance": {
            "source": product.data_source,
            "fetched_at": product.fetched_at,
            "confidence": product.confidence,
            "citations": product.citations,
        },
    }


def apply_record(product: Product, record: ProductRecord) -> Product:
    """Copy a ProductRecord onto a row."""
    fields = record.country_fields
    provenance = record.provenance

    product.name = record.name
    product.brand = record.brand
    product.image_url = record.image_url
    product.category = record.category
    product.description = record.description
    product.ingredients = record.ingredients
    product.countries = fields.countries
    product.manufacturing_places = fields.manufacturing_places
    product.origins = fields.origins
    product.is_canadian = record.is_canadian
    product.web_origin_signal = record.web_origin_signal
    product.canadian_factors = record.canadian_factors()
    product.data_source = provenance.source.value
    product.confidence = provenance.confidence
    product.citations = (
        [c.to_dict() for c in provenance.citations] if provenance.citations is not None else None
    )
    product.fetched_at = provenance.fetched_at
    return product


class ProductRepository(IProductCatalog):
    """Repository for product records, one session per operation."""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def get_by_barcode(self, barcode: str) -> Optional[ProductRecord]:
        """Get stored product by barcode."""
        async with self.session_factory() as session:
            product = await session.get(Product, barcode)
            if product is None:
                return None
            return normalize_cached(product_to_payload(product))

    async def upsert(self, record: ProductRecord) -> ProductRecord:
        """Insert or replace the product stored under the record's barcode."""
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    product = await session.get(Product, record.barcode)
                    if product is None:
                        product = Product(barcode=record.barcode)
                        session.add(product)
                    apply_record(product, record)

            logger.debug("Product saved", barcode=record.barcode, source=record.source.value)
            return record

        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save product: {str(e)}",
                barcode=record.barcode,
                original_error=e
            )

    async def count_products(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(select(func.count()).select_from(Product))
            return result.scalar_one()

    async def count_canadian_products(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(Product).where(Product.is_canadian.is_(True))
            )
            return result.scalar_one()

    async def _find(self, *criteria, limit: int) -> List[ProductRecord]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Product).where(*criteria).order_by(Product.name).limit(limit)
            )
            return [normalize_cached(product_to_payload(p)) for p in result.scalars()]

    async def search_products(self, query: str, canadian_only: bool = False) -> List[ProductRecord]:
        """Case-insensitive search over name, brand and category."""
        criteria = [or_(
            _contains(Product.name, query),
            _contains(Product.brand, query),
            _contains(Product.category, query)
        )]
        if canadian_only:
            criteria.append(Product.is_canadian.is_(True))

        products = await self._find(*criteria, limit=SEARCH_LIMIT)
        logger.info("Product search", query=query, canadian_only=canadian_only, count=len(products))
        return products

    async def find_canadian_alternatives(self, barcode: str) -> Optional[List[ProductRecord]]:
        """Canadian products sharing a category or the main brand of a stored product."""
        original = await self.get_by_barcode(barcode)
        if original is None:
            return None

        categories, brand = alternative_criteria(original)
        criteria = [Product.is_canadian.is_(True), Product.barcode != barcode]
        if categories:
            matches = [_contains(Product.category, c) for c in categories]
            if brand:
                matches.append(_contains(Product.brand, brand))
            criteria.append(or_(*matches))
        elif brand:
            criteria.append(_contains(Product.brand, brand))

        alternatives = await self._find(*criteria, limit=ALTERNATIVES_LIMIT)
        logger.info("Canadian alternatives found", barcode=barcode, count=len(alternatives))
        return alternatives


def _contains(column, text: str):
    """ILIKE substring match with LIKE wildcards in `text` escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def get_product_repository() -> ProductRepository:
    """Repository bound to the application session factory."""
    from app.db.database import AsyncSessionLocal
    return ProductRepository(AsyncSessionLocal)
