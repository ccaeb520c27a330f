"""
Normalisation des réponses natives de chaque source vers ProductRecord.

Un normaliseur par source, fonctions pures. Tout champ natif absent ou
inconnu devient "" afin que la classification et l'affichage restent
définis pour tous les enregistrements.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .extraction import ExtractedProduct
from .interfaces import (
    Citation, CountryFields, NormalizationError, ProductRecord, Provenance, SourceTag
)


def as_text(value: Any) -> str:
    """Convertit une valeur native en texte ("" si absente)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return ", ".join(as_text(item) for item in value if as_text(item))
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _require_mapping(payload: Any, source: SourceTag, barcode: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise NormalizationError(
            f"Expected an object, got {type(payload).__name__}",
            source=source.value,
            barcode=barcode
        )
    return payload


def _now(fetched_at: Optional[datetime]) -> datetime:
    return fetched_at or datetime.now(timezone.utc)


def normalize_open_food_facts(barcode: str, product: Any, fetched_at: datetime = None) -> ProductRecord:
    """Open Food Facts : champ `product` de /product/{barcode}.json."""
    product = _require_mapping(product, SourceTag.PRIMARY_CATALOG, barcode)

    return ProductRecord(
        barcode=barcode,
        provenance=Provenance(source=SourceTag.PRIMARY_CATALOG, fetched_at=_now(fetched_at)),
        name=as_text(product.get("product_name")) or as_text(product.get("product_name_en")),
        brand=as_text(product.get("brands")),
        image_url=as_text(product.get("image_url")) or as_text(product.get("image_front_url")),
        category=as_text(product.get("categories")),
        description=as_text(product.get("generic_name")),
        ingredients=as_text(product.get("ingredients_text")),
        country_fields=CountryFields(
            countries=as_text(product.get("countries")),
            manufacturing_places=as_text(product.get("manufacturing_places")),
            origins=as_text(product.get("origins")),
        ),
    )


def normalize_upc_database(barcode: str, payload: Any, fetched_at: datetime = None) -> ProductRecord:
    """UPC Database : objet `data`, images en tableau, origine dans `country`."""
    payload = _require_mapping(payload, SourceTag.SECONDARY_A, barcode)
    item = _require_mapping(payload.get("data"), SourceTag.SECONDARY_A, barcode)

    images = item.get("images") or []
    first_image = images[0] if isinstance(images, list) and images else ""

    return ProductRecord(
        barcode=barcode,
        provenance=Provenance(source=SourceTag.SECONDARY_A, fetched_at=_now(fetched_at)),
        name=as_text(item.get("title")),
        brand=as_text(item.get("brand")),
        image_url=as_text(first_image),
        category=as_text(item.get("category")),
        description=as_text(item.get("description")),
        country_fields=CountryFields(
            countries=as_text(item.get("country")),
            manufacturing_places=as_text(item.get("manufacturer")),
            origins=as_text(item.get("country")),
        ),
    )


def normalize_go_upc(barcode: str, product: Any, fetched_at: datetime = None) -> ProductRecord:
    """Go-UPC : champ `product`, image unique, origine dans `region`."""
    product = _require_mapping(product, SourceTag.SECONDARY_B, barcode)

    ingredients = product.get("ingredients")
    if isinstance(ingredients, dict):
        ingredients = ingredients.get("text")

    return ProductRecord(
        barcode=barcode,
        provenance=Provenance(source=SourceTag.SECONDARY_B, fetched_at=_now(fetched_at)),
        name=as_text(product.get("name")),
        brand=as_text(product.get("brand")),
        image_url=as_text(product.get("imageUrl")),
        category=as_text(product.get("category")),
        description=as_text(product.get("description")),
        ingredients=as_text(ingredients),
        country_fields=CountryFields(
            countries=as_text(product.get("region")),
            manufacturing_places=as_text(product.get("manufacturer")),
            origins=as_text(product.get("region")),
        ),
    )


def normalize_web_search(
    barcode: str,
    extracted: ExtractedProduct,
    confidence: float,
    web_origin_signal: bool,
    citations: List[Citation],
    fetched_at: datetime = None
) -> ProductRecord:
    """Recherche web : enregistrement partiel + signal de confiance."""
    return ProductRecord(
        barcode=barcode,
        provenance=Provenance(
            source=SourceTag.WEB_SEARCH,
            fetched_at=_now(fetched_at),
            confidence=confidence,
            citations=list(citations),
        ),
        name=extracted.name,
        brand=extracted.brand,
        category=extracted.category,
        web_origin_signal=web_origin_signal,
    )


def normalize_cached(payload: Any) -> ProductRecord:
    """Cache : forme sérialisée de ProductRecord, provenance conservée."""
    payload = _require_mapping(payload, SourceTag.CACHE, "")
    try:
        return ProductRecord.from_dict(payload)
    except (KeyError, ValueError, TypeError) as e:
        raise NormalizationError(
            f"Invalid cached product: {e}",
            source=SourceTag.CACHE.value,
            barcode=as_text(payload.get("barcode")),
            original_error=e
        )
