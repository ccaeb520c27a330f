"""
Extraction heuristique d'informations produit depuis des résultats de recherche.

Les titres de pages marchandes suivent souvent "Nom | Marque" ou
"Nom - Marque" ; la catégorie est cherchée dans l'extrait.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
import structlog

from .interfaces import Citation

logger = structlog.get_logger(__name__)

# Titres de pages d'annuaires de codes-barres, pas de pages produit
NON_PRODUCT_MARKERS = ("UPC", "Barcode", "Database")

CATEGORY_KEYWORDS = ("category", "department", "section", "type")

_CATEGORY_PATTERNS = [
    re.compile(rf"{keyword}[:\s]+(\w+)", re.IGNORECASE) for keyword in CATEGORY_KEYWORDS
]


@dataclass(frozen=True)
class ExtractedProduct:
    """Enregistrement partiel déduit d'un titre et d'un extrait."""
    name: str
    brand: str = ""
    category: str = ""


def is_non_product_page(title: str) -> bool:
    return any(marker in title for marker in NON_PRODUCT_MARKERS)


def split_title(title: str) -> Tuple[str, str]:
    """Découpe un titre en (nom, marque)."""
    if "|" in title:
        parts = [part.strip() for part in title.split("|")]
        return parts[0], parts[1].replace("Brand:", "").strip()
    if "-" in title:
        parts = [part.strip() for part in title.split("-")]
        return parts[0], parts[1]
    return title.strip(), ""


def extract_category(snippet: str) -> str:
    for pattern in _CATEGORY_PATTERNS:
        match = pattern.search(snippet or "")
        if match:
            return match.group(1)
    return ""


def extract_product_info(search_results: Iterable[Citation]) -> Optional[ExtractedProduct]:
    """
    Déduit nom, marque et catégorie du premier résultat exploitable.

    Args:
        search_results: Résultats ordonnés (title, snippet)

    Returns:
        ExtractedProduct, ou None si aucun résultat ne donne de nom
    """
    for result in search_results:
        title = result.title or ""

        if is_non_product_page(title):
            continue

        name, brand = split_title(title)
        if not name:
            continue

        return ExtractedProduct(
            name=name,
            brand=brand,
            category=extract_category(result.snippet),
        )

    logger.debug("No product name found in search results")
    return None
