"""
Règles de recherche dans les produits déjà résolus.

Recherche texte : sous-chaîne insensible à la casse sur nom, marque ou catégorie.
Alternatives canadiennes : produits canadiens partageant une catégorie ou la
marque principale du produit scanné, le produit lui-même exclu.
"""

from typing import List, Optional, Tuple

from .interfaces import ProductRecord

SEARCH_LIMIT = 50
ALTERNATIVES_LIMIT = 6


def split_list(text: str) -> List[str]:
    """Découpe une liste séparée par des virgules, sans éléments vides."""
    return [part.strip() for part in (text or "").split(",") if part.strip()]


def alternative_criteria(record: ProductRecord) -> Tuple[List[str], Optional[str]]:
    """(catégories, marque principale) servant à chercher des alternatives."""
    brands = split_list(record.brand)
    return split_list(record.category), (brands[0] if brands else None)


def contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def matches_query(record: ProductRecord, query: str) -> bool:
    return any(contains(value, query) for value in (record.name, record.brand, record.category))


def is_alternative(candidate: ProductRecord,
                   barcode: str,
                   categories: List[str],
                   brand: Optional[str]) -> bool:
    """
    Vrai si `candidate` est une alternative canadienne au produit `barcode`.

    Sans catégorie ni marque, tout autre produit canadien convient.
    """
    if candidate.barcode == barcode or not candidate.is_canadian:
        return False
    if categories:
        if any(contains(candidate.category, c) for c in categories):
            return True
        return brand is not None and contains(candidate.brand, brand)
    if brand:
        return contains(candidate.brand, brand)
    return True
