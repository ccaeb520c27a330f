"""
Classification de l'origine canadienne d'un produit.

Règle unique pour toutes les sources : au moins un des champs pays
contient "canada" (insensible à la casse).
"""

from typing import Any, Iterable

CANADA_KEYWORD = "canada"

# Mentions comptées comme corroboration lors de la recherche web
CANADIAN_PHRASES = ("made in canada", "canadian made", "product of canada")


def mentions_canada(country_fields: Any) -> bool:
    """Vrai si countries, manufacturing_places ou origins mentionne le Canada."""
    for value in (
        getattr(country_fields, "countries", ""),
        getattr(country_fields, "manufacturing_places", ""),
        getattr(country_fields, "origins", ""),
    ):
        if value and CANADA_KEYWORD in value.lower():
            return True
    return False


def is_canadian(record: Any) -> bool:
    """
    Classification d'un enregistrement produit à partir de ses champs pays.

    Accepte un ProductRecord ou directement un CountryFields.
    """
    return mentions_canada(getattr(record, "country_fields", record))


def has_canadian_phrase(text: str, phrases: Iterable[str] = CANADIAN_PHRASES) -> bool:
    lowered = (text or "").lower()
    return any(phrase in lowered for phrase in phrases)


def corroboration_confidence(texts: Iterable[str]) -> float:
    """
    Ratio des textes contenant une mention "made in Canada" ou équivalent.

    Zéro texte donne une confiance de 0.0 (signal négatif, pas une erreur).
    """
    texts = list(texts)
    if not texts:
        return 0.0
    mentions = sum(1 for text in texts if has_canadian_phrase(text))
    return mentions / len(texts)
