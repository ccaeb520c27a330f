"""
Résolution code-barres -> produit et détermination de l'origine canadienne.

Architecture : Chain of Responsibility + Strategy + Factory
Usage : cascade de sources ordonnée, première réponse gagnante

Example:
    from app.services.lookup import lookup_barcode

    result = await lookup_barcode("0064100000015")
    if result.found:
        print(result.record.name, result.record.is_canadian, result.source)
"""

from .interfaces import (
    SourceTag,
    CountryFields,
    Citation,
    Provenance,
    ProductRecord,
    LookupResult,
    FetchResult,
    ISourceProvider,
    IPersistenceGateway,
    IProductCatalog,
    ProviderError,
    ProviderTimeoutError,
    ProviderRateLimitError,
    NormalizationError,
    PersistenceError
)

from .config import LookupConfig
from .origin import is_canadian, mentions_canada, corroboration_confidence
from .extraction import ExtractedProduct, extract_product_info
from .orchestrator import ProductLookupOrchestrator
from .manager import (
    LookupServiceFactory,
    get_lookup_orchestrator,
    close_lookup_orchestrator,
    lookup_barcode
)

# Exports publics
__all__ = [
    # Modèle
    "SourceTag",
    "CountryFields",
    "Citation",
    "Provenance",
    "ProductRecord",
    "LookupResult",
    "FetchResult",

    # Interfaces
    "ISourceProvider",
    "IPersistenceGateway",
    "IProductCatalog",

    # Exceptions
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderRateLimitError",
    "NormalizationError",
    "PersistenceError",

    # Classification et extraction
    "LookupConfig",
    "is_canadian",
    "mentions_canada",
    "corroboration_confidence",
    "ExtractedProduct",
    "extract_product_info",

    # Orchestration
    "ProductLookupOrchestrator",
    "LookupServiceFactory",
    "get_lookup_orchestrator",
    "close_lookup_orchestrator",
    "lookup_barcode"
]
