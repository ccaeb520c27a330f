"""
Adaptateurs de sources, un par origine de données.
"""

from .cache import CacheProvider
from .openfoodfacts import OpenFoodFactsProvider
from .upc_database import UPCDatabaseProvider
from .go_upc import GoUPCProvider
from .web_search import WebSearchProvider

__all__ = [
    "CacheProvider",
    "OpenFoodFactsProvider",
    "UPCDatabaseProvider",
    "GoUPCProvider",
    "WebSearchProvider"
]
