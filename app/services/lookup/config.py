"""
Configuration explicite de la cascade de résolution.

Construite une seule fois au démarrage depuis Settings puis passée aux
constructeurs des sources et de l'orchestrateur.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from app.core.config import Settings


@dataclass(frozen=True)
class LookupConfig:
    """Endpoints, identifiants et constantes de la cascade."""

    open_food_facts_api: str = "https://world.openfoodfacts.org/api/v3"
    upc_database_api: str = "https://api.searchupc.com/v1"
    upc_database_api_key: Optional[str] = None
    go_upc_api: str = "https://api.go-upc.com/v1"
    go_upc_api_key: Optional[str] = None
    google_search_api: str = "https://www.googleapis.com/customsearch/v1"
    google_api_key: Optional[str] = None
    google_search_engine_id: Optional[str] = None
    user_agent: str = "CanadianProductLookup/1.0"

    structured_timeout: float = 8.0
    web_search_timeout: float = 15.0
    identification_results: int = 10
    corroboration_results: int = 5
    citation_limit: int = 3
    confidence_threshold: float = 0.30

    accept_placeholder_names: bool = True
    placeholder_names: Tuple[str, ...] = field(default=("unknown product",))

    @property
    def upc_database_enabled(self) -> bool:
        return bool(self.upc_database_api_key)

    @property
    def go_upc_enabled(self) -> bool:
        return bool(self.go_upc_api_key)

    @property
    def web_search_enabled(self) -> bool:
        return bool(self.google_api_key and self.google_search_engine_id)

    def is_placeholder_name(self, name: str) -> bool:
        normalized = (name or "").strip().lower()
        return not normalized or normalized in {n.lower() for n in self.placeholder_names}

    @classmethod
    def from_settings(cls, settings: Settings) -> "LookupConfig":
        return cls(
            open_food_facts_api=settings.open_food_facts_api,
            upc_database_api=settings.upc_database_api,
            upc_database_api_key=settings.upc_database_api_key,
            go_upc_api=settings.go_upc_api,
            go_upc_api_key=settings.go_upc_api_key,
            google_search_api=settings.google_search_api,
            google_api_key=settings.google_api_key,
            google_search_engine_id=settings.google_search_engine_id,
            user_agent=settings.lookup_user_agent,
            structured_timeout=settings.structured_provider_timeout,
            web_search_timeout=settings.web_search_timeout,
            identification_results=min(settings.web_search_identification_results, 10),
            corroboration_results=settings.web_search_corroboration_results,
            citation_limit=settings.web_search_citation_limit,
            confidence_threshold=settings.canadian_confidence_threshold,
            accept_placeholder_names=settings.accept_placeholder_names,
            placeholder_names=tuple(settings.placeholder_product_names),
        )
