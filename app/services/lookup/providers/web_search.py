"""
Source de dernier recours : recherche web (Google Custom Search).

Protocole en deux phases strictement séquentielles :
1. Identification : "<barcode> product information", extraction nom/marque
2. Corroboration : "<nom> <marque> made in Canada", ratio de mentions

La phase 2 dépend du résultat de la phase 1 et n'est jamais lancée en parallèle.
"""

from typing import Any, List
import structlog

from ..config import LookupConfig
from ..extraction import extract_product_info
from ..interfaces import Citation, FetchResult, ISourceProvider, ProviderError, SourceTag
from ..normalizers import as_text, normalize_web_search
from ..origin import corroboration_confidence
from ..transport import JsonHttpClient

logger = structlog.get_logger(__name__)

IDENTIFICATION_QUALIFIER = "product information"
CORROBORATION_PHRASE = "made in Canada"


def parse_search_items(data: Any) -> List[Citation]:
    """Convertit la réponse Custom Search en liste de Citation."""
    if not isinstance(data, dict):
        return []
    items = data.get("items") or []
    if not isinstance(items, list):
        return []
    return [
        Citation(
            title=as_text(item.get("title")),
            link=as_text(item.get("link")),
            snippet=as_text(item.get("snippet")),
        )
        for item in items
        if isinstance(item, dict)
    ]


class WebSearchProvider(ISourceProvider):
    """
    Recherche web à deux phases avec confiance quantifiée.

    Fonctionnalités :
    - Identification du produit depuis des titres de pages marchandes
    - Confiance d'origine = mentions "made in Canada" / résultats
    - Citations des premiers résultats pour attribution
    """

    def __init__(self, config: LookupConfig, client: JsonHttpClient = None):
        self.search_url = config.google_search_api
        self.api_key = config.google_api_key
        self.engine_id = config.google_search_engine_id
        self.identification_results = config.identification_results
        self.corroboration_results = config.corroboration_results
        self.citation_limit = config.citation_limit
        self.confidence_threshold = config.confidence_threshold
        self._configured = config.web_search_enabled
        self._timeout = config.web_search_timeout
        self.client = client or JsonHttpClient(
            source=SourceTag.WEB_SEARCH.value,
            timeout=config.web_search_timeout,
            user_agent=config.user_agent
        )

    @property
    def source(self) -> SourceTag:
        return SourceTag.WEB_SEARCH

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def timeout(self) -> float:
        return self._timeout

    async def close(self):
        await self.client.close()

    async def search(self, query: str, num: int, barcode: str = "") -> List[Citation]:
        data = await self.client.get_json(
            self.search_url,
            barcode=barcode,
            params={
                "key": self.api_key,
                "cx": self.engine_id,
                "q": query,
                "num": num
            }
        )
        return parse_search_items(data)[:num]

    async def corroborate(self, name: str, brand: str, barcode: str = "") -> float:
        """
        Phase 2 : confiance que le produit est fabriqué au Canada.

        Une erreur de recherche donne une confiance nulle plutôt qu'un échec :
        le produit est déjà identifié.
        """
        query = " ".join(part for part in (name, brand, CORROBORATION_PHRASE) if part)

        try:
            results = await self.search(query, self.corroboration_results, barcode=barcode)
        except ProviderError as e:
            logger.warning(
                "Origin corroboration search failed",
                barcode=barcode,
                error=str(e)
            )
            return 0.0

        return corroboration_confidence(f"{r.title} {r.snippet}" for r in results)

    async def fetch(self, barcode: str) -> FetchResult:
        try:
            results = await self.search(
                f"{barcode} {IDENTIFICATION_QUALIFIER}",
                self.identification_results,
                barcode=barcode
            )
        except ProviderError as e:
            return FetchResult.failed(e)

        if not results:
            logger.info("No search results found", barcode=barcode)
            return FetchResult.miss()

        extracted = extract_product_info(results)
        if extracted is None:
            logger.info("Could not extract product name", barcode=barcode)
            return FetchResult.miss()

        confidence = await self.corroborate(extracted.name, extracted.brand, barcode=barcode)

        logger.info(
            "Web search origin confidence",
            barcode=barcode,
            product_name=extracted.name,
            confidence=confidence
        )

        return FetchResult.hit(normalize_web_search(
            barcode,
            extracted,
            confidence=confidence,
            web_origin_signal=confidence > self.confidence_threshold,
            citations=results[:self.citation_limit]
        ))
