"""
Factory et accès global pour l'orchestrateur de résolution.

Architecture Pattern : Factory + Singleton Manager
"""

import asyncio
from typing import List, Optional
import structlog

from app.core.config import Settings, settings

from .config import LookupConfig
from .interfaces import IPersistenceGateway, IProductCatalog, ISourceProvider, LookupResult
from .orchestrator import ProductLookupOrchestrator
from .providers import (
    CacheProvider, GoUPCProvider, OpenFoodFactsProvider, UPCDatabaseProvider, WebSearchProvider
)

logger = structlog.get_logger(__name__)


class LookupServiceFactory:
    """
    Factory pour assembler la cascade de sources.

    L'ordre de la liste est l'ordre de priorité : cache, catalogue principal,
    sources secondaires, puis recherche web.
    """

    @staticmethod
    def create_providers(config: LookupConfig, gateway: IPersistenceGateway) -> List[ISourceProvider]:
        providers = [
            CacheProvider(gateway, timeout=config.structured_timeout),
            OpenFoodFactsProvider(config),
            UPCDatabaseProvider(config),
            GoUPCProvider(config),
            WebSearchProvider(config),
        ]

        logger.info(
            "Lookup providers created",
            providers={p.source.value: p.is_configured for p in providers}
        )

        return providers

    @staticmethod
    def create_gateway(app_settings: Settings) -> IProductCatalog:
        """Crée le stockage selon `persistence_backend`."""
        if app_settings.persistence_backend == "redis":
            from app.cache.product_store import RedisProductStore
            from app.cache.redis_client import redis_client
            return RedisProductStore(redis_client, ttl=app_settings.product_cache_ttl)

        from app.repositories.product_repository import get_product_repository
        return get_product_repository()

    @classmethod
    def create_orchestrator(cls,
                            config: LookupConfig,
                            gateway: IPersistenceGateway) -> ProductLookupOrchestrator:
        return ProductLookupOrchestrator(
            providers=cls.create_providers(config, gateway),
            gateway=gateway,
            config=config
        )


_orchestrator: Optional[ProductLookupOrchestrator] = None
_lock = asyncio.Lock()


async def get_lookup_orchestrator() -> ProductLookupOrchestrator:
    """
    Obtient l'orchestrateur global, construit une seule fois depuis Settings.

    Returns:
        Instance partagée de ProductLookupOrchestrator
    """
    global _orchestrator
    if _orchestrator is None:
        async with _lock:
            if _orchestrator is None:
                config = LookupConfig.from_settings(settings)
                gateway = LookupServiceFactory.create_gateway(settings)
                _orchestrator = LookupServiceFactory.create_orchestrator(config, gateway)
    return _orchestrator


async def close_lookup_orchestrator():
    """Ferme les sessions HTTP des sources."""
    global _orchestrator
    if _orchestrator is not None:
        await _orchestrator.close()
        _orchestrator = None
        logger.info("Lookup providers closed")


async def lookup_barcode(barcode: str) -> LookupResult:
    """Résolution rapide d'un code-barres."""
    orchestrator = await get_lookup_orchestrator()
    return await orchestrator.resolve(barcode)
