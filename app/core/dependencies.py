"""
FastAPI dependencies for the lookup service.
"""

from fastapi import Depends

from app.services.lookup import IProductCatalog, ProductLookupOrchestrator, get_lookup_orchestrator


async def get_orchestrator() -> ProductLookupOrchestrator:
    """Shared lookup orchestrator."""
    return await get_lookup_orchestrator()


def get_products(
    orchestrator: ProductLookupOrchestrator = Depends(get_orchestrator)
) -> IProductCatalog:
    """Product store selected by `persistence_backend`, the one lookups write to."""
    return orchestrator.gateway
