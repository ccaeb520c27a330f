"""
Catalog status API endpoint.
"""

from typing import Dict
from fastapi import APIRouter, Depends
from pydantic import BaseModel
import structlog

from app.core.dependencies import get_orchestrator, get_products
from app.services.lookup import IProductCatalog, ProductLookupOrchestrator

logger = structlog.get_logger(__name__)

router = APIRouter()


class StatusResponse(BaseModel):
    status: str
    product_count: int
    canadian_product_count: int
    providers: Dict[str, bool]


@router.get("", response_model=StatusResponse)
async def get_status(
    products: IProductCatalog = Depends(get_products),
    orchestrator: ProductLookupOrchestrator = Depends(get_orchestrator)
):
    """Stored product counts and which lookup sources are enabled."""
    providers = {p.source.value: p.is_configured for p in orchestrator.providers}

    try:
        product_count = await products.count_products()
        canadian_count = await products.count_canadian_products()
    except Exception as e:
        logger.error("Error getting catalog status", error=str(e))
        return StatusResponse(
            status="error",
            product_count=0,
            canadian_product_count=0,
            providers=providers
        )

    logger.info("Catalog status retrieved", product_count=product_count)

    return StatusResponse(
        status="ok",
        product_count=product_count,
        canadian_product_count=canadian_count,
        providers=providers
    )
