"""
Product lookup API endpoints.
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from app.core.dependencies import get_orchestrator, get_products
from app.services.lookup import IProductCatalog, ProductLookupOrchestrator

router = APIRouter()


class LookupResponse(BaseModel):
    found: bool
    source: Optional[str] = None
    is_canadian: Optional[bool] = None
    product: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None


class ProductListResponse(BaseModel):
    products: List[Dict[str, Any]]


@router.get("/lookup/{barcode}", response_model=LookupResponse)
async def lookup_product(
    barcode: str,
    orchestrator: ProductLookupOrchestrator = Depends(get_orchestrator)
):
    """
    Resolve a barcode through the source waterfall.

    Not-found is returned as data with a reason, never as an HTTP error.
    """
    result = await orchestrator.resolve(barcode)
    return result.to_dict()


def _require_query(query: Optional[str]) -> str:
    if not query or not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter is required"
        )
    return query.strip()


@router.get("/search", response_model=ProductListResponse)
async def search_products(
    query: Optional[str] = None,
    products: IProductCatalog = Depends(get_products)
):
    """Search stored products by name, brand or category."""
    results = await products.search_products(_require_query(query))
    return {"products": [r.to_dict() for r in results]}


@router.get("/search/canadian", response_model=ProductListResponse)
async def search_canadian_products(
    query: Optional[str] = None,
    products: IProductCatalog = Depends(get_products)
):
    """Search stored Canadian products by name, brand or category."""
    results = await products.search_products(_require_query(query), canadian_only=True)
    return {"products": [r.to_dict() for r in results]}


@router.get("/alternatives/{barcode}", response_model=ProductListResponse)
async def get_canadian_alternatives(
    barcode: str,
    products: IProductCatalog = Depends(get_products)
):
    """Canadian products sharing a category or brand with a stored product."""
    alternatives = await products.find_canadian_alternatives(barcode)
    if alternatives is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Original product not found"
        )
    return {"products": [r.to_dict() for r in alternatives]}
