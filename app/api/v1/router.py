"""
Main API v1 router.
"""

from fastapi import APIRouter
from app.api.v1 import products, status

api_router = APIRouter()

api_router.include_router(
    products.router,
    prefix="/products",
    tags=["products"]
)

api_router.include_router(
    status.router,
    prefix="/status",
    tags=["status"]
)
