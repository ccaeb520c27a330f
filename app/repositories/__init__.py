"""
Repository layer for data access abstraction.
"""

from .product_repository import ProductRepository, get_product_repository

__all__ = [
    "ProductRepository",
    "get_product_repository"
]
