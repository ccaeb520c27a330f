"""
Database models for the product lookup service.
"""

from .product import Product

__all__ = [
    "Product"
]
