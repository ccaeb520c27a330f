"""
Product model storing resolved barcode lookups.
"""

from sqlalchemy import Column, String, Boolean, DateTime, Text, Float, JSON
from sqlalchemy.sql import func

from app.db.database import Base


class Product(Base):
    """Normalized product record keyed by barcode."""

    __tablename__ = "products"

    barcode = Column(String(64), primary_key=True, index=True)

    # Product identification
    name = Column(String(255), nullable=False, default="", index=True)
    brand = Column(String(255), nullable=False, default="", index=True)
    image_url = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    ingredients = Column(Text, nullable=False, default="")

    # Origin signals
    countries = Column(Text, nullable=False, default="")
    manufacturing_places = Column(Text, nullable=False, default="")
    origins = Column(Text, nullable=False, default="")
    is_canadian = Column(Boolean, nullable=False, default=False, index=True)
    web_origin_signal = Column(Boolean, nullable=False, default=False)
    canadian_factors = Column(JSON, default=dict)

    # Provenance
    data_source = Column(String(50), nullable=False)
    confidence = Column(Float, nullable=True)
    citations = Column(JSON, nullable=True)
    fetched_at = Column(DateTime(timezone=True), nullable=False)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Product(barcode={self.barcode}, name={self.name}, source={self.data_source})>"
