"""Product SQLAlchemy model."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text, Index

from ..database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(String(20), primary_key=True)           # user-defined, e.g. "gym-001"
    name = Column(String(100), nullable=False)
    category = Column(String, nullable=False, index=True)
    subcategory = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    pictures = Column(JSON, default=list)               # image URLs
    colours = Column(JSON, default=list)
    printing_method = Column(String(200), nullable=False)
    sizes = Column(JSON, default=list)
    minimum_quantity = Column(Integer, nullable=False)
    featured = Column(Boolean, default=False, index=True)
    tags = Column(JSON, default=list)
    status = Column(String, default="active")           # active | inactive | out-of-stock | discontinued
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_products_category_subcategory", "category", "subcategory"),
    )
