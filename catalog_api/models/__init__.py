"""SQLAlchemy models: import all models here so Alembic can discover them."""

from .product import Product

__all__ = ["Product"]
