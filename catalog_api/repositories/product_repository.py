"""Product repository: SQLAlchemy access to the products table."""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models.product import Product

logger = logging.getLogger("catalog_api.repositories.product")


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_in_category(self, product_id: str, category: str) -> Optional[Product]:
        return self.db.execute(
            select(Product).where(Product.id == product_id, Product.category == category)
        ).scalar_one_or_none()

    def list_all(self) -> List[Product]:
        stmt = select(Product).order_by(Product.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_by_category(self, category: str, subcategory: Optional[str] = None) -> List[Product]:
        stmt = select(Product).where(Product.category == category)
        if subcategory is not None:
            stmt = stmt.where(Product.subcategory == subcategory)
        stmt = stmt.order_by(Product.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def count_by_category(self) -> Dict[str, int]:
        rows = self.db.execute(
            select(Product.category, func.count(Product.id)).group_by(Product.category)
        ).all()
        return {category: count for category, count in rows}

    def create(self, **fields) -> Product:
        product = Product(**fields)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(self, product: Product, **fields) -> Product:
        for key, value in fields.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: Product):
        self.db.delete(product)
        self.db.commit()
