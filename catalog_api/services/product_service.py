"""Catalog service: category-scoped product queries and admin mutations."""

import logging
import os
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..categories import SUBCATEGORIES, VALID_CATEGORIES, display_name, is_valid_subcategory
from ..config import settings
from ..errors import ImageStoreError
from ..models.product import Product
from ..repositories.image_store import ImageStore, ImageUpload
from ..repositories.product_repository import ProductRepository
from ..schemas.product import ProductCreate, ProductManageItem, ProductUpdate

logger = logging.getLogger("catalog_api.services.product_service")

MANAGE_DESCRIPTION_CHARS = 100
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


def require_category(category: str) -> str:
    """Lower-case and check a category path parameter; 400 when unknown."""
    category = category.lower()
    if category not in VALID_CATEGORIES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid category. Available categories: {', '.join(VALID_CATEGORIES)}",
        )
    return category


def require_subcategory(category: str, subcategory: str) -> str:
    if not is_valid_subcategory(category, subcategory):
        raise HTTPException(
            status_code=400,
            detail=(
                f"Invalid subcategory for {category}. "
                f"Available subcategories: {', '.join(SUBCATEGORIES.get(category, [])) or 'none'}"
            ),
        )
    return subcategory


def check_images(images: List[ImageUpload]) -> None:
    """Reject an upload batch before anything is stored."""
    if len(images) > settings.MAX_IMAGES_PER_PRODUCT:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files. Maximum {settings.MAX_IMAGES_PER_PRODUCT} images allowed",
        )
    max_bytes = settings.MAX_IMAGE_SIZE_MB * 1024 * 1024
    for image in images:
        ext = os.path.splitext(image.filename)[1].lower()
        if ext not in IMAGE_EXTENSIONS or not (image.content_type or "").startswith("image/"):
            raise HTTPException(status_code=400, detail="Only image files are allowed (JPG, PNG, WebP)")
        if len(image.content) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File size too large. Maximum size is {settings.MAX_IMAGE_SIZE_MB}MB per image",
            )


class ProductService:
    def __init__(self, db: Session, images: Optional[ImageStore] = None):
        self.db = db
        self.repo = ProductRepository(db)
        self.images = images

    def list_products(self) -> List[Product]:
        return self.repo.list_all()

    def list_by_category(self, category: str) -> List[Product]:
        return self.repo.list_by_category(require_category(category))

    def list_for_management(self, category: str) -> List[ProductManageItem]:
        category = require_category(category)
        return [
            ProductManageItem(
                id=p.id,
                name=p.name,
                category=p.category,
                subcategory=p.subcategory,
                description=p.description[:MANAGE_DESCRIPTION_CHARS] + "...",
                status=p.status,
                featured=p.featured,
                created_at=p.created_at,
                updated_at=p.updated_at,
            )
            for p in self.repo.list_by_category(category)
        ]

    def list_by_subcategory(self, category: str, subcategory: str) -> List[Product]:
        category = require_category(category)
        require_subcategory(category, subcategory)
        return self.repo.list_by_category(category, subcategory)

    def category_summary(self) -> List[dict]:
        counts = self.repo.count_by_category()
        return [
            {
                "category": category,
                "name": display_name(category),
                "count": counts.get(category, 0),
                "endpoint": f"/api/products/category/{category}",
            }
            for category in VALID_CATEGORIES
        ]

    def create_product(self, req: ProductCreate) -> Product:
        if self.repo.get(req.id):
            raise HTTPException(status_code=409, detail="Product ID already exists. Please use a different ID.")
        product = self.repo.create(**req.model_dump())
        logger.info("Created %s product %s", product.category, product.id)
        return product

    async def create_product_with_images(self, req: ProductCreate, images: List[ImageUpload]) -> Product:
        """Upload ``images`` and create the product with their URLs appended to its pictures.

        Whatever was uploaded is removed again if the product is not created.
        """
        check_images(images)
        urls: List[str] = []
        try:
            for image in images:
                urls.append(await self.images.upload(image))
            return self.create_product(req.model_copy(update={"pictures": [*req.pictures, *urls]}))
        except ImageStoreError as exc:
            logger.error("Image upload failed for product %s: %s", req.id, exc)
            await self._discard_images(urls)
            raise HTTPException(status_code=502, detail="Image upload failed") from exc
        except Exception:
            await self._discard_images(urls)
            raise

    async def _discard_images(self, urls: List[str]):
        for url in urls:
            if not self.images.owns(url):
                continue
            try:
                await self.images.delete(url)
            except ImageStoreError as exc:
                logger.error("Could not delete image %s: %s", url, exc)

    def update_product(self, category: str, product_id: str, req: ProductUpdate) -> Product:
        category = require_category(category)
        product = self.repo.get_in_category(product_id, category)
        if not product:
            raise HTTPException(status_code=404, detail=f"Product not found in {category} category")

        updates = req.model_dump(exclude_unset=True, exclude_none=True)
        if "subcategory" in updates:
            require_subcategory(category, updates["subcategory"])

        logger.info("Updating %s product %s with fields %s", category, product_id, sorted(updates))
        return self.repo.update(product, **updates)

    async def delete_product(self, category: str, product_id: str) -> str:
        category = require_category(category)
        product = self.repo.get_in_category(product_id, category)
        if not product:
            raise HTTPException(status_code=404, detail=f"Product not found in {category} category")
        pictures = list(product.pictures or [])
        self.repo.delete(product)
        if self.images is not None:
            await self._discard_images(pictures)
        logger.info("Deleted %s product %s", category, product_id)
        return product_id
