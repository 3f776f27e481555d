"""FastAPI dependency injection providers."""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .config import Settings
from .database import get_db
from .repositories.cloudinary_image_store import CloudinaryImageStore
from .repositories.filesystem_image_store import FileSystemImageStore
from .repositories.image_store import ImageStore
from .services.cron_service import CronService
from .services.product_service import ProductService


def build_image_store(settings: Settings) -> ImageStore:
    if settings.IMAGE_STORE == "cloudinary":
        return CloudinaryImageStore(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.CLOUDINARY_FOLDER,
        )
    return FileSystemImageStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)


def get_cron_service(request: Request) -> CronService:
    # Built once per process by the lifespan in main.py
    cron = getattr(request.app.state, "cron_service", None)
    if cron is None:
        raise HTTPException(status_code=503, detail="Cron service is not initialised")
    return cron


def get_image_store(request: Request) -> ImageStore:
    images = getattr(request.app.state, "image_store", None)
    if images is None:
        raise HTTPException(status_code=503, detail="Image store is not initialised")
    return images


def get_product_service(
    db: Session = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
) -> ProductService:
    return ProductService(db, images)
