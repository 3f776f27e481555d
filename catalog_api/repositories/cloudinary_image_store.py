"""Cloudinary-hosted product images.

Uploads land in one folder (``store_products`` by default) and are limited to
800x600 on the way in. A stored image's public id is the folder plus the file
name without its extension, which is how deletes find it again from the URL.
"""

import asyncio
import io
import logging
from typing import Optional
from urllib.parse import urlsplit

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from ..errors import ImageStoreError
from .image_store import ImageStore, ImageUpload

logger = logging.getLogger("catalog_api.repositories.cloudinary_image_store")

ALLOWED_FORMATS = ["jpg", "jpeg", "png", "webp"]
UPLOAD_TRANSFORMATION = {"width": 800, "height": 600, "crop": "limit", "quality": "auto"}


class CloudinaryImageStore(ImageStore):
    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "store_products",
    ):
        if not (cloud_name and api_key and api_secret):
            raise ImageStoreError(
                "CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET must be set"
            )
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)
        self.folder = folder.strip("/")

    def public_id(self, url: str) -> Optional[str]:
        path = urlsplit(url).path
        if f"/{self.folder}/" not in path:
            return None
        filename = path.rsplit("/", 1)[-1]
        return f"{self.folder}/{filename.rsplit('.', 1)[0]}"

    def owns(self, url: str) -> bool:
        return urlsplit(url).netloc.endswith("res.cloudinary.com") and self.public_id(url) is not None

    async def upload(self, image: ImageUpload) -> str:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(image.content),
                folder=self.folder,
                allowed_formats=ALLOWED_FORMATS,
                transformation=[UPLOAD_TRANSFORMATION],
            )
        except CloudinaryError as exc:
            raise ImageStoreError(f"Cloudinary upload failed for {image.filename}: {exc}") from exc
        logger.info("Uploaded %s as %s", image.filename, result.get("public_id"))
        return result["secure_url"]

    async def delete(self, url: str) -> None:
        if not self.owns(url):
            return
        public_id = self.public_id(url)
        try:
            result = await asyncio.to_thread(cloudinary.uploader.destroy, public_id)
        except CloudinaryError as exc:
            raise ImageStoreError(f"Cloudinary delete failed for {public_id}: {exc}") from exc
        logger.info("Deleted image %s (%s)", public_id, result.get("result"))
