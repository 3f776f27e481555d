import asyncio
import logging
import os
import uuid
from pathlib import Path

from ..errors import ImageStoreError
from .image_store import ImageStore, ImageUpload

logger = logging.getLogger("catalog_api.repositories.filesystem_image_store")


class FileSystemImageStore(ImageStore):
    """Keeps images in a local directory served under ``url_prefix``."""

    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _path_for(self, url: str) -> Path:
        name = url[len(self.url_prefix) + 1:]
        if not name or Path(name).name != name:
            raise ImageStoreError(f"Not a stored image: {url}")
        return self.root / name

    async def upload(self, image: ImageUpload) -> str:
        ext = os.path.splitext(image.filename)[1].lower()
        name = f"{uuid.uuid4().hex}{ext}"
        path = self.root / name
        try:
            await asyncio.to_thread(os.makedirs, self.root, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, image.content)
        except OSError as exc:
            raise ImageStoreError(f"Could not write {name}: {exc}") from exc
        logger.info("Stored image %s (%d bytes)", name, len(image.content))
        return f"{self.url_prefix}/{name}"

    def owns(self, url: str) -> bool:
        return url.startswith(self.url_prefix + "/")

    async def delete(self, url: str) -> None:
        if not self.owns(url):
            return
        path = self._path_for(url)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise ImageStoreError(f"Could not delete {path.name}: {exc}") from exc
        logger.info("Deleted image %s", path.name)
