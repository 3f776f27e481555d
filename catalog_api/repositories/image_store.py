from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ImageUpload:
    filename: str
    content: bytes
    content_type: Optional[str] = None


class ImageStore(ABC):
    @abstractmethod
    async def upload(self, image: ImageUpload) -> str:
        """Store one image and return the public URL it is served from."""

    @abstractmethod
    async def delete(self, url: str) -> None:
        """Remove a stored image. URLs this store did not issue are ignored."""

    @abstractmethod
    def owns(self, url: str) -> bool:
        pass
