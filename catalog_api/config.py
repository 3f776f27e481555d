"""Application settings loaded from environment variables."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to the project root (one level above catalog_api/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000
    ROOT_PATH: str = ""  # Set when behind a reverse proxy with a path prefix
    ENVIRONMENT: str = "development"
    API_VERSION: str = "v1"
    DATABASE_URL: str = "sqlite:///./catalog.db"

    # Basic-auth gate for write endpoints and the cron admin surface
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change-me"

    # Keep-alive job. Unset values fall back to the built-in defaults in CronService.
    CRON_ENABLED: bool = False
    CRON_SCHEDULE: Optional[str] = None
    CRON_URL: Optional[str] = None
    CRON_METHOD: Optional[str] = None
    CRON_TIMEOUT: Optional[int] = None  # milliseconds
    CRON_OVERLAP_POLICY: Literal["allow", "skip"] = "allow"

    # Product images: "local" writes to UPLOAD_DIR, "cloudinary" needs the CLOUDINARY_* keys
    IMAGE_STORE: Literal["local", "cloudinary"] = "local"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_IMAGES_PER_PRODUCT: int = 5
    MAX_IMAGE_SIZE_MB: int = 5
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    CLOUDINARY_FOLDER: str = "store_products"


settings = Settings()
