"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the blog content service.
"""

from os import environ
from pathlib import Path
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Constants ---
CACHE_VALIDITY_SECONDS = 3 * 24 * 60 * 60  # 3 days
DEFAULT_PAGE_SIZE = 9
MAX_PAGE_SIZE = 100

# Closed language set; versions without a language tag belong to the primary one
PRIMARY_LANGUAGE = "vi"
SUPPORTED_LANGUAGES: frozenset[str] = frozenset({"vi", "en"})

ALLOWED_IMAGE_TYPES: frozenset[str] = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"},
)

# Markdown bundle (ZIP) limits
MAX_BUNDLE_SIZE = 100 * 1024 * 1024  # 100MB upload
MAX_BUNDLE_EXTRACTED_SIZE = 100 * 1024 * 1024
MAX_BUNDLE_ENTRY_SIZE = 10 * 1024 * 1024
MAX_BUNDLE_ENTRIES = 500
BUNDLE_IMAGE_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}

SERVERLESS_ENV_MARKERS = ("VERCEL", "AWS_LAMBDA_FUNCTION_NAME", "LAMBDA_TASK_ROOT")


def is_serverless() -> bool:
    """Return True when running on a serverless host with a read-only working tree."""
    return any(environ.get(marker) for marker in SERVERLESS_ENV_MARKERS)


def default_cache_dir() -> Path:
    """Cache directory used when ``CACHE_DIR`` is not configured."""
    if is_serverless():
        return Path("/tmp") / ".cache" / "blog"  # noqa: S108
    return Path.cwd() / ".cache" / "blog"


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Blog Content Service"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE: str = "logs/app.log"
    PRODUCTION_FRONTEND_URL: str | None = None

    # Content cache
    CACHE_DIR: Path | None = None
    CACHE_VALIDITY_SECONDS: int = CACHE_VALIDITY_SECONDS

    # Metadata store (in-memory when no file is configured)
    METADATA_FILE: Path | None = None

    # Blob storage
    STORAGE_PROVIDER: Literal["local", "cloudinary"] = "local"
    UPLOADS_DIR: Path = Path("uploads")
    PUBLIC_BASE_URL: str = "/uploads"
    BLOB_FETCH_TIMEOUT: float = 10.0  # seconds

    # Cloudinary Configuration
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: SecretStr = SecretStr("")
    CLOUDINARY_FOLDER: str = "blog"

    # Shared secret for mutating endpoints
    SECRET_UPLOAD_PASSWORD: SecretStr | None = None

    @property
    def cache_dir(self) -> Path:
        """Resolved cache directory."""
        return self.CACHE_DIR or default_cache_dir()


settings = Settings()


class LimiterConfig(BaseSettings):
    """Rate limiter configuration."""

    model_config = SettingsConfigDict(env_prefix="LIMITER_", case_sensitive=False)

    storage_uri: str = "memory://"
    default_limits: list[str] = ["120/minute"]
    headers_enabled: bool = False
    enabled: bool = True
