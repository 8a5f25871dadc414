"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.
"""
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    service_name: str = "storage-api"
    log_level: str = "INFO"

    # CORS (JSON list in the environment)
    cors_allow_origins: List[str] = ["*"]

    # Local staging area for uploads before they are forwarded to the bucket
    tmp_root: Path = Field(default_factory=lambda: Path.cwd() / "tmp")
    staging_max_age_seconds: int = 3600  # Leftovers older than this are swept at startup

    # Upload validation
    max_upload_size_bytes: int = 5 * 1024 * 1024  # 5 MiB
    allowed_mime_types: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/jpg",
    ]

    # Cloudflare R2 / S3-compatible storage
    r2_endpoint: Optional[str] = None  # e.g., https://<account_id>.r2.cloudflarestorage.com
    r2_bucket: str = "storage-media"  # Bucket name
    r2_access_key: Optional[str] = None  # R2 access key ID
    r2_secret_key: Optional[str] = None  # R2 secret access key
    r2_region: str = "auto"  # R2 uses "auto" for region
    r2_public_base_url: Optional[str] = None  # Public bucket domain; presigned URLs are used when unset
    r2_presign_expiration: int = 3600  # Presigned read URL expiration in seconds (1 hour)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
