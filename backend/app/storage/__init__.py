"""
Storage module for S3-compatible object storage (Cloudflare R2).

Uploads are staged on local disk, validated, and forwarded to the bucket
under a per-category prefix.
"""
from app.storage.r2_client import get_r2_client, R2Client
from app.storage.asset_store import AssetStore, UploadPayload, get_avatar_store, get_tutoring_image_store
from app.storage.categories import AssetCategory, AVATARS, TUTORING_IMAGES
from app.storage.temp_dirs import TempDirectories, get_temp_directories

__all__ = [
    "get_r2_client",
    "R2Client",
    "AssetStore",
    "UploadPayload",
    "get_avatar_store",
    "get_tutoring_image_store",
    "AssetCategory",
    "AVATARS",
    "TUTORING_IMAGES",
    "TempDirectories",
    "get_temp_directories",
]
