"""
Generic asset store backed by the object store.

One AssetStore instance exists per AssetCategory. Objects are keyed as
<key_prefix>/<entity_id>/<file_name>, so avatars and tutoring images share
the bucket without colliding.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from app.schemas.storage import StoredFile
from app.storage.categories import AssetCategory, AVATARS, TUTORING_IMAGES
from app.storage.exceptions import AssetNotFoundError, InvalidAssetPathError
from app.storage.r2_client import R2Client, get_r2_client
from app.utils.metrics import asset_operations_total

logger = logging.getLogger(__name__)


@dataclass
class UploadPayload:
    """File bytes plus the metadata the client sent with them."""
    data: bytes
    original_name: str
    mime_type: str
    size: int


def _check_segment(value: str) -> str:
    """Reject key segments that are empty or could escape their prefix."""
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise InvalidAssetPathError(value)
    return value


def resolve_file_name(original_name: str, desired_name: Optional[str] = None) -> str:
    """
    Pick the stored file name.

    The desired name wins when given; it inherits the original extension if
    it has none. Without one, a UUID plus the original extension is used.
    """
    extension = PurePosixPath(original_name or "").suffix.lower()
    desired_name = (desired_name or "").strip()

    if desired_name:
        _check_segment(desired_name)
        if not PurePosixPath(desired_name).suffix:
            desired_name = f"{desired_name}{extension}"
        return desired_name

    return f"{uuid.uuid4()}{extension}"


class AssetStore:
    """
    Upload, lookup and delete for one asset category.

    Blocking client calls run in a worker thread so the event loop keeps
    serving other requests.
    """

    def __init__(self, category: AssetCategory, client: R2Client):
        self.category = category
        self.client = client

    @property
    def is_configured(self) -> bool:
        return self.client.is_configured

    def object_key(self, entity_id: str, file_name: str) -> str:
        return f"{self.category.key_prefix}/{_check_segment(entity_id)}/{_check_segment(file_name)}"

    async def upload(
        self,
        entity_id: str,
        payload: UploadPayload,
        desired_name: Optional[str] = None
    ) -> StoredFile:
        """
        Store a file for an entity.

        An existing object with the same name is replaced.

        Returns:
            StoredFile with the URL to fetch the object
        """
        file_name = resolve_file_name(payload.original_name, desired_name)
        object_key = self.object_key(entity_id, file_name)

        try:
            await asyncio.to_thread(self.client.upload_object, object_key, payload.data, payload.mime_type)
            url = await asyncio.to_thread(self.client.get_object_url, object_key)
        except Exception:
            asset_operations_total.labels(category=self.category.name, operation="upload", status="error").inc()
            raise

        asset_operations_total.labels(category=self.category.name, operation="upload", status="ok").inc()
        logger.info(
            f"Stored {self.category.label} {object_key}",
            extra={"event": "asset_stored", "category": self.category.name, "object_key": object_key}
        )

        return StoredFile(
            entity_id=entity_id,
            file_name=file_name,
            object_key=object_key,
            mime_type=payload.mime_type,
            size_bytes=payload.size,
            url=url,
            category=self.category.name,
        )

    async def get_url(self, entity_id: str, file_name: str) -> str:
        """
        Resolve the URL of a stored file.

        Raises:
            AssetNotFoundError: If the object does not exist
        """
        object_key = self.object_key(entity_id, file_name)

        exists = await asyncio.to_thread(self.client.check_object_exists, object_key)
        if not exists:
            asset_operations_total.labels(category=self.category.name, operation="lookup", status="not_found").inc()
            logger.info(
                f"{self.category.label.capitalize()} not found: {object_key}",
                extra={"event": "asset_not_found", "category": self.category.name, "object_key": object_key}
            )
            raise AssetNotFoundError(object_key)

        url = await asyncio.to_thread(self.client.get_object_url, object_key)
        asset_operations_total.labels(category=self.category.name, operation="lookup", status="ok").inc()
        return url

    async def delete(self, entity_id: str, file_name: str) -> bool:
        """
        Delete a stored file.

        Deleting a file that no longer exists succeeds.
        """
        object_key = self.object_key(entity_id, file_name)
        success = await asyncio.to_thread(self.client.delete_object, object_key)
        asset_operations_total.labels(
            category=self.category.name,
            operation="delete",
            status="ok" if success else "error"
        ).inc()
        return success


_avatar_store: Optional[AssetStore] = None
_tutoring_image_store: Optional[AssetStore] = None


def get_avatar_store() -> AssetStore:
    """Asset store for user avatars (FastAPI dependency)."""
    global _avatar_store
    if _avatar_store is None:
        _avatar_store = AssetStore(AVATARS, get_r2_client())
    return _avatar_store


def get_tutoring_image_store() -> AssetStore:
    """Asset store for tutoring session images (FastAPI dependency)."""
    global _tutoring_image_store
    if _tutoring_image_store is None:
        _tutoring_image_store = AssetStore(TUTORING_IMAGES, get_r2_client())
    return _tutoring_image_store
