"""
Upload handling shared by every asset category.

Flow for one request:
1. StagedUpload (FastAPI dependency) validates the file's MIME type and
   size, then copies it to the category's staging directory
2. UploadService.handle_upload checks the owner ID and the file, reads the
   staged bytes and hands them to the category's AssetStore
3. The staging file is removed on every exit path
"""
import logging
import time
from typing import AsyncGenerator, Optional

from fastapi import Depends, File, HTTPException, UploadFile, status

from app.config import settings
from app.schemas.storage import StoredFile
from app.storage.asset_store import AssetStore, UploadPayload
from app.storage.categories import AssetCategory
from app.storage.staging import StagedFile, stage_upload, read_staged_file, discard_staged_file
from app.storage.temp_dirs import TempDirectories, get_temp_directories
from app.storage.validation import validate_content_type, validate_size, raise_for_rejection
from app.utils.logging import log_upload_received, log_upload_completed, log_upload_failed
from app.utils.metrics import uploads_total, upload_size_bytes

logger = logging.getLogger(__name__)


class StagedUpload:
    """
    Dependency that validates and stages the multipart `file` field.

    Yields None when no file was sent so the handler can report it. The
    staged file is removed again when the request finishes, whatever the
    handler did with it.
    """

    def __init__(self, category: AssetCategory):
        self.category = category

    async def __call__(
        self,
        file: Optional[UploadFile] = File(None, description="Image file (jpeg, png, gif, webp), max 5MB"),
        temp_dirs: TempDirectories = Depends(get_temp_directories),
    ) -> AsyncGenerator[Optional[StagedFile], None]:
        if file is None or not file.filename:
            yield None
            return

        rejection = validate_content_type(file.content_type) or validate_size(file.size)
        if rejection is not None:
            uploads_total.labels(category=self.category.name, status="rejected").inc()
            logger.warning(
                f"Rejected {self.category.label} upload: {rejection.detail}",
                extra={
                    "event": "upload_rejected",
                    "category": self.category.name,
                    "reason": rejection.reason,
                    "mime_type": file.content_type,
                }
            )
            raise_for_rejection(rejection)

        try:
            staged = await stage_upload(
                file,
                temp_dirs.for_category(self.category),
                settings.max_upload_size_bytes,
                self.category
            )
        except HTTPException:
            uploads_total.labels(category=self.category.name, status="rejected").inc()
            raise

        try:
            yield staged
        finally:
            await discard_staged_file(staged, self.category)


class UploadService:
    """Service for the upload handler logic."""

    @staticmethod
    async def handle_upload(
        store: AssetStore,
        entity_id: Optional[str],
        staged: Optional[StagedFile],
        desired_name: Optional[str] = None
    ) -> StoredFile:
        """
        Forward a staged upload to the asset store.

        Args:
            store: Asset store of the category being uploaded to
            entity_id: Owner ID from the form (user or tutoring session)
            staged: The staged file, None if no file was received
            desired_name: Optional name to store the file under

        Returns:
            StoredFile with the URL of the stored asset

        Raises:
            HTTPException 400: Missing owner ID, missing file, or a storage
                failure that carried no HTTP status of its own
            HTTPException: Storage failures that already carry a status are
                re-raised unchanged
        """
        category = store.category
        start_time = time.time()

        log_upload_received(
            logger,
            category=category.name,
            entity_id=entity_id,
            original_name=staged.original_name if staged else None,
            mime_type=staged.mime_type if staged else None,
            size_bytes=staged.size if staged else None,
            staging_path=str(staged.path) if staged else None,
        )

        try:
            if not entity_id or not entity_id.strip():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=category.missing_entity_message
                )

            if staged is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="No file was received"
                )

            data = await read_staged_file(staged)

            result = await store.upload(
                entity_id,
                UploadPayload(
                    data=data,
                    original_name=staged.original_name,
                    mime_type=staged.mime_type,
                    size=staged.size,
                ),
                desired_name
            )

            uploads_total.labels(category=category.name, status="ok").inc()
            upload_size_bytes.labels(category=category.name).observe(staged.size)
            log_upload_completed(
                logger,
                category=category.name,
                entity_id=entity_id,
                url=result.url,
                file_name=result.file_name,
                duration_ms=(time.time() - start_time) * 1000,
            )
            return result

        except Exception as e:
            uploads_total.labels(category=category.name, status="error").inc()
            log_upload_failed(
                logger,
                category=category.name,
                entity_id=entity_id,
                error=getattr(e, "detail", None) or str(e),
                duration_ms=(time.time() - start_time) * 1000,
            )

            if isinstance(e, HTTPException):
                raise

            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Failed to process {category.label}: {e}"
            ) from e

        finally:
            await discard_staged_file(staged, category)
