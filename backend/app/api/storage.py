"""
Storage endpoints for user avatars and tutoring session images.

Each category exposes the same three operations:
- POST   /storage/<category>                        upload (multipart)
- GET    /storage/<category>/{entity_id}/{file_name} resolve URL
- DELETE /storage/<category>/{entity_id}/{file_name} delete

Uploads are validated and staged on local disk before being forwarded to
the object store; the staged copy never outlives the request.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Path, status

from app.schemas.storage import StoredFile, FileUrlResponse, DeleteResponse
from app.services.upload_service import StagedUpload, UploadService
from app.storage.asset_store import AssetStore, get_avatar_store, get_tutoring_image_store
from app.storage.categories import AVATARS, TUTORING_IMAGES
from app.storage.staging import StagedFile
from app.utils.logging import log_asset_deleted

logger = logging.getLogger(__name__)

router = APIRouter()

stage_avatar = StagedUpload(AVATARS)
stage_tutoring_image = StagedUpload(TUTORING_IMAGES)


# ============================================================================
# Avatars
# ============================================================================

@router.post(
    "/avatars",
    response_model=StoredFile,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an avatar for a user",
    responses={
        400: {"description": "Missing user ID, missing file, or file type not allowed"},
        413: {"description": "File exceeds 5MB"},
    },
)
async def upload_avatar(
    staged: Optional[StagedFile] = Depends(stage_avatar),
    user_id: Optional[str] = Form(None, alias=AVATARS.entity_field, description="ID of the user"),
    file_name: Optional[str] = Form(None, alias="fileName", description="Name to store the file under"),
    store: AssetStore = Depends(get_avatar_store),
):
    """Upload an avatar image (jpeg, png, gif, webp; max 5MB)."""
    return await UploadService.handle_upload(store, user_id, staged, file_name)


@router.get(
    "/avatars/{user_id}/{file_name}",
    response_model=FileUrlResponse,
    summary="Get the URL of a user's avatar",
)
async def get_avatar_url(
    user_id: str = Path(..., description="ID of the user"),
    file_name: str = Path(..., description="Name of the file"),
    store: AssetStore = Depends(get_avatar_store),
):
    url = await store.get_url(user_id, file_name)
    return FileUrlResponse(url=url)


@router.delete(
    "/avatars/{user_id}/{file_name}",
    response_model=DeleteResponse,
    summary="Delete a user's avatar",
)
async def delete_avatar(
    user_id: str = Path(..., description="ID of the user"),
    file_name: str = Path(..., description="Name of the file"),
    store: AssetStore = Depends(get_avatar_store),
):
    success = await store.delete(user_id, file_name)
    log_asset_deleted(logger, category=AVATARS.name, entity_id=user_id, file_name=file_name, success=success)
    return DeleteResponse(success=success)


# ============================================================================
# Tutoring images
# ============================================================================

@router.post(
    "/tutoring-images",
    response_model=StoredFile,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image for a tutoring session",
    responses={
        400: {"description": "Missing tutoring ID, missing file, or file type not allowed"},
        413: {"description": "File exceeds 5MB"},
    },
)
async def upload_tutoring_image(
    staged: Optional[StagedFile] = Depends(stage_tutoring_image),
    tutoring_id: Optional[str] = Form(None, alias=TUTORING_IMAGES.entity_field, description="ID of the tutoring session"),
    file_name: Optional[str] = Form(None, alias="fileName", description="Name to store the file under"),
    store: AssetStore = Depends(get_tutoring_image_store),
):
    """Upload a tutoring session image (jpeg, png, gif, webp; max 5MB)."""
    return await UploadService.handle_upload(store, tutoring_id, staged, file_name)


@router.get(
    "/tutoring-images/{tutoring_id}/{file_name}",
    response_model=FileUrlResponse,
    summary="Get the URL of a tutoring session image",
)
async def get_tutoring_image_url(
    tutoring_id: str = Path(..., description="ID of the tutoring session"),
    file_name: str = Path(..., description="Name of the file"),
    store: AssetStore = Depends(get_tutoring_image_store),
):
    url = await store.get_url(tutoring_id, file_name)
    return FileUrlResponse(url=url)


@router.delete(
    "/tutoring-images/{tutoring_id}/{file_name}",
    response_model=DeleteResponse,
    summary="Delete a tutoring session image",
)
async def delete_tutoring_image(
    tutoring_id: str = Path(..., description="ID of the tutoring session"),
    file_name: str = Path(..., description="Name of the file"),
    store: AssetStore = Depends(get_tutoring_image_store),
):
    success = await store.delete(tutoring_id, file_name)
    log_asset_deleted(logger, category=TUTORING_IMAGES.name, entity_id=tutoring_id, file_name=file_name, success=success)
    return DeleteResponse(success=success)
