"""
Upload validation.

Checks run before any handler logic touches the file: the declared MIME
type against the allow-list and the size against the ceiling. Each check
returns an UploadRejection instead of raising, so callers decide how to
surface it; `raise_for_rejection` turns one into an HTTPException.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import HTTPException, status

from app.config import settings

REASON_UNSUPPORTED_TYPE = "unsupported_type"
REASON_TOO_LARGE = "too_large"


@dataclass(frozen=True)
class UploadRejection:
    """Why an upload was refused, and how to answer the client."""
    reason: str
    status_code: int
    detail: str


def validate_content_type(
    content_type: Optional[str],
    allowed: Optional[Iterable[str]] = None
) -> Optional[UploadRejection]:
    """
    Validate the declared MIME type of an upload.

    Args:
        content_type: MIME type sent by the client (may be missing)
        allowed: Allow-list, defaults to settings.allowed_mime_types

    Returns:
        None when accepted, an UploadRejection naming the type otherwise
    """
    allowed = settings.allowed_mime_types if allowed is None else allowed
    if content_type and content_type.lower() in allowed:
        return None

    return UploadRejection(
        reason=REASON_UNSUPPORTED_TYPE,
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"File type not allowed: {content_type}"
    )


def validate_size(size: Optional[int], max_size: Optional[int] = None) -> Optional[UploadRejection]:
    """
    Validate an upload size against the ceiling.

    An unknown size passes; the staging writer enforces the ceiling again
    while copying chunks.
    """
    max_size = settings.max_upload_size_bytes if max_size is None else max_size
    if size is None or size <= max_size:
        return None

    return UploadRejection(
        reason=REASON_TOO_LARGE,
        status_code=413,
        detail=f"File exceeds the maximum size of {max_size} bytes"
    )


def raise_for_rejection(rejection: Optional[UploadRejection]) -> None:
    """Raise the HTTPException for a rejection, do nothing for None."""
    if rejection is not None:
        raise HTTPException(status_code=rejection.status_code, detail=rejection.detail)
