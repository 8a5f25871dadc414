"""
ASGI middleware that rejects oversized uploads before the body is read.

Multipart parsing spools the whole body before any route dependency runs,
so the declared Content-Length is checked here first. The chunked check in
the staging writer still applies to bodies without a Content-Length.
"""
import logging

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.config import settings
from app.storage.categories import CATEGORIES
from app.storage.validation import validate_size
from app.utils.metrics import uploads_total

logger = logging.getLogger(__name__)

# Boundaries, part headers and the small form fields
MULTIPART_OVERHEAD_BYTES = 64 * 1024

_UPLOAD_PATHS = {f"/storage/{name}": category for name, category in CATEGORIES.items()}


class UploadLimitMiddleware(BaseHTTPMiddleware):
    """Answer 413 for upload requests whose declared body exceeds the ceiling."""

    async def dispatch(self, request: Request, call_next):
        category = _UPLOAD_PATHS.get(request.url.path.rstrip("/"))
        if request.method != "POST" or category is None:
            return await call_next(request)

        try:
            declared = int(request.headers.get("content-length", ""))
        except ValueError:
            return await call_next(request)

        rejection = validate_size(declared - MULTIPART_OVERHEAD_BYTES, settings.max_upload_size_bytes)
        if rejection is None:
            return await call_next(request)

        uploads_total.labels(category=category.name, status="rejected").inc()
        logger.warning(
            f"Rejected {category.label} upload: {rejection.detail}",
            extra={
                "event": "upload_rejected",
                "category": category.name,
                "reason": rejection.reason,
                "content_length": declared,
            }
        )
        return JSONResponse(status_code=rejection.status_code, content={"detail": rejection.detail})
