"""
Pydantic schemas for API request/response validation.
"""
from app.schemas.storage import (
    StoredFile,
    FileUrlResponse,
    DeleteResponse,
)

__all__ = [
    "StoredFile",
    "FileUrlResponse",
    "DeleteResponse",
]
