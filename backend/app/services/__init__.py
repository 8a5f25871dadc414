"""
Business logic services.
"""
from app.services.upload_service import StagedUpload, UploadService

__all__ = [
    "StagedUpload",
    "UploadService",
]
