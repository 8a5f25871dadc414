"""
Pydantic schemas for storage endpoints.
"""
from pydantic import BaseModel, Field


class StoredFile(BaseModel):
    """A file persisted in the object store."""
    entity_id: str = Field(..., description="ID of the owning user or tutoring session")
    file_name: str = Field(..., description="Name of the file under its owner")
    object_key: str = Field(..., description="Object key in storage bucket")
    mime_type: str = Field(..., description="MIME type of the file")
    size_bytes: int = Field(..., description="File size in bytes")
    url: str = Field(..., description="URL to fetch the file")
    category: str = Field(..., description="Asset category (avatars, tutoring-images)")

    model_config = {
        "json_schema_extra": {
            "example": {
                "entity_id": "u1",
                "file_name": "profile.png",
                "object_key": "avatars/u1/profile.png",
                "mime_type": "image/png",
                "size_bytes": 1024,
                "url": "https://media.example.com/avatars/u1/profile.png",
                "category": "avatars"
            }
        }
    }


class FileUrlResponse(BaseModel):
    """Response schema for URL lookup."""
    url: str


class DeleteResponse(BaseModel):
    """Response schema for deletion."""
    success: bool
