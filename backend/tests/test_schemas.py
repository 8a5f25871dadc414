"""
Tests for Pydantic schemas and validation results.
"""
import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from app.schemas.storage import StoredFile, FileUrlResponse, DeleteResponse
from app.storage.validation import (
    REASON_TOO_LARGE,
    REASON_UNSUPPORTED_TYPE,
    raise_for_rejection,
    validate_content_type,
    validate_size,
)


class TestStorageSchemas:
    """Tests for storage response schemas."""

    def test_stored_file_valid(self):
        schema = StoredFile(
            entity_id="u1",
            file_name="photo.png",
            object_key="avatars/u1/photo.png",
            mime_type="image/png",
            size_bytes=1024,
            url="https://media.test/avatars/u1/photo.png",
            category="avatars"
        )
        assert schema.url == "https://media.test/avatars/u1/photo.png"
        assert schema.model_dump()["size_bytes"] == 1024

    def test_stored_file_requires_url(self):
        with pytest.raises(ValidationError):
            StoredFile(
                entity_id="u1",
                file_name="photo.png",
                object_key="avatars/u1/photo.png",
                mime_type="image/png",
                size_bytes=1024,
                category="avatars"
            )

    def test_url_and_delete_responses(self):
        assert FileUrlResponse(url="https://x").model_dump() == {"url": "https://x"}
        assert DeleteResponse(success=False).model_dump() == {"success": False}


class TestUploadValidation:
    """Tests for the upload validator."""

    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/png", "image/gif", "image/webp", "image/jpg"])
    def test_allowed_types(self, content_type: str):
        assert validate_content_type(content_type) is None

    def test_allowed_type_case_insensitive(self):
        assert validate_content_type("IMAGE/PNG") is None

    def test_disallowed_type_named(self):
        rejection = validate_content_type("text/plain")

        assert rejection.reason == REASON_UNSUPPORTED_TYPE
        assert rejection.status_code == 400
        assert "text/plain" in rejection.detail

    def test_missing_type_rejected(self):
        assert validate_content_type(None) is not None

    def test_svg_rejected(self):
        assert validate_content_type("image/svg+xml") is not None

    def test_size_limits(self):
        limit = 5 * 1024 * 1024

        assert validate_size(None) is None
        assert validate_size(limit) is None
        rejection = validate_size(limit + 1)
        assert rejection.reason == REASON_TOO_LARGE
        assert rejection.status_code == 413

    def test_custom_size_limit(self):
        assert validate_size(11, max_size=10) is not None

    def test_raise_for_rejection(self):
        raise_for_rejection(None)

        with pytest.raises(HTTPException) as exc_info:
            raise_for_rejection(validate_content_type("application/pdf"))

        assert exc_info.value.status_code == 400
        assert "application/pdf" in exc_info.value.detail
