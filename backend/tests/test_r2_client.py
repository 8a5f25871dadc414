"""
Tests for the R2 client, using botocore's Stubber instead of a live bucket.
"""
import pytest
from botocore.stub import Stubber

from app.config import settings
from app.storage.exceptions import StorageBackendError, StorageNotConfiguredError
from app.storage.r2_client import R2Client


@pytest.fixture
def r2(monkeypatch) -> R2Client:
    monkeypatch.setattr(settings, "r2_endpoint", "https://account.r2.test")
    monkeypatch.setattr(settings, "r2_access_key", "test-key")
    monkeypatch.setattr(settings, "r2_secret_key", "test-secret")
    monkeypatch.setattr(settings, "r2_bucket", "test-bucket")
    monkeypatch.setattr(settings, "r2_public_base_url", None)
    return R2Client()


@pytest.fixture
def unconfigured_r2(monkeypatch) -> R2Client:
    monkeypatch.setattr(settings, "r2_endpoint", None)
    return R2Client()


class TestR2Client:
    """Tests for R2Client."""

    def test_configured(self, r2: R2Client):
        assert r2.is_configured
        assert r2.bucket == "test-bucket"

    def test_upload_object(self, r2: R2Client):
        with Stubber(r2._client) as stubber:
            stubber.add_response("put_object", {})
            r2.upload_object("avatars/u1/a.png", b"data", "image/png")
            stubber.assert_no_pending_responses()

    def test_upload_object_error(self, r2: R2Client):
        with Stubber(r2._client) as stubber:
            stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
            with pytest.raises(StorageBackendError):
                r2.upload_object("avatars/u1/a.png", b"data", "image/png")

    def test_check_object_exists(self, r2: R2Client):
        with Stubber(r2._client) as stubber:
            stubber.add_response("head_object", {"ContentLength": 4})
            stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)

            assert r2.check_object_exists("avatars/u1/a.png") is True
            assert r2.check_object_exists("avatars/u1/missing.png") is False

    def test_delete_missing_object_succeeds(self, r2: R2Client):
        with Stubber(r2._client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="NoSuchKey", http_status_code=404)

            assert r2.delete_object("avatars/u1/a.png") is True

    def test_delete_failure(self, r2: R2Client):
        with Stubber(r2._client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)

            assert r2.delete_object("avatars/u1/a.png") is False

    def test_presigned_url(self, r2: R2Client):
        url = r2.get_object_url("avatars/u1/a.png", expiration=60)

        assert "avatars/u1/a.png" in url
        assert "X-Amz-Signature" in url

    def test_public_url(self, r2: R2Client, monkeypatch):
        monkeypatch.setattr(settings, "r2_public_base_url", "https://media.example.com/")

        assert r2.get_object_url("avatars/u1/a.png") == "https://media.example.com/avatars/u1/a.png"

    def test_not_configured(self, unconfigured_r2: R2Client):
        assert not unconfigured_r2.is_configured
        with pytest.raises(StorageNotConfiguredError):
            unconfigured_r2.upload_object("k", b"", "image/png")
