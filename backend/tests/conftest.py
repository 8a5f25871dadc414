"""
Test configuration and fixtures.
The object store is replaced by an in-memory fake and staging directories
live under pytest's tmp_path.
"""
import os

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"

import pytest
from pathlib import Path
from typing import AsyncGenerator, Callable, Dict, Optional, Tuple

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from app.storage.asset_store import AssetStore
from app.storage.categories import AVATARS, TUTORING_IMAGES
from app.storage.temp_dirs import TempDirectories

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 1016  # 1KB


class InMemoryObjectClient:
    """Stands in for R2Client; keeps objects in a dict."""

    def __init__(self):
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.configured = True
        self.upload_error: Optional[Exception] = None
        self.lookup_error: Optional[Exception] = None
        self.delete_result: Optional[bool] = None
        self.on_upload: Optional[Callable[[str], None]] = None

    @property
    def is_configured(self) -> bool:
        return self.configured

    def upload_object(self, object_key: str, data: bytes, content_type: str) -> None:
        if self.on_upload:
            self.on_upload(object_key)
        if self.upload_error:
            raise self.upload_error
        self.objects[object_key] = (data, content_type)

    def check_object_exists(self, object_key: str) -> bool:
        if self.lookup_error:
            raise self.lookup_error
        return object_key in self.objects

    def get_object_url(self, object_key: str, expiration: Optional[int] = None) -> str:
        return f"https://media.test/{object_key}"

    def delete_object(self, object_key: str) -> bool:
        if self.delete_result is not None:
            return self.delete_result
        self.objects.pop(object_key, None)
        return True


@pytest.fixture
def temp_dirs(tmp_path: Path) -> TempDirectories:
    """Staging directories rooted in tmp_path."""
    return TempDirectories(tmp_path / "tmp")


@pytest.fixture
def object_client() -> InMemoryObjectClient:
    return InMemoryObjectClient()


@pytest.fixture
def avatar_store(object_client: InMemoryObjectClient) -> AssetStore:
    return AssetStore(AVATARS, object_client)


@pytest.fixture
def tutoring_image_store(object_client: InMemoryObjectClient) -> AssetStore:
    return AssetStore(TUTORING_IMAGES, object_client)


def get_test_app(
    temp_dirs: TempDirectories,
    object_client: InMemoryObjectClient,
    avatar_store: AssetStore,
    tutoring_image_store: AssetStore,
) -> FastAPI:
    """Create a test FastAPI app with overridden dependencies."""
    from app.main import app
    from app.storage.asset_store import get_avatar_store, get_tutoring_image_store
    from app.storage.r2_client import get_r2_client
    from app.storage.temp_dirs import get_temp_directories

    app.dependency_overrides[get_temp_directories] = lambda: temp_dirs
    app.dependency_overrides[get_r2_client] = lambda: object_client
    app.dependency_overrides[get_avatar_store] = lambda: avatar_store
    app.dependency_overrides[get_tutoring_image_store] = lambda: tutoring_image_store

    return app


@pytest.fixture
async def client(
    temp_dirs: TempDirectories,
    object_client: InMemoryObjectClient,
    avatar_store: AssetStore,
    tutoring_image_store: AssetStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = get_test_app(temp_dirs, object_client, avatar_store, tutoring_image_store)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()


def staged_files(temp_dirs: TempDirectories) -> list:
    """All files currently in any staging directory."""
    return [entry for path in temp_dirs.category_dirs.values() for entry in path.iterdir()]
