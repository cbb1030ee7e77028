"""
Wedding Gallery Backend — Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings built without reading .env
    ├── memory_store: Fresh InMemoryBlessingStore
    ├── fake_gateway: FakeMediaGateway recording calls, no network
    ├── database_store: DatabaseBlessingStore on a temporary SQLite file
    ├── sample_image_bytes: Fake image content for upload tests
    └── test_client: HTTPX AsyncClient over an app wired with the fakes above
"""

import os
from collections import defaultdict
from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any app imports: importing wedding_api.main builds the default app
os.environ["BLESSING_STORE"] = "memory"
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from wedding_api.config import Settings  # noqa: E402
from wedding_api.exceptions import (  # noqa: E402
    FetchFailedError,
    NoFileProvidedError,
    UploadFailedError,
)
from wedding_api.schemas.media import UploadedImage  # noqa: E402
from wedding_api.services.database_store import DatabaseBlessingStore  # noqa: E402
from wedding_api.services.media_base import (  # noqa: E402
    MAX_LISTED_IMAGES,
    MediaGateway,
    public_id_from_filename,
)
from wedding_api.services.memory_store import InMemoryBlessingStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class FakeMediaGateway(MediaGateway):
    """
    In-process stand-in for the media host.

    Applies the real folder/public-id naming rules, keeps each folder's
    URLs newest first, and records every store/list call. Set
    `fail_uploads` / `fail_listing` to simulate host errors.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.folders: Dict[str, List[str]] = defaultdict(list)
        self.store_calls: List[dict] = []
        self.list_calls: List[str] = []
        self.fail_uploads = False
        self.fail_listing = False

    async def store_image(
        self,
        event: Optional[str],
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str] = None,
    ) -> UploadedImage:
        if not content:
            raise NoFileProvidedError()
        folder = self.folder_for(event)
        public_id = f"{folder}/{public_id_from_filename(filename) or 'generated'}"
        self.store_calls.append(
            {"folder": folder, "public_id": public_id, "content_type": content_type}
        )
        if self.fail_uploads:
            raise UploadFailedError(context={"folder": folder})

        url = f"https://res.cloudinary.test/image/upload/{public_id}.jpg"
        self.folders[folder].insert(0, url)
        return UploadedImage(
            url=url,
            public_id=public_id,
            folder=folder,
            original_filename=filename,
            content_type=content_type,
            size=len(content),
        )

    async def list_images(self, event: Optional[str]) -> List[str]:
        folder = self.folder_for(event)
        self.list_calls.append(folder)
        if self.fail_listing:
            raise FetchFailedError(context={"folder": folder})
        return list(self.folders.get(folder, []))[:MAX_LISTED_IMAGES]

    async def health_check(self) -> bool:
        return True


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings():
    """Settings independent of the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        blessing_store="memory",
        cloudinary_cloud_name="",
        cloudinary_api_key="",
        cloudinary_api_secret="",
        cors_origins="http://localhost:3000",
        log_level="WARNING",
    )


@pytest.fixture
def memory_store():
    return InMemoryBlessingStore()


@pytest.fixture
def fake_gateway():
    return FakeMediaGateway()


@pytest_asyncio.fixture
async def database_store(tmp_path):
    """
    DatabaseBlessingStore on a throwaway SQLite file, tables created.
    """
    settings = Settings(
        _env_file=None,
        blessing_store="database",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'blessings.db'}",
        db_create_tables=True,
    )
    store = DatabaseBlessingStore.from_settings(settings)
    await store.startup()
    yield store
    await store.close()


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def test_client(test_settings, memory_store, fake_gateway):
    """
    HTTPX AsyncClient talking to an app wired with the in-memory store and
    the fake gateway. ASGITransport does not run the lifespan, which these
    collaborators do not need.
    """
    from wedding_api.main import create_app

    app = create_app(
        settings=test_settings,
        blessing_store=memory_store,
        media_gateway=fake_gateway,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
