"""
Wedding Gallery Backend — API Integration Tests
=================================================

What:  End-to-end tests for every HTTP endpoint.
How:   HTTPX AsyncClient against the ASGI app (no server), wired with the
       in-memory store and the fake media gateway from conftest.py.

What we test:
    ✅ POST/GET /api/blessings: create, ordering, 400s leave the store unchanged
    ✅ POST /upload: event folders, default folder, missing file, host failure
    ✅ GET /images/{event}: listing, empty event, host failure
    ✅ Error bodies carry {"error", "request_id"}; responses carry X-Request-ID
    ✅ /health and CORS
    ✅ Injected collaborators are used; lifespan runs store startup and close
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from wedding_api.config import Settings
from wedding_api.main import create_app
from wedding_api.services.database_store import DatabaseBlessingStore
from wedding_api.services.memory_store import InMemoryBlessingStore


# ══════════════════════════════════════════════════════════════════════════
# Blessings
# ══════════════════════════════════════════════════════════════════════════

class TestCreateBlessing:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_stored_blessing(self, test_client, memory_store):
        response = await test_client.post(
            "/api/blessings",
            json={"name": "Alice", "message": "Congrats!"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Alice"
        assert data["message"] == "Congrats!"
        assert data["timestamp"]
        assert data["id"] == 1
        assert len(memory_store) == 1

    @pytest.mark.asyncio
    async def test_created_blessing_listed_first(self, test_client):
        await test_client.post("/api/blessings", json={"name": "Zed", "message": "Earlier"})
        await test_client.post("/api/blessings", json={"name": "Alice", "message": "Congrats!"})

        response = await test_client.get("/api/blessings")

        assert response.status_code == 200
        data = response.json()
        assert [b["name"] for b in data] == ["Alice", "Zed"]
        assert data[0]["message"] == "Congrats!"

    @pytest.mark.asyncio
    async def test_client_timestamp_ignored(self, test_client):
        response = await test_client.post(
            "/api/blessings",
            json={"name": "Alice", "message": "Hi", "timestamp": "1999-01-01T00:00:00Z"},
        )

        assert response.status_code == 201
        assert not response.json()["timestamp"].startswith("1999")

    @pytest.mark.asyncio
    async def test_values_stored_trimmed(self, test_client):
        response = await test_client.post(
            "/api/blessings",
            json={"name": "  Alice  ", "message": " Congrats! "},
        )

        assert response.json()["name"] == "Alice"
        assert response.json()["message"] == "Congrats!"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"name": "Bob"},
            {"message": "Hi"},
            {},
            {"name": "", "message": "Hi"},
            {"name": "   ", "message": "Hi"},
            {"name": "Bob", "message": None},
        ],
    )
    async def test_missing_fields_rejected(self, test_client, memory_store, body):
        response = await test_client.post("/api/blessings", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Name and message are required"
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_empty_body_rejected(self, test_client, memory_store):
        response = await test_client.post("/api/blessings")

        assert response.status_code == 400
        assert response.json()["error"] == "Name and message are required"
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_malformed_json_rejected(self, test_client, memory_store):
        response = await test_client.post(
            "/api/blessings",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_wrong_field_type_rejected(self, test_client, memory_store):
        response = await test_client.post(
            "/api/blessings",
            json={"name": 123, "message": "Hi"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_rejection_does_not_change_listing(self, test_client):
        await test_client.post("/api/blessings", json={"name": "Alice", "message": "Congrats!"})
        before = (await test_client.get("/api/blessings")).json()

        await test_client.post("/api/blessings", json={"name": "Bob"})
        after = (await test_client.get("/api/blessings")).json()

        assert after == before


class TestListBlessings:

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client):
        response = await test_client.get("/api/blessings")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_newest_first(self, test_client):
        for name in ("first", "second", "third"):
            await test_client.post("/api/blessings", json={"name": name, "message": "msg"})

        data = (await test_client.get("/api/blessings")).json()

        assert [b["name"] for b in data] == ["third", "second", "first"]


class TestDurableStoreErrors:
    """A durable store that cannot be reached maps to 500."""

    @pytest.mark.asyncio
    async def test_store_failures_return_500(self, tmp_path, test_settings, fake_gateway):
        settings = Settings(
            _env_file=None,
            blessing_store="database",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'no_tables.db'}",
        )
        store = DatabaseBlessingStore.from_settings(settings)
        app = create_app(settings=test_settings, blessing_store=store, media_gateway=fake_gateway)

        try:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                post = await client.post(
                    "/api/blessings", json={"name": "Alice", "message": "Congrats!"}
                )
                get = await client.get("/api/blessings")
        finally:
            await store.close()

        assert post.status_code == 500
        assert post.json()["error"] == "Failed to save blessing"
        assert get.status_code == 500
        assert get.json()["error"] == "Failed to fetch blessings"

    @pytest.mark.asyncio
    async def test_database_store_round_trip(self, database_store, test_settings, fake_gateway):
        app = create_app(
            settings=test_settings,
            blessing_store=database_store,
            media_gateway=fake_gateway,
        )

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            created = await client.post(
                "/api/blessings", json={"name": "Alice", "message": "Congrats!"}
            )
            listed = await client.get("/api/blessings")

        assert created.status_code == 201
        assert listed.json()[0]["name"] == "Alice"
        assert listed.json()[0]["id"] == created.json()["id"]


# ══════════════════════════════════════════════════════════════════════════
# Media
# ══════════════════════════════════════════════════════════════════════════

class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_into_event_then_listed(self, test_client, sample_image_bytes):
        response = await test_client.post(
            "/upload",
            params={"event": "ceremony"},
            files={"file": ("photo1.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["folder"] == "wedding/private/ceremony"
        assert data["public_id"] == "wedding/private/ceremony/photo1"
        assert data["original_filename"] == "photo1.jpg"
        assert data["content_type"] == "image/jpeg"
        assert data["size"] == len(sample_image_bytes)

        listed = await test_client.get("/images/ceremony")
        assert listed.status_code == 200
        assert data["url"] in listed.json()["images"]

    @pytest.mark.asyncio
    async def test_upload_without_event_uses_uncategorized(
        self, test_client, fake_gateway, sample_image_bytes
    ):
        response = await test_client.post(
            "/upload",
            files={"file": ("x.png", sample_image_bytes, "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["folder"] == "wedding/private/Uncategorized"
        assert fake_gateway.store_calls[0]["folder"] == "wedding/private/Uncategorized"

    @pytest.mark.asyncio
    async def test_blank_event_uses_uncategorized(
        self, test_client, fake_gateway, sample_image_bytes
    ):
        response = await test_client.post(
            "/upload",
            params={"event": "  "},
            files={"file": ("x.png", sample_image_bytes, "image/png")},
        )

        assert response.status_code == 200
        assert fake_gateway.store_calls[0]["folder"] == "wedding/private/Uncategorized"

    @pytest.mark.asyncio
    async def test_no_file_field_returns_400(self, test_client, fake_gateway):
        response = await test_client.post(
            "/upload",
            params={"event": "ceremony"},
            data={"caption": "no file here"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"
        assert fake_gateway.store_calls == []

    @pytest.mark.asyncio
    async def test_text_file_field_returns_no_file_uploaded(self, test_client, fake_gateway):
        response = await test_client.post(
            "/upload",
            params={"event": "ceremony"},
            data={"file": "not-a-file"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"
        assert fake_gateway.store_calls == []

    @pytest.mark.asyncio
    async def test_multipart_text_file_field_returns_no_file_uploaded(
        self, test_client, fake_gateway, sample_image_bytes
    ):
        # The image is sent under another name; "file" is a plain form value
        response = await test_client.post(
            "/upload",
            data={"file": "not-a-file"},
            files={"attachment": ("photo1.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"
        assert fake_gateway.store_calls == []

    @pytest.mark.asyncio
    async def test_no_body_returns_400(self, test_client, fake_gateway):
        response = await test_client.post("/upload")

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"
        assert fake_gateway.store_calls == []

    @pytest.mark.asyncio
    async def test_empty_file_returns_400(self, test_client, fake_gateway):
        response = await test_client.post(
            "/upload",
            files={"file": ("empty.jpg", b"", "image/jpeg")},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"
        assert fake_gateway.store_calls == []

    @pytest.mark.asyncio
    async def test_host_failure_returns_500(self, test_client, fake_gateway, sample_image_bytes):
        fake_gateway.fail_uploads = True

        response = await test_client.post(
            "/upload",
            params={"event": "ceremony"},
            files={"file": ("photo1.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to upload image"
        assert "request_id" in response.json()


class TestListImages:

    @pytest.mark.asyncio
    async def test_empty_event(self, test_client):
        response = await test_client.get("/images/empty-event")

        assert response.status_code == 200
        assert response.json() == {"images": []}

    @pytest.mark.asyncio
    async def test_newest_first_and_isolated_per_event(self, test_client, sample_image_bytes):
        for name in ("a.jpg", "b.jpg"):
            await test_client.post(
                "/upload",
                params={"event": "ceremony"},
                files={"file": (name, sample_image_bytes, "image/jpeg")},
            )
        await test_client.post(
            "/upload",
            params={"event": "reception"},
            files={"file": ("c.jpg", sample_image_bytes, "image/jpeg")},
        )

        images = (await test_client.get("/images/ceremony")).json()["images"]

        assert len(images) == 2
        assert images[0].endswith("/ceremony/b.jpg")
        assert images[1].endswith("/ceremony/a.jpg")

    @pytest.mark.asyncio
    async def test_listing_capped_at_thirty(self, test_client, fake_gateway):
        fake_gateway.folders["wedding/private/big"] = [
            f"https://res.cloudinary.test/{i}.jpg" for i in range(35)
        ]

        images = (await test_client.get("/images/big")).json()["images"]

        assert len(images) == 30

    @pytest.mark.asyncio
    async def test_host_failure_returns_500(self, test_client, fake_gateway):
        fake_gateway.fail_listing = True

        response = await test_client.get("/images/ceremony")

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to fetch images"


# ══════════════════════════════════════════════════════════════════════════
# Application wiring & lifecycle
# ══════════════════════════════════════════════════════════════════════════

class TestAppWiring:

    def test_injected_empty_collaborators_are_used(self, test_settings, fake_gateway):
        store = InMemoryBlessingStore()
        assert len(store) == 0

        app = create_app(settings=test_settings, blessing_store=store, media_gateway=fake_gateway)

        assert app.state.blessing_store is store
        assert app.state.blessing_service.store is store
        assert app.state.media_gateway is fake_gateway

    def test_store_built_from_settings_when_not_injected(self, test_settings, fake_gateway):
        app = create_app(settings=test_settings, media_gateway=fake_gateway)

        assert isinstance(app.state.blessing_store, InMemoryBlessingStore)


class TestLifespan:
    """Startup/shutdown run the store's startup() and close()."""

    @pytest.mark.asyncio
    async def test_startup_creates_tables_and_shutdown_closes_store(
        self, tmp_path, test_settings, fake_gateway
    ):
        db_settings = Settings(
            _env_file=None,
            blessing_store="database",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'lifespan.db'}",
            db_create_tables=True,
        )
        store = DatabaseBlessingStore.from_settings(db_settings)
        store.close = AsyncMock(wraps=store.close)
        # test_settings has no Cloudinary credentials: startup must still succeed
        app = create_app(settings=test_settings, blessing_store=store, media_gateway=fake_gateway)

        async with app.router.lifespan_context(app):
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                created = await client.post(
                    "/api/blessings", json={"name": "Alice", "message": "Congrats!"}
                )
                listed = await client.get("/api/blessings")
            store.close.assert_not_awaited()

        store.close.assert_awaited_once()
        assert created.status_code == 201
        assert listed.status_code == 200
        assert [b["name"] for b in listed.json()] == ["Alice"]


# ══════════════════════════════════════════════════════════════════════════
# Cross-cutting
# ══════════════════════════════════════════════════════════════════════════

class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/api/blessings")

        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_client_id_echoed_in_header_and_error_body(self, test_client):
        response = await test_client.post(
            "/api/blessings",
            json={"name": "Bob"},
            headers={"X-Request-ID": "trace-42"},
        )

        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"


class TestHealth:

    @pytest.mark.asyncio
    async def test_degraded_without_media_credentials(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["blessing_store"] == "memory"
        assert data["store"] == "available"
        assert data["media"] == "unconfigured"

    @pytest.mark.asyncio
    async def test_healthy_when_everything_reachable(self, memory_store, fake_gateway):
        settings = Settings(
            _env_file=None,
            cloudinary_cloud_name="demo",
            cloudinary_api_key="key",
            cloudinary_api_secret="secret",
        )
        app = create_app(settings=settings, blessing_store=memory_store, media_gateway=fake_gateway)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["media"] == "available"


class TestCors:

    @pytest.mark.asyncio
    async def test_allowed_origin(self, test_client):
        response = await test_client.get(
            "/api/blessings",
            headers={"Origin": "http://localhost:3000"},
        )

        assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"

    @pytest.mark.asyncio
    async def test_unlisted_origin_gets_no_cors_header(self, test_client):
        response = await test_client.get(
            "/api/blessings",
            headers={"Origin": "http://evil.example"},
        )

        assert "access-control-allow-origin" not in response.headers
