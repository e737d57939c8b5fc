"""Unit tests for ContentRegistrarService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hashsign.application.services.content_registrar_service import (
    DEFAULT_CONTENT_NAME,
    ContentRegistrarService,
)
from hashsign.config import DEFAULT_MAX_PAYLOAD_BYTES
from hashsign.domain.errors import (
    ContentNotFoundError,
    FetchFailedError,
    PayloadTooLargeError,
    TransportError,
    UploadFailedError,
)
from hashsign.infrastructure.monitoring.metrics import get_metrics_collector
from hashsign.infrastructure.stubs.blob_store_stub import BlobStoreStub


class TestStore:
    """Tests for store()."""

    @pytest.mark.asyncio
    async def test_round_trip(self, registrar: ContentRegistrarService) -> None:
        payload = b"%PDF-1.7 contract"
        content_id = await registrar.store(payload)
        assert await registrar.fetch(content_id) == payload

    @pytest.mark.asyncio
    async def test_default_name_recorded(
        self, registrar: ContentRegistrarService, blob_store: BlobStoreStub
    ) -> None:
        content_id = await registrar.store(b"x")
        assert blob_store.name_of(content_id) == DEFAULT_CONTENT_NAME

    @pytest.mark.asyncio
    async def test_custom_name_recorded(
        self, registrar: ContentRegistrarService, blob_store: BlobStoreStub
    ) -> None:
        content_id = await registrar.store(b"x", name="lease.pdf")
        assert blob_store.name_of(content_id) == "lease.pdf"

    @pytest.mark.asyncio
    async def test_oversized_payload_never_reaches_blob_store(
        self, registrar: ContentRegistrarService, blob_store: BlobStoreStub
    ) -> None:
        payload = b"\0" * (DEFAULT_MAX_PAYLOAD_BYTES + 1)

        with pytest.raises(PayloadTooLargeError) as exc_info:
            await registrar.store(payload)

        assert exc_info.value.limit == DEFAULT_MAX_PAYLOAD_BYTES
        assert blob_store.upload_calls == 0

    @pytest.mark.asyncio
    async def test_payload_at_limit_accepted(self, blob_store: BlobStoreStub) -> None:
        registrar = ContentRegistrarService(blob_store=blob_store, max_payload_bytes=4)
        await registrar.store(b"1234")
        assert blob_store.upload_calls == 1

    @pytest.mark.asyncio
    async def test_explicit_size_limit_overrides_default(
        self, registrar: ContentRegistrarService, blob_store: BlobStoreStub
    ) -> None:
        with pytest.raises(PayloadTooLargeError):
            await registrar.store(b"12345", size_limit=4)
        assert blob_store.upload_calls == 0

    @pytest.mark.asyncio
    async def test_upload_failure_surfaces_without_retry(
        self, registrar: ContentRegistrarService, blob_store: BlobStoreStub
    ) -> None:
        blob_store.fail_next_upload()

        with pytest.raises(UploadFailedError):
            await registrar.store(b"x")
        assert blob_store.upload_calls == 1

    @pytest.mark.asyncio
    async def test_transport_error_wrapped_as_upload_failure(self) -> None:
        blob_store = MagicMock()
        blob_store.upload = AsyncMock(side_effect=TransportError("reset", service="blob_store"))
        registrar = ContentRegistrarService(blob_store=blob_store)

        with pytest.raises(UploadFailedError) as exc_info:
            await registrar.store(b"x")
        assert isinstance(exc_info.value.__cause__, TransportError)

    @pytest.mark.asyncio
    async def test_upload_size_recorded(self, registrar: ContentRegistrarService) -> None:
        await registrar.store(b"x" * 2048)

        registry = get_metrics_collector().get_registry()
        count = registry.get_sample_value(
            "hashsign_upload_bytes_count",
            {"service": "hashsign-api", "environment": "production"},
        )
        assert count == 1.0


class TestFetch:
    """Tests for fetch()."""

    @pytest.mark.asyncio
    async def test_unknown_content(self, registrar: ContentRegistrarService) -> None:
        with pytest.raises(ContentNotFoundError):
            await registrar.fetch("QmUnknown")

    @pytest.mark.asyncio
    async def test_unknown_content_is_fetch_failure(
        self, registrar: ContentRegistrarService
    ) -> None:
        with pytest.raises(FetchFailedError):
            await registrar.fetch("QmUnknown")

    @pytest.mark.asyncio
    async def test_transfer_failure(
        self, registrar: ContentRegistrarService, blob_store: BlobStoreStub
    ) -> None:
        content_id = await registrar.store(b"x")
        blob_store.fail_next_download()

        with pytest.raises(FetchFailedError):
            await registrar.fetch(content_id)

    @pytest.mark.asyncio
    async def test_transport_error_wrapped_as_fetch_failure(self) -> None:
        blob_store = MagicMock()
        blob_store.download = AsyncMock(side_effect=TransportError("reset"))
        registrar = ContentRegistrarService(blob_store=blob_store)

        with pytest.raises(FetchFailedError) as exc_info:
            await registrar.fetch("QmA")
        assert exc_info.value.content_id == "QmA"

    @pytest.mark.asyncio
    async def test_no_caching(
        self, registrar: ContentRegistrarService, blob_store: BlobStoreStub
    ) -> None:
        content_id = await registrar.store(b"x")
        await registrar.fetch(content_id)
        await registrar.fetch(content_id)
        assert blob_store.download_calls == 2


def test_content_url(registrar: ContentRegistrarService) -> None:
    assert registrar.content_url("QmA") == "https://gateway.example.test/ipfs/QmA"
