"""Unit tests for PinataBlobStore.

The HTTP client is replaced by a mock; responses are MagicMocks carrying a
status code and a JSON body.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from hashsign.config import BlobStoreConfig
from hashsign.domain.errors import ContentNotFoundError, FetchFailedError, UploadFailedError
from hashsign.infrastructure.adapters.pinata_blob_store import PinataBlobStore


def _response(status_code: int, body=None, content: bytes = b"") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.text = json.dumps(body) if body is not None else ""
    if body is None:
        response.json = MagicMock(side_effect=ValueError("no json"))
    else:
        response.json = MagicMock(return_value=body)
    return response


@pytest.fixture
def config() -> BlobStoreConfig:
    return BlobStoreConfig(
        api_url="https://api.pinata.test/",
        gateway_url="https://gw.pinata.test",
        api_key="key",
        secret_api_key="secret",
    )


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.post = AsyncMock()
    client.get = AsyncMock()
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def blob_store(config: BlobStoreConfig, client: MagicMock) -> PinataBlobStore:
    return PinataBlobStore(config, client=client)


class TestUpload:
    @pytest.mark.asyncio
    async def test_pins_file(self, blob_store: PinataBlobStore, client: MagicMock) -> None:
        client.post.return_value = _response(200, {"IpfsHash": "QmHash", "PinSize": 8})

        content_id = await blob_store.upload(b"contract", "contract.pdf")

        assert content_id == "QmHash"
        call = client.post.call_args
        assert call.args[0] == "https://api.pinata.test/pinning/pinFileToIPFS"
        assert call.kwargs["headers"] == {
            "pinata_api_key": "key",
            "pinata_secret_api_key": "secret",
        }
        assert call.kwargs["files"]["file"] == (
            "contract.pdf",
            b"contract",
            "application/octet-stream",
        )
        assert json.loads(call.kwargs["data"]["pinataMetadata"]) == {"name": "contract.pdf"}
        assert json.loads(call.kwargs["data"]["pinataOptions"]) == {"cidVersion": 0}

    @pytest.mark.asyncio
    async def test_rejected_upload(
        self, blob_store: PinataBlobStore, client: MagicMock
    ) -> None:
        client.post.return_value = _response(401, {"error": "Invalid API key"})

        with pytest.raises(UploadFailedError, match="Invalid API key"):
            await blob_store.upload(b"x", "x")

    @pytest.mark.asyncio
    async def test_response_without_hash(
        self, blob_store: PinataBlobStore, client: MagicMock
    ) -> None:
        client.post.return_value = _response(200, {"PinSize": 1})

        with pytest.raises(UploadFailedError, match="IpfsHash"):
            await blob_store.upload(b"x", "x")

    @pytest.mark.asyncio
    async def test_timeout(self, blob_store: PinataBlobStore, client: MagicMock) -> None:
        client.post.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(UploadFailedError, match="timed out"):
            await blob_store.upload(b"x", "x")

    @pytest.mark.asyncio
    async def test_connection_error(
        self, blob_store: PinataBlobStore, client: MagicMock
    ) -> None:
        client.post.side_effect = httpx.ConnectError("refused")

        with pytest.raises(UploadFailedError) as exc_info:
            await blob_store.upload(b"x", "x")
        assert exc_info.value.service == "blob_store"


class TestDownload:
    @pytest.mark.asyncio
    async def test_reads_through_gateway(
        self, blob_store: PinataBlobStore, client: MagicMock
    ) -> None:
        client.get.return_value = _response(200, content=b"%PDF")

        assert await blob_store.download("QmHash") == b"%PDF"
        client.get.assert_awaited_once_with("https://gw.pinata.test/ipfs/QmHash")

    @pytest.mark.asyncio
    async def test_unknown_content(
        self, blob_store: PinataBlobStore, client: MagicMock
    ) -> None:
        client.get.return_value = _response(404)

        with pytest.raises(ContentNotFoundError):
            await blob_store.download("QmMissing")

    @pytest.mark.asyncio
    async def test_gateway_failure(
        self, blob_store: PinataBlobStore, client: MagicMock
    ) -> None:
        client.get.return_value = _response(504)

        with pytest.raises(FetchFailedError) as exc_info:
            await blob_store.download("QmHash")
        assert not isinstance(exc_info.value, ContentNotFoundError)

    @pytest.mark.asyncio
    async def test_connection_error(
        self, blob_store: PinataBlobStore, client: MagicMock
    ) -> None:
        client.get.side_effect = httpx.ConnectError("refused")

        with pytest.raises(FetchFailedError) as exc_info:
            await blob_store.download("QmHash")
        assert exc_info.value.content_id == "QmHash"


@pytest.mark.asyncio
async def test_context_manager_closes_client(
    config: BlobStoreConfig, client: MagicMock
) -> None:
    async with PinataBlobStore(config, client=client):
        pass
    client.aclose.assert_awaited_once()
