"""Pinata blob store adapter.

Stores payloads on IPFS through the Pinata pinning API and reads them back
through an IPFS gateway.

Upload:
    POST {api_url}/pinning/pinFileToIPFS
    multipart form: file, pinataMetadata {"name": ...}, pinataOptions {"cidVersion": 0}
    headers: pinata_api_key, pinata_secret_api_key
    response: {"IpfsHash": "<cid>", "PinSize": ..., "Timestamp": ...}

Download:
    GET {gateway_url}/ipfs/{cid}

Example:
    async with PinataBlobStore(config.blob_store) as blob_store:
        cid = await blob_store.upload(payload, "contract.pdf")
        assert await blob_store.download(cid) == payload
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from structlog import get_logger

from hashsign.config import BlobStoreConfig
from hashsign.domain.errors import (
    ContentNotFoundError,
    FetchFailedError,
    UploadFailedError,
)

logger = get_logger(__name__)

PIN_FILE_ENDPOINT = "/pinning/pinFileToIPFS"
CID_VERSION = 0


class PinataBlobStore:
    """BlobStoreProtocol implementation backed by Pinata and an IPFS gateway."""

    def __init__(
        self,
        config: BlobStoreConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Pinata API, gateway and credential settings.
            client: HTTP client to use; one is created when omitted.
        """
        self._config = config
        self._api_url = config.api_url.rstrip("/")
        self._gateway_url = config.gateway_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def __aenter__(self) -> PinataBlobStore:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def upload(self, payload: bytes, name: str) -> str:
        log = logger.bind(payload_size=len(payload), name=name)
        headers = {
            "pinata_api_key": self._config.api_key or "",
            "pinata_secret_api_key": self._config.secret_api_key or "",
        }
        files = {"file": (name, payload, "application/octet-stream")}
        data = {
            "pinataMetadata": json.dumps({"name": name}),
            "pinataOptions": json.dumps({"cidVersion": CID_VERSION}),
        }

        try:
            response = await self._client.post(
                f"{self._api_url}{PIN_FILE_ENDPOINT}",
                headers=headers,
                files=files,
                data=data,
            )
        except httpx.TimeoutException as e:
            raise UploadFailedError(
                f"Upload timed out after {self._config.timeout_seconds}s"
            ) from e
        except httpx.RequestError as e:
            raise UploadFailedError(f"Upload request failed: {e}") from e

        if response.status_code != 200:
            log.warning("Pinata rejected upload", status_code=response.status_code)
            raise UploadFailedError(
                f"Pinata returned {response.status_code}: {_error_detail(response)}"
            )

        try:
            content_id = response.json()["IpfsHash"]
        except (ValueError, KeyError, TypeError) as e:
            raise UploadFailedError("Pinata response carries no IpfsHash") from e

        log.debug("Payload pinned", content_id=content_id)
        return str(content_id)

    async def download(self, content_id: str) -> bytes:
        try:
            response = await self._client.get(self.content_url(content_id))
        except httpx.TimeoutException as e:
            raise FetchFailedError(
                content_id, f"Download timed out after {self._config.timeout_seconds}s"
            ) from e
        except httpx.RequestError as e:
            raise FetchFailedError(content_id, f"Download request failed: {e}") from e

        if response.status_code == 404:
            raise ContentNotFoundError(content_id)
        if response.status_code != 200:
            raise FetchFailedError(
                content_id, f"Gateway returned {response.status_code}"
            )
        return response.content

    def content_url(self, content_id: str) -> str:
        return f"{self._gateway_url}/ipfs/{content_id}"

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _error_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        return body["error"]
    return body
