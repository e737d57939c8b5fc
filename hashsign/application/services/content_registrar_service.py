"""Content registrar service.

Uploads document payloads to the blob store and fetches them back for
viewing. The registrar holds no state; every call goes to the blob store.

Rules:
- The size limit is checked before the blob store is contacted.
- Failures are surfaced to the caller and never retried here; the caller
  decides whether to call again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from structlog import get_logger

from hashsign.config import DEFAULT_MAX_PAYLOAD_BYTES
from hashsign.domain.errors import (
    FetchFailedError,
    PayloadTooLargeError,
    TransportError,
    UploadFailedError,
)
from hashsign.infrastructure.monitoring.metrics import get_metrics_collector

if TYPE_CHECKING:
    from hashsign.application.ports.blob_store import BlobStoreProtocol

logger = get_logger(__name__)

DEFAULT_CONTENT_NAME = "HashSign Document"


class ContentRegistrarService:
    """Service for storing and retrieving signed content.

    Example:
        >>> registrar = ContentRegistrarService(blob_store=PinataBlobStore(config))
        >>> content_id = await registrar.store(payload, name="contract.pdf")
        >>> assert await registrar.fetch(content_id) == payload
    """

    def __init__(
        self,
        blob_store: BlobStoreProtocol,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
    ) -> None:
        """Initialize the registrar.

        Args:
            blob_store: Content-addressed storage backend.
            max_payload_bytes: Default size limit for store().
        """
        self._blob_store = blob_store
        self._max_payload_bytes = max_payload_bytes

    @property
    def max_payload_bytes(self) -> int:
        return self._max_payload_bytes

    async def store(
        self,
        payload: bytes,
        size_limit: int | None = None,
        name: str | None = None,
    ) -> str:
        """Upload a payload and return its content identifier.

        Args:
            payload: Content to upload.
            size_limit: Maximum size in bytes; defaults to the configured limit.
            name: Name recorded with the upload.

        Returns:
            The identifier assigned by the blob store.

        Raises:
            PayloadTooLargeError: Payload exceeds the limit. The blob store
                is not contacted.
            UploadFailedError: Transport or service failure.
        """
        limit = self._max_payload_bytes if size_limit is None else size_limit
        log = logger.bind(payload_size=len(payload), size_limit=limit)

        if len(payload) > limit:
            log.warning("Upload rejected - payload too large")
            raise PayloadTooLargeError(size=len(payload), limit=limit)

        try:
            content_id = await self._blob_store.upload(payload, name or DEFAULT_CONTENT_NAME)
        except UploadFailedError:
            log.error("Upload failed")
            raise
        except TransportError as e:
            log.error("Upload failed", error=str(e))
            raise UploadFailedError(str(e)) from e

        log.info("Payload stored", content_id=content_id)
        get_metrics_collector().observe_upload_size(len(payload))
        return content_id

    async def fetch(self, content_id: str) -> bytes:
        """Retrieve a previously stored payload.

        Args:
            content_id: Identifier returned by store().

        Returns:
            The stored bytes.

        Raises:
            ContentNotFoundError: The identifier is unknown to the blob store.
            FetchFailedError: Transport or service failure.
        """
        log = logger.bind(content_id=content_id)
        try:
            payload = await self._blob_store.download(content_id)
        except FetchFailedError as e:
            log.warning("Fetch failed", error=str(e))
            raise
        except TransportError as e:
            log.warning("Fetch failed", error=str(e))
            raise FetchFailedError(content_id, str(e)) from e

        log.debug("Payload fetched", payload_size=len(payload))
        return payload

    def content_url(self, content_id: str) -> str:
        """Return the retrieval address of a stored payload."""
        return self._blob_store.content_url(content_id)
