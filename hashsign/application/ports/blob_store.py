"""Blob store port.

The blob store is an opaque, content-addressed key/value service. It
accepts a payload, returns the identifier it assigned, and serves the
payload back by that identifier.

Implementations raise:
- UploadFailedError when an upload is not accepted
- ContentNotFoundError when an identifier is unknown
- FetchFailedError when a download fails for any other reason
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class BlobStoreProtocol(Protocol):
    """Protocol for content-addressed payload storage."""

    @abstractmethod
    async def upload(self, payload: bytes, name: str) -> str:
        """Store a payload.

        Args:
            payload: Bytes to store.
            name: Human-readable name recorded as upload metadata.

        Returns:
            The content identifier assigned by the store.

        Raises:
            UploadFailedError: Transport or service failure.
        """
        ...

    @abstractmethod
    async def download(self, content_id: str) -> bytes:
        """Retrieve a payload by identifier.

        Raises:
            ContentNotFoundError: The identifier is unknown.
            FetchFailedError: Transport or service failure.
        """
        ...

    @abstractmethod
    def content_url(self, content_id: str) -> str:
        """Return the retrieval address for an identifier."""
        ...
