"""In-memory stub for BlobStoreProtocol.

Content identifiers are derived from the SHA-256 digest of the payload.
With deduplicate=False (the default) every upload also gets a sequence
suffix, so uploading the same bytes twice yields two identifiers, the way a
pinning service with per-upload metadata behaves. With deduplicate=True the
identifier depends on the content only.

Call counters let tests assert that no network call happened.

WARNING: This stub is for development/testing only.
"""

from __future__ import annotations

import hashlib

from hashsign.domain.errors import (
    ContentNotFoundError,
    FetchFailedError,
    UploadFailedError,
)


class BlobStoreStub:
    """In-memory stub implementation of BlobStoreProtocol."""

    def __init__(
        self,
        deduplicate: bool = False,
        gateway_url: str = "https://gateway.example.test",
    ) -> None:
        self._deduplicate = deduplicate
        self._gateway_url = gateway_url.rstrip("/")
        self._blobs: dict[str, bytes] = {}
        self._names: dict[str, str] = {}
        self._upload_calls = 0
        self._download_calls = 0
        self._fail_uploads = 0
        self._fail_downloads = 0

    async def upload(self, payload: bytes, name: str) -> str:
        self._upload_calls += 1
        if self._fail_uploads:
            self._fail_uploads -= 1
            raise UploadFailedError("Blob store unavailable")

        digest = hashlib.sha256(payload).hexdigest()
        if self._deduplicate:
            content_id = f"stub-{digest}"
        else:
            content_id = f"stub-{digest[:32]}-{self._upload_calls}"
        self._blobs[content_id] = bytes(payload)
        self._names[content_id] = name
        return content_id

    async def download(self, content_id: str) -> bytes:
        self._download_calls += 1
        if self._fail_downloads:
            self._fail_downloads -= 1
            raise FetchFailedError(content_id, "Blob store unavailable")
        if content_id not in self._blobs:
            raise ContentNotFoundError(content_id)
        return self._blobs[content_id]

    def content_url(self, content_id: str) -> str:
        return f"{self._gateway_url}/ipfs/{content_id}"

    # Test helper methods

    def fail_next_upload(self, count: int = 1) -> None:
        self._fail_uploads += count

    def fail_next_download(self, count: int = 1) -> None:
        self._fail_downloads += count

    def name_of(self, content_id: str) -> str | None:
        return self._names.get(content_id)

    @property
    def upload_calls(self) -> int:
        return self._upload_calls

    @property
    def download_calls(self) -> int:
        return self._download_calls

    @property
    def blob_count(self) -> int:
        return len(self._blobs)

    def reset(self) -> None:
        """Reset all stored data. Useful between tests."""
        self._blobs.clear()
        self._names.clear()
        self._upload_calls = 0
        self._download_calls = 0
        self._fail_uploads = 0
        self._fail_downloads = 0
