"""HTTP client for the HashSign API.

Example:
    async with HashSignClient("http://localhost:8000") as client:
        await client.register("0xa11ce")
        created = await client.create_document("0xa11ce", payload, "0xa11ce, 0xb0b")
        await client.sign_document("0xb0b", "0xa11ce", created["document_id"])
"""

from typing import Any, Optional

import httpx


class HashSignAPIError(Exception):
    """The API answered with an error.

    Attributes:
        status_code: HTTP status code.
        problem: RFC 7807 body when the API sent one.
    """

    def __init__(self, status_code: int, problem: Optional[dict[str, Any]] = None) -> None:
        self.status_code = status_code
        self.problem = problem or {}
        detail = self.problem.get("detail") or f"HTTP {status_code}"
        super().__init__(detail)

    @property
    def problem_type(self) -> Optional[str]:
        return self.problem.get("type")


class HashSignClient:
    """Client for the HashSign API."""

    DEFAULT_BASE_URL = "http://localhost:8000"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: API base URL. Defaults to a local server.
            timeout: Request timeout in seconds.
            transport: Custom transport, e.g. httpx.ASGITransport in tests.
        """
        self.base_url = base_url or self.DEFAULT_BASE_URL
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "HashSignClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def register(self, account: str) -> dict:
        response = await self._client.post(f"/v1/accounts/{account}/register")
        return self._json(response)

    async def create_document(
        self,
        account: str,
        payload: bytes,
        signers: str,
        name: Optional[str] = None,
    ) -> dict:
        """Upload a payload and register it for the given signers.

        Args:
            account: Creator.
            payload: Document content.
            signers: Comma-separated signer accounts.
            name: Upload name; the API falls back to the file name.
        """
        data = {"signers": signers}
        if name:
            data["name"] = name
        response = await self._client.post(
            f"/v1/accounts/{account}/documents",
            files={"payload": (name or "document", payload, "application/octet-stream")},
            data=data,
        )
        return self._json(response)

    async def sign_document(self, account: str, owner: str, document_id: int) -> dict:
        response = await self._client.post(
            f"/v1/accounts/{account}/documents/{owner}/{document_id}/sign"
        )
        return self._json(response)

    async def list_documents(self, account: str) -> dict:
        response = await self._client.get(f"/v1/accounts/{account}/documents")
        return self._json(response)

    async def document_status(self, owner: str, document_id: int) -> dict:
        response = await self._client.get(f"/v1/accounts/{owner}/documents/{document_id}")
        return self._json(response)

    async def download(self, content_id: str) -> bytes:
        response = await self._client.get(f"/v1/documents/content/{content_id}")
        self._raise_for_problem(response)
        return response.content

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _json(self, response: httpx.Response) -> dict:
        self._raise_for_problem(response)
        return response.json()

    @staticmethod
    def _raise_for_problem(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            raise HashSignAPIError(response.status_code) from None
        # FastAPI wraps HTTPException details under "detail"
        problem = body.get("detail") if isinstance(body, dict) else None
        if not isinstance(problem, dict):
            problem = {"detail": str(problem)} if problem else None
        raise HashSignAPIError(response.status_code, problem)
