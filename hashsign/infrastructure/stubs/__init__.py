"""Infrastructure stubs for development and testing.

Available stubs:
- LedgerStub: In-memory ledger applying the document lifecycle transitions
- BlobStoreStub: In-memory content-addressed payload storage

WARNING: These stubs are NOT for production use.
Production implementations are in hashsign/infrastructure/adapters/.
"""

from hashsign.infrastructure.stubs.blob_store_stub import BlobStoreStub
from hashsign.infrastructure.stubs.ledger_stub import LedgerStub, Submission

__all__: list[str] = ["BlobStoreStub", "LedgerStub", "Submission"]
