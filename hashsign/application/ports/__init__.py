"""Application ports (interfaces) for HashSign.

Ports define the contracts the application layer needs from external
collaborators. Adapters in hashsign.infrastructure implement them.
"""

from hashsign.application.ports.blob_store import BlobStoreProtocol
from hashsign.application.ports.ledger import (
    LedgerEvent,
    LedgerProtocol,
    TransactionOutcome,
)

__all__: list[str] = [
    "BlobStoreProtocol",
    "LedgerEvent",
    "LedgerProtocol",
    "TransactionOutcome",
]
