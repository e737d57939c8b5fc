"""Infrastructure adapters for HashSign.

Adapters implement the ports defined in the application layer,
providing concrete implementations for external services:
- AptosLedger: LedgerProtocol over an Aptos fullnode
- PinataBlobStore: BlobStoreProtocol over Pinata and an IPFS gateway
"""

from hashsign.infrastructure.adapters.aptos_ledger import (
    AptosLedger,
    TransactionSigner,
    TransactionSignerError,
    WalletRelaySigner,
)
from hashsign.infrastructure.adapters.pinata_blob_store import PinataBlobStore

__all__: list[str] = [
    "AptosLedger",
    "PinataBlobStore",
    "TransactionSigner",
    "TransactionSignerError",
    "WalletRelaySigner",
]
