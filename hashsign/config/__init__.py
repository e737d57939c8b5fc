"""Configuration module for HashSign.

Available Configurations:
- HashSignConfig: Top-level workflow configuration
- LedgerConfig: Aptos node and module settings
- BlobStoreConfig: Pinata API and gateway settings
"""

from hashsign.config.hashsign_config import (
    BACKEND_MEMORY,
    BACKEND_REMOTE,
    DEFAULT_HASHSIGN_CONFIG,
    DEFAULT_MAX_PAYLOAD_BYTES,
    BlobStoreConfig,
    HashSignConfig,
    LedgerConfig,
)

__all__ = [
    "BACKEND_MEMORY",
    "BACKEND_REMOTE",
    "BlobStoreConfig",
    "DEFAULT_HASHSIGN_CONFIG",
    "DEFAULT_MAX_PAYLOAD_BYTES",
    "HashSignConfig",
    "LedgerConfig",
]
