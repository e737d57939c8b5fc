"""HashSign configuration.

Configuration for the ledger connection, the blob store connection and the
document workflow, with environment variable overrides.

Environment Variables (Workflow):
- HASHSIGN_ENVIRONMENT: "production" (JSON logs) or "development" (default: production)
- HASHSIGN_BACKEND: "memory" for in-process stubs, "remote" for Aptos + Pinata (default: memory)
- HASHSIGN_MAX_PAYLOAD_BYTES: Upload size limit in bytes (default: 26214400, 25 MiB)

Environment Variables (Ledger):
- APTOS_NODE_URL: REST endpoint of the Aptos fullnode (default: testnet)
- HASHSIGN_MODULE_ADDRESS: Address the signing module is published at (required for remote)
- HASHSIGN_MODULE_NAME: Name of the signing module (default: hash_sign1)
- HASHSIGN_TX_WAIT_TIMEOUT: Seconds to wait for a transaction to commit (default: 30.0)
- HASHSIGN_TX_POLL_INTERVAL: Seconds between commit polls (default: 1.0)
- HASHSIGN_SIGNER_URL: Endpoint of the wallet relay that signs and submits transactions (required for remote)

Environment Variables (Blob store):
- PINATA_API_URL: Pinata API base URL (default: https://api.pinata.cloud)
- PINATA_GATEWAY_URL: Gateway used to build retrieval addresses (default: https://gateway.pinata.cloud)
- PINATA_API_KEY / PINATA_SECRET_API_KEY: Pinata credentials (required for remote)
- HASHSIGN_HTTP_TIMEOUT: Timeout in seconds for blob store requests (default: 30.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

# 25 MiB
DEFAULT_MAX_PAYLOAD_BYTES = 26_214_400

BACKEND_MEMORY = "memory"
BACKEND_REMOTE = "remote"


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class LedgerConfig:
    """Aptos ledger connection configuration.

    Attributes:
        node_url: REST endpoint of the fullnode, including the /v1 prefix.
        module_address: Address the signing module is published at.
        module_name: Name of the signing module.
        tx_wait_timeout_seconds: How long to wait for a submitted
            transaction to commit before reporting a TransportError.
        tx_poll_interval_seconds: Delay between commit polls.
        signer_url: Wallet relay that signs and submits entry function
            payloads on behalf of an account.
    """

    node_url: str = "https://fullnode.testnet.aptoslabs.com/v1"
    module_address: str = "0x1"
    module_name: str = "hash_sign1"
    tx_wait_timeout_seconds: float = 30.0
    tx_poll_interval_seconds: float = 1.0
    signer_url: str | None = None

    def __post_init__(self) -> None:
        if not self.module_address:
            raise ValueError("module_address must be set")
        if not self.module_name:
            raise ValueError("module_name must be set")
        if self.tx_wait_timeout_seconds <= 0:
            raise ValueError(
                f"tx_wait_timeout_seconds must be positive, got {self.tx_wait_timeout_seconds}"
            )
        if self.tx_poll_interval_seconds <= 0:
            raise ValueError(
                f"tx_poll_interval_seconds must be positive, got {self.tx_poll_interval_seconds}"
            )

    @property
    def module_id(self) -> str:
        return f"{self.module_address}::{self.module_name}"

    @property
    def store_resource_type(self) -> str:
        return f"{self.module_id}::DocumentStore"

    def function_id(self, name: str) -> str:
        return f"{self.module_id}::{name}"

    @classmethod
    def from_environment(cls) -> LedgerConfig:
        defaults = cls()
        return cls(
            node_url=os.environ.get("APTOS_NODE_URL", defaults.node_url),
            module_address=os.environ.get("HASHSIGN_MODULE_ADDRESS", defaults.module_address),
            module_name=os.environ.get("HASHSIGN_MODULE_NAME", defaults.module_name),
            tx_wait_timeout_seconds=_get_float_env(
                "HASHSIGN_TX_WAIT_TIMEOUT", defaults.tx_wait_timeout_seconds
            ),
            tx_poll_interval_seconds=_get_float_env(
                "HASHSIGN_TX_POLL_INTERVAL", defaults.tx_poll_interval_seconds
            ),
            signer_url=os.environ.get("HASHSIGN_SIGNER_URL"),
        )


@dataclass(frozen=True)
class BlobStoreConfig:
    """Pinata blob store configuration.

    Attributes:
        api_url: Pinata API base URL.
        gateway_url: IPFS gateway used for downloads and retrieval addresses.
        api_key: Pinata API key.
        secret_api_key: Pinata secret API key.
        timeout_seconds: Request timeout for uploads and downloads.
    """

    api_url: str = "https://api.pinata.cloud"
    gateway_url: str = "https://gateway.pinata.cloud"
    api_key: str | None = field(default=None, repr=False)
    secret_api_key: str | None = field(default=None, repr=False)
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.secret_api_key)

    @classmethod
    def from_environment(cls) -> BlobStoreConfig:
        defaults = cls()
        return cls(
            api_url=os.environ.get("PINATA_API_URL", defaults.api_url),
            gateway_url=os.environ.get("PINATA_GATEWAY_URL", defaults.gateway_url),
            api_key=os.environ.get("PINATA_API_KEY"),
            secret_api_key=os.environ.get("PINATA_SECRET_API_KEY"),
            timeout_seconds=_get_float_env("HASHSIGN_HTTP_TIMEOUT", defaults.timeout_seconds),
        )


@dataclass(frozen=True)
class HashSignConfig:
    """Top-level HashSign configuration.

    Attributes:
        environment: "production" or "development"; selects the log renderer.
        backend: "memory" wires in-process stubs, "remote" wires Aptos and Pinata.
        max_payload_bytes: Upload size limit enforced before any network call.
        ledger: Ledger connection settings.
        blob_store: Blob store connection settings.
    """

    environment: str = "production"
    backend: str = BACKEND_MEMORY
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    blob_store: BlobStoreConfig = field(default_factory=BlobStoreConfig)

    def __post_init__(self) -> None:
        if self.backend not in (BACKEND_MEMORY, BACKEND_REMOTE):
            raise ValueError(
                f"backend must be '{BACKEND_MEMORY}' or '{BACKEND_REMOTE}', got {self.backend!r}"
            )
        if self.max_payload_bytes < 1:
            raise ValueError(
                f"max_payload_bytes must be positive, got {self.max_payload_bytes}"
            )
        if self.backend == BACKEND_REMOTE and not self.blob_store.has_credentials:
            raise ValueError(
                "PINATA_API_KEY and PINATA_SECRET_API_KEY are required for the remote backend"
            )
        if self.backend == BACKEND_REMOTE and not self.ledger.signer_url:
            raise ValueError("HASHSIGN_SIGNER_URL is required for the remote backend")

    @classmethod
    def from_environment(cls) -> HashSignConfig:
        """Create config from environment variables with defaults.

        Returns:
            HashSignConfig with values from environment or defaults.

        Raises:
            ValueError: A value is out of range or required credentials are missing.
        """
        return cls(
            environment=os.environ.get("HASHSIGN_ENVIRONMENT", "production"),
            backend=os.environ.get("HASHSIGN_BACKEND", BACKEND_MEMORY),
            max_payload_bytes=_get_int_env(
                "HASHSIGN_MAX_PAYLOAD_BYTES", DEFAULT_MAX_PAYLOAD_BYTES
            ),
            ledger=LedgerConfig.from_environment(),
            blob_store=BlobStoreConfig.from_environment(),
        )


# Default config for in-process development and tests
DEFAULT_HASHSIGN_CONFIG = HashSignConfig()
