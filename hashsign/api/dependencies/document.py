"""Document API dependencies.

Dependency injection setup for the workflow orchestrator and the ports it
sits on. Singletons are built lazily from HashSignConfig:

- backend "memory": LedgerStub and BlobStoreStub, state lives in-process
- backend "remote": AptosLedger (signing through WalletRelaySigner) and
  PinataBlobStore

Tests replace any piece with the set_* helpers and clear everything with
reset_document_dependencies().
"""

from hashsign.application.ports.blob_store import BlobStoreProtocol
from hashsign.application.ports.ledger import LedgerProtocol
from hashsign.application.services.content_registrar_service import (
    ContentRegistrarService,
)
from hashsign.application.services.document_store_accessor import DocumentStoreAccessor
from hashsign.application.services.workflow_orchestrator import WorkflowOrchestrator
from hashsign.config import BACKEND_REMOTE, HashSignConfig
from hashsign.infrastructure.adapters.aptos_ledger import AptosLedger, WalletRelaySigner
from hashsign.infrastructure.adapters.pinata_blob_store import PinataBlobStore
from hashsign.infrastructure.stubs.blob_store_stub import BlobStoreStub
from hashsign.infrastructure.stubs.ledger_stub import LedgerStub

_config: HashSignConfig | None = None
_ledger: LedgerProtocol | None = None
_blob_store: BlobStoreProtocol | None = None
_workflow_orchestrator: WorkflowOrchestrator | None = None


def get_hashsign_config() -> HashSignConfig:
    """Get configuration, read from the environment on first use."""
    global _config
    if _config is None:
        _config = HashSignConfig.from_environment()
    return _config


def get_ledger() -> LedgerProtocol:
    """Get ledger instance.

    Returns a LedgerStub for the memory backend and an AptosLedger for the
    remote backend.
    """
    global _ledger
    if _ledger is None:
        config = get_hashsign_config()
        if config.backend == BACKEND_REMOTE:
            signer = WalletRelaySigner(
                config.ledger.signer_url or "",
                timeout=config.ledger.tx_wait_timeout_seconds,
            )
            _ledger = AptosLedger(config.ledger, signer)
        else:
            _ledger = LedgerStub(config.ledger)
    return _ledger


def get_blob_store() -> BlobStoreProtocol:
    """Get blob store instance.

    Returns a BlobStoreStub for the memory backend and a PinataBlobStore
    for the remote backend.
    """
    global _blob_store
    if _blob_store is None:
        config = get_hashsign_config()
        if config.backend == BACKEND_REMOTE:
            _blob_store = PinataBlobStore(config.blob_store)
        else:
            _blob_store = BlobStoreStub(gateway_url=config.blob_store.gateway_url)
    return _blob_store


def get_workflow_orchestrator() -> WorkflowOrchestrator:
    """Get the workflow orchestrator wired to the configured ports."""
    global _workflow_orchestrator
    if _workflow_orchestrator is None:
        config = get_hashsign_config()
        _workflow_orchestrator = WorkflowOrchestrator(
            registrar=ContentRegistrarService(
                blob_store=get_blob_store(),
                max_payload_bytes=config.max_payload_bytes,
            ),
            accessor=DocumentStoreAccessor(ledger=get_ledger(), config=config.ledger),
        )
    return _workflow_orchestrator


def reset_document_dependencies() -> None:
    """Reset all singleton instances for testing.

    Call this in test fixtures to ensure clean state between tests.
    """
    global _config, _ledger, _blob_store, _workflow_orchestrator
    _config = None
    _ledger = None
    _blob_store = None
    _workflow_orchestrator = None


def set_hashsign_config(config: HashSignConfig) -> None:
    """Set configuration for testing; ports are rebuilt from it."""
    global _config, _ledger, _blob_store, _workflow_orchestrator
    _config = config
    _ledger = None
    _blob_store = None
    _workflow_orchestrator = None


def set_ledger(ledger: LedgerProtocol) -> None:
    """Set custom ledger for testing."""
    global _ledger, _workflow_orchestrator
    _ledger = ledger
    _workflow_orchestrator = None  # Force orchestrator recreation


def set_blob_store(blob_store: BlobStoreProtocol) -> None:
    """Set custom blob store for testing."""
    global _blob_store, _workflow_orchestrator
    _blob_store = blob_store
    _workflow_orchestrator = None  # Force orchestrator recreation
