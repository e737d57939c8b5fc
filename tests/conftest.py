"""
Pytest configuration and shared fixtures for HashSign tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from hashsign.api.dependencies.document import reset_document_dependencies
from hashsign.application.services.content_registrar_service import (
    ContentRegistrarService,
)
from hashsign.application.services.document_store_accessor import DocumentStoreAccessor
from hashsign.application.services.workflow_orchestrator import WorkflowOrchestrator
from hashsign.config import LedgerConfig
from hashsign.infrastructure.monitoring.metrics import reset_metrics_collector
from hashsign.infrastructure.stubs.blob_store_stub import BlobStoreStub
from hashsign.infrastructure.stubs.ledger_stub import LedgerStub

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset module-level singletons before each test."""
    monkeypatch.delenv("HASHSIGN_ENVIRONMENT", raising=False)
    monkeypatch.delenv("SERVICE_NAME", raising=False)
    reset_metrics_collector()
    reset_document_dependencies()


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from hashsign import __version__

    return __version__


@pytest.fixture
def ticking_clock() -> Callable[[], datetime]:
    """Clock advancing one second per call, starting at FIXED_NOW."""
    ticks = iter(range(10_000))
    return lambda: FIXED_NOW + timedelta(seconds=next(ticks))


@pytest.fixture
def ledger_config() -> LedgerConfig:
    return LedgerConfig(module_address="0xcafe", module_name="hash_sign1")


@pytest.fixture
def ledger(
    ledger_config: LedgerConfig, ticking_clock: Callable[[], datetime]
) -> LedgerStub:
    """Create fresh in-memory ledger for each test."""
    return LedgerStub(config=ledger_config, clock=ticking_clock)


@pytest.fixture
def blob_store() -> BlobStoreStub:
    """Create fresh in-memory blob store for each test."""
    return BlobStoreStub()


@pytest.fixture
def registrar(blob_store: BlobStoreStub) -> ContentRegistrarService:
    return ContentRegistrarService(blob_store=blob_store)


@pytest.fixture
def accessor(ledger: LedgerStub, ledger_config: LedgerConfig) -> DocumentStoreAccessor:
    return DocumentStoreAccessor(ledger=ledger, config=ledger_config)


@pytest.fixture
def orchestrator(
    registrar: ContentRegistrarService, accessor: DocumentStoreAccessor
) -> WorkflowOrchestrator:
    return WorkflowOrchestrator(registrar=registrar, accessor=accessor)
