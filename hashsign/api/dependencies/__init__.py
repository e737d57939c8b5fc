"""FastAPI dependency providers."""

from hashsign.api.dependencies.document import (
    get_blob_store,
    get_hashsign_config,
    get_ledger,
    get_workflow_orchestrator,
    reset_document_dependencies,
    set_blob_store,
    set_hashsign_config,
    set_ledger,
)

__all__: list[str] = [
    "get_blob_store",
    "get_hashsign_config",
    "get_ledger",
    "get_workflow_orchestrator",
    "reset_document_dependencies",
    "set_blob_store",
    "set_hashsign_config",
    "set_ledger",
]
