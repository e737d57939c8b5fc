"""Application services for HashSign."""

from hashsign.application.services.content_registrar_service import (
    ContentRegistrarService,
)
from hashsign.application.services.document_store_accessor import (
    DocumentStoreAccessor,
)
from hashsign.application.services.workflow_orchestrator import (
    CreatedDocument,
    WorkflowOrchestrator,
)

__all__: list[str] = [
    "ContentRegistrarService",
    "CreatedDocument",
    "DocumentStoreAccessor",
    "WorkflowOrchestrator",
]
