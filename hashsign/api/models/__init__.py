"""API request/response models."""

from hashsign.api.models.document import (
    CreateDocumentResponse,
    DocumentListResponse,
    DocumentResponse,
    DocumentStatusResponse,
    ProblemResponse,
    RegisterAccountResponse,
    SignatureResponse,
    SignDocumentResponse,
)
from hashsign.api.models.health import HealthResponse

__all__: list[str] = [
    "CreateDocumentResponse",
    "DocumentListResponse",
    "DocumentResponse",
    "DocumentStatusResponse",
    "HealthResponse",
    "ProblemResponse",
    "RegisterAccountResponse",
    "SignDocumentResponse",
    "SignatureResponse",
]
