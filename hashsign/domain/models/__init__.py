"""Domain models for HashSign."""

from hashsign.domain.models.document import (
    Document,
    DocumentState,
    DocumentStatus,
    DocumentStore,
    Signature,
    parse_signers,
    validate_signers,
)

__all__: list[str] = [
    "Document",
    "DocumentState",
    "DocumentStatus",
    "DocumentStore",
    "Signature",
    "parse_signers",
    "validate_signers",
]
