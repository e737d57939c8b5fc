"""Domain services for HashSign."""

from hashsign.domain.services.document_lifecycle import (
    apply_create,
    apply_sign,
    document_status,
    initialize_store,
)

__all__: list[str] = [
    "apply_create",
    "apply_sign",
    "document_status",
    "initialize_store",
]
