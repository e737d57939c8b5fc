"""Document lifecycle domain service.

The authoritative transition logic for documents. The ledger executes these
transitions; the in-memory ledger stub calls these functions directly.

Transitions:
- Create: validates the signer list, allocates the next id from the store's
  counter and appends a document in CREATED state.
- Sign: validates existence, terminality, membership and uniqueness, then
  appends a signature. Completion follows from the signatures.

Every function is pure. The input store is never modified; the new store is
returned together with the affected document. Callers are responsible for
serializing transitions against the same store.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from hashsign.domain.errors import (
    AlreadyCompletedError,
    AlreadySignedError,
    NotASignerError,
)
from hashsign.domain.models.document import (
    Document,
    DocumentStatus,
    DocumentStore,
    Signature,
    validate_signers,
)


def initialize_store(owner: str) -> DocumentStore:
    """Create the empty DocumentStore for a newly registered account."""
    return DocumentStore(owner=owner)


def apply_create(
    store: DocumentStore,
    creator: str,
    content_fingerprint: str,
    signers: Iterable[str],
) -> tuple[DocumentStore, Document]:
    """Apply the Create transition.

    Args:
        store: Current committed store of the creator.
        creator: Account creating the document.
        content_fingerprint: Blob-store identifier of the content.
        signers: Required signer identities, in order.

    Returns:
        Tuple of (new store, created document).

    Raises:
        SignerListEmptyError: signers is empty.
        DuplicateSignerError: signers lists an identity twice.
    """
    signer_tuple = tuple(signers)
    validate_signers(signer_tuple)

    document = Document(
        id=store.next_document_id,
        content_fingerprint=content_fingerprint,
        creator=creator,
        signers=signer_tuple,
    )
    return store.with_new_document(document), document


def apply_sign(
    store: DocumentStore,
    document_id: int,
    signer: str,
    signed_at: datetime,
) -> tuple[DocumentStore, Document]:
    """Apply the Sign transition.

    Checks run in this order: existence, terminality, membership,
    uniqueness. A completed document therefore reports AlreadyCompleted
    even to one of its own signers.

    Args:
        store: Current committed store holding the document.
        document_id: Document to sign.
        signer: Identity of the transaction sender.
        signed_at: Timestamp for the new signature (UTC).

    Returns:
        Tuple of (new store, updated document).

    Raises:
        DocumentNotFoundError: No document with that id in the store.
        AlreadyCompletedError: The document is already completed.
        NotASignerError: signer is not in the document's signers.
        AlreadySignedError: signer has already signed.
    """
    document = store.get(document_id)

    if document.state.is_terminal():
        raise AlreadyCompletedError(document_id)
    if not document.is_signer(signer):
        raise NotASignerError(document_id, signer)
    if document.has_signed(signer):
        raise AlreadySignedError(document_id, signer)

    updated = document.with_signature(Signature(signer=signer, timestamp=signed_at))
    return store.with_replaced_document(updated), updated


def document_status(store: DocumentStore, document_id: int) -> DocumentStatus:
    """Read a document's status without side effects.

    Raises:
        DocumentNotFoundError: No document with that id in the store.
    """
    return store.get(document_id).status()
