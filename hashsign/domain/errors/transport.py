"""Errors at the boundary with the ledger and the blob store.

- TransportError: the remote side could not be reached or answered with a
  service failure. Never retried by this package.
- TransactionRejectedError: the ledger answered and refused a transition for
  a reason this package does not model.
- StateInconsistencyError: the two external systems, or a stored flag and
  the value derived from it, disagree.
"""

from __future__ import annotations

from typing import Any

from hashsign.domain.errors.document import NotFoundError
from hashsign.domain.exceptions import HashSignError


class TransportError(HashSignError):
    """Raised when a remote collaborator is unreachable or fails.

    Attributes:
        service: Name of the collaborator ("ledger", "blob_store").
    """

    problem_type = "urn:hashsign:transport"
    title = "Transport Error"
    status = 503

    def __init__(self, message: str, service: str = "ledger") -> None:
        self.service = service
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {"service": self.service}


class UploadFailedError(TransportError):
    """Raised when the blob store does not accept a payload."""

    problem_type = "urn:hashsign:content:upload-failed"
    title = "Upload Failed"
    status = 502

    def __init__(self, message: str) -> None:
        super().__init__(message, service="blob_store")


class FetchFailedError(TransportError):
    """Raised when a payload cannot be retrieved from the blob store.

    Attributes:
        content_id: The identifier that was requested.
    """

    problem_type = "urn:hashsign:content:fetch-failed"
    title = "Fetch Failed"
    status = 502

    def __init__(self, content_id: str, message: str | None = None) -> None:
        self.content_id = content_id
        super().__init__(
            message or f"Failed to fetch content {content_id}",
            service="blob_store",
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"service": self.service, "content_id": self.content_id}


class ContentNotFoundError(FetchFailedError, NotFoundError):
    """Raised when the blob store does not know a content identifier."""

    problem_type = "urn:hashsign:content:not-found"
    title = "Content Not Found"
    status = 404

    def __init__(self, content_id: str) -> None:
        super().__init__(content_id, f"Content {content_id} is unknown to the blob store")


class TransactionRejectedError(HashSignError):
    """Raised when the ledger rejects a transition for an unmodelled reason.

    Insufficient authorization, gas exhaustion or a wallet refusing to sign
    all end up here; the reason is kept verbatim.

    Attributes:
        function_id: The transition that was submitted.
        reason: Rejection reason reported by the ledger.
    """

    problem_type = "urn:hashsign:ledger:transaction-rejected"
    title = "Transaction Rejected"
    status = 422

    def __init__(self, function_id: str, reason: str | None = None) -> None:
        self.function_id = function_id
        self.reason = reason
        super().__init__(
            f"Transaction {function_id} rejected: {reason or 'no reason given'}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"function_id": self.function_id, "reason": self.reason}


class StateInconsistencyError(HashSignError):
    """Base error for disagreement between two views of the same state."""

    problem_type = "urn:hashsign:state-inconsistency"
    title = "State Inconsistency"
    status = 500


class OrphanedUploadError(StateInconsistencyError):
    """Raised when the payload was uploaded but the create transition failed.

    The blob stays in the store; no compensation is attempted because the
    store is content-addressed and an orphan only costs storage.

    Attributes:
        content_id: Identifier of the orphaned upload.
        cause: The error that failed the create transition.
    """

    problem_type = "urn:hashsign:document:create-failed"
    title = "Document Creation Failed"
    status = 502

    def __init__(self, content_id: str, cause: HashSignError) -> None:
        self.content_id = content_id
        self.cause = cause
        super().__init__(
            f"Content {content_id} was uploaded but the document was not created: {cause}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "content_id": self.content_id,
            "cause": self.cause.to_rfc7807_dict(),
        }


class DocumentIdUnresolvedError(StateInconsistencyError):
    """Raised when a create transition committed but its id is not known.

    The document exists on the ledger; only the id could not be read back
    (no event and the store does not show it yet). Submitting the create
    again would register the same content a second time.

    Attributes:
        account: The creator.
        content_id: Content of the created document.
        transaction_id: The committed transaction.
    """

    problem_type = "urn:hashsign:document:id-unresolved"
    title = "Document Id Unresolved"

    def __init__(
        self,
        account: str,
        content_id: str,
        transaction_id: str | None,
        message: str | None = None,
    ) -> None:
        self.account = account
        self.content_id = content_id
        self.transaction_id = transaction_id
        super().__init__(
            message
            or f"Create for content {content_id} committed in {transaction_id} "
            f"but the document id could not be resolved"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "account": self.account,
            "content_id": self.content_id,
            "transaction_id": self.transaction_id,
        }


class CompletionFlagMismatchError(StateInconsistencyError):
    """Raised when a stored is_completed flag disagrees with the signatures.

    Attributes:
        document_id: The affected document.
        stored: Flag value read from the ledger.
        derived: Value recomputed from signers and signatures.
    """

    problem_type = "urn:hashsign:document:completion-mismatch"
    title = "Completion Flag Mismatch"

    def __init__(self, document_id: int, stored: bool, derived: bool) -> None:
        self.document_id = document_id
        self.stored = stored
        self.derived = derived
        super().__init__(
            f"Document {document_id} stored is_completed={stored} "
            f"but signatures imply {derived}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "stored": self.stored,
            "derived": self.derived,
        }
