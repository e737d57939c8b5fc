"""Document lifecycle errors.

These errors are raised by the Lifecycle Engine when a transition is
rejected, and by the accessor when the ledger reports the same rejection.
A rejected transition never partially applies: the DocumentStore that was
passed in is returned to the caller untouched.

Families:
- DocumentValidationError: the request itself is invalid for the current
  committed state (empty or duplicated signers, non-signer, second
  signature, completed document, second registration, oversized payload).
- NotFoundError: the addressed account store or document does not exist.
"""

from __future__ import annotations

from typing import Any

from hashsign.domain.exceptions import HashSignError


class DocumentValidationError(HashSignError):
    """Base error for requests rejected by validation."""

    problem_type = "urn:hashsign:validation"
    title = "Validation Failed"
    status = 400


class NotFoundError(HashSignError):
    """Base error for addressed entities that do not exist."""

    problem_type = "urn:hashsign:not-found"
    title = "Not Found"
    status = 404


class SignerListEmptyError(DocumentValidationError):
    """Raised when a document is created without any required signer."""

    problem_type = "urn:hashsign:document:signer-list-empty"
    title = "Signer List Empty"
    abort_code = "E_EMPTY_SIGNERS"

    def __init__(self) -> None:
        super().__init__("A document requires at least one signer")


class DuplicateSignerError(DocumentValidationError):
    """Raised when the same identity appears twice in a signer list.

    Attributes:
        signer: The identity that was listed more than once.
    """

    problem_type = "urn:hashsign:document:duplicate-signer"
    title = "Duplicate Signer"
    abort_code = "E_DUPLICATE_SIGNER"

    def __init__(self, signer: str | None = None) -> None:
        self.signer = signer
        if signer is None:
            super().__init__("Signer list contains duplicate identities")
        else:
            super().__init__(f"Signer {signer} is listed more than once")

    def problem_extensions(self) -> dict[str, Any]:
        return {"signer": self.signer} if self.signer is not None else {}


class PayloadTooLargeError(DocumentValidationError):
    """Raised when a payload exceeds the upload size limit.

    The check happens before the blob store is contacted.

    Attributes:
        size: Payload size in bytes.
        limit: Maximum accepted size in bytes.
    """

    problem_type = "urn:hashsign:content:payload-too-large"
    title = "Payload Too Large"
    status = 413

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Payload of {size} bytes exceeds the limit of {limit} bytes")

    def problem_extensions(self) -> dict[str, Any]:
        return {"size": self.size, "limit": self.limit}


class NotASignerError(DocumentValidationError):
    """Raised when an identity outside the signer list tries to sign.

    Attributes:
        document_id: The document that was addressed.
        signer: The identity that is not a required signer.
    """

    problem_type = "urn:hashsign:document:not-a-signer"
    title = "Not A Signer"
    status = 403
    abort_code = "E_NOT_A_SIGNER"

    def __init__(self, document_id: int | None = None, signer: str | None = None) -> None:
        self.document_id = document_id
        self.signer = signer
        super().__init__(f"{signer or 'Sender'} is not a signer of document {document_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"document_id": self.document_id, "signer": self.signer}


class AlreadySignedError(DocumentValidationError):
    """Raised when a signer tries to sign the same document twice.

    A signer may sign at most once; this is the uniqueness property every
    other invariant relies on.

    Attributes:
        document_id: The document that was already signed.
        signer: The identity attempting the duplicate signature.
    """

    problem_type = "urn:hashsign:document:already-signed"
    title = "Already Signed"
    status = 409
    abort_code = "E_ALREADY_SIGNED"

    def __init__(self, document_id: int | None = None, signer: str | None = None) -> None:
        self.document_id = document_id
        self.signer = signer
        super().__init__(f"{signer or 'Sender'} has already signed document {document_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"document_id": self.document_id, "signer": self.signer}


class AlreadyCompletedError(DocumentValidationError):
    """Raised when a completed document receives another sign attempt.

    Completion is terminal.

    Attributes:
        document_id: The completed document.
    """

    problem_type = "urn:hashsign:document:already-completed"
    title = "Already Completed"
    status = 409
    abort_code = "E_ALREADY_COMPLETED"

    def __init__(self, document_id: int | None = None) -> None:
        self.document_id = document_id
        super().__init__(f"Document {document_id} is already completed")

    def problem_extensions(self) -> dict[str, Any]:
        return {"document_id": self.document_id}


class AlreadyRegisteredError(DocumentValidationError):
    """Raised when an account that already owns a DocumentStore registers again.

    Attributes:
        account: The account that is already registered.
    """

    problem_type = "urn:hashsign:account:already-registered"
    title = "Already Registered"
    status = 409
    abort_code = "E_ALREADY_REGISTERED"

    def __init__(self, account: str | None = None) -> None:
        self.account = account
        super().__init__(f"Account {account} is already registered")

    def problem_extensions(self) -> dict[str, Any]:
        return {"account": self.account}


class NotRegisteredError(NotFoundError):
    """Raised when an account has no DocumentStore.

    Distinct from TransportError: this is a confirmed absence, so callers
    may safely offer registration.

    Attributes:
        account: The unregistered account.
    """

    problem_type = "urn:hashsign:account:not-registered"
    title = "Account Not Registered"
    abort_code = "E_NOT_REGISTERED"

    def __init__(self, account: str | None = None) -> None:
        self.account = account
        super().__init__(f"Account {account} has no document store")

    def problem_extensions(self) -> dict[str, Any]:
        return {"account": self.account}


class DocumentNotFoundError(NotFoundError):
    """Raised when a document id does not exist in the addressed store.

    Attributes:
        document_id: The id that was not found.
        owner: The account whose store was searched.
    """

    problem_type = "urn:hashsign:document:not-found"
    title = "Document Not Found"
    abort_code = "E_DOCUMENT_NOT_FOUND"

    def __init__(self, document_id: int | None = None, owner: str | None = None) -> None:
        self.document_id = document_id
        self.owner = owner
        message = f"Document {document_id} not found"
        if owner is not None:
            message += f" in store of {owner}"
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {"document_id": self.document_id, "owner": self.owner}
