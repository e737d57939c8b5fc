"""Domain errors for HashSign.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from HashSignError.
"""

from __future__ import annotations

from hashsign.domain.errors.document import (
    AlreadyCompletedError,
    AlreadyRegisteredError,
    AlreadySignedError,
    DocumentNotFoundError,
    DocumentValidationError,
    DuplicateSignerError,
    NotASignerError,
    NotFoundError,
    NotRegisteredError,
    PayloadTooLargeError,
    SignerListEmptyError,
)
from hashsign.domain.errors.transport import (
    CompletionFlagMismatchError,
    ContentNotFoundError,
    DocumentIdUnresolvedError,
    FetchFailedError,
    OrphanedUploadError,
    StateInconsistencyError,
    TransactionRejectedError,
    TransportError,
    UploadFailedError,
)
from hashsign.domain.exceptions import HashSignError

__all__: list[str] = [
    "AlreadyCompletedError",
    "AlreadyRegisteredError",
    "AlreadySignedError",
    "CompletionFlagMismatchError",
    "ContentNotFoundError",
    "DocumentIdUnresolvedError",
    "DocumentNotFoundError",
    "DocumentValidationError",
    "DuplicateSignerError",
    "FetchFailedError",
    "HashSignError",
    "NotASignerError",
    "NotFoundError",
    "NotRegisteredError",
    "OrphanedUploadError",
    "PayloadTooLargeError",
    "SignerListEmptyError",
    "StateInconsistencyError",
    "TransactionRejectedError",
    "TransportError",
    "UploadFailedError",
]
