"""Document domain models.

This module defines the entity model for multi-party document signing:
- Signature: one signer's approval of a document
- Document: content fingerprint plus a fixed signer list and the
  signatures collected so far
- DocumentStore: the per-account, append-only collection of documents
- DocumentStatus: a read-only summary used for listing

Invariants:
- signers is non-empty and free of duplicates, fixed at creation
- every signature comes from a member of signers, at most one per signer
- is_completed is derived from signers and signatures, never stored
- document ids are dense, start at 0 and equal the store's counter at
  assignment time

All models are frozen. Transitions (see
hashsign.domain.services.document_lifecycle) build new instances, so a
rejected transition leaves the previous state untouched.

Wire format:
    The ledger serves a DocumentStore as a JSON resource. Integers are
    decimal strings and signature timestamps are microseconds since the
    Unix epoch, also as decimal strings. to_resource/from_resource convert
    between that shape and the models.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from hashsign.domain.errors import (
    AlreadySignedError,
    CompletionFlagMismatchError,
    DocumentNotFoundError,
    DuplicateSignerError,
    NotASignerError,
    SignerListEmptyError,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)


def _to_microseconds(value: datetime) -> str:
    return str((value - _EPOCH) // _MICROSECOND)


def _from_microseconds(value: str | int) -> datetime:
    return _EPOCH + timedelta(microseconds=int(value))


def parse_signers(value: str | Iterable[str]) -> tuple[str, ...]:
    """Normalize a signer list.

    Accepts either an iterable of identities or a comma-separated string
    (the form the signing dashboard collects). Entries are trimmed and
    blank entries dropped; order is preserved.

    Args:
        value: Comma-separated identities or an iterable of identities.

    Returns:
        Tuple of trimmed identities.

    Raises:
        SignerListEmptyError: No identity remains after trimming.
        DuplicateSignerError: An identity appears more than once.
    """
    raw = value.split(",") if isinstance(value, str) else list(value)
    signers = tuple(s.strip() for s in raw if s and s.strip())
    validate_signers(signers)
    return signers


def validate_signers(signers: tuple[str, ...]) -> None:
    """Check the signer-list invariants.

    Raises:
        SignerListEmptyError: signers is empty.
        DuplicateSignerError: An identity appears more than once.
    """
    if not signers:
        raise SignerListEmptyError()
    seen: set[str] = set()
    for signer in signers:
        if signer in seen:
            raise DuplicateSignerError(signer)
        seen.add(signer)


class DocumentState(Enum):
    """State in the document lifecycle.

    State Machine:
        CREATED -> PARTIALLY_SIGNED (first signature of several)
        CREATED -> COMPLETED (single-signer document signed)
        PARTIALLY_SIGNED -> COMPLETED (last missing signature)

    COMPLETED is terminal. No state leads back to CREATED.
    """

    CREATED = "CREATED"
    PARTIALLY_SIGNED = "PARTIALLY_SIGNED"
    COMPLETED = "COMPLETED"

    def is_terminal(self) -> bool:
        """Check if no further signature is accepted in this state."""
        return self is DocumentState.COMPLETED


@dataclass(frozen=True, eq=True)
class Signature:
    """A signer's approval of a document.

    Attributes:
        signer: Identity that signed; member of the document's signers.
        timestamp: When the signature was recorded (UTC timezone-aware).
    """

    signer: str
    timestamp: datetime

    def __post_init__(self) -> None:
        if not self.signer:
            raise ValueError("signer must be a non-empty identity")
        if self.timestamp.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware (UTC)")

    def to_resource(self) -> dict[str, str]:
        return {"signer": self.signer, "timestamp": _to_microseconds(self.timestamp)}

    @classmethod
    def from_resource(cls, data: dict[str, Any]) -> Signature:
        return cls(signer=data["signer"], timestamp=_from_microseconds(data["timestamp"]))


@dataclass(frozen=True)
class DocumentStatus:
    """Read-only status summary of a document.

    Attributes:
        document_id: The summarized document.
        state: Current lifecycle state.
        is_completed: Whether every required signer has signed.
        signature_count: Number of signatures collected.
        signer_count: Number of required signers.
    """

    document_id: int
    state: DocumentState
    is_completed: bool
    signature_count: int
    signer_count: int

    @property
    def progress(self) -> str:
        """Signatures collected over signatures required, e.g. "1/2"."""
        return f"{self.signature_count}/{self.signer_count}"


@dataclass(frozen=True, eq=True)
class Document:
    """A document awaiting or holding signatures from a fixed signer list.

    Attributes:
        id: Identifier, unique within the owning DocumentStore.
        content_fingerprint: Blob-store identifier of the signed content.
        creator: Account that created the document.
        signers: Required signer identities, ordered, no duplicates.
        signatures: Signatures in the order they were accepted.
    """

    id: int
    content_fingerprint: str
    creator: str
    signers: tuple[str, ...]
    signatures: tuple[Signature, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError(f"document id must be non-negative, got {self.id}")
        if not self.content_fingerprint:
            raise ValueError("content_fingerprint must be non-empty")
        validate_signers(self.signers)

        required = set(self.signers)
        signed: set[str] = set()
        for signature in self.signatures:
            if signature.signer not in required:
                raise NotASignerError(self.id, signature.signer)
            if signature.signer in signed:
                raise AlreadySignedError(self.id, signature.signer)
            signed.add(signature.signer)

    @property
    def is_completed(self) -> bool:
        """True iff every required signer has exactly one signature.

        Signatures are validated against signers on construction, so
        comparing counts is equivalent to checking every signer.
        """
        return len(self.signatures) == len(self.signers)

    @property
    def state(self) -> DocumentState:
        if self.is_completed:
            return DocumentState.COMPLETED
        if self.signatures:
            return DocumentState.PARTIALLY_SIGNED
        return DocumentState.CREATED

    @property
    def pending_signers(self) -> tuple[str, ...]:
        """Required signers that have not signed yet, in list order."""
        signed = {s.signer for s in self.signatures}
        return tuple(s for s in self.signers if s not in signed)

    def is_signer(self, identity: str) -> bool:
        return identity in self.signers

    def has_signed(self, identity: str) -> bool:
        return any(s.signer == identity for s in self.signatures)

    def signature_of(self, identity: str) -> Signature | None:
        for signature in self.signatures:
            if signature.signer == identity:
                return signature
        return None

    def with_signature(self, signature: Signature) -> Document:
        """Return a copy with one more signature appended.

        Membership and uniqueness are re-checked by __post_init__.
        """
        return replace(self, signatures=self.signatures + (signature,))

    def status(self) -> DocumentStatus:
        return DocumentStatus(
            document_id=self.id,
            state=self.state,
            is_completed=self.is_completed,
            signature_count=len(self.signatures),
            signer_count=len(self.signers),
        )

    def to_resource(self) -> dict[str, Any]:
        """Serialize to the ledger resource shape.

        is_completed is written for readers that expect the flag; it is
        always the derived value.
        """
        return {
            "id": str(self.id),
            "content_hash": self.content_fingerprint,
            "creator": self.creator,
            "signers": list(self.signers),
            "signatures": [s.to_resource() for s in self.signatures],
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_resource(cls, data: dict[str, Any]) -> Document:
        """Deserialize from the ledger resource shape.

        Raises:
            CompletionFlagMismatchError: The stored is_completed flag
                disagrees with the value derived from the signatures.
            KeyError: If required fields are missing.
        """
        document = cls(
            id=int(data["id"]),
            content_fingerprint=data["content_hash"],
            creator=data["creator"],
            signers=tuple(data["signers"]),
            signatures=tuple(Signature.from_resource(s) for s in data["signatures"]),
        )
        stored = data.get("is_completed")
        if stored is not None and bool(stored) != document.is_completed:
            raise CompletionFlagMismatchError(document.id, bool(stored), document.is_completed)
        return document


@dataclass(frozen=True)
class DocumentStore:
    """The per-account, append-only collection of documents.

    Attributes:
        owner: Account holding the store.
        documents: Documents ordered by id.
        document_counter: Number of documents ever created; the next id.
    """

    owner: str
    documents: tuple[Document, ...] = field(default=())
    document_counter: int = 0

    def __post_init__(self) -> None:
        if self.document_counter != len(self.documents):
            raise ValueError(
                f"document_counter ({self.document_counter}) must equal the number "
                f"of documents ({len(self.documents)})"
            )
        for expected_id, document in enumerate(self.documents):
            if document.id != expected_id:
                raise ValueError(
                    f"document ids must be dense from 0, found {document.id} "
                    f"at position {expected_id}"
                )

    @property
    def next_document_id(self) -> int:
        return self.document_counter

    def get(self, document_id: int) -> Document:
        """Look up a document by id.

        Raises:
            DocumentNotFoundError: No document with that id exists.
        """
        if 0 <= document_id < len(self.documents):
            return self.documents[document_id]
        raise DocumentNotFoundError(document_id, self.owner)

    def created_by(self, account: str) -> list[Document]:
        return [d for d in self.documents if d.creator == account]

    def awaiting_signature_from(self, identity: str) -> list[Document]:
        """Documents where identity is a signer that has not signed yet."""
        return [
            d
            for d in self.documents
            if not d.is_completed and identity in d.pending_signers
        ]

    def with_new_document(self, document: Document) -> DocumentStore:
        return replace(
            self,
            documents=self.documents + (document,),
            document_counter=self.document_counter + 1,
        )

    def with_replaced_document(self, document: Document) -> DocumentStore:
        documents = list(self.documents)
        documents[document.id] = document
        return replace(self, documents=tuple(documents))

    def to_resource(self) -> dict[str, Any]:
        return {
            "documents": [d.to_resource() for d in self.documents],
            "document_counter": str(self.document_counter),
        }

    @classmethod
    def from_resource(cls, owner: str, data: dict[str, Any]) -> DocumentStore:
        return cls(
            owner=owner,
            documents=tuple(Document.from_resource(d) for d in data["documents"]),
            document_counter=int(data["document_counter"]),
        )
