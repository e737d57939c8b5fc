"""Document API request/response models.

Pydantic models for the account, document and content endpoints.
Domain objects are converted with the from_domain classmethods so the
routes never build responses field by field.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

from hashsign.application.services.workflow_orchestrator import CreatedDocument
from hashsign.domain.models.document import Document, DocumentStatus, Signature

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class RegisterAccountResponse(BaseModel):
    """Response to an onboarding request.

    Attributes:
        account: The onboarded account.
        registered: True if this request created the account's store,
            False if the account already had one.
    """

    account: str
    registered: bool


class CreateDocumentResponse(BaseModel):
    """Response after a document was uploaded and registered."""

    owner: str = Field(..., description="Account whose store holds the document")
    document_id: int = Field(..., ge=0, description="Id assigned by the ledger")
    content_id: str = Field(..., description="Blob-store identifier of the payload")
    content_url: str = Field(..., description="Retrieval address of the payload")
    signers: list[str] = Field(..., min_length=1, description="Required signers")

    @classmethod
    def from_domain(cls, created: CreatedDocument) -> CreateDocumentResponse:
        return cls(
            owner=created.owner,
            document_id=created.document_id,
            content_id=created.content_id,
            content_url=created.content_url,
            signers=list(created.signers),
        )


class SignDocumentResponse(BaseModel):
    """Acknowledgement of an accepted sign transition.

    The document view is not refreshed here; clients re-read it.
    """

    owner: str
    document_id: int = Field(..., ge=0)
    signer: str


class SignatureResponse(BaseModel):
    signer: str
    timestamp: DateTimeWithZ

    @classmethod
    def from_domain(cls, signature: Signature) -> SignatureResponse:
        return cls(signer=signature.signer, timestamp=signature.timestamp)


class DocumentResponse(BaseModel):
    """A document as listed on the dashboard.

    Attributes:
        id: Document id, unique within the creator's store.
        content_id: Blob-store identifier of the payload.
        creator: Account that created the document.
        signers: Required signers in creation order.
        signatures: Collected signatures in acceptance order.
        is_completed: Whether every signer has signed.
        state: CREATED, PARTIALLY_SIGNED or COMPLETED.
        progress: "signatures/signers", e.g. "1/2".
    """

    id: int = Field(..., ge=0)
    content_id: str
    creator: str
    signers: list[str]
    signatures: list[SignatureResponse]
    is_completed: bool
    state: str
    progress: str

    @classmethod
    def from_domain(cls, document: Document) -> DocumentResponse:
        status = document.status()
        return cls(
            id=document.id,
            content_id=document.content_fingerprint,
            creator=document.creator,
            signers=list(document.signers),
            signatures=[SignatureResponse.from_domain(s) for s in document.signatures],
            is_completed=document.is_completed,
            state=status.state.value,
            progress=status.progress,
        )


class DocumentListResponse(BaseModel):
    account: str
    documents: list[DocumentResponse]
    total: int = Field(..., ge=0)


class DocumentStatusResponse(BaseModel):
    """Status summary of a single document."""

    owner: str
    document_id: int = Field(..., ge=0)
    state: str
    is_completed: bool
    signature_count: int = Field(..., ge=0)
    signer_count: int = Field(..., ge=1)
    progress: str

    @classmethod
    def from_domain(cls, owner: str, status: DocumentStatus) -> DocumentStatusResponse:
        return cls(
            owner=owner,
            document_id=status.document_id,
            state=status.state.value,
            is_completed=status.is_completed,
            signature_count=status.signature_count,
            signer_count=status.signer_count,
            progress=status.progress,
        )


class ProblemResponse(BaseModel):
    """RFC 7807 problem details body.

    Error-specific extension members (content_id, document_id, ...) are
    carried alongside these fields.
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
