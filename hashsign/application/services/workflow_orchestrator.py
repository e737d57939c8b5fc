"""Workflow orchestrator.

Sequences the content registrar and the document store accessor into the
operations the presentation layer may call:

1. onboard: register the account unless it already holds a store
2. create_document: upload the payload, then submit the create transition
3. sign_document: submit the sign transition
4. view_document: fetch the payload for local rendering

plus the read queries list_documents and document_status.

Create is a two-step saga across independent systems. The upload may be
repeated safely; the create transition is the only step with invariants.
If the transition fails after a successful upload, the operation fails with
OrphanedUploadError and the upload is left in place; nothing is rolled back.
A transition that committed but whose id cannot be read back raises
DocumentIdUnresolvedError instead; the document exists.

No operation keeps session state: the acting account is passed explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from structlog import get_logger

from hashsign.domain.errors import (
    AlreadyRegisteredError,
    DocumentIdUnresolvedError,
    NotRegisteredError,
    OrphanedUploadError,
)
from hashsign.domain.exceptions import HashSignError
from hashsign.domain.models.document import Document, DocumentStatus, parse_signers
from hashsign.infrastructure.monitoring.metrics import OUTCOME_SUCCESS, get_metrics_collector

if TYPE_CHECKING:
    from hashsign.application.services.content_registrar_service import (
        ContentRegistrarService,
    )
    from hashsign.application.services.document_store_accessor import (
        DocumentStoreAccessor,
    )

logger = get_logger(__name__)


@dataclass(frozen=True)
class CreatedDocument:
    """Result of a successful create_document.

    Attributes:
        owner: Account whose store holds the document (the creator).
        document_id: Id assigned by the ledger.
        content_id: Blob-store identifier of the uploaded payload.
        content_url: Retrieval address of the payload.
        signers: Required signers, as registered.
    """

    owner: str
    document_id: int
    content_id: str
    content_url: str
    signers: tuple[str, ...]


class WorkflowOrchestrator:
    """Entry point for every user-facing document operation.

    Example:
        >>> orchestrator = WorkflowOrchestrator(registrar=registrar, accessor=accessor)
        >>> await orchestrator.onboard("0xa11ce")
        >>> created = await orchestrator.create_document(
        ...     "0xa11ce", payload, ["0xa11ce", "0xb0b"]
        ... )
        >>> await orchestrator.sign_document("0xb0b", created.document_id, owner="0xa11ce")
    """

    def __init__(
        self,
        registrar: ContentRegistrarService,
        accessor: DocumentStoreAccessor,
    ) -> None:
        self._registrar = registrar
        self._accessor = accessor

    @property
    def max_payload_bytes(self) -> int:
        """Largest payload create_document accepts."""
        return self._registrar.max_payload_bytes

    async def onboard(self, account: str) -> bool:
        """Make sure an account holds a DocumentStore.

        Idempotent for the caller: an account that is already registered,
        including one registered concurrently by another request, is left
        as it is.

        Returns:
            True if this call registered the account, False otherwise.

        Raises:
            TransportError: The ledger could not be reached. An unreachable
                ledger is never mistaken for an unregistered account.
            TransactionRejectedError: Registration was rejected.
        """
        log = logger.bind(account=account)
        with _recorded("onboard"):
            try:
                await self._accessor.read_store(account)
            except NotRegisteredError:
                log.info("Account not registered, registering")
            else:
                log.debug("Account already registered")
                return False

            try:
                await self._accessor.register_account(account)
            except AlreadyRegisteredError:
                log.info("Account registered concurrently")
                return False
            return True

    async def create_document(
        self,
        account: str,
        payload: bytes,
        signers: str | Iterable[str],
        name: str | None = None,
    ) -> CreatedDocument:
        """Upload a payload and register it as a document awaiting signatures.

        Args:
            account: Creator.
            payload: Content to be signed.
            signers: Required signers, as identities or comma-separated text.
            name: Name recorded with the upload.

        Returns:
            CreatedDocument with the assigned id and content identifier.

        Raises:
            SignerListEmptyError: No signer given; nothing is uploaded.
            DuplicateSignerError: A signer is listed twice; nothing is uploaded.
            PayloadTooLargeError: Payload over the limit; nothing is uploaded.
            UploadFailedError: The blob store did not accept the payload.
            OrphanedUploadError: The payload was uploaded but the create
                transition failed; the cause is attached.
            DocumentIdUnresolvedError: The create transition committed but
                the new id could not be read back. Not an orphan; do not
                resubmit.
        """
        with _recorded("create_document"):
            signer_tuple = parse_signers(signers)
            log = logger.bind(account=account, signer_count=len(signer_tuple))

            content_id = await self._registrar.store(payload, name=name)
            log = log.bind(content_id=content_id)

            try:
                document_id = await self._accessor.submit_create(
                    account, content_id, signer_tuple
                )
            except DocumentIdUnresolvedError:
                log.error("Document created but its id is unknown")
                raise
            except HashSignError as e:
                log.error(
                    "Document creation failed after upload",
                    error_type=type(e).__name__,
                    error=str(e),
                )
                get_metrics_collector().increment_orphaned_uploads()
                raise OrphanedUploadError(content_id, e) from e

            log.info("Document created", document_id=document_id)
            return CreatedDocument(
                owner=account,
                document_id=document_id,
                content_id=content_id,
                content_url=self._registrar.content_url(content_id),
                signers=signer_tuple,
            )

    async def sign_document(
        self, account: str, document_id: int, owner: str | None = None
    ) -> None:
        """Attach account's signature to a document.

        The ledger only guarantees eventual visibility, so callers refresh
        their view with list_documents or document_status afterwards.

        Args:
            account: Signer.
            document_id: Document to sign.
            owner: Store owner (the document's creator); defaults to account.

        Raises:
            DocumentNotFoundError, NotASignerError, AlreadySignedError,
            AlreadyCompletedError, TransactionRejectedError, TransportError.
        """
        with _recorded("sign_document"):
            await self._accessor.submit_sign(account, document_id, owner=owner)

    async def view_document(self, content_id: str) -> bytes:
        """Fetch a document's payload for local rendering.

        Raises:
            FetchFailedError: Unknown identifier or failed transfer.
        """
        with _recorded("view_document"):
            return await self._registrar.fetch(content_id)

    async def list_documents(self, account: str) -> list[Document]:
        """Documents the account created, read fresh from the ledger."""
        return await self._accessor.list_documents(account, created_by=account)

    async def document_status(self, owner: str, document_id: int) -> DocumentStatus:
        document = await self._accessor.get_document(owner, document_id)
        return document.status()


@contextmanager
def _recorded(operation: str) -> Iterator[None]:
    """Count the operation as success, or by the domain error it raised."""
    metrics = get_metrics_collector()
    try:
        yield
    except HashSignError as e:
        metrics.increment_workflow_operation(operation, type(e).__name__)
        raise
    metrics.increment_workflow_operation(operation, OUTCOME_SUCCESS)
