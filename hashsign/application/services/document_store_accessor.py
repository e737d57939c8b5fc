"""Document store accessor.

Reads and writes the per-account DocumentStore through the ledger's
resource reads and transition submissions.

Transitions (positional arguments):
- initialize()
- create_document(content_id: str, signers: list[str])
- sign_document(document_id: u64), signing in the sender's own store
- sign_document_for(owner: address, document_id: u64), signing in another
  account's store. The deployed hash_sign1 module exposes only
  sign_document; a ledger without sign_document_for rejects it.

Rejections reported by the ledger with a known abort name are raised as the
matching domain error; any other rejection is a TransactionRejectedError.

Re-registration policy: register_account on an already registered account
fails with AlreadyRegisteredError. It never creates a second store.

Reads are not guaranteed to observe a write submitted moments earlier;
callers that need fresh state re-read explicitly.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from structlog import get_logger

from hashsign.domain.errors import (
    AlreadyCompletedError,
    AlreadyRegisteredError,
    AlreadySignedError,
    DocumentIdUnresolvedError,
    DocumentNotFoundError,
    DuplicateSignerError,
    NotASignerError,
    NotRegisteredError,
    SignerListEmptyError,
    TransactionRejectedError,
)
from hashsign.domain.exceptions import HashSignError
from hashsign.domain.models.document import Document, DocumentStore, validate_signers

if TYPE_CHECKING:
    from hashsign.application.ports.ledger import LedgerProtocol, TransactionOutcome
    from hashsign.config import LedgerConfig

logger = get_logger(__name__)

FN_INITIALIZE = "initialize"
FN_CREATE_DOCUMENT = "create_document"
FN_SIGN_DOCUMENT = "sign_document"
FN_SIGN_DOCUMENT_FOR = "sign_document_for"
EVENT_DOCUMENT_CREATED = "DocumentCreated"


@dataclass(frozen=True)
class _RejectionContext:
    account: str
    owner: str | None = None
    document_id: int | None = None


_REJECTIONS: dict[str, Callable[[_RejectionContext], HashSignError]] = {
    "E_EMPTY_SIGNERS": lambda ctx: SignerListEmptyError(),
    "E_DUPLICATE_SIGNER": lambda ctx: DuplicateSignerError(),
    "E_NOT_A_SIGNER": lambda ctx: NotASignerError(ctx.document_id, ctx.account),
    "E_ALREADY_SIGNED": lambda ctx: AlreadySignedError(ctx.document_id, ctx.account),
    "E_ALREADY_COMPLETED": lambda ctx: AlreadyCompletedError(ctx.document_id),
    "E_ALREADY_REGISTERED": lambda ctx: AlreadyRegisteredError(ctx.account),
    "E_NOT_REGISTERED": lambda ctx: NotRegisteredError(ctx.owner or ctx.account),
    "E_DOCUMENT_NOT_FOUND": lambda ctx: DocumentNotFoundError(ctx.document_id, ctx.owner),
}


class DocumentStoreAccessor:
    """Gateway between the workflow and the ledger-held DocumentStores."""

    def __init__(self, ledger: LedgerProtocol, config: LedgerConfig) -> None:
        """Initialize the accessor.

        Args:
            ledger: Identity and transaction layer.
            config: Module address and name used to build identifiers.
        """
        self._ledger = ledger
        self._config = config

    async def read_store(self, account: str) -> DocumentStore:
        """Read the DocumentStore held by an account.

        Raises:
            NotRegisteredError: The account holds no DocumentStore.
            TransportError: The ledger could not be reached.
            CompletionFlagMismatchError: A stored completion flag disagrees
                with the signatures.
        """
        resource = await self._ledger.read_resource(account, self._config.store_resource_type)
        if resource is None:
            raise NotRegisteredError(account)
        return DocumentStore.from_resource(account, resource)

    async def is_registered(self, account: str) -> bool:
        resource = await self._ledger.read_resource(account, self._config.store_resource_type)
        return resource is not None

    async def register_account(self, account: str) -> None:
        """Create the DocumentStore for an account.

        Raises:
            AlreadyRegisteredError: The account already holds a store.
            TransactionRejectedError: Rejected for any other reason.
            TransportError: The ledger could not be reached.
        """
        log = logger.bind(account=account)
        outcome = await self._submit(FN_INITIALIZE, account, [])
        self._raise_if_rejected(FN_INITIALIZE, outcome, _RejectionContext(account=account))
        log.info("Account registered", transaction_id=outcome.transaction_id)

    async def submit_create(
        self, account: str, content_id: str, signers: Iterable[str]
    ) -> int:
        """Submit the create transition and return the new document id.

        Args:
            account: Creator; the document lands in this account's store.
            content_id: Blob-store identifier of the content.
            signers: Required signer identities.

        Returns:
            Id of the created document.

        Raises:
            SignerListEmptyError: signers is empty (checked before submitting).
            DuplicateSignerError: signers lists an identity twice.
            NotRegisteredError: The account holds no store.
            TransactionRejectedError: Rejected for any other reason.
            TransportError: The ledger could not be reached.
            DocumentIdUnresolvedError: The create committed but neither an
                event nor a re-read yields the new id.
        """
        signer_list = list(signers)
        validate_signers(tuple(signer_list))

        log = logger.bind(account=account, content_id=content_id, signer_count=len(signer_list))
        outcome = await self._submit(FN_CREATE_DOCUMENT, account, [content_id, signer_list])
        self._raise_if_rejected(
            FN_CREATE_DOCUMENT, outcome, _RejectionContext(account=account, owner=account)
        )

        document_id = self._created_document_id(outcome, account)
        if document_id is None:
            try:
                document_id = await self._find_created_document_id(account, content_id)
            except HashSignError as e:
                log.error("Document id re-read failed", error=str(e))
                raise DocumentIdUnresolvedError(
                    account, content_id, outcome.transaction_id
                ) from e
            if document_id is None:
                log.error(
                    "Document not yet visible after create",
                    transaction_id=outcome.transaction_id,
                )
                raise DocumentIdUnresolvedError(account, content_id, outcome.transaction_id)
        log.info("Document created", document_id=document_id, transaction_id=outcome.transaction_id)
        return document_id

    async def submit_sign(
        self, account: str, document_id: int, owner: str | None = None
    ) -> None:
        """Submit the sign transition.

        Args:
            account: Signer; the ledger authenticates it as the sender.
            document_id: Document to sign.
            owner: Account whose store holds the document; defaults to account.
                A different owner is submitted as sign_document_for.

        Raises:
            DocumentNotFoundError: No such document in the owner's store.
            NotRegisteredError: The owner holds no store.
            NotASignerError: account is not a required signer.
            AlreadySignedError: account has already signed.
            AlreadyCompletedError: The document is already completed.
            TransactionRejectedError: Rejected for any other reason.
            TransportError: The ledger could not be reached.
        """
        store_owner = owner or account
        log = logger.bind(account=account, owner=store_owner, document_id=document_id)
        if store_owner == account:
            function, args = FN_SIGN_DOCUMENT, [document_id]
        else:
            function, args = FN_SIGN_DOCUMENT_FOR, [store_owner, document_id]
        outcome = await self._submit(function, account, args)
        self._raise_if_rejected(
            function,
            outcome,
            _RejectionContext(account=account, owner=store_owner, document_id=document_id),
        )
        log.info("Document signed", transaction_id=outcome.transaction_id)

    async def get_document(self, owner: str, document_id: int) -> Document:
        """Read a single document from an owner's store.

        Raises:
            NotRegisteredError: The owner holds no store.
            DocumentNotFoundError: No such document.
        """
        store = await self.read_store(owner)
        return store.get(document_id)

    async def list_documents(
        self, account: str, created_by: str | None = None
    ) -> list[Document]:
        """List documents in an account's store.

        Args:
            account: Store owner.
            created_by: When given, keep only documents with that creator.
        """
        store = await self.read_store(account)
        if created_by is None:
            return list(store.documents)
        return store.created_by(created_by)

    async def _submit(
        self, function: str, account: str, args: list
    ) -> TransactionOutcome:
        return await self._ledger.submit(account, self._config.function_id(function), args)

    def _raise_if_rejected(
        self,
        function: str,
        outcome: TransactionOutcome,
        context: _RejectionContext,
    ) -> None:
        if outcome.committed:
            return

        function_id = self._config.function_id(function)
        factory = _REJECTIONS.get(outcome.reason or "")
        logger.warning(
            "Transaction rejected",
            function_id=function_id,
            account=context.account,
            reason=outcome.reason,
            transaction_id=outcome.transaction_id,
        )
        if factory is None:
            raise TransactionRejectedError(function_id, outcome.reason)
        raise factory(context)

    def _created_document_id(self, outcome: TransactionOutcome, account: str) -> int | None:
        event_type = self._config.function_id(EVENT_DOCUMENT_CREATED)
        for event in outcome.events:
            if event.type == event_type and event.data.get("creator", account) == account:
                return int(event.data["id"])
        return None

    async def _find_created_document_id(
        self, account: str, content_id: str
    ) -> int | None:
        """Locate a just-created document when the ledger emitted no event.

        The newest document by this creator with this content wins; an older
        document with the same content can only come from an earlier create.
        """
        store = await self.read_store(account)
        matches = [
            d.id for d in store.created_by(account) if d.content_fingerprint == content_id
        ]
        return max(matches) if matches else None
