"""In-memory stub for LedgerProtocol.

This stub stands in for the external identity and transaction layer. It
keeps one DocumentStore per account and executes the transitions with
the lifecycle domain service, so it enforces the same rules the deployed
module does:
- initialize creates a store once (E_ALREADY_REGISTERED afterwards)
- create_document appends to the sender's store and emits DocumentCreated
- sign_document(document_id) signs a document in the sender's own store
- sign_document_for(owner, document_id) signs a document in owner's store
  as the sender

Transitions against the same store are serialized with an asyncio.Lock per
store owner. The lock is held across an await point between reading the
committed store and writing the new one, so concurrent submissions really
interleave and the uniqueness checks are exercised.

Rejections are reported the way a Move module reports them: a rejected
TransactionOutcome whose reason is the abort name.

Test helpers allow injecting rejections and transport failures and inspect
the submissions received.

WARNING: This stub is for development/testing only.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from hashsign.application.ports.ledger import LedgerEvent, TransactionOutcome
from hashsign.config import LedgerConfig
from hashsign.domain.errors import (
    AlreadyRegisteredError,
    NotRegisteredError,
    TransportError,
)
from hashsign.domain.exceptions import HashSignError
from hashsign.domain.models.document import DocumentStore
from hashsign.domain.services.document_lifecycle import (
    apply_create,
    apply_sign,
    initialize_store,
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Submission:
    """A transition received by the stub."""

    account: str
    function_id: str
    args: tuple[Any, ...]


class LedgerStub:
    """In-memory stub implementation of LedgerProtocol.

    Thread-safety note: safe for concurrent coroutines on one event loop,
    NOT for use from several threads.
    """

    def __init__(
        self,
        config: LedgerConfig | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize empty ledger.

        Args:
            config: Module address and name the stub answers to.
            clock: Source of signature timestamps.
        """
        self._config = config or LedgerConfig()
        self._clock = clock
        self._stores: dict[str, DocumentStore] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._submissions: list[Submission] = []
        self._pending_rejections: list[str] = []
        self._unavailable = False
        self._read_count = 0
        self._tx_counter = 0

    async def read_resource(
        self, account: str, resource_type: str
    ) -> dict[str, Any] | None:
        self._read_count += 1
        if self._unavailable:
            raise TransportError("Ledger unavailable", service="ledger")
        if resource_type != self._config.store_resource_type:
            return None
        store = self._stores.get(account)
        return store.to_resource() if store is not None else None

    async def submit(
        self, account: str, function_id: str, args: list[Any]
    ) -> TransactionOutcome:
        self._submissions.append(Submission(account, function_id, tuple(args)))
        if self._unavailable:
            raise TransportError("Ledger unavailable", service="ledger")

        transaction_id = self._next_transaction_id()
        if self._pending_rejections:
            return TransactionOutcome.rejected(self._pending_rejections.pop(0), transaction_id)

        handlers = {
            self._config.function_id("initialize"): self._initialize,
            self._config.function_id("create_document"): self._create_document,
            self._config.function_id("sign_document"): self._sign_document,
            self._config.function_id("sign_document_for"): self._sign_document_for,
        }
        handler = handlers.get(function_id)
        if handler is None:
            return TransactionOutcome.rejected("E_FUNCTION_NOT_FOUND", transaction_id)

        if function_id == self._config.function_id("sign_document_for"):
            owner = str(args[0])
        else:
            owner = account
        async with self._lock_for(owner):
            try:
                events = await handler(account, args)
            except HashSignError as e:
                if e.abort_code is None:
                    raise
                return TransactionOutcome.rejected(e.abort_code, transaction_id)
        return TransactionOutcome.accepted(transaction_id, events)

    async def _initialize(self, account: str, args: list[Any]) -> tuple[LedgerEvent, ...]:
        if account in self._stores:
            raise AlreadyRegisteredError(account)
        await asyncio.sleep(0)
        self._stores[account] = initialize_store(account)
        return ()

    async def _create_document(self, account: str, args: list[Any]) -> tuple[LedgerEvent, ...]:
        content_id, signers = args
        store = self._committed_store(account)
        await asyncio.sleep(0)
        new_store, document = apply_create(store, account, str(content_id), list(signers))
        self._stores[account] = new_store
        return (
            LedgerEvent(
                type=self._config.function_id("DocumentCreated"),
                data={
                    "id": str(document.id),
                    "creator": account,
                    "content_hash": document.content_fingerprint,
                },
            ),
        )

    async def _sign_document(self, account: str, args: list[Any]) -> tuple[LedgerEvent, ...]:
        return await self._apply_sign(account, account, int(args[0]))

    async def _sign_document_for(
        self, account: str, args: list[Any]
    ) -> tuple[LedgerEvent, ...]:
        return await self._apply_sign(account, str(args[0]), int(args[1]))

    async def _apply_sign(
        self, account: str, owner: str, document_id: int
    ) -> tuple[LedgerEvent, ...]:
        store = self._committed_store(owner)
        await asyncio.sleep(0)
        new_store, document = apply_sign(store, document_id, account, self._clock())
        self._stores[owner] = new_store
        return (
            LedgerEvent(
                type=self._config.function_id("DocumentSigned"),
                data={
                    "id": str(document.id),
                    "owner": owner,
                    "signer": account,
                    "is_completed": document.is_completed,
                },
            ),
        )

    def _committed_store(self, owner: str) -> DocumentStore:
        store = self._stores.get(owner)
        if store is None:
            raise NotRegisteredError(owner)
        return store

    def _lock_for(self, owner: str) -> asyncio.Lock:
        lock = self._locks.get(owner)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[owner] = lock
        return lock

    def _next_transaction_id(self) -> str:
        self._tx_counter += 1
        return f"0x{self._tx_counter:064x}"

    # Test helper methods

    def reject_next_submit(self, reason: str) -> None:
        """Reject the next submission with the given reason, whatever it is."""
        self._pending_rejections.append(reason)

    def set_unavailable(self, unavailable: bool = True) -> None:
        """Make reads and submissions raise TransportError."""
        self._unavailable = unavailable

    def get_store(self, account: str) -> DocumentStore | None:
        """Get committed store for inspection in tests."""
        return self._stores.get(account)

    @property
    def submissions(self) -> list[Submission]:
        return list(self._submissions)

    @property
    def read_count(self) -> int:
        return self._read_count

    def reset(self) -> None:
        """Reset all stored data. Useful between tests."""
        self._stores.clear()
        self._locks.clear()
        self._submissions.clear()
        self._pending_rejections.clear()
        self._unavailable = False
        self._read_count = 0
        self._tx_counter = 0
