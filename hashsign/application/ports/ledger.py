"""Ledger (identity and transaction layer) port.

The ledger holds the authoritative DocumentStore for every account and
executes the lifecycle transitions. This package only reads resources and
submits transitions; it never sees the execution itself.

Contract:
- read_resource returns the resource value, or None when the account holds
  no resource of that type. Transport failures raise TransportError; they
  are never reported as None.
- submit returns a TransactionOutcome. Each submission is atomic: it either
  fully applies or not at all. Transitions against one store are serialized
  by the ledger.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class LedgerEvent:
    """An event emitted by a committed transaction.

    Attributes:
        type: Fully qualified event type, e.g. "0x1::hash_sign1::DocumentCreated".
        data: Event payload as served by the ledger.
    """

    type: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionOutcome:
    """Result of a submitted transition.

    Attributes:
        committed: Whether the transition was applied.
        transaction_id: Ledger identifier (hash) of the transaction, if any.
        reason: Rejection reason when not committed. Abort names such as
            "E_ALREADY_SIGNED" are mapped back to domain errors by the
            accessor; anything else is opaque.
        events: Events emitted by a committed transaction.
    """

    committed: bool
    transaction_id: str | None = None
    reason: str | None = None
    events: tuple[LedgerEvent, ...] = ()

    @classmethod
    def accepted(
        cls, transaction_id: str | None = None, events: tuple[LedgerEvent, ...] = ()
    ) -> TransactionOutcome:
        return cls(committed=True, transaction_id=transaction_id, events=events)

    @classmethod
    def rejected(cls, reason: str, transaction_id: str | None = None) -> TransactionOutcome:
        return cls(committed=False, transaction_id=transaction_id, reason=reason)


class LedgerProtocol(Protocol):
    """Protocol for the external identity and transaction layer."""

    @abstractmethod
    async def read_resource(
        self, account: str, resource_type: str
    ) -> dict[str, Any] | None:
        """Read a resource held by an account.

        Args:
            account: Account address.
            resource_type: Fully qualified resource type.

        Returns:
            The resource value, or None if the account holds none.

        Raises:
            TransportError: The ledger could not be reached.
        """
        ...

    @abstractmethod
    async def submit(
        self, account: str, function_id: str, args: list[Any]
    ) -> TransactionOutcome:
        """Submit a transition on behalf of an account.

        Args:
            account: Sender account; the ledger authenticates it.
            function_id: Fully qualified transition identifier.
            args: Positional transition arguments.

        Returns:
            TransactionOutcome, committed or rejected.

        Raises:
            TransportError: The submission could not be delivered or its
                outcome could not be observed in time.
        """
        ...
