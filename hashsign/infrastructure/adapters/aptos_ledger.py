"""Aptos ledger adapter.

Reads DocumentStore resources from an Aptos fullnode and submits the
signing module's entry functions.

Signing stays with the account holder. Submissions are handed to a
TransactionSigner (a wallet relay in production) that signs the entry
function payload as the account and returns the transaction hash. The
adapter then polls the fullnode until the transaction leaves the mempool
and translates the result into a TransactionOutcome.

Fullnode endpoints used:
- GET /accounts/{address}/resource/{resource_type}
- GET /transactions/by_hash/{hash}

Aborts raised by the module surface in vm_status as
"Move abort in 0x1::hash_sign1: E_ALREADY_SIGNED(0x3): ...". The abort
name is reported as the rejection reason.
"""

from __future__ import annotations

import asyncio
import re
import time
from abc import abstractmethod
from typing import Any, Protocol

import httpx
from structlog import get_logger

from hashsign.application.ports.ledger import LedgerEvent, TransactionOutcome
from hashsign.config import LedgerConfig
from hashsign.domain.errors import TransportError

logger = get_logger(__name__)

_ABORT_PATTERN = re.compile(r"Move abort in [^:]+::\w+: (\w+)\(")

PENDING_TRANSACTION = "pending_transaction"


class TransactionSignerError(Exception):
    """The signer refused or failed to sign a transaction.

    Attributes:
        reason: Short reason reported by the signer (e.g. "user_rejected").
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Transaction not signed: {reason}")
        self.reason = reason


class TransactionSigner(Protocol):
    """Signs and submits entry function payloads on behalf of an account."""

    @abstractmethod
    async def sign_and_submit(self, account: str, payload: dict[str, Any]) -> str:
        """Sign a payload as account and submit it.

        Returns:
            The transaction hash.

        Raises:
            TransactionSignerError: The signer refused to sign.
            TransportError: The signer could not be reached.
        """
        ...


class WalletRelaySigner:
    """TransactionSigner that forwards payloads to a wallet relay over HTTP.

    Request:  POST {signer_url} {"sender": account, "payload": {...}}
    Response: {"hash": "0x..."}
    A 4xx response means the wallet declined; its "reason" field is kept.
    """

    def __init__(
        self,
        signer_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._signer_url = signer_url
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def sign_and_submit(self, account: str, payload: dict[str, Any]) -> str:
        try:
            response = await self._client.post(
                self._signer_url, json={"sender": account, "payload": payload}
            )
        except httpx.RequestError as e:
            raise TransportError(f"Signer request failed: {e}", service="signer") from e

        if 400 <= response.status_code < 500:
            try:
                reason = response.json().get("reason", "rejected")
            except ValueError:
                reason = "rejected"
            raise TransactionSignerError(str(reason))
        if response.status_code != 200:
            raise TransportError(
                f"Signer returned {response.status_code}", service="signer"
            )
        return str(response.json()["hash"])

    async def close(self) -> None:
        await self._client.aclose()


class AptosLedger:
    """LedgerProtocol implementation backed by an Aptos fullnode."""

    def __init__(
        self,
        config: LedgerConfig,
        signer: TransactionSigner,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Node URL, module identity and commit polling settings.
            signer: Signs submissions as the sending account.
            client: HTTP client to use; one is created when omitted.
        """
        self._config = config
        self._signer = signer
        self._base_url = config.node_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=config.tx_wait_timeout_seconds)

    async def __aenter__(self) -> AptosLedger:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def read_resource(
        self, account: str, resource_type: str
    ) -> dict[str, Any] | None:
        response = await self._get(f"/accounts/{account}/resource/{resource_type}")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise TransportError(
                f"Fullnode returned {response.status_code} reading {resource_type}"
            )
        return response.json()["data"]

    async def submit(
        self, account: str, function_id: str, args: list[Any]
    ) -> TransactionOutcome:
        log = logger.bind(account=account, function_id=function_id)
        payload = entry_function_payload(function_id, args)

        try:
            transaction_hash = await self._signer.sign_and_submit(account, payload)
        except TransactionSignerError as e:
            log.info("Transaction not signed", reason=e.reason)
            return TransactionOutcome.rejected(e.reason)

        log = log.bind(transaction_id=transaction_hash)
        transaction = await self._wait_for_transaction(transaction_hash)

        if transaction.get("success"):
            events = tuple(
                LedgerEvent(type=e["type"], data=e.get("data") or {})
                for e in transaction.get("events", [])
            )
            log.debug("Transaction committed", event_count=len(events))
            return TransactionOutcome.accepted(transaction_hash, events)

        reason = abort_reason(transaction.get("vm_status", ""))
        log.info("Transaction aborted", reason=reason)
        return TransactionOutcome.rejected(reason, transaction_hash)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _wait_for_transaction(self, transaction_hash: str) -> dict[str, Any]:
        deadline = time.monotonic() + self._config.tx_wait_timeout_seconds
        while True:
            response = await self._get(f"/transactions/by_hash/{transaction_hash}")
            if response.status_code == 200:
                transaction = response.json()
                if transaction.get("type") != PENDING_TRANSACTION:
                    return transaction
            elif response.status_code != 404:
                raise TransportError(
                    f"Fullnode returned {response.status_code} for transaction {transaction_hash}"
                )

            if time.monotonic() >= deadline:
                raise TransportError(
                    f"Transaction {transaction_hash} not committed after "
                    f"{self._config.tx_wait_timeout_seconds}s"
                )
            await asyncio.sleep(self._config.tx_poll_interval_seconds)

    async def _get(self, path: str) -> httpx.Response:
        try:
            return await self._client.get(f"{self._base_url}{path}")
        except httpx.TimeoutException as e:
            raise TransportError(f"Fullnode request timed out: {path}") from e
        except httpx.RequestError as e:
            raise TransportError(f"Fullnode request failed: {e}") from e


def entry_function_payload(function_id: str, args: list[Any]) -> dict[str, Any]:
    """Build an entry function payload; u64 and address arguments travel as strings."""
    return {
        "type": "entry_function_payload",
        "function": function_id,
        "type_arguments": [],
        "arguments": [_encode_argument(a) for a in args],
    }


def _encode_argument(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_encode_argument(v) for v in value]
    if isinstance(value, bool):
        return value
    return str(value)


def abort_reason(vm_status: str) -> str:
    """Extract the abort name from a vm_status, or return the status unchanged."""
    match = _ABORT_PATTERN.search(vm_status)
    return match.group(1) if match else vm_status
