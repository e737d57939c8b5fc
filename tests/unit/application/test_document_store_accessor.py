"""Unit tests for DocumentStoreAccessor.

Most tests run against the in-memory LedgerStub; ledger behaviour the stub
does not produce (missing events, unknown rejections) is mocked.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hashsign.application.ports.ledger import LedgerEvent, TransactionOutcome
from hashsign.application.services.document_store_accessor import DocumentStoreAccessor
from hashsign.config import LedgerConfig
from hashsign.domain.errors import (
    AlreadyCompletedError,
    AlreadyRegisteredError,
    AlreadySignedError,
    CompletionFlagMismatchError,
    DocumentIdUnresolvedError,
    DocumentNotFoundError,
    DuplicateSignerError,
    NotASignerError,
    NotRegisteredError,
    SignerListEmptyError,
    StateInconsistencyError,
    TransactionRejectedError,
    TransportError,
)
from hashsign.infrastructure.stubs.ledger_stub import LedgerStub

ALICE = "0xa11ce"
BOB = "0xb0b"
CAROL = "0xca201"


def _mock_ledger() -> MagicMock:
    ledger = MagicMock()
    ledger.read_resource = AsyncMock(return_value=None)
    ledger.submit = AsyncMock()
    return ledger


class TestReadStore:
    @pytest.mark.asyncio
    async def test_unregistered_account(self, accessor: DocumentStoreAccessor) -> None:
        with pytest.raises(NotRegisteredError) as exc_info:
            await accessor.read_store(ALICE)
        assert exc_info.value.account == ALICE

    @pytest.mark.asyncio
    async def test_transport_failure_is_not_not_registered(
        self, accessor: DocumentStoreAccessor, ledger: LedgerStub
    ) -> None:
        ledger.set_unavailable()
        with pytest.raises(TransportError):
            await accessor.read_store(ALICE)

    @pytest.mark.asyncio
    async def test_reads_resource_type_of_module(self, ledger_config: LedgerConfig) -> None:
        ledger = _mock_ledger()
        accessor = DocumentStoreAccessor(ledger=ledger, config=ledger_config)

        with pytest.raises(NotRegisteredError):
            await accessor.read_store(ALICE)
        ledger.read_resource.assert_awaited_once_with(
            ALICE, "0xcafe::hash_sign1::DocumentStore"
        )

    @pytest.mark.asyncio
    async def test_completion_flag_mismatch_surfaces(self, ledger_config: LedgerConfig) -> None:
        ledger = _mock_ledger()
        ledger.read_resource.return_value = {
            "documents": [
                {
                    "id": "0",
                    "content_hash": "QmA",
                    "creator": ALICE,
                    "signers": [ALICE],
                    "signatures": [],
                    "is_completed": True,
                }
            ],
            "document_counter": "1",
        }
        accessor = DocumentStoreAccessor(ledger=ledger, config=ledger_config)

        with pytest.raises(CompletionFlagMismatchError):
            await accessor.read_store(ALICE)


class TestRegisterAccount:
    @pytest.mark.asyncio
    async def test_register_creates_empty_store(
        self, accessor: DocumentStoreAccessor
    ) -> None:
        await accessor.register_account(ALICE)

        store = await accessor.read_store(ALICE)
        assert store.documents == ()
        assert store.document_counter == 0
        assert await accessor.is_registered(ALICE) is True

    @pytest.mark.asyncio
    async def test_second_registration_rejected(
        self, accessor: DocumentStoreAccessor
    ) -> None:
        await accessor.register_account(ALICE)
        with pytest.raises(AlreadyRegisteredError):
            await accessor.register_account(ALICE)

    @pytest.mark.asyncio
    async def test_is_registered_false(self, accessor: DocumentStoreAccessor) -> None:
        assert await accessor.is_registered(ALICE) is False


class TestSubmitCreate:
    @pytest.mark.asyncio
    async def test_returns_dense_ids(self, accessor: DocumentStoreAccessor) -> None:
        await accessor.register_account(ALICE)

        first = await accessor.submit_create(ALICE, "QmA", [ALICE, BOB])
        second = await accessor.submit_create(ALICE, "QmB", [BOB])

        assert (first, second) == (0, 1)
        store = await accessor.read_store(ALICE)
        assert store.document_counter == 2

    @pytest.mark.asyncio
    async def test_submits_module_function(
        self, accessor: DocumentStoreAccessor, ledger: LedgerStub
    ) -> None:
        await accessor.register_account(ALICE)
        await accessor.submit_create(ALICE, "QmA", (ALICE, BOB))

        submission = ledger.submissions[-1]
        assert submission.function_id == "0xcafe::hash_sign1::create_document"
        assert submission.args == ("QmA", [ALICE, BOB])

    @pytest.mark.asyncio
    async def test_empty_signers_checked_before_submitting(
        self, accessor: DocumentStoreAccessor, ledger: LedgerStub
    ) -> None:
        await accessor.register_account(ALICE)
        submitted = len(ledger.submissions)

        with pytest.raises(SignerListEmptyError):
            await accessor.submit_create(ALICE, "QmA", [])
        assert len(ledger.submissions) == submitted

    @pytest.mark.asyncio
    async def test_duplicate_signers_checked_before_submitting(
        self, accessor: DocumentStoreAccessor, ledger: LedgerStub
    ) -> None:
        with pytest.raises(DuplicateSignerError):
            await accessor.submit_create(ALICE, "QmA", [BOB, BOB])
        assert ledger.submissions == []

    @pytest.mark.asyncio
    async def test_unregistered_creator(self, accessor: DocumentStoreAccessor) -> None:
        with pytest.raises(NotRegisteredError):
            await accessor.submit_create(ALICE, "QmA", [BOB])

    @pytest.mark.asyncio
    async def test_unknown_rejection_is_transaction_rejected(
        self, accessor: DocumentStoreAccessor, ledger: LedgerStub
    ) -> None:
        await accessor.register_account(ALICE)
        ledger.reject_next_submit("OUT_OF_GAS")

        with pytest.raises(TransactionRejectedError) as exc_info:
            await accessor.submit_create(ALICE, "QmA", [BOB])

        assert exc_info.value.reason == "OUT_OF_GAS"
        assert exc_info.value.function_id == "0xcafe::hash_sign1::create_document"

    @pytest.mark.asyncio
    async def test_id_from_event(self, ledger_config: LedgerConfig) -> None:
        ledger = _mock_ledger()
        ledger.submit.return_value = TransactionOutcome.accepted(
            "0xabc",
            (
                LedgerEvent(
                    type="0xcafe::hash_sign1::DocumentCreated",
                    data={"id": "41", "creator": ALICE},
                ),
            ),
        )
        accessor = DocumentStoreAccessor(ledger=ledger, config=ledger_config)

        assert await accessor.submit_create(ALICE, "QmA", [BOB]) == 41
        ledger.read_resource.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_id_found_by_rereading_without_event(
        self, ledger_config: LedgerConfig
    ) -> None:
        ledger = _mock_ledger()
        ledger.submit.return_value = TransactionOutcome.accepted("0xabc")
        ledger.read_resource.return_value = {
            "documents": [
                {
                    "id": str(n),
                    "content_hash": content,
                    "creator": ALICE,
                    "signers": [BOB],
                    "signatures": [],
                    "is_completed": False,
                }
                for n, content in enumerate(["QmA", "QmB", "QmA"])
            ],
            "document_counter": "3",
        }
        accessor = DocumentStoreAccessor(ledger=ledger, config=ledger_config)

        assert await accessor.submit_create(ALICE, "QmA", [BOB]) == 2

    @pytest.mark.asyncio
    async def test_committed_but_invisible_document(
        self, ledger_config: LedgerConfig
    ) -> None:
        ledger = _mock_ledger()
        ledger.submit.return_value = TransactionOutcome.accepted("0xabc")
        ledger.read_resource.return_value = {"documents": [], "document_counter": "0"}
        accessor = DocumentStoreAccessor(ledger=ledger, config=ledger_config)

        with pytest.raises(DocumentIdUnresolvedError) as exc_info:
            await accessor.submit_create(ALICE, "QmA", [BOB])

        assert isinstance(exc_info.value, StateInconsistencyError)
        assert exc_info.value.content_id == "QmA"
        assert exc_info.value.transaction_id == "0xabc"
        assert exc_info.value.account == ALICE

    @pytest.mark.asyncio
    async def test_reread_failure_after_commit(self, ledger_config: LedgerConfig) -> None:
        ledger = _mock_ledger()
        ledger.submit.return_value = TransactionOutcome.accepted("0xabc")
        ledger.read_resource.side_effect = TransportError("Ledger unavailable")
        accessor = DocumentStoreAccessor(ledger=ledger, config=ledger_config)

        with pytest.raises(DocumentIdUnresolvedError) as exc_info:
            await accessor.submit_create(ALICE, "QmA", [BOB])

        assert isinstance(exc_info.value.__cause__, TransportError)


class TestSubmitSign:
    @pytest.fixture
    async def document_id(self, accessor: DocumentStoreAccessor) -> int:
        await accessor.register_account(ALICE)
        return await accessor.submit_create(ALICE, "QmA", [ALICE, BOB])

    @pytest.mark.asyncio
    async def test_own_document_sends_only_the_id(
        self, accessor: DocumentStoreAccessor, ledger: LedgerStub, document_id: int
    ) -> None:
        await accessor.submit_sign(ALICE, document_id)

        submission = ledger.submissions[-1]
        assert submission.function_id == "0xcafe::hash_sign1::sign_document"
        assert submission.args == (document_id,)
        document = await accessor.get_document(ALICE, document_id)
        assert document.has_signed(ALICE)

    @pytest.mark.asyncio
    async def test_cross_account_signature(
        self, accessor: DocumentStoreAccessor, ledger: LedgerStub, document_id: int
    ) -> None:
        await accessor.submit_sign(BOB, document_id, owner=ALICE)

        submission = ledger.submissions[-1]
        assert submission.account == BOB
        assert submission.function_id == "0xcafe::hash_sign1::sign_document_for"
        assert submission.args == (ALICE, document_id)
        document = await accessor.get_document(ALICE, document_id)
        assert [s.signer for s in document.signatures] == [BOB]

    @pytest.mark.asyncio
    async def test_already_signed(
        self, accessor: DocumentStoreAccessor, document_id: int
    ) -> None:
        await accessor.submit_sign(ALICE, document_id)
        with pytest.raises(AlreadySignedError) as exc_info:
            await accessor.submit_sign(ALICE, document_id)
        assert exc_info.value.signer == ALICE

    @pytest.mark.asyncio
    async def test_not_a_signer(
        self, accessor: DocumentStoreAccessor, document_id: int
    ) -> None:
        with pytest.raises(NotASignerError) as exc_info:
            await accessor.submit_sign(CAROL, document_id, owner=ALICE)
        assert exc_info.value.signer == CAROL
        assert exc_info.value.document_id == document_id

    @pytest.mark.asyncio
    async def test_already_completed(
        self, accessor: DocumentStoreAccessor, document_id: int
    ) -> None:
        await accessor.submit_sign(ALICE, document_id)
        await accessor.submit_sign(BOB, document_id, owner=ALICE)

        with pytest.raises(AlreadyCompletedError):
            await accessor.submit_sign(BOB, document_id, owner=ALICE)

    @pytest.mark.asyncio
    async def test_document_not_found(
        self, accessor: DocumentStoreAccessor, document_id: int
    ) -> None:
        with pytest.raises(DocumentNotFoundError) as exc_info:
            await accessor.submit_sign(ALICE, 99)
        assert exc_info.value.owner == ALICE

    @pytest.mark.asyncio
    async def test_owner_not_registered(self, accessor: DocumentStoreAccessor) -> None:
        with pytest.raises(NotRegisteredError) as exc_info:
            await accessor.submit_sign(BOB, 0, owner=CAROL)
        assert exc_info.value.account == CAROL


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_documents_filters_creator(
        self, accessor: DocumentStoreAccessor
    ) -> None:
        await accessor.register_account(ALICE)
        await accessor.submit_create(ALICE, "QmA", [BOB])
        await accessor.submit_create(ALICE, "QmB", [BOB])

        assert len(await accessor.list_documents(ALICE)) == 2
        assert len(await accessor.list_documents(ALICE, created_by=ALICE)) == 2
        assert await accessor.list_documents(ALICE, created_by=BOB) == []

    @pytest.mark.asyncio
    async def test_get_document_not_found(self, accessor: DocumentStoreAccessor) -> None:
        await accessor.register_account(ALICE)
        with pytest.raises(DocumentNotFoundError):
            await accessor.get_document(ALICE, 0)
