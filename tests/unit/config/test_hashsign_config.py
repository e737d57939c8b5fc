"""Unit tests for HashSign configuration."""

import pytest

from hashsign.config import (
    BACKEND_MEMORY,
    BACKEND_REMOTE,
    DEFAULT_MAX_PAYLOAD_BYTES,
    BlobStoreConfig,
    HashSignConfig,
    LedgerConfig,
)

ENV_VARS = (
    "HASHSIGN_ENVIRONMENT",
    "HASHSIGN_BACKEND",
    "HASHSIGN_MAX_PAYLOAD_BYTES",
    "APTOS_NODE_URL",
    "HASHSIGN_MODULE_ADDRESS",
    "HASHSIGN_MODULE_NAME",
    "HASHSIGN_TX_WAIT_TIMEOUT",
    "HASHSIGN_TX_POLL_INTERVAL",
    "HASHSIGN_SIGNER_URL",
    "PINATA_API_URL",
    "PINATA_GATEWAY_URL",
    "PINATA_API_KEY",
    "PINATA_SECRET_API_KEY",
    "HASHSIGN_HTTP_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLedgerConfig:
    def test_identifiers(self) -> None:
        config = LedgerConfig(module_address="0xcafe", module_name="hash_sign1")

        assert config.module_id == "0xcafe::hash_sign1"
        assert config.store_resource_type == "0xcafe::hash_sign1::DocumentStore"
        assert config.function_id("sign_document") == "0xcafe::hash_sign1::sign_document"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"module_address": ""},
            {"module_name": ""},
            {"tx_wait_timeout_seconds": 0},
            {"tx_poll_interval_seconds": -1},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            LedgerConfig(**kwargs)

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHSIGN_MODULE_ADDRESS", "0xbeef")
        monkeypatch.setenv("HASHSIGN_TX_WAIT_TIMEOUT", "12.5")
        monkeypatch.setenv("HASHSIGN_SIGNER_URL", "http://relay:9000/sign")

        config = LedgerConfig.from_environment()

        assert config.module_address == "0xbeef"
        assert config.module_name == "hash_sign1"
        assert config.tx_wait_timeout_seconds == 12.5
        assert config.signer_url == "http://relay:9000/sign"

    def test_unparseable_number_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHSIGN_TX_POLL_INTERVAL", "soon")
        assert LedgerConfig.from_environment().tx_poll_interval_seconds == 1.0


class TestBlobStoreConfig:
    def test_credentials_hidden_from_repr(self) -> None:
        config = BlobStoreConfig(api_key="key", secret_api_key="secret")

        assert config.has_credentials is True
        assert "secret" not in repr(config)

    def test_partial_credentials(self) -> None:
        assert BlobStoreConfig(api_key="key").has_credentials is False


class TestHashSignConfig:
    def test_defaults(self) -> None:
        config = HashSignConfig.from_environment()

        assert config.environment == "production"
        assert config.backend == BACKEND_MEMORY
        assert config.max_payload_bytes == DEFAULT_MAX_PAYLOAD_BYTES == 25 * 1024 * 1024

    def test_payload_limit_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHSIGN_MAX_PAYLOAD_BYTES", "1048576")
        assert HashSignConfig.from_environment().max_payload_bytes == 1_048_576

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="backend"):
            HashSignConfig(backend="postgres")

    def test_remote_requires_pinata_credentials(self) -> None:
        with pytest.raises(ValueError, match="PINATA_API_KEY"):
            HashSignConfig(
                backend=BACKEND_REMOTE,
                ledger=LedgerConfig(signer_url="http://relay/sign"),
            )

    def test_remote_requires_signer(self) -> None:
        with pytest.raises(ValueError, match="HASHSIGN_SIGNER_URL"):
            HashSignConfig(
                backend=BACKEND_REMOTE,
                blob_store=BlobStoreConfig(api_key="k", secret_api_key="s"),
            )

    def test_remote_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HASHSIGN_BACKEND", "remote")
        monkeypatch.setenv("HASHSIGN_SIGNER_URL", "http://relay/sign")
        monkeypatch.setenv("PINATA_API_KEY", "k")
        monkeypatch.setenv("PINATA_SECRET_API_KEY", "s")

        config = HashSignConfig.from_environment()

        assert config.backend == BACKEND_REMOTE
        assert config.blob_store.has_credentials is True
