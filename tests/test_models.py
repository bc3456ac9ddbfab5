"""Tests for Pydantic models and settings."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from feecache.config import Settings
from feecache.constants import BaseCurrencyNetwork
from feecache.core.exceptions import FeeProviderError, FeeProviderRateLimitError
from feecache.models.fees import FeeRequestResult, FeeSnapshot


class TestFeeSnapshotModel:
    """Tests for FeeSnapshot."""

    def test_frozen(self) -> None:
        """Test snapshots cannot be modified."""
        snapshot = FeeSnapshot(tx_fee_per_byte=10)

        with pytest.raises(ValidationError):
            snapshot.tx_fee_per_byte = 20

    def test_negative_fee_rejected(self) -> None:
        """Test negative fees are invalid."""
        with pytest.raises(ValidationError):
            FeeSnapshot(tx_fee_per_byte=-1)

    def test_source_time(self) -> None:
        """Test the source timestamp conversion."""
        snapshot = FeeSnapshot(tx_fee_per_byte=10, epoch_seconds_at_source=1_700_000_000)

        assert snapshot.source_time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


class TestFeeRequestResultModel:
    """Tests for FeeRequestResult."""

    def test_ok(self) -> None:
        """Test successful results carry the snapshot."""
        snapshot = FeeSnapshot(tx_fee_per_byte=10, version=3)

        result = FeeRequestResult.ok(snapshot, throttled=True)

        assert result.success is True
        assert result.throttled is True
        assert result.updated is False
        assert result.snapshot == snapshot
        assert result.cause is None

    def test_failed(self) -> None:
        """Test failed results carry message and cause."""
        error = FeeProviderError("down", "pricenode")

        result = FeeRequestResult.failed("Could not load fees", cause=error, provider="pricenode")

        assert result.success is False
        assert result.snapshot is None
        assert result.cause is error
        assert result.provider == "pricenode"
        assert result.defect is False


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_rate_limit_message(self) -> None:
        """Test rate limit errors mention the retry delay."""
        error = FeeProviderRateLimitError("pricenode", retry_after=5)

        assert isinstance(error, FeeProviderError)
        assert error.code == "FEE_PROVIDER_RATE_LIMIT"
        assert "Retry after 5s" in error.message


class TestSettings:
    """Tests for Settings and network configuration."""

    def test_defaults(self) -> None:
        """Test default refresh schedule."""
        settings = Settings(_env_file=None)

        assert settings.refresh_interval_seconds == 300
        assert settings.min_pause_between_requests_seconds == 120

    def test_network_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the network is read from the environment."""
        monkeypatch.setenv("BASE_CURRENCY_NETWORK", "BTC_REGTEST")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.base_currency_network == BaseCurrencyNetwork.BTC_REGTEST
        assert settings.log_level == "DEBUG"

    def test_network_fees(self) -> None:
        """Test every network has a non-zero default above its minimum."""
        for network in BaseCurrencyNetwork:
            assert network.currency_code == "BTC"
            assert network.default_fee_per_byte > 0
            assert network.default_fee_per_byte >= network.default_min_fee_per_byte
