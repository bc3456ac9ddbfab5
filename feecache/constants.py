"""Network configurations and trade fee constants."""

from enum import Enum
from typing import NamedTuple


class NetworkConfig(NamedTuple):
    """Fee configuration for a base currency network."""

    currency_code: str
    network: str
    name: str
    min_fee_per_byte: int
    default_fee_per_byte: int


class BaseCurrencyNetwork(str, Enum):
    """Base currency networks the fee cache can run against."""

    BTC_MAINNET = "BTC_MAINNET"
    BTC_TESTNET = "BTC_TESTNET"
    BTC_REGTEST = "BTC_REGTEST"

    @property
    def config(self) -> NetworkConfig:
        """Fee configuration for this network."""
        return NETWORK_CONFIGS[self]

    @property
    def currency_code(self) -> str:
        return self.config.currency_code

    @property
    def default_min_fee_per_byte(self) -> int:
        return self.config.min_fee_per_byte

    @property
    def default_fee_per_byte(self) -> int:
        return self.config.default_fee_per_byte


# Miner fees are between 1-600 sat/byte. The default fee is only served until
# the provider delivers data, the minimum is the floor applied to every update.
NETWORK_CONFIGS: dict[BaseCurrencyNetwork, NetworkConfig] = {
    BaseCurrencyNetwork.BTC_MAINNET: NetworkConfig("BTC", "MAINNET", "Bitcoin", 5, 50),
    BaseCurrencyNetwork.BTC_TESTNET: NetworkConfig("BTC", "TESTNET", "Bitcoin Testnet", 5, 50),
    BaseCurrencyNetwork.BTC_REGTEST: NetworkConfig("BTC", "REGTEST", "Bitcoin Regtest", 1, 50),
}

# Key of the provider timestamp mapping holding the source data timestamp
SOURCE_TIMESTAMP_KEY = "bitcoinFeesTs"


class SettlementCurrency(str, Enum):
    """Currency a trade fee is paid in."""

    BTC = "BTC"
    BSQ = "BSQ"


class FeeRole(str, Enum):
    """Trade fee roles in the fee schedule."""

    MAKER_MIN = "maker_min"
    MAKER_DEFAULT = "maker_default"
    TAKER_MIN = "taker_min"
    TAKER_DEFAULT = "taker_default"


# Trade fees per 1 BTC of trade amount, in satoshi (BTC) or BSQ-satoshi (BSQ)
TRADE_FEES: dict[tuple[FeeRole, SettlementCurrency], int] = {
    # 0.005%. 0.5 USD at BTC price 10_000 USD
    (FeeRole.MAKER_MIN, SettlementCurrency.BTC): 5_000,
    # 0.2%. 20 USD at BTC price 10_000 USD for a 1 BTC trade
    (FeeRole.MAKER_DEFAULT, SettlementCurrency.BTC): 200_000,
    (FeeRole.TAKER_MIN, SettlementCurrency.BTC): 5_000,
    (FeeRole.TAKER_DEFAULT, SettlementCurrency.BTC): 200_000,
    # 0.05 BSQ (5 BSQ-satoshi) for a 1 BTC trade, about 10% of the BTC fee
    (FeeRole.MAKER_MIN, SettlementCurrency.BSQ): 5,
    (FeeRole.MAKER_DEFAULT, SettlementCurrency.BSQ): 200,
    (FeeRole.TAKER_MIN, SettlementCurrency.BSQ): 5,
    (FeeRole.TAKER_DEFAULT, SettlementCurrency.BSQ): 200,
}
