"""Static trade fee schedule."""

from types import MappingProxyType
from typing import Mapping

from feecache.constants import TRADE_FEES, FeeRole, SettlementCurrency
from feecache.models.fees import TradeFee


class FeeSchedule:
    """Immutable table of trade fees keyed by role and settlement currency."""

    def __init__(self, fees: Mapping[tuple[FeeRole, SettlementCurrency], int]) -> None:
        missing = [
            (role, currency)
            for role in FeeRole
            for currency in SettlementCurrency
            if (role, currency) not in fees
        ]
        if missing:
            raise ValueError(f"Fee schedule is missing entries: {missing}")
        self._fees = MappingProxyType(dict(fees))

    def get(self, role: FeeRole, currency: SettlementCurrency) -> int:
        """Look up the fee for a role and settlement currency."""
        return self._fees[(FeeRole(role), SettlementCurrency(currency))]

    def maker_fee_per_btc(self, currency: SettlementCurrency) -> int:
        return self.get(FeeRole.MAKER_DEFAULT, currency)

    def min_maker_fee(self, currency: SettlementCurrency) -> int:
        return self.get(FeeRole.MAKER_MIN, currency)

    def taker_fee_per_btc(self, currency: SettlementCurrency) -> int:
        return self.get(FeeRole.TAKER_DEFAULT, currency)

    def min_taker_fee(self, currency: SettlementCurrency) -> int:
        return self.get(FeeRole.TAKER_MIN, currency)

    def entries(self) -> list[TradeFee]:
        """All schedule entries, ordered by currency then role."""
        return [
            TradeFee(role=role, currency=currency, amount=self._fees[(role, currency)])
            for currency in SettlementCurrency
            for role in FeeRole
        ]


DEFAULT_FEE_SCHEDULE = FeeSchedule(TRADE_FEES)
