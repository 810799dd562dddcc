"""
rates.py - Directed currency conversion table

Provides:
- RateTable: static from/to/rate lookup used for all cross-currency math
- get_exchange_rate / convert_currency: module helpers over the seed table
- format_currency: display helper for amounts

Rates are directed multipliers. The table is NOT required to be reciprocal
(USD->KES and KES->USD are quoted independently) and nothing here derives
one direction from the other.
"""

from decimal import Decimal
from typing import Dict, Iterable, Tuple

from .core import ExchangeRate, to_decimal
from .seed import CURRENCIES, EXCHANGE_RATES


ONE = Decimal("1")


class RateTable:
    """
    Static conversion table keyed by (from_currency, to_currency).

    A missing pair resolves to a rate of 1 instead of raising. This is the
    established lookup policy and callers (including analytics and tests)
    rely on it; do not turn it into an error.
    """

    def __init__(self, rates: Iterable[ExchangeRate] = EXCHANGE_RATES):
        """
        Initialize with exchange rate records.

        Args:
            rates: ExchangeRate records. A later record for the same pair replaces an earlier one.
        """
        self._rates: Dict[Tuple[str, str], Decimal] = {}
        for entry in rates:
            self._rates[(entry.from_currency, entry.to_currency)] = entry.rate

    def rate(self, from_currency: str, to_currency: str) -> Decimal:
        """Directed rate; 1 for same-currency and for unknown pairs."""
        if from_currency == to_currency:
            return ONE
        # Known policy: unknown pair falls back to 1.
        return self._rates.get((from_currency, to_currency), ONE)

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """Convert amount without rounding."""
        return to_decimal(amount) * self.rate(from_currency, to_currency)

    def has_rate(self, from_currency: str, to_currency: str) -> bool:
        """True when a directed entry is quoted (same-currency counts as quoted)."""
        return from_currency == to_currency or (from_currency, to_currency) in self._rates

    def pairs(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(self._rates)

    def __repr__(self):
        return f"RateTable({len(self._rates)} directed rates)"


DEFAULT_RATES = RateTable(EXCHANGE_RATES)


def get_exchange_rate(from_currency: str, to_currency: str) -> Decimal:
    return DEFAULT_RATES.rate(from_currency, to_currency)


def convert_currency(amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
    return DEFAULT_RATES.convert(amount, from_currency, to_currency)


def format_currency(amount: Decimal, currency: str) -> str:
    """
    Render an amount with its currency symbol and two decimals.

    Example:
        format_currency(Decimal("1234567.891"), "USD")  # '$ 1,234,567.89'
    """
    symbol = CURRENCIES[currency]['symbol']
    quantized = to_decimal(amount).quantize(Decimal("0.01"))
    return f"{symbol} {quantized:,.2f}"
