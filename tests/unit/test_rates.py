"""
test_rates.py - Unit tests for the rate table and currency formatting
"""

import pytest
from decimal import Decimal

from treasury import (
    RateTable, ExchangeRate, DEFAULT_RATES,
    get_exchange_rate, convert_currency, format_currency,
    CURRENCY_USD, CURRENCY_KES, CURRENCY_NGN,
)


class TestRateLookup:
    """Tests for directed rate lookup."""

    def test_seed_rates(self):
        assert DEFAULT_RATES.rate(CURRENCY_USD, CURRENCY_KES) == Decimal("132.50")
        assert DEFAULT_RATES.rate(CURRENCY_KES, CURRENCY_USD) == Decimal("0.0075")
        assert DEFAULT_RATES.rate(CURRENCY_NGN, CURRENCY_KES) == Decimal("0.168")

    def test_same_currency_is_one(self):
        for currency in (CURRENCY_USD, CURRENCY_KES, CURRENCY_NGN):
            assert DEFAULT_RATES.rate(currency, currency) == Decimal("1")

    def test_unknown_pair_falls_back_to_one(self):
        assert DEFAULT_RATES.rate(CURRENCY_USD, "EUR") == Decimal("1")
        assert RateTable([]).rate(CURRENCY_USD, CURRENCY_KES) == Decimal("1")

    def test_rates_are_not_reciprocal(self):
        forward = DEFAULT_RATES.rate(CURRENCY_USD, CURRENCY_KES)
        backward = DEFAULT_RATES.rate(CURRENCY_KES, CURRENCY_USD)
        assert forward * backward == Decimal("0.99375")

    def test_later_record_replaces_earlier(self):
        table = RateTable([
            ExchangeRate(CURRENCY_USD, CURRENCY_KES, Decimal("130")),
            ExchangeRate(CURRENCY_USD, CURRENCY_KES, Decimal("131")),
        ])
        assert table.rate(CURRENCY_USD, CURRENCY_KES) == Decimal("131")
        assert table.pairs() == ((CURRENCY_USD, CURRENCY_KES),)

    def test_has_rate(self):
        assert DEFAULT_RATES.has_rate(CURRENCY_USD, CURRENCY_KES)
        assert DEFAULT_RATES.has_rate(CURRENCY_USD, CURRENCY_USD)
        assert not DEFAULT_RATES.has_rate(CURRENCY_USD, "EUR")


class TestConversion:
    """Tests for conversion helpers."""

    def test_convert_usd_to_kes(self):
        assert DEFAULT_RATES.convert(Decimal("500"), CURRENCY_USD, CURRENCY_KES) == Decimal("66250")

    def test_convert_is_not_rounded(self):
        result = DEFAULT_RATES.convert(Decimal("1"), CURRENCY_NGN, CURRENCY_USD)
        assert result == Decimal("0.00127")

    def test_module_helpers_use_seed_table(self):
        assert get_exchange_rate(CURRENCY_USD, CURRENCY_NGN) == Decimal("790.25")
        assert convert_currency(Decimal("2"), CURRENCY_USD, CURRENCY_NGN) == Decimal("1580.50")

    def test_convert_accepts_plain_numbers(self):
        assert convert_currency(10, CURRENCY_KES, CURRENCY_NGN) == Decimal("59.6")


class TestFormatCurrency:
    """Tests for display formatting."""

    @pytest.mark.parametrize("amount,currency,expected", [
        (Decimal("1234567.891"), CURRENCY_USD, "$ 1,234,567.89"),
        (Decimal("500"), CURRENCY_KES, "KSh 500.00"),
        (Decimal("0.5"), CURRENCY_NGN, "₦ 0.50"),
        (Decimal("0.125"), CURRENCY_USD, "$ 0.12"),
    ])
    def test_format(self, amount, currency, expected):
        assert format_currency(amount, currency) == expected
