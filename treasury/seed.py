"""
seed.py - Session fixtures for the treasury demo

Currency metadata, the directed exchange-rate table and the initial account
set. These are inputs to the engine, not computed by it.
"""

from decimal import Decimal
from typing import Dict, List, Tuple

from .core import (
    Account, ExchangeRate,
    CURRENCY_KES, CURRENCY_USD, CURRENCY_NGN,
    ACCOUNT_TYPE_MPESA, ACCOUNT_TYPE_BANK, ACCOUNT_TYPE_WALLET, ACCOUNT_TYPE_CORPORATE,
)


CURRENCIES: Dict[str, Dict[str, str]] = {
    CURRENCY_KES: {'symbol': 'KSh', 'name': 'Kenyan Shilling'},
    CURRENCY_USD: {'symbol': '$', 'name': 'US Dollar'},
    CURRENCY_NGN: {'symbol': '₦', 'name': 'Nigerian Naira'},
}

# Each direction is quoted independently; KES->USD is not 1 / (USD->KES).
EXCHANGE_RATES: Tuple[ExchangeRate, ...] = (
    ExchangeRate(CURRENCY_USD, CURRENCY_KES, Decimal("132.50")),
    ExchangeRate(CURRENCY_USD, CURRENCY_NGN, Decimal("790.25")),
    ExchangeRate(CURRENCY_KES, CURRENCY_USD, Decimal("0.0075")),
    ExchangeRate(CURRENCY_KES, CURRENCY_NGN, Decimal("5.96")),
    ExchangeRate(CURRENCY_NGN, CURRENCY_USD, Decimal("0.00127")),
    ExchangeRate(CURRENCY_NGN, CURRENCY_KES, Decimal("0.168")),
)

INITIAL_ACCOUNTS: Tuple[Account, ...] = (
    Account('1', 'Mpesa_KES_1', CURRENCY_KES, Decimal("125000"), ACCOUNT_TYPE_MPESA),
    Account('2', 'Mpesa_KES_2', CURRENCY_KES, Decimal("89500"), ACCOUNT_TYPE_MPESA),
    Account('3', 'Bank_USD_1', CURRENCY_USD, Decimal("15750"), ACCOUNT_TYPE_BANK),
    Account('4', 'Bank_USD_2', CURRENCY_USD, Decimal("32100"), ACCOUNT_TYPE_BANK),
    Account('5', 'Bank_USD_3', CURRENCY_USD, Decimal("8900"), ACCOUNT_TYPE_BANK),
    Account('6', 'Wallet_NGN_1', CURRENCY_NGN, Decimal("2450000"), ACCOUNT_TYPE_WALLET),
    Account('7', 'Wallet_NGN_2', CURRENCY_NGN, Decimal("1875000"), ACCOUNT_TYPE_WALLET),
    Account('8', 'Corporate_KES_1', CURRENCY_KES, Decimal("450000"), ACCOUNT_TYPE_CORPORATE),
    Account('9', 'Corporate_USD_1', CURRENCY_USD, Decimal("67500"), ACCOUNT_TYPE_CORPORATE),
    Account('10', 'Corporate_NGN_1', CURRENCY_NGN, Decimal("5200000"), ACCOUNT_TYPE_CORPORATE),
)


def initial_accounts() -> List[Account]:
    """Fresh list of the seed accounts (Account is frozen, so sharing instances is safe)."""
    return list(INITIAL_ACCOUNTS)


def create_seeded_ledger(name: str = "treasury", **kwargs):
    """
    Build a Ledger holding the seed accounts and the seed rate table.

    Keyword arguments are passed through to Ledger (clock, verbose, test_mode).
    """
    from .ledger import Ledger
    from .rates import RateTable

    return Ledger(
        name,
        accounts=initial_accounts(),
        rates=RateTable(EXCHANGE_RATES),
        **kwargs
    )
