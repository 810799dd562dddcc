"""
conftest.py - Shared pytest fixtures for treasury tests

Provides common fixtures used across unit and functional tests:
- A fixed clock, so validation and timestamps are deterministic
- Seeded and empty ledgers
- A Transaction factory for analytics and report tests
"""

import itertools
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from treasury import (
    Ledger, Account, Transaction,
    CURRENCY_USD,
    create_seeded_ledger,
    initial_accounts,
)


# =============================================================================
# CONSTANTS
# =============================================================================

NOW = datetime(2025, 1, 15, 12, 0, 0)


# =============================================================================
# CLOCK
# =============================================================================

class SteppingClock:
    """Clock that returns `now` and can be moved forward by tests."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return SteppingClock(NOW)


@pytest.fixture
def ledger(clock):
    """Ledger holding the ten seed accounts and the seed rate table."""
    return create_seeded_ledger("test", clock=clock, verbose=False)


@pytest.fixture
def ledger_test_mode(clock):
    """Seeded ledger with set_balance() enabled."""
    return create_seeded_ledger("test", clock=clock, verbose=False, test_mode=True)


@pytest.fixture
def empty_ledger(clock):
    return Ledger("test", clock=clock, verbose=False)


@pytest.fixture
def accounts():
    return initial_accounts()


@pytest.fixture
def make_tx():
    """
    Factory for Transaction records.

    Usage:
        tx = make_tx("3", "4", 100)
        tx = make_tx("3", "1", 10, converted_amount=Decimal("1325"),
                     converted_currency="KES", exchange_rate=Decimal("132.5"))
    """
    counter = itertools.count()

    def _make(from_id, to_id, amount, currency=CURRENCY_USD, timestamp=NOW, **kwargs):
        sequence = next(counter)
        return Transaction(
            id=f"tx:fixture:{sequence:08d}",
            from_account_id=from_id,
            to_account_id=to_id,
            amount=Decimal(str(amount)),
            currency=currency,
            timestamp=timestamp,
            sequence_number=sequence,
            **kwargs
        )

    return _make


@pytest.fixture
def make_account():
    """Factory for USD bank accounts with a given id and balance."""

    def _make(account_id, balance, currency=CURRENCY_USD, type="Bank", is_active=True, name=None):
        return Account(
            id=account_id,
            name=name or f"Account_{account_id}",
            currency=currency,
            balance=Decimal(str(balance)),
            type=type,
            is_active=is_active,
        )

    return _make
