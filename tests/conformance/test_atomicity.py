"""
Atomicity Conformance Tests

INVARIANT: Transfers are all-or-nothing.

    ∀ transfer request R:
        R applied  ⟹ both balances change and exactly one Transaction is appended
        R rejected ⟹ no balance changes and the log is untouched

Validation runs before any mutation, so partial application is impossible.
"""

from hypothesis import given, settings
from hypothesis import strategies as st
from decimal import Decimal
from datetime import datetime, timedelta

from treasury import (
    TransferRequest, ExecuteResult, create_seeded_ledger,
)


NOW = datetime(2025, 1, 15, 12, 0, 0)

ACCOUNT_IDS = [str(i) for i in range(1, 11)] + ['99']

amounts = st.integers(min_value=-1000, max_value=10_000_000).map(lambda c: Decimal(c) / 100)
schedules = st.one_of(st.none(), st.integers(min_value=-3, max_value=3).map(lambda d: NOW + timedelta(days=d)))


def _snapshot(ledger):
    return {a.id: a.balance for a in ledger.get_accounts()}


class TestAtomicityProperties:
    """Property-based atomicity tests."""

    @given(st.sampled_from(ACCOUNT_IDS), st.sampled_from(ACCOUNT_IDS), amounts, schedules)
    @settings(max_examples=50)
    def test_applied_or_untouched(self, from_id, to_id, amount, scheduled):
        """
        PROPERTY: Every request either changes exactly two balances and appends
        one transaction, or changes nothing.
        """
        ledger = create_seeded_ledger("test", clock=lambda: NOW, verbose=False)
        before = _snapshot(ledger)

        outcome = ledger.execute(TransferRequest(from_id, to_id, amount, scheduled_date=scheduled))
        after = _snapshot(ledger)
        log = ledger.get_transactions()

        if outcome.result == ExecuteResult.APPLIED:
            assert log == [outcome.transaction]
            assert outcome.errors == ()
            changed = {k for k in before if before[k] != after[k]}
            assert changed == {from_id, to_id}
        else:
            assert outcome.errors
            assert outcome.transaction is None
            assert log == []
            assert after == before

    @given(st.lists(st.tuples(st.sampled_from(ACCOUNT_IDS), st.sampled_from(ACCOUNT_IDS), amounts),
                    min_size=1, max_size=15))
    @settings(max_examples=50)
    def test_log_length_counts_applied(self, requests):
        """
        PROPERTY: Log length equals the number of APPLIED outcomes.
        """
        ledger = create_seeded_ledger("test", clock=lambda: NOW, verbose=False)
        applied = 0
        for from_id, to_id, amount in requests:
            if ledger.execute_transfer(TransferRequest(from_id, to_id, amount)):
                applied += 1
        assert len(ledger.get_transactions()) == applied

    @given(amounts)
    @settings(max_examples=50)
    def test_balances_never_negative(self, amount):
        """
        PROPERTY: A transfer can never overdraw its source.
        """
        ledger = create_seeded_ledger("test", clock=lambda: NOW, verbose=False)
        ledger.execute(TransferRequest('5', '4', amount))
        assert all(a.balance >= 0 for a in ledger.get_accounts())
