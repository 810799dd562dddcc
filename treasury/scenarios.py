"""
scenarios.py - Canned transfer batches for exercising a ledger

Each Scenario is a list of transfer amounts/notes plus optional account
filters. run_scenario() pairs every transfer with a random eligible
source/destination and submits it through Ledger.execute_transfer(), so all
business rules still apply.

Pass a seeded random.Random for reproducible runs:

    ledger = create_seeded_ledger(verbose=False)
    result = run_scenario(SCENARIOS['payroll_simulation'], ledger, random.Random(42))
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple
import random

from .core import (
    Account, TransferRequest,
    CURRENCY_USD, ACCOUNT_TYPE_CORPORATE,
)


@dataclass(frozen=True, slots=True)
class AccountFilters:
    from_currency: Optional[str] = None
    to_currency: Optional[str] = None
    from_type: Optional[str] = None
    to_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScenarioTransfer:
    """
    One transfer template. schedule_in, when set, schedules the transfer
    that far past the ledger's current time.
    """
    amount: Decimal
    note: str
    schedule_in: Optional[timedelta] = None


@dataclass(frozen=True, slots=True)
class Scenario:
    """
    A named batch of transfers.

    random_transfers > 0 adds that many generated transfers (amounts 100..10099)
    at run time, on top of the fixed ones.
    """
    id: str
    name: str
    description: str
    transfers: Tuple[ScenarioTransfer, ...] = ()
    filters: AccountFilters = AccountFilters()
    random_transfers: int = 0

    def build_transfers(self, rng=random) -> List[ScenarioTransfer]:
        generated = [
            ScenarioTransfer(Decimal(rng.randint(100, 10099)), f"Stress test transaction #{i + 1}")
            for i in range(self.random_transfers)
        ]
        return list(self.transfers) + generated


@dataclass(frozen=True, slots=True)
class ScenarioResult:
    success: int
    failed: int
    errors: Tuple[str, ...]


def _t(amount: str, note: str, days: Optional[int] = None) -> ScenarioTransfer:
    return ScenarioTransfer(Decimal(amount), note, timedelta(days=days) if days is not None else None)


SCENARIOS: Dict[str, Scenario] = {s.id: s for s in (
    Scenario(
        'payroll_simulation', 'Monthly Payroll',
        'Simulate monthly salary distribution from corporate accounts to employee accounts',
        (
            _t("2500", 'Software Engineer - Monthly Salary'),
            _t("3000", 'Senior Developer - Monthly Salary'),
            _t("1800", 'Junior Developer - Monthly Salary'),
            _t("4500", 'Team Lead - Monthly Salary'),
            _t("2200", 'QA Engineer - Monthly Salary'),
            _t("3500", 'DevOps Engineer - Monthly Salary'),
            _t("2800", 'UI/UX Designer - Monthly Salary'),
            _t("5000", 'Project Manager - Monthly Salary'),
        ),
        AccountFilters(from_type=ACCOUNT_TYPE_CORPORATE, from_currency=CURRENCY_USD),
    ),
    Scenario(
        'vendor_payments', 'Vendor Payments',
        'Process payments to various vendors and suppliers',
        (
            _t("15000", 'Office rent - Q1 payment'),
            _t("8500", 'Cloud infrastructure - Monthly bill'),
            _t("3200", 'Software licenses - Annual renewal'),
            _t("1200", 'Office supplies and equipment'),
            _t("2800", 'Marketing agency - Campaign costs'),
            _t("4500", 'Legal services - Contract review'),
            _t("6700", 'Accounting services - Monthly retainer'),
        ),
        AccountFilters(from_type=ACCOUNT_TYPE_CORPORATE),
    ),
    Scenario(
        'emergency_distribution', 'Emergency Fund Distribution',
        'Distribute emergency funds to operational accounts during crisis',
        (
            _t("25000", 'Emergency operational funding - Account 1'),
            _t("15000", 'Emergency operational funding - Account 2'),
            _t("30000", 'Emergency operational funding - Account 3'),
            _t("10000", 'Emergency petty cash allocation'),
            _t("20000", 'Emergency vendor payment fund'),
        ),
        AccountFilters(from_currency=CURRENCY_USD),
    ),
    Scenario(
        'cross_currency_arbitrage', 'Currency Arbitrage',
        'Exploit exchange rate differences for profit optimization',
        (
            _t("1000", 'USD → KES arbitrage opportunity'),
            _t("132500", 'KES → NGN conversion for better rates'),
            _t("789290", 'NGN → USD completion of arbitrage cycle'),
            _t("500", 'USD → NGN direct conversion test'),
            _t("66250", 'KES → USD reverse conversion'),
        ),
    ),
    Scenario(
        'micro_transactions', 'Micro-Transactions',
        'High-frequency small value transactions for testing system performance',
        tuple(
            _t(amount, f'Micro-payment #{i + 1}')
            for i, amount in enumerate(("10", "25", "50", "15", "30", "75", "20", "40", "60", "35"))
        ),
    ),
    Scenario(
        'investment_rebalancing', 'Investment Portfolio Rebalancing',
        'Rebalance investment portfolios across different currencies',
        (
            _t("50000", 'Portfolio rebalancing - USD allocation'),
            _t("25000", 'Portfolio rebalancing - KES allocation'),
            _t("75000", 'Portfolio rebalancing - NGN allocation'),
            _t("30000", 'Diversification transfer - Emerging markets'),
            _t("40000", 'Risk management - Safe haven allocation'),
        ),
        AccountFilters(from_type=ACCOUNT_TYPE_CORPORATE),
    ),
    Scenario(
        'scheduled_transfers', 'Scheduled Transfers',
        'Set up future scheduled transfers for automated processing',
        (
            _t("5000", 'Weekly operational funding', days=7),
            _t("2500", 'Bi-weekly payroll supplement', days=14),
            _t("10000", 'Monthly vendor payment batch', days=30),
            _t("1000", 'Daily operational expenses', days=1),
        ),
    ),
    Scenario(
        'stress_test', 'System Stress Test',
        'High-volume transactions to test system performance and limits',
        random_transfers=50,
    ),
)}


def pick_account_pair(
    accounts: Sequence[Account],
    filters: Optional[AccountFilters] = None,
    rng=random,
) -> Tuple[Optional[Account], Optional[Account]]:
    """
    Random active (source, destination) pair honouring the filters.

    Either side is None when no eligible account exists. The destination is
    never the source.
    """
    filters = filters or AccountFilters()
    sources = [a for a in accounts if a.is_active]
    dests = [a for a in accounts if a.is_active]
    if filters.from_currency:
        sources = [a for a in sources if a.currency == filters.from_currency]
    if filters.to_currency:
        dests = [a for a in dests if a.currency == filters.to_currency]
    if filters.from_type:
        sources = [a for a in sources if a.type == filters.from_type]
    if filters.to_type:
        dests = [a for a in dests if a.type == filters.to_type]

    source = rng.choice(sources) if sources else None
    if source is not None:
        dests = [a for a in dests if a.id != source.id]
    dest = rng.choice(dests) if dests else None
    return source, dest


def run_scenario(scenario: Scenario, ledger, rng=random) -> ScenarioResult:
    """
    Submit every transfer of a scenario to the ledger.

    Account pairs are drawn from the ledger's state before each transfer, so
    earlier transfers affect later solvency checks.
    """
    success = 0
    failed = 0
    errors: List[str] = []

    for index, template in enumerate(scenario.build_transfers(rng), start=1):
        source, dest = pick_account_pair(ledger.get_accounts(), scenario.filters, rng)
        if source is None or dest is None:
            failed += 1
            errors.append(f"Transfer {index}: Could not find suitable account pair")
            continue

        scheduled = None
        if template.schedule_in is not None:
            scheduled = ledger.current_time + template.schedule_in
        request = TransferRequest(
            from_account_id=source.id,
            to_account_id=dest.id,
            amount=template.amount,
            note=template.note,
            scheduled_date=scheduled,
        )
        if ledger.execute_transfer(request):
            success += 1
        else:
            failed += 1
            errors.append(f"Transfer {index}: Validation failed")

    return ScenarioResult(success=success, failed=failed, errors=tuple(errors))
