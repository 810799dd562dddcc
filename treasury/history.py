"""
history.py - Transaction history views and dashboard metrics

Read-only helpers over a ledger snapshot: filtering and searching the log,
recent activity, and the headline counters shown on a dashboard.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from .core import (
    Account, Transaction,
    SUPPORTED_CURRENCIES, STATUS_COMPLETED, STATUS_PENDING, STATUS_SCHEDULED, STATUS_FAILED,
    ZERO, end_of_day, start_of_day,
)


@dataclass(frozen=True, slots=True)
class FilterOptions:
    """
    Criteria for filter_transactions(). Unset fields do not filter.

    date_to includes the whole calendar day. search_term matches account
    names, note and id case-insensitively, or a substring of the amount.
    """
    currency: Optional[str] = None
    account_id: Optional[str] = None
    status: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search_term: Optional[str] = None


def sort_newest_first(transactions: Sequence[Transaction]) -> List[Transaction]:
    return sorted(transactions, key=lambda tx: (tx.timestamp, tx.sequence_number), reverse=True)


def _matches_search(tx: Transaction, term: str, names: Dict[str, str]) -> bool:
    needle = term.lower()
    haystacks = (
        names.get(tx.from_account_id, "Unknown").lower(),
        names.get(tx.to_account_id, "Unknown").lower(),
        (tx.note or "").lower(),
        tx.id.lower(),
    )
    if any(needle in text for text in haystacks):
        return True
    return term in str(tx.amount)


def filter_transactions(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    options: FilterOptions,
) -> List[Transaction]:
    """Apply every set criterion in options; order is preserved."""
    names = {a.id: a.name for a in accounts}
    start = start_of_day(options.date_from) if options.date_from else None
    end = end_of_day(options.date_to) if options.date_to else None

    result = []
    for tx in transactions:
        if options.currency and tx.currency != options.currency:
            continue
        if options.account_id and options.account_id not in (tx.from_account_id, tx.to_account_id):
            continue
        if options.status and tx.status != options.status:
            continue
        if start is not None and tx.timestamp < start:
            continue
        if end is not None and tx.timestamp > end:
            continue
        if options.search_term and not _matches_search(tx, options.search_term, names):
            continue
        result.append(tx)
    return result


def recent_transactions(transactions: Sequence[Transaction], limit: int = 5) -> List[Transaction]:
    """Latest completed transactions, newest first."""
    completed = [tx for tx in transactions if tx.status == STATUS_COMPLETED]
    return sort_newest_first(completed)[:limit]


@dataclass(frozen=True, slots=True)
class DashboardMetrics:
    total_active_accounts: int
    total_balance_by_currency: Dict[str, Decimal] = field(default_factory=dict)
    today_transaction_count: int = 0
    weekly_transaction_count: int = 0
    success_rate: float = 0.0
    pending_transactions: int = 0
    scheduled_transactions: int = 0
    failed_transactions: int = 0


def compute_dashboard_metrics(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> DashboardMetrics:
    """
    Headline counters for the dashboard.

    Balances are totalled per currency over active accounts (there is no
    single reporting currency). The week is the seven calendar days ending
    today. success_rate is the percentage of transactions completed.
    """
    now = now or datetime.now()
    today = now.date()
    week_start = start_of_day(today - timedelta(days=6))
    today_end = end_of_day(today)

    active = [a for a in accounts if a.is_active]
    totals = {
        currency: sum((a.balance for a in active if a.currency == currency), ZERO)
        for currency in SUPPORTED_CURRENCIES
    }

    def count(status: str) -> int:
        return sum(1 for tx in transactions if tx.status == status)

    total = len(transactions)
    completed = count(STATUS_COMPLETED)

    return DashboardMetrics(
        total_active_accounts=len(active),
        total_balance_by_currency=totals,
        today_transaction_count=sum(1 for tx in transactions if tx.timestamp.date() == today),
        weekly_transaction_count=sum(1 for tx in transactions if week_start <= tx.timestamp <= today_end),
        success_rate=completed / total * 100.0 if total else 0.0,
        pending_transactions=count(STATUS_PENDING),
        scheduled_transactions=count(STATUS_SCHEDULED),
        failed_transactions=count(STATUS_FAILED),
    )
