"""
analytics.py - Derived metrics over a ledger snapshot

Every function here is pure: it takes (accounts, transactions, date range)
and returns immutable value objects. Nothing mutates the ledger.

Provides:
- Date helpers: get_date_range, previous_period, filter_* helpers
- calculate_transaction_volume: per-day volume and count
- calculate_account_performance: inbound/outbound/net flow and tier per account
- calculate_currency_analytics: balances, volume and market share per currency
- calculate_risk_metrics: liquidity, concentration and volatility scores
- calculate_trends: period-over-period growth
- calculate_analytics_summary: headline numbers for a window
- generate_analytics_data: all of the above in one AnalyticsData

Degenerate inputs (no accounts, no transactions, zero denominators) resolve
to zero or empty values. None of these functions raise on missing data.

Money values are Decimal. Scores, shares and growth rates are float percentages.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .core import (
    Account, Transaction, DateRange,
    SUPPORTED_CURRENCIES, CURRENCY_USD,
    LOW_BALANCE_THRESHOLDS, RISK_WEIGHTS, RISK_LEVEL_CUTOFFS, RISK_LEVEL_LOW,
    RISK_RECOMMENDATIONS, PERFORMANCE_TIERS, PERFORMANCE_LOW,
    TREND_THRESHOLD, TREND_UP, TREND_DOWN, TREND_STABLE,
    ZERO, end_of_day, start_of_day,
)


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True, slots=True)
class TransactionVolumeData:
    """Volume (sum of source amounts) and count for one calendar day."""
    date: str
    volume: Decimal
    count: int
    currency: str


@dataclass(frozen=True, slots=True)
class AccountPerformanceData:
    account_id: str
    account_name: str
    total_inbound: Decimal
    total_outbound: Decimal
    net_flow: Decimal
    transaction_count: int
    average_transaction_size: Decimal
    currency: str
    performance: str


@dataclass(frozen=True, slots=True)
class CurrencyAnalyticsData:
    currency: str
    total_balance: Decimal
    total_transaction_volume: Decimal
    transaction_count: int
    average_transaction_size: Decimal
    market_share: float


@dataclass(frozen=True, slots=True)
class RiskMetrics:
    """
    Composite 0-100 risk scores.

    Attributes:
        liquidity_risk: Share of active accounts below their low-balance threshold
        concentration_risk: Largest active balance as a share of all active balances
        volatility_risk: Coefficient of variation of daily volume
        overall_risk_score: Weighted blend of the three
        risk_level: low / medium / high / critical
        recommendations: One advisory per dimension over its threshold
        low_balance_accounts: Active accounts currently below threshold
    """
    liquidity_risk: float
    concentration_risk: float
    volatility_risk: float
    overall_risk_score: float
    risk_level: str
    recommendations: Tuple[str, ...]
    low_balance_accounts: Tuple[Account, ...]


@dataclass(frozen=True, slots=True)
class TrendData:
    transaction_trend: str
    volume_trend: str
    balance_trend: str
    transaction_growth: float
    volume_growth: float
    balance_growth: float


@dataclass(frozen=True, slots=True)
class PeriodComparison:
    volume_change: float
    count_change: float
    balance_change: float


@dataclass(frozen=True, slots=True)
class AnalyticsSummary:
    total_transaction_volume: Decimal
    total_transaction_count: int
    active_accounts_count: int
    average_transaction_size: Decimal
    largest_transaction: Decimal
    most_active_account: str
    most_used_currency: str
    period: DateRange
    previous_period_comparison: Optional[PeriodComparison] = None


@dataclass(frozen=True, slots=True)
class AnalyticsData:
    transaction_volume: Tuple[TransactionVolumeData, ...]
    account_performance: Tuple[AccountPerformanceData, ...]
    currency_analytics: Tuple[CurrencyAnalyticsData, ...]
    risk_metrics: RiskMetrics
    trends: TrendData
    summary: AnalyticsSummary


# ============================================================================
# DATE HELPERS AND FILTERS
# ============================================================================

def get_date_range(days: int, end: Optional[datetime] = None) -> DateRange:
    """
    Window covering the last `days` days up to the end of `end`'s day.

    The start is midnight `days` days before `end`; the end is the last
    moment of `end`'s calendar day.
    """
    end = end or datetime.now()
    start = start_of_day((end - timedelta(days=days)).date())
    return DateRange(start, end_of_day(end.date()))


def previous_period(date_range: DateRange) -> DateRange:
    """Window of equal length ending where date_range starts."""
    length = date_range.end - date_range.start
    return DateRange(date_range.start - length, date_range.start)


def filter_by_date_range(transactions: Sequence[Transaction], date_range: DateRange) -> List[Transaction]:
    return [tx for tx in transactions if date_range.contains(tx.timestamp)]


def filter_by_currency(transactions: Sequence[Transaction], currency: str) -> List[Transaction]:
    return [tx for tx in transactions if tx.currency == currency]


def filter_by_account(transactions: Sequence[Transaction], account_id: str) -> List[Transaction]:
    """Transactions where the account is either side."""
    return [
        tx for tx in transactions
        if tx.from_account_id == account_id or tx.to_account_id == account_id
    ]


def _total_amount(transactions: Sequence[Transaction]) -> Decimal:
    return sum((tx.amount for tx in transactions), ZERO)


def _growth(current, previous) -> float:
    """Percent change; 0 when there is no positive baseline."""
    if previous <= 0:
        return 0.0
    return float((current - previous) / previous) * 100.0


def _trend(growth: float) -> str:
    if growth > TREND_THRESHOLD:
        return TREND_UP
    if growth < -TREND_THRESHOLD:
        return TREND_DOWN
    return TREND_STABLE


# ============================================================================
# TRANSACTION VOLUME
# ============================================================================

def calculate_transaction_volume(
    transactions: Sequence[Transaction],
    date_range: DateRange,
    currency: Optional[str] = None,
) -> List[TransactionVolumeData]:
    """
    Daily volume over the range, one entry per calendar day.

    Days without activity appear with zero volume and count. Volume is the sum
    of source amounts (no conversion), bucketed by the transaction's own date.

    Args:
        transactions: Transaction log
        date_range: Inclusive window
        currency: Optional source-currency filter

    Returns:
        Entries ordered by date
    """
    in_range = filter_by_date_range(transactions, date_range)
    if currency:
        in_range = filter_by_currency(in_range, currency)

    buckets: Dict[str, Tuple[Decimal, int]] = {}
    for tx in in_range:
        key = tx.timestamp.date().isoformat()
        volume, count = buckets.get(key, (ZERO, 0))
        buckets[key] = (volume + tx.amount, count + 1)

    label = currency or CURRENCY_USD
    result = []
    for day in date_range.days():
        key = day.isoformat()
        volume, count = buckets.get(key, (ZERO, 0))
        result.append(TransactionVolumeData(date=key, volume=volume, count=count, currency=label))
    return result


# ============================================================================
# ACCOUNT PERFORMANCE
# ============================================================================

def _performance_tier(count: int, net_flow: Decimal) -> str:
    for min_count, min_net, tier in PERFORMANCE_TIERS:
        if count >= min_count and abs(net_flow) > min_net:
            return tier
    return PERFORMANCE_LOW


def calculate_account_performance(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    date_range: DateRange,
) -> List[AccountPerformanceData]:
    """
    Flow statistics for every active account within the range.

    Inbound uses the settled (converted) amount, outbound the source amount,
    so both are in the account's own currency.
    """
    in_range = filter_by_date_range(transactions, date_range)
    results = []
    for account in accounts:
        if not account.is_active:
            continue
        touching = filter_by_account(in_range, account.id)
        inbound = sum((tx.settled_amount for tx in touching if tx.to_account_id == account.id), ZERO)
        outbound = sum((tx.amount for tx in touching if tx.from_account_id == account.id), ZERO)
        net_flow = inbound - outbound
        count = len(touching)
        average = (inbound + outbound) / count if count else ZERO

        results.append(AccountPerformanceData(
            account_id=account.id,
            account_name=account.name,
            total_inbound=inbound,
            total_outbound=outbound,
            net_flow=net_flow,
            transaction_count=count,
            average_transaction_size=average,
            currency=account.currency,
            performance=_performance_tier(count, net_flow),
        ))
    return results


# ============================================================================
# CURRENCY ANALYTICS
# ============================================================================

def calculate_currency_analytics(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    date_range: DateRange,
) -> List[CurrencyAnalyticsData]:
    """
    Per-currency balances and in-range activity for USD, KES and NGN.

    total_balance ignores the date range (it is the current active balance).
    market_share is this currency's share of in-range volume, in percent.
    """
    in_range = filter_by_date_range(transactions, date_range)
    total_volume = _total_amount(in_range)

    results = []
    for currency in SUPPORTED_CURRENCIES:
        balance = sum(
            (a.balance for a in accounts if a.currency == currency and a.is_active), ZERO
        )
        currency_txs = filter_by_currency(in_range, currency)
        volume = _total_amount(currency_txs)
        count = len(currency_txs)
        share = float(volume / total_volume) * 100.0 if total_volume > 0 else 0.0

        results.append(CurrencyAnalyticsData(
            currency=currency,
            total_balance=balance,
            total_transaction_volume=volume,
            transaction_count=count,
            average_transaction_size=volume / count if count else ZERO,
            market_share=share,
        ))
    return results


# ============================================================================
# RISK METRICS
# ============================================================================

def _volatility(daily_volumes: Sequence[Decimal]) -> float:
    """Coefficient of variation (population std / mean) in percent, capped at 100."""
    if not daily_volumes:
        return 0.0
    series = np.asarray([float(v) for v in daily_volumes], dtype=float)
    mean = float(series.mean())
    if mean == 0.0:
        return 0.0
    return min(float(series.std()) / mean * 100.0, 100.0)


def _risk_level(score: float) -> str:
    for cutoff, level in RISK_LEVEL_CUTOFFS:
        if score >= cutoff:
            return level
    return RISK_LEVEL_LOW


def calculate_risk_metrics(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    date_range: DateRange,
) -> RiskMetrics:
    """
    Liquidity, concentration and volatility risk for the active accounts.

    Volatility is measured over the unfiltered daily volume series of the
    range (all currencies summed by source amount).
    """
    active = [a for a in accounts if a.is_active]

    low_balance = tuple(
        a for a in active if a.balance < LOW_BALANCE_THRESHOLDS.get(a.currency, ZERO)
    )
    liquidity = min(len(low_balance) / len(active) * 100.0, 100.0) if active else 0.0

    total_balance = sum((a.balance for a in active), ZERO)
    if total_balance > 0:
        concentration = float(max(a.balance for a in active) / total_balance) * 100.0
    else:
        concentration = 0.0

    daily = [entry.volume for entry in calculate_transaction_volume(transactions, date_range)]
    volatility = _volatility(daily)

    scores = {
        'liquidity': liquidity,
        'concentration': concentration,
        'volatility': volatility,
    }
    overall = sum(scores[name] * weight for name, weight in RISK_WEIGHTS.items())
    recommendations = tuple(
        advice for name, threshold, advice in RISK_RECOMMENDATIONS if scores[name] > threshold
    )

    return RiskMetrics(
        liquidity_risk=liquidity,
        concentration_risk=concentration,
        volatility_risk=volatility,
        overall_risk_score=overall,
        risk_level=_risk_level(overall),
        recommendations=recommendations,
        low_balance_accounts=low_balance,
    )


# ============================================================================
# TRENDS
# ============================================================================

def calculate_trends(
    transactions: Sequence[Transaction],
    date_range: DateRange,
    previous: Optional[DateRange] = None,
) -> TrendData:
    """
    Growth of count and volume versus a previous window.

    Balance growth has no balance history to work from and uses in-range
    amount totals as a proxy. Without a previous window every trend is
    stable with zero growth.
    """
    if previous is None:
        return TrendData(TREND_STABLE, TREND_STABLE, TREND_STABLE, 0.0, 0.0, 0.0)

    current_txs = filter_by_date_range(transactions, date_range)
    previous_txs = filter_by_date_range(transactions, previous)

    transaction_growth = _growth(len(current_txs), len(previous_txs))
    current_volume = _total_amount(current_txs)
    previous_volume = _total_amount(previous_txs)
    volume_growth = _growth(current_volume, previous_volume)
    balance_growth = _growth(current_volume, previous_volume)

    return TrendData(
        transaction_trend=_trend(transaction_growth),
        volume_trend=_trend(volume_growth),
        balance_trend=_trend(balance_growth),
        transaction_growth=transaction_growth,
        volume_growth=volume_growth,
        balance_growth=balance_growth,
    )


# ============================================================================
# SUMMARY
# ============================================================================

def _most_frequent(counts: Dict[str, int]) -> Optional[str]:
    """Key with the highest count; the first key seen wins ties."""
    best, best_count = None, 0
    for key, count in counts.items():
        if count > best_count:
            best, best_count = key, count
    return best


def calculate_analytics_summary(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    date_range: DateRange,
    previous: Optional[DateRange] = None,
) -> AnalyticsSummary:
    """
    Headline figures for a window.

    most_active_account is the account NAME with the most from+to touches
    (falls back to the id for unknown accounts, '' with no activity).
    most_used_currency defaults to USD when there are no transactions.
    """
    active = [a for a in accounts if a.is_active]
    in_range = filter_by_date_range(transactions, date_range)

    total_volume = _total_amount(in_range)
    total_count = len(in_range)
    largest = max((tx.amount for tx in in_range), default=ZERO)

    activity: Dict[str, int] = {}
    usage: Dict[str, int] = {}
    for tx in in_range:
        activity[tx.from_account_id] = activity.get(tx.from_account_id, 0) + 1
        activity[tx.to_account_id] = activity.get(tx.to_account_id, 0) + 1
        usage[tx.currency] = usage.get(tx.currency, 0) + 1

    names = {a.id: a.name for a in accounts}
    busiest = _most_frequent(activity)
    most_active = names.get(busiest, busiest) if busiest is not None else ""

    comparison = None
    if previous is not None:
        previous_txs = filter_by_date_range(transactions, previous)
        comparison = PeriodComparison(
            volume_change=_growth(total_volume, _total_amount(previous_txs)),
            count_change=_growth(total_count, len(previous_txs)),
            # No historical balances are kept.
            balance_change=0.0,
        )

    return AnalyticsSummary(
        total_transaction_volume=total_volume,
        total_transaction_count=total_count,
        active_accounts_count=len(active),
        average_transaction_size=total_volume / total_count if total_count else ZERO,
        largest_transaction=largest,
        most_active_account=most_active,
        most_used_currency=_most_frequent(usage) or CURRENCY_USD,
        period=date_range,
        previous_period_comparison=comparison,
    )


# ============================================================================
# AGGREGATE
# ============================================================================

def generate_analytics_data(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    date_range: DateRange,
    previous: Optional[DateRange] = None,
) -> AnalyticsData:
    """Run the whole pipeline over one snapshot."""
    accounts = list(accounts)
    transactions = list(transactions)
    return AnalyticsData(
        transaction_volume=tuple(calculate_transaction_volume(transactions, date_range)),
        account_performance=tuple(calculate_account_performance(accounts, transactions, date_range)),
        currency_analytics=tuple(calculate_currency_analytics(accounts, transactions, date_range)),
        risk_metrics=calculate_risk_metrics(accounts, transactions, date_range),
        trends=calculate_trends(transactions, date_range, previous),
        summary=calculate_analytics_summary(accounts, transactions, date_range, previous),
    )
