"""
reports.py - Report payload assembly

build_report() runs the analytics pipeline once and projects a payload for
the requested report type. Each report type has its own payload class; the
set of payloads is a closed union dispatched through REPORT_BUILDERS, which
is checked at import time to cover every report type.

Report types:
    summary       headline metrics, currency breakdown, risk summary
    detailed      full analytics plus report metadata
    analytics     every analytics series
    risk          risk assessment, low-balance accounts, recommendations
    performance   ranked account performance plus tier counts
    transactions  filtered transaction detail with resolved account names
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from .core import (
    Account, Transaction, DateRange,
    SUPPORTED_CURRENCIES, TRANSACTION_STATUSES, ZERO,
)
from .analytics import (
    AnalyticsData, AccountPerformanceData,
    generate_analytics_data, filter_by_date_range,
)


REPORT_TYPE_SUMMARY = "summary"
REPORT_TYPE_DETAILED = "detailed"
REPORT_TYPE_ANALYTICS = "analytics"
REPORT_TYPE_RISK = "risk"
REPORT_TYPE_PERFORMANCE = "performance"
REPORT_TYPE_TRANSACTIONS = "transactions"

REPORT_TYPES: Tuple[str, ...] = (
    REPORT_TYPE_SUMMARY, REPORT_TYPE_DETAILED, REPORT_TYPE_ANALYTICS,
    REPORT_TYPE_RISK, REPORT_TYPE_PERFORMANCE, REPORT_TYPE_TRANSACTIONS,
)

EXPORT_FORMATS: Tuple[str, ...] = ("csv", "json", "pdf")

REPORT_TITLES: Dict[str, str] = {
    REPORT_TYPE_SUMMARY: "Treasury Summary Report",
    REPORT_TYPE_DETAILED: "Detailed Treasury Analysis",
    REPORT_TYPE_ANALYTICS: "Treasury Analytics Report",
    REPORT_TYPE_RISK: "Risk Assessment Report",
    REPORT_TYPE_PERFORMANCE: "Account Performance Report",
    REPORT_TYPE_TRANSACTIONS: "Transaction History Report",
}

_DESCRIPTIONS: Dict[str, str] = {
    REPORT_TYPE_SUMMARY: "Comprehensive overview of treasury operations for the period {period}",
    REPORT_TYPE_DETAILED: "In-depth analysis of all treasury activities from {period}",
    REPORT_TYPE_ANALYTICS: "Statistical analysis and insights for treasury operations ({period})",
    REPORT_TYPE_RISK: "Risk assessment and recommendations based on data from {period}",
    REPORT_TYPE_PERFORMANCE: "Account performance metrics and comparisons for {period}",
    REPORT_TYPE_TRANSACTIONS: "Complete transaction history and details for {period}",
}


def _short_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


def report_description(report_type: str, date_range: DateRange) -> str:
    period = f"{_short_date(date_range.start)} to {_short_date(date_range.end)}"
    return _DESCRIPTIONS[report_type].format(period=period)


# ============================================================================
# CONFIG AND METADATA
# ============================================================================

@dataclass(frozen=True, slots=True)
class ReportConfig:
    """
    What to report on.

    title and description default from the report type and period.
    """
    type: str
    date_range: DateRange
    currency: Optional[str] = None
    account_ids: Optional[Tuple[str, ...]] = None
    include_charts: bool = True
    format: str = "json"
    title: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        if self.type not in REPORT_TYPES:
            raise ValueError(f"Unknown report type: {self.type}")
        if self.format not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format: {self.format}")
        if self.account_ids is not None:
            object.__setattr__(self, 'account_ids', tuple(self.account_ids))
        if self.title is None:
            object.__setattr__(self, 'title', REPORT_TITLES[self.type])
        if self.description is None:
            object.__setattr__(self, 'description', report_description(self.type, self.date_range))


@dataclass(frozen=True, slots=True)
class ReportFilters:
    currency: Optional[str]
    date_from: str
    date_to: str


@dataclass(frozen=True, slots=True)
class ReportMetadata:
    total_pages: int
    record_count: int
    filters: ReportFilters

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _report_info(config: ReportConfig, generated_at: datetime) -> Dict[str, Any]:
    return {
        'title': config.title,
        'description': config.description,
        'generated_at': generated_at.isoformat(),
    }


def select_transactions(config: ReportConfig, transactions: Sequence[Transaction]) -> list:
    """Transactions in the config's window, narrowed by currency and account ids when given."""
    selected = filter_by_date_range(transactions, config.date_range)
    if config.currency:
        selected = [tx for tx in selected if tx.currency == config.currency]
    if config.account_ids:
        wanted = set(config.account_ids)
        selected = [
            tx for tx in selected
            if tx.from_account_id in wanted or tx.to_account_id in wanted
        ]
    return selected


# ============================================================================
# PAYLOADS
# ============================================================================

@dataclass(frozen=True, slots=True)
class SummaryReport:
    report_info: Dict[str, Any]
    analytics: AnalyticsData

    def to_dict(self) -> Dict[str, Any]:
        summary = self.analytics.summary
        risk = self.analytics.risk_metrics
        return {
            'report_info': self.report_info,
            'summary_metrics': {
                'total_transaction_volume': summary.total_transaction_volume,
                'total_transaction_count': summary.total_transaction_count,
                'active_accounts': summary.active_accounts_count,
                'average_transaction_size': summary.average_transaction_size,
                'largest_transaction': summary.largest_transaction,
                'most_active_account': summary.most_active_account,
                'primary_currency': summary.most_used_currency,
            },
            'currency_breakdown': [
                {
                    'currency': c.currency,
                    'balance': c.total_balance,
                    'transaction_volume': c.total_transaction_volume,
                    'transaction_count': c.transaction_count,
                    'market_share': c.market_share,
                }
                for c in self.analytics.currency_analytics
            ],
            'risk_summary': {
                'overall_risk_level': risk.risk_level,
                'overall_risk_score': risk.overall_risk_score,
                'liquidity_risk': risk.liquidity_risk,
                'concentration_risk': risk.concentration_risk,
                'volatility_risk': risk.volatility_risk,
                'low_balance_accounts_count': len(risk.low_balance_accounts),
            },
        }


@dataclass(frozen=True, slots=True)
class DetailedReport:
    report_info: Dict[str, Any]
    analytics: AnalyticsData
    metadata: ReportMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            'report_info': self.report_info,
            'analytics': asdict(self.analytics),
            'metadata': self.metadata.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class AnalyticsReport:
    report_info: Dict[str, Any]
    analytics: AnalyticsData

    def to_dict(self) -> Dict[str, Any]:
        a = self.analytics
        return {
            'report_info': self.report_info,
            'transaction_volume_analysis': [asdict(v) for v in a.transaction_volume],
            'account_performance_analysis': [asdict(p) for p in a.account_performance],
            'currency_analytics': [asdict(c) for c in a.currency_analytics],
            'trend_analysis': asdict(a.trends),
            'statistical_summary': asdict(a.summary),
        }


@dataclass(frozen=True, slots=True)
class RiskReport:
    report_info: Dict[str, Any]
    analytics: AnalyticsData

    def to_dict(self) -> Dict[str, Any]:
        risk = self.analytics.risk_metrics
        return {
            'report_info': self.report_info,
            'risk_assessment': asdict(risk),
            'low_balance_accounts': [
                {
                    'id': acc.id,
                    'name': acc.name,
                    'balance': acc.balance,
                    'currency': acc.currency,
                    'type': acc.type,
                }
                for acc in risk.low_balance_accounts
            ],
            'recommendations': list(risk.recommendations),
        }


def rank_by_net_flow(performance: Sequence[AccountPerformanceData]) -> list:
    """Accounts ordered by |net_flow| descending; equal magnitudes keep input order."""
    return sorted(performance, key=lambda p: abs(p.net_flow), reverse=True)


@dataclass(frozen=True, slots=True)
class PerformanceReport:
    report_info: Dict[str, Any]
    analytics: AnalyticsData

    def to_dict(self) -> Dict[str, Any]:
        performance = self.analytics.account_performance
        ranked = rank_by_net_flow(performance)
        ranking = {p.account_id: position for position, p in enumerate(ranked, start=1)}

        def tier_count(tier: str) -> int:
            return sum(1 for p in performance if p.performance == tier)

        return {
            'report_info': self.report_info,
            'account_performance': [
                {**asdict(p), 'performance_ranking': ranking[p.account_id]}
                for p in performance
            ],
            'performance_summary': {
                'high_performers': tier_count("high"),
                'medium_performers': tier_count("medium"),
                'low_performers': tier_count("low"),
                'top_account_by_volume': ranked[0].account_name if ranked else None,
            },
        }


@dataclass(frozen=True, slots=True)
class TransactionsReport:
    report_info: Dict[str, Any]
    transactions: Tuple[Transaction, ...]
    accounts: Tuple[Account, ...]

    def _party(self, account_id: str, by_id: Dict[str, Account]) -> Dict[str, Any]:
        account = by_id.get(account_id)
        return {
            'id': account_id,
            'name': account.name if account else "Unknown",
            'type': account.type if account else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        by_id = {a.id: a for a in self.accounts}
        txs = self.transactions
        return {
            'report_info': self.report_info,
            'transactions': [
                {
                    'id': tx.id,
                    'timestamp': tx.timestamp.isoformat(),
                    'from_account': self._party(tx.from_account_id, by_id),
                    'to_account': self._party(tx.to_account_id, by_id),
                    'amount': tx.amount,
                    'currency': tx.currency,
                    'converted_amount': tx.converted_amount,
                    'converted_currency': tx.converted_currency,
                    'exchange_rate': tx.exchange_rate,
                    'status': tx.status,
                    'note': tx.note,
                }
                for tx in txs
            ],
            'transaction_summary': {
                'total_count': len(txs),
                'total_volume': sum((tx.amount for tx in txs), ZERO),
                'by_status': {
                    status: sum(1 for tx in txs if tx.status == status)
                    for status in TRANSACTION_STATUSES
                },
                'by_currency': {
                    currency: sum(1 for tx in txs if tx.currency == currency)
                    for currency in SUPPORTED_CURRENCIES
                },
            },
        }


ReportContent = Union[
    SummaryReport, DetailedReport, AnalyticsReport,
    RiskReport, PerformanceReport, TransactionsReport,
]


@dataclass(frozen=True, slots=True)
class ReportData:
    """
    A generated report.

    content is the type-specific payload; to_dict() gives its export shape.
    """
    config: ReportConfig
    analytics: AnalyticsData
    generated_at: datetime
    metadata: ReportMetadata
    content: ReportContent

    def to_dict(self) -> Dict[str, Any]:
        return self.content.to_dict()


# ============================================================================
# DISPATCH
# ============================================================================

@dataclass(frozen=True, slots=True)
class _BuildContext:
    config: ReportConfig
    analytics: AnalyticsData
    metadata: ReportMetadata
    report_info: Dict[str, Any]
    selected: Tuple[Transaction, ...]
    accounts: Tuple[Account, ...]


def _summary_info(ctx: _BuildContext) -> Dict[str, Any]:
    return {
        **ctx.report_info,
        'period': {
            'start': ctx.config.date_range.start.isoformat(),
            'end': ctx.config.date_range.end.isoformat(),
        },
    }


REPORT_BUILDERS: Dict[str, Callable[[_BuildContext], ReportContent]] = {
    REPORT_TYPE_SUMMARY: lambda ctx: SummaryReport(_summary_info(ctx), ctx.analytics),
    REPORT_TYPE_DETAILED: lambda ctx: DetailedReport(ctx.report_info, ctx.analytics, ctx.metadata),
    REPORT_TYPE_ANALYTICS: lambda ctx: AnalyticsReport(ctx.report_info, ctx.analytics),
    REPORT_TYPE_RISK: lambda ctx: RiskReport(ctx.report_info, ctx.analytics),
    REPORT_TYPE_PERFORMANCE: lambda ctx: PerformanceReport(ctx.report_info, ctx.analytics),
    REPORT_TYPE_TRANSACTIONS: lambda ctx: TransactionsReport(ctx.report_info, ctx.selected, ctx.accounts),
}

if set(REPORT_BUILDERS) != set(REPORT_TYPES):
    raise RuntimeError("every report type needs a builder")


def build_report(
    config: ReportConfig,
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> ReportData:
    """
    Assemble a report for config over an (accounts, transactions) snapshot.

    Args:
        config: Report type, window and filters
        accounts: Account snapshot
        transactions: Transaction snapshot
        now: Generation time (default: datetime.now())

    Returns:
        ReportData with metadata.record_count equal to the number of
        transactions matching the window, currency and account filters
    """
    accounts = tuple(accounts)
    transactions = list(transactions)
    generated_at = now or datetime.now()

    analytics = generate_analytics_data(accounts, transactions, config.date_range)
    selected = tuple(select_transactions(config, transactions))
    metadata = ReportMetadata(
        total_pages=1,
        record_count=len(selected),
        filters=ReportFilters(
            currency=config.currency,
            date_from=config.date_range.start.isoformat(),
            date_to=config.date_range.end.isoformat(),
        ),
    )
    ctx = _BuildContext(
        config=config,
        analytics=analytics,
        metadata=metadata,
        report_info=_report_info(config, generated_at),
        selected=selected,
        accounts=accounts,
    )
    content = REPORT_BUILDERS[config.type](ctx)
    return ReportData(
        config=config,
        analytics=analytics,
        generated_at=generated_at,
        metadata=metadata,
        content=content,
    )


generate_report_data = build_report
