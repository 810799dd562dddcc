"""
treasury - Multi-currency Treasury Ledger

An in-memory ledger for treasury transfers between KES, USD and NGN accounts,
with an analytics engine and report generation on top.

Usage:
    from decimal import Decimal
    from treasury import create_seeded_ledger, TransferRequest, get_date_range, generate_analytics_data

    ledger = create_seeded_ledger(verbose=False)

    # USD -> KES, converted once through the rate table
    outcome = ledger.execute(TransferRequest("3", "1", Decimal("500"), note="float top-up"))
    assert outcome.applied

    window = get_date_range(30)
    analytics = generate_analytics_data(ledger.get_accounts(), ledger.get_transactions(), window)
"""

# Core types
from .core import (
    LedgerView,
    Account,
    ExchangeRate,
    TransferRequest,
    Transaction,
    DateRange,
    ValidationResult,
    TransferOutcome,
    ExecuteResult,
    LedgerError,
    AccountNotFound,
    AccountAlreadyRegistered,
    to_decimal,
    CURRENCY_KES,
    CURRENCY_USD,
    CURRENCY_NGN,
    SUPPORTED_CURRENCIES,
    ACCOUNT_TYPE_MPESA,
    ACCOUNT_TYPE_BANK,
    ACCOUNT_TYPE_WALLET,
    ACCOUNT_TYPE_CORPORATE,
    ACCOUNT_TYPES,
    STATUS_COMPLETED,
    STATUS_PENDING,
    STATUS_SCHEDULED,
    STATUS_FAILED,
    TRANSACTION_STATUSES,
)

# Ledger
from .ledger import Ledger

# Rates
from .rates import (
    RateTable,
    DEFAULT_RATES,
    get_exchange_rate,
    convert_currency,
    format_currency,
)

# Validation
from .validation import (
    validate_transfer,
    validate_amount,
    ERR_SOURCE_NOT_FOUND,
    ERR_DEST_NOT_FOUND,
    ERR_SAME_ACCOUNT,
    ERR_NON_POSITIVE_AMOUNT,
    ERR_INSUFFICIENT_FUNDS,
    ERR_SCHEDULE_NOT_FUTURE,
)

# Seed data
from .seed import (
    CURRENCIES,
    EXCHANGE_RATES,
    INITIAL_ACCOUNTS,
    initial_accounts,
    create_seeded_ledger,
)

# Analytics
from .analytics import (
    TransactionVolumeData,
    AccountPerformanceData,
    CurrencyAnalyticsData,
    RiskMetrics,
    TrendData,
    PeriodComparison,
    AnalyticsSummary,
    AnalyticsData,
    get_date_range,
    previous_period,
    filter_by_date_range,
    filter_by_currency,
    filter_by_account,
    calculate_transaction_volume,
    calculate_account_performance,
    calculate_currency_analytics,
    calculate_risk_metrics,
    calculate_trends,
    calculate_analytics_summary,
    generate_analytics_data,
)

# Reports
from .reports import (
    ReportConfig,
    ReportData,
    ReportMetadata,
    ReportFilters,
    SummaryReport,
    DetailedReport,
    AnalyticsReport,
    RiskReport,
    PerformanceReport,
    TransactionsReport,
    REPORT_TYPES,
    REPORT_TYPE_SUMMARY,
    REPORT_TYPE_DETAILED,
    REPORT_TYPE_ANALYTICS,
    REPORT_TYPE_RISK,
    REPORT_TYPE_PERFORMANCE,
    REPORT_TYPE_TRANSACTIONS,
    EXPORT_FORMATS,
    REPORT_BUILDERS,
    build_report,
    generate_report_data,
    rank_by_net_flow,
    select_transactions,
)

# Export
from .export import (
    to_serializable,
    flatten_for_csv,
    render_csv,
    render_json,
    export_filename,
    export_report,
)

# History and dashboard
from .history import (
    FilterOptions,
    DashboardMetrics,
    filter_transactions,
    recent_transactions,
    sort_newest_first,
    compute_dashboard_metrics,
)

# Scenarios
from .scenarios import (
    Scenario,
    ScenarioTransfer,
    ScenarioResult,
    AccountFilters,
    SCENARIOS,
    pick_account_pair,
    run_scenario,
)

__all__ = [
    # Core
    'LedgerView', 'Account', 'ExchangeRate', 'TransferRequest', 'Transaction',
    'DateRange', 'ValidationResult', 'TransferOutcome', 'ExecuteResult',
    'LedgerError', 'AccountNotFound', 'AccountAlreadyRegistered', 'to_decimal',
    'CURRENCY_KES', 'CURRENCY_USD', 'CURRENCY_NGN', 'SUPPORTED_CURRENCIES',
    'ACCOUNT_TYPE_MPESA', 'ACCOUNT_TYPE_BANK', 'ACCOUNT_TYPE_WALLET',
    'ACCOUNT_TYPE_CORPORATE', 'ACCOUNT_TYPES',
    'STATUS_COMPLETED', 'STATUS_PENDING', 'STATUS_SCHEDULED', 'STATUS_FAILED',
    'TRANSACTION_STATUSES',
    # Ledger
    'Ledger',
    # Rates
    'RateTable', 'DEFAULT_RATES', 'get_exchange_rate', 'convert_currency', 'format_currency',
    # Validation
    'validate_transfer', 'validate_amount',
    'ERR_SOURCE_NOT_FOUND', 'ERR_DEST_NOT_FOUND', 'ERR_SAME_ACCOUNT',
    'ERR_NON_POSITIVE_AMOUNT', 'ERR_INSUFFICIENT_FUNDS', 'ERR_SCHEDULE_NOT_FUTURE',
    # Seed
    'CURRENCIES', 'EXCHANGE_RATES', 'INITIAL_ACCOUNTS', 'initial_accounts', 'create_seeded_ledger',
    # Analytics
    'TransactionVolumeData', 'AccountPerformanceData', 'CurrencyAnalyticsData',
    'RiskMetrics', 'TrendData', 'PeriodComparison', 'AnalyticsSummary', 'AnalyticsData',
    'get_date_range', 'previous_period',
    'filter_by_date_range', 'filter_by_currency', 'filter_by_account',
    'calculate_transaction_volume', 'calculate_account_performance',
    'calculate_currency_analytics', 'calculate_risk_metrics', 'calculate_trends',
    'calculate_analytics_summary', 'generate_analytics_data',
    # Reports
    'ReportConfig', 'ReportData', 'ReportMetadata', 'ReportFilters',
    'SummaryReport', 'DetailedReport', 'AnalyticsReport', 'RiskReport',
    'PerformanceReport', 'TransactionsReport',
    'REPORT_TYPES', 'REPORT_TYPE_SUMMARY', 'REPORT_TYPE_DETAILED', 'REPORT_TYPE_ANALYTICS',
    'REPORT_TYPE_RISK', 'REPORT_TYPE_PERFORMANCE', 'REPORT_TYPE_TRANSACTIONS',
    'EXPORT_FORMATS', 'REPORT_BUILDERS',
    'build_report', 'generate_report_data', 'rank_by_net_flow', 'select_transactions',
    # Export
    'to_serializable', 'flatten_for_csv', 'render_csv', 'render_json',
    'export_filename', 'export_report',
    # History
    'FilterOptions', 'DashboardMetrics', 'filter_transactions', 'recent_transactions',
    'sort_newest_first', 'compute_dashboard_metrics',
    # Scenarios
    'Scenario', 'ScenarioTransfer', 'ScenarioResult', 'AccountFilters', 'SCENARIOS',
    'pick_account_pair', 'run_scenario',
]

__version__ = '1.0.0'
