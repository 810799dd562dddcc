"""
Core types and constants for the treasury ledger.

This module provides the foundational data structures for the ledger:
1. Protocols: LedgerView for read-only ledger access
2. Immutable data structures: Account, ExchangeRate, TransferRequest, Transaction, DateRange
3. Exceptions: LedgerError and domain-specific error types
4. Policy constants: currencies, account types, statuses and analytics thresholds

Nothing in this module mutates ledger state. Balances change only through
Ledger.execute().
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_EVEN, getcontext
from enum import Enum
from typing import Dict, List, Optional, Protocol, Tuple, Iterator, runtime_checkable


# ============================================================================
# DECIMAL CONTEXT CONFIGURATION
# ============================================================================
#
# Money arithmetic must be deterministic. The global context is configured
# once at import time.
#
# PRECONDITION: No other code should modify the global Decimal context.
#
_TREASURY_DECIMAL_CONTEXT = getcontext()
_TREASURY_DECIMAL_CONTEXT.prec = 50
_TREASURY_DECIMAL_CONTEXT.rounding = ROUND_HALF_EVEN


# ============================================================================
# CONSTANTS
# ============================================================================

# Currencies (strings, not enum, same as account types and statuses).
CURRENCY_KES = "KES"
CURRENCY_USD = "USD"
CURRENCY_NGN = "NGN"

# Order used by currency analytics and report breakdowns.
SUPPORTED_CURRENCIES: Tuple[str, ...] = (CURRENCY_USD, CURRENCY_KES, CURRENCY_NGN)

ACCOUNT_TYPE_MPESA = "Mpesa"
ACCOUNT_TYPE_BANK = "Bank"
ACCOUNT_TYPE_WALLET = "Wallet"
ACCOUNT_TYPE_CORPORATE = "Corporate"

ACCOUNT_TYPES: Tuple[str, ...] = (
    ACCOUNT_TYPE_MPESA, ACCOUNT_TYPE_BANK, ACCOUNT_TYPE_WALLET, ACCOUNT_TYPE_CORPORATE,
)

STATUS_COMPLETED = "completed"
STATUS_PENDING = "pending"
STATUS_SCHEDULED = "scheduled"
STATUS_FAILED = "failed"

TRANSACTION_STATUSES: Tuple[str, ...] = (
    STATUS_COMPLETED, STATUS_PENDING, STATUS_SCHEDULED, STATUS_FAILED,
)

# Upper bound accepted by validate_amount() for free-text amount input.
MAX_TRANSFER_AMOUNT = Decimal("999999999")

# Accounts below these balances count toward liquidity risk.
LOW_BALANCE_THRESHOLDS: Dict[str, Decimal] = {
    CURRENCY_USD: Decimal("100"),
    CURRENCY_KES: Decimal("10000"),
    CURRENCY_NGN: Decimal("50000"),
}

# Weights of the composite risk score.
RISK_WEIGHTS: Dict[str, float] = {
    'liquidity': 0.4,
    'concentration': 0.3,
    'volatility': 0.3,
}

# (minimum score, level), checked top-down.
RISK_LEVEL_CUTOFFS: Tuple[Tuple[float, str], ...] = (
    (75.0, "critical"),
    (50.0, "high"),
    (25.0, "medium"),
)
RISK_LEVEL_LOW = "low"

# (dimension, threshold, advisory) - advisory is added when score > threshold.
RISK_RECOMMENDATIONS: Tuple[Tuple[str, float, str], ...] = (
    ('liquidity', 30.0, "Consider increasing account balances to improve liquidity"),
    ('concentration', 50.0, "Diversify balance distribution across accounts"),
    ('volatility', 40.0, "Monitor transaction patterns for unusual volatility"),
)

# (minimum transaction count, minimum |net flow| exclusive, tier), checked top-down.
PERFORMANCE_TIERS: Tuple[Tuple[int, Decimal, str], ...] = (
    (10, Decimal("1000"), "high"),
    (5, Decimal("500"), "medium"),
)
PERFORMANCE_LOW = "low"

# Growth (percent) beyond which a trend is reported as up/down.
TREND_THRESHOLD = 5.0
TREND_UP = "up"
TREND_DOWN = "down"
TREND_STABLE = "stable"

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert int/float/str to Decimal via str() so floats keep their printed value."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ============================================================================
# ENUMS
# ============================================================================

class ExecuteResult(Enum):
    """
    Outcome of a transfer execution attempt.

    APPLIED: Transfer passed validation and both balances plus the log were updated.
    REJECTED: Transfer failed validation. Nothing was changed.
    """
    APPLIED = "applied"
    REJECTED = "rejected"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class AccountNotFound(LedgerError, KeyError):
    """Raised when looking up an account id that was never registered."""
    pass


class AccountAlreadyRegistered(LedgerError, ValueError):
    """Raised when registering an account id twice."""
    pass


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class Account:
    """
    A treasury account holding a single currency.

    The balance is denominated in the account's own currency and may only be
    changed by the ledger (which swaps in a new instance).
    """
    id: str
    name: str
    currency: str
    balance: Decimal
    type: str
    is_active: bool = True

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise ValueError("Account id cannot be empty")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")
        if self.type not in ACCOUNT_TYPES:
            raise ValueError(f"Unsupported account type: {self.type}")
        object.__setattr__(self, 'balance', to_decimal(self.balance))

    def __repr__(self) -> str:
        flag = "" if self.is_active else ", inactive"
        return f"Account({self.id} {self.name}: {self.balance} {self.currency}{flag})"


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """A directed conversion multiplier: amount_in_to = amount_in_from * rate."""
    from_currency: str
    to_currency: str
    rate: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'rate', to_decimal(self.rate))


@dataclass(frozen=True, slots=True)
class TransferRequest:
    """
    A prospective transfer as submitted by a caller.

    amount is in the source account's currency. scheduled_date accepts a
    datetime or an ISO-8601 string; offset-aware values are converted to
    naive local time so they compare with the ledger clock.
    """
    from_account_id: str
    to_account_id: str
    amount: Decimal
    note: Optional[str] = None
    scheduled_date: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, 'amount', to_decimal(self.amount))
        scheduled = self.scheduled_date
        if isinstance(scheduled, str):
            text = scheduled.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            scheduled = datetime.fromisoformat(text)
        if scheduled is not None and scheduled.tzinfo is not None:
            scheduled = scheduled.astimezone().replace(tzinfo=None)
        object.__setattr__(self, 'scheduled_date', scheduled)


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    An executed, immutable record of a transfer.

    Attributes:
        id: Ledger-unique transaction id
        from_account_id: Debited account
        to_account_id: Credited account
        amount: Amount debited, in `currency`
        currency: Source account currency
        timestamp: Execution time, or the scheduled date for scheduled transfers
        status: One of TRANSACTION_STATUSES
        converted_amount: Amount credited when currencies differ
        converted_currency: Destination currency when currencies differ
        exchange_rate: converted_amount / amount when currencies differ
        note: Free-text memo
        scheduled_date: Requested execution date, if any
        sequence_number: Monotonic insertion order within the ledger
    """
    id: str
    from_account_id: str
    to_account_id: str
    amount: Decimal
    currency: str
    timestamp: datetime
    status: str = STATUS_COMPLETED
    converted_amount: Optional[Decimal] = None
    converted_currency: Optional[str] = None
    exchange_rate: Optional[Decimal] = None
    note: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    sequence_number: int = 0

    def __post_init__(self):
        if not self.from_account_id or not self.to_account_id:
            raise ValueError("Transaction account ids cannot be empty")
        if self.from_account_id == self.to_account_id:
            raise ValueError("Source and destination must be different")
        object.__setattr__(self, 'amount', to_decimal(self.amount))
        if not self.amount.is_finite() or self.amount <= 0:
            raise ValueError(f"Transaction amount must be positive, got {self.amount}")
        if self.status not in TRANSACTION_STATUSES:
            raise ValueError(f"Unknown transaction status: {self.status}")
        conversion = (self.converted_amount, self.converted_currency, self.exchange_rate)
        present = [v is not None for v in conversion]
        if any(present) and not all(present):
            raise ValueError("converted_amount, converted_currency and exchange_rate go together")
        if self.converted_amount is not None:
            object.__setattr__(self, 'converted_amount', to_decimal(self.converted_amount))
            object.__setattr__(self, 'exchange_rate', to_decimal(self.exchange_rate))

    @property
    def is_cross_currency(self) -> bool:
        return self.converted_amount is not None

    @property
    def settled_amount(self) -> Decimal:
        """Amount credited to the destination, in the destination currency."""
        return self.converted_amount if self.converted_amount is not None else self.amount

    def __repr__(self) -> str:
        w = 72
        bar = "─" * w

        def pad(text: str) -> str:
            if len(text) > w:
                return text[:w-3] + "..."
            return text + " " * (w - len(text))

        lines = [
            f"┌{bar}┐",
            f"│{pad(' Transaction: ' + self.id)}│",
            f"├{bar}┤",
            f"│{pad('   timestamp : ' + str(self.timestamp))}│",
            f"│{pad('   status    : ' + self.status)}│",
            f"│{pad(f'   debit     : {self.amount} {self.currency} from {self.from_account_id}')}│",
        ]
        if self.is_cross_currency:
            lines.append(
                f"│{pad(f'   credit    : {self.converted_amount} {self.converted_currency} to {self.to_account_id} @ {self.exchange_rate}')}│"
            )
        else:
            lines.append(f"│{pad(f'   credit    : {self.amount} {self.currency} to {self.to_account_id}')}│")
        if self.note:
            lines.append(f"│{pad('   note      : ' + self.note)}│")
        lines.append(f"└{bar}┘")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class DateRange:
    """
    Inclusive [start, end] window used to scope analytics.

    A range whose end precedes its start is empty rather than an error.
    """
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def days(self) -> Iterator[date]:
        """Every calendar day touched by the range, in order."""
        current = self.start.date()
        last = self.end.date()
        while current <= last:
            yield current
            current += timedelta(days=1)

    def __repr__(self) -> str:
        return f"DateRange({self.start.isoformat()} .. {self.end.isoformat()})"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Accumulated outcome of validate_transfer()."""
    is_valid: bool
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TransferOutcome:
    """
    Result of Ledger.execute().

    transaction is set only when result is APPLIED; errors only when REJECTED.
    """
    result: ExecuteResult
    errors: Tuple[str, ...] = ()
    transaction: Optional[Transaction] = None

    @property
    def applied(self) -> bool:
        return self.result == ExecuteResult.APPLIED


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class LedgerView(Protocol):
    """
    Read-only interface to ledger state.

    Analytics, reports and scenario helpers accept a LedgerView (or plain
    snapshots) to declare they never mutate the ledger.
    """

    @property
    def current_time(self) -> datetime:
        """Return the ledger's notion of now."""
        ...

    def get_accounts(self) -> List[Account]:
        """Return a snapshot of all accounts in registration order."""
        ...

    def get_transactions(self, newest_first: bool = False) -> List[Transaction]:
        """Return a snapshot of the transaction log."""
        ...


def end_of_day(day: date) -> datetime:
    """Last representable moment of a calendar day."""
    return datetime.combine(day, time.max)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)
