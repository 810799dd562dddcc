"""
ledger.py - Stateful multi-currency treasury ledger

The Ledger class owns the account set and the transaction log.
It is the only module that mutates state.

Key responsibilities:
    - Implements LedgerView for read-only access by analytics and reports
    - Executes transfers atomically: both balance changes and the log append
      happen together or not at all
    - Converts cross-currency transfers once, through the rate table
    - Always validates and always logs
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional
import threading

from .core import (
    # Types
    Account, Transaction, TransferRequest, TransferOutcome,
    ExecuteResult,
    # Constants
    STATUS_COMPLETED, STATUS_SCHEDULED, ZERO,
    # Exceptions
    LedgerError, AccountNotFound, AccountAlreadyRegistered,
    # Helpers
    to_decimal,
)
from .rates import RateTable, DEFAULT_RATES
from .validation import validate_transfer


class Ledger:
    """
    In-memory treasury ledger with validation and an append-only log.

    Implements the LedgerView protocol, so it can be handed to analytics and
    report functions that only read.

    Design Principles:
        - Always validates: every transfer goes through validate_transfer().
        - Always logs: every applied transfer appends exactly one Transaction.
        - Never edits history: past transactions are immutable.

    Thread Safety:
        execute() holds the ledger lock across the balance pair and the log
        append; snapshot reads take the same lock, so no reader observes a
        half-applied transfer.

    Example:
        ledger = Ledger("main", accounts=initial_accounts())
        ok = ledger.execute_transfer(TransferRequest("3", "1", Decimal("500")))
    """

    def __init__(
        self,
        name: str,
        accounts: Iterable[Account] = (),
        rates: Optional[RateTable] = None,
        clock: Optional[Callable[[], datetime]] = None,
        verbose: bool = True,
        test_mode: bool = False
    ):
        """
        Create a ledger.

        Args:
            name: Ledger identifier (prefix of transaction ids)
            accounts: Initial accounts, registered in order
            rates: Conversion table (default: seed rate table)
            clock: Source of "now" for validation and timestamps (default: datetime.now)
            verbose: Enable diagnostic output (default: True)
            test_mode: Enable test mode to allow set_balance() calls (default: False)
        """
        self.name = name
        self.rates = rates if rates is not None else DEFAULT_RATES
        self.accounts: Dict[str, Account] = {}
        self.transaction_log: List[Transaction] = []
        self.verbose = verbose
        self._clock = clock or datetime.now
        self._test_mode = test_mode
        self._next_sequence: int = 0
        self._lock = threading.RLock()

        for account in accounts:
            self.register_account(account)

    # ========================================================================
    # LedgerView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    @property
    def current_time(self) -> datetime:
        """Current time according to the ledger's clock."""
        return self._clock()

    def get_accounts(self) -> List[Account]:
        """Snapshot of all accounts in registration order."""
        with self._lock:
            return list(self.accounts.values())

    def get_transactions(self, newest_first: bool = False) -> List[Transaction]:
        """
        Snapshot of the transaction log.

        Args:
            newest_first: Sort by timestamp descending (insertion order breaks ties,
                          later insertions first). Default is insertion order.
        """
        with self._lock:
            log = list(self.transaction_log)
        if newest_first:
            log.sort(key=lambda tx: (tx.timestamp, tx.sequence_number), reverse=True)
        return log

    def get_account(self, account_id: str) -> Account:
        """
        Get an account by id.

        Raises:
            AccountNotFound: If the id was never registered
        """
        with self._lock:
            if account_id not in self.accounts:
                raise AccountNotFound(f"Account {account_id} not registered")
            return self.accounts[account_id]

    def get_balance(self, account_id: str) -> Decimal:
        return self.get_account(account_id).balance

    def get_total_by_currency(self, currency: str) -> Decimal:
        """
        Sum of balances over ACTIVE accounts in a currency.

        Inactive accounts are excluded here even though the validator lets
        them transfer.
        """
        with self._lock:
            return sum(
                (a.balance for a in self.accounts.values() if a.currency == currency and a.is_active),
                ZERO,
            )

    def is_registered(self, account_id: str) -> bool:
        """Check if an account id is registered."""
        with self._lock:
            return account_id in self.accounts

    # ========================================================================
    # REGISTRATION (Mutating)
    # ========================================================================

    def register_account(self, account: Account) -> str:
        """
        Register a new account.

        Args:
            account: The Account to register

        Returns:
            The registered account id

        Raises:
            AccountAlreadyRegistered: If the id is already registered
        """
        with self._lock:
            if account.id in self.accounts:
                raise AccountAlreadyRegistered(f"Account {account.id} already registered")
            self.accounts[account.id] = account
        if self.verbose:
            state = "" if account.is_active else " (inactive)"
            print(f"📝 Registered: {account.name} [{account.type}] {account.balance} {account.currency}{state}")
        return account.id

    def set_balance(self, account_id: str, balance: Decimal) -> None:
        """
        Set an account balance directly.

        WARNING: This bypasses transfer validation and logging and is only
        available in test mode.

        Raises:
            LedgerError: If called when test_mode is False
            AccountNotFound: If the id was never registered
        """
        if not self._test_mode:
            raise LedgerError(
                "set_balance() is disabled in production mode. "
                "Use execute_transfer() to modify balances. "
                "Set test_mode=True when creating Ledger for testing."
            )
        with self._lock:
            account = self.get_account(account_id)
            self.accounts[account_id] = replace(account, balance=to_decimal(balance))

    # ========================================================================
    # TRANSFER EXECUTION (Mutating)
    # ========================================================================

    def _generate_tx_id(self, sequence: int) -> str:
        """Format: tx:{ledger_name}:{sequence:08d}"""
        return f"tx:{self.name}:{sequence:08d}"

    def execute(self, request: TransferRequest) -> TransferOutcome:
        """
        Validate and apply a transfer atomically.

        On success the source is debited by request.amount, the destination is
        credited by the amount converted into its currency, and exactly one
        Transaction is appended. On failure nothing changes.

        Args:
            request: Transfer to execute

        Returns:
            TransferOutcome with APPLIED and the new transaction, or
            REJECTED with every validation error
        """
        with self._lock:
            now = self._clock()
            validation = validate_transfer(request, self.accounts.values(), now=now)
            if not validation.is_valid:
                if self.verbose:
                    print(f"✗ REJECTED: {'; '.join(validation.errors)}")
                return TransferOutcome(ExecuteResult.REJECTED, errors=validation.errors)

            source = self.accounts[request.from_account_id]
            dest = self.accounts[request.to_account_id]
            amount = request.amount

            converted_amount = None
            converted_currency = None
            exchange_rate = None
            credit = amount
            if source.currency != dest.currency:
                converted_amount = self.rates.convert(amount, source.currency, dest.currency)
                converted_currency = dest.currency
                # Derived from the converted amount so the record is self-consistent.
                exchange_rate = converted_amount / amount
                credit = converted_amount

            scheduled = request.scheduled_date
            sequence = self._next_sequence
            tx = Transaction(
                id=self._generate_tx_id(sequence),
                from_account_id=source.id,
                to_account_id=dest.id,
                amount=amount,
                currency=source.currency,
                timestamp=scheduled if scheduled is not None else now,
                status=STATUS_SCHEDULED if scheduled is not None else STATUS_COMPLETED,
                converted_amount=converted_amount,
                converted_currency=converted_currency,
                exchange_rate=exchange_rate,
                note=request.note,
                scheduled_date=scheduled,
                sequence_number=sequence,
            )

            # Nothing below can fail, so the pair and the append land together.
            self.accounts[source.id] = replace(source, balance=source.balance - amount)
            self.accounts[dest.id] = replace(dest, balance=dest.balance + credit)
            self.transaction_log.append(tx)
            self._next_sequence += 1

        if self.verbose:
            print(repr(tx))
            print("✓ APPLIED")
        return TransferOutcome(ExecuteResult.APPLIED, transaction=tx)

    def execute_transfer(self, request: TransferRequest) -> bool:
        """Execute a transfer; True if it was applied."""
        return self.execute(request).applied

    # ========================================================================
    # LEDGER OPERATIONS
    # ========================================================================

    def clone(self) -> Ledger:
        """
        Create an independent copy of this ledger.

        Accounts and transactions are immutable, so copying the containers is
        enough; later transfers on either ledger do not affect the other.
        """
        with self._lock:
            cloned = Ledger.__new__(Ledger)
            cloned.name = self.name
            cloned.rates = self.rates
            cloned.accounts = dict(self.accounts)
            cloned.transaction_log = list(self.transaction_log)
            cloned.verbose = self.verbose
            cloned._clock = self._clock
            cloned._test_mode = self._test_mode
            cloned._next_sequence = self._next_sequence
            cloned._lock = threading.RLock()
            return cloned

    def __repr__(self) -> str:
        return f"Ledger({self.name}: {len(self.accounts)} accounts, {len(self.transaction_log)} transactions)"
