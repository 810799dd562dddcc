"""
validation.py - Transfer business rules

validate_transfer() is a pure function: it reads the account snapshot and
returns every rule violation it finds. It never raises for a well-formed
request and never short-circuits, so callers can display all errors at once.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from .core import Account, TransferRequest, ValidationResult, MAX_TRANSFER_AMOUNT


ERR_SOURCE_NOT_FOUND = "Source account not found"
ERR_DEST_NOT_FOUND = "Destination account not found"
ERR_SAME_ACCOUNT = "Cannot transfer to the same account"
ERR_NON_POSITIVE_AMOUNT = "Amount must be greater than zero"
ERR_INSUFFICIENT_FUNDS = "Insufficient funds in source account"
ERR_SCHEDULE_NOT_FUTURE = "Scheduled date must be in the future"


def _find(accounts: Iterable[Account], account_id: str) -> Optional[Account]:
    for account in accounts:
        if account.id == account_id:
            return account
    return None


def validate_transfer(
    request: TransferRequest,
    accounts: Iterable[Account],
    now: Optional[datetime] = None,
) -> ValidationResult:
    """
    Check a prospective transfer against the current account snapshot.

    Solvency is checked on the raw amount in the source currency; conversion
    does not affect it. Account activity (is_active) is deliberately not
    checked here.

    Args:
        request: Transfer to check
        accounts: Current account snapshot
        now: Reference time for scheduled dates (default: datetime.now())

    Returns:
        ValidationResult with is_valid=True iff no rule failed
    """
    accounts = list(accounts)
    errors: List[str] = []

    source = _find(accounts, request.from_account_id)
    dest = _find(accounts, request.to_account_id)

    if source is None:
        errors.append(ERR_SOURCE_NOT_FOUND)
    if dest is None:
        errors.append(ERR_DEST_NOT_FOUND)

    if request.from_account_id == request.to_account_id:
        errors.append(ERR_SAME_ACCOUNT)

    amount = request.amount
    amount_is_finite = amount.is_finite()
    if not amount_is_finite or amount <= 0:
        errors.append(ERR_NON_POSITIVE_AMOUNT)

    if source is not None and amount_is_finite and amount > source.balance:
        errors.append(ERR_INSUFFICIENT_FUNDS)

    if request.scheduled_date is not None:
        reference = now if now is not None else datetime.now()
        if request.scheduled_date <= reference:
            errors.append(ERR_SCHEDULE_NOT_FUTURE)

    return ValidationResult(is_valid=not errors, errors=tuple(errors))


def validate_amount(text: str) -> bool:
    """True if text parses as a number in (0, MAX_TRANSFER_AMOUNT]."""
    try:
        value = Decimal(str(text).strip())
    except InvalidOperation:
        return False
    if not value.is_finite():
        return False
    return Decimal("0") < value <= MAX_TRANSFER_AMOUNT
