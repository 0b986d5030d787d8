"""Shared domain error messages and error types."""

from datetime import date
from decimal import Decimal

from caixa.utils.amount_parser import format_brl


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as closing a day twice."""


class UnknownAccountError(DomainError):
    """Account identifier outside the fixed set of ledger accounts."""


class SettlementDateUnresolvedError(DomainError):
    """No business day found for a card settlement within the search window."""


class StorageFailure(DomainError):
    """The storage layer failed; the current unit of work was rolled back."""


def unknown_account(account_id: object) -> str:
    """Return message for an account identifier outside the ledger."""
    return f"Unknown account '{account_id}'"


def sale_not_found(sale_id: int) -> str:
    """Return message for missing sale."""
    return f"Sale {sale_id} not found"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def bill_not_found(bill_id: int) -> str:
    """Return message for missing bill."""
    return f"Bill {bill_id} not found"


def holiday_not_found(day: date) -> str:
    """Return message for missing holiday."""
    return f"No holiday registered on {day.isoformat()}"


def non_positive_amount(amount: Decimal) -> str:
    """Return message for an amount that must be positive."""
    return f"Amount must be greater than zero (got {format_brl(amount)})"


def day_already_closed(day: date) -> str:
    """Return message when end of day already ran for a date."""
    return f"Day {day.isoformat()} is already closed"


def bill_already_paid(bill_id: int) -> str:
    """Return message when settling a bill that has no remaining amount."""
    return f"Bill {bill_id} is already paid"


def bill_overpayment(bill_id: int, amount: Decimal, remaining: Decimal) -> str:
    """Return message when a payment exceeds what is still owed."""
    return (
        f"Payment of {format_brl(amount)} exceeds the remaining "
        f"{format_brl(remaining)} on bill {bill_id}"
    )


def settlement_unresolved(sale_date: date, attempts: int) -> str:
    """Return message when the holiday calendar blocks every candidate day."""
    return (
        f"Could not find a business day to settle the sale of {sale_date.isoformat()} "
        f"within {attempts} days; check the holiday calendar"
    )
