"""Expense domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from caixa.database.base import Database
from caixa.domain.account import coerce_account_id
from caixa.domain.entities import AccountId, Expense as ExpenseEntity, TransactionCategory
from caixa.domain.errors import (
    NotFoundError,
    ValidationError,
    expense_not_found,
    non_positive_amount,
)
from caixa.domain.transaction import TransactionService
from caixa.utils.amount_parser import format_brl, to_cents
from caixa.utils.dates import is_calendar_day

logger = structlog.get_logger()


def _validate(expense_date: date, amount: Optional[Decimal], description: str) -> Decimal:
    if not is_calendar_day(expense_date):
        raise ValidationError(f"Invalid expense date '{expense_date}'")
    if amount is None:
        raise ValidationError("Expense amount is required")
    amount = to_cents(amount)
    if amount <= 0:
        raise ValidationError(non_positive_amount(amount))
    if not description or not description.strip():
        raise ValidationError("Expense description is required")
    return amount


class ExpenseService:
    """Service for recording expenses paid out of a ledger account."""

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def add_expense(
        self,
        date: date,
        amount: Decimal,
        account: AccountId | str,
        description: str,
        category: str = "geral",
    ) -> int:
        """Record an expense, debit its account and log one transaction.

        The transaction references the account on both sides: an expense has
        no destination inside the ledger.

        Returns:
            Expense ID

        Raises:
            ValidationError: If amount or description is invalid (nothing is written)
            UnknownAccountError: If the account is unknown
        """
        amount = _validate(date, amount, description)
        account_id = coerce_account_id(account)
        description = description.strip()
        category = (category or "geral").strip()

        with self.db.transaction():
            expense_id = self.db.create_expense(
                date=date,
                amount=amount,
                category=category,
                account_id=account_id,
                description=description,
            )
            self.db.apply_balance_delta(account_id, -amount)
            self.transactions.record(
                on=date,
                from_account=account_id,
                to_account=account_id,
                amount=amount,
                category=TransactionCategory.EXPENSE,
                description=f"Despesa: {description}",
                reference=f"expense:{expense_id}",
            )

        logger.info(
            "expense_recorded",
            expense_id=expense_id,
            date=date.isoformat(),
            amount=str(amount),
            account=account_id.value,
            category=category,
        )
        return expense_id

    def get_expense(self, expense_id: int) -> ExpenseEntity:
        """Get an expense.

        Raises:
            NotFoundError: If the expense does not exist
        """
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return expense

    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: AccountId | str | None = None,
    ) -> list[ExpenseEntity]:
        """List expenses with optional filters."""
        account_id = coerce_account_id(account) if account is not None else None
        return self.db.list_expenses(start_date=start_date, end_date=end_date, account_id=account_id)

    def delete_expense(self, expense_id: int, on: Optional[date] = None) -> None:
        """Delete an expense and credit its amount back to the account.

        Records a balance adjustment carrying the resulting balance.

        Raises:
            NotFoundError: If the expense does not exist
        """
        expense = self.get_expense(expense_id)
        with self.db.transaction():
            self.db.apply_balance_delta(expense.account, expense.amount)
            account = self.db.get_account(expense.account)
            self.transactions.record(
                on=on or expense.date,
                from_account=expense.account,
                to_account=expense.account,
                amount=account.balance,
                category=TransactionCategory.BALANCE_ADJUSTMENT,
                description=f"Estorno da despesa {expense_id} ({format_brl(expense.amount)})",
                reference=f"expense:{expense_id}",
            )
            self.db.delete_expense(expense_id)
        logger.info("expense_deleted", expense_id=expense_id, amount=str(expense.amount))
