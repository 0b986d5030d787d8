"""Transaction recorder and statement domain service."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from caixa.database.base import Database
from caixa.domain.account import coerce_account_id
from caixa.domain.entities import AccountId, InternalTransaction, TransactionCategory
from caixa.domain.errors import ValidationError

# Self-referencing entries (from == to) carry their direction in the category
INFLOW_CATEGORIES = frozenset({TransactionCategory.SALE, TransactionCategory.CARD_SETTLEMENT})
OUTFLOW_CATEGORIES = frozenset({TransactionCategory.EXPENSE})


@dataclass(frozen=True)
class StatementLine:
    """One line of an account statement."""

    transaction_id: int
    date: date
    category: TransactionCategory
    description: str
    amount: Decimal
    balance: Decimal

    @property
    def is_adjustment(self) -> bool:
        return self.category == TransactionCategory.BALANCE_ADJUSTMENT


def signed_effect(txn: InternalTransaction, account_id: AccountId) -> Optional[Decimal]:
    """Return the signed effect of a transaction on an account.

    Returns None for balance adjustments, which set the balance instead of
    moving it, and Decimal zero when the account is not involved.
    """
    if txn.category == TransactionCategory.BALANCE_ADJUSTMENT:
        return None if txn.to_account == account_id else Decimal("0.00")

    if txn.from_account == txn.to_account:
        if txn.from_account != account_id:
            return Decimal("0.00")
        if txn.category in INFLOW_CATEGORIES:
            return txn.amount
        if txn.category in OUTFLOW_CATEGORIES:
            return -txn.amount
        return Decimal("0.00")

    if txn.to_account == account_id:
        return txn.amount
    if txn.from_account == account_id:
        return -txn.amount
    return Decimal("0.00")


class TransactionService:
    """Service for the append-only transaction log."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def record(
        self,
        on: date,
        from_account: AccountId | str,
        to_account: AccountId | str,
        amount: Decimal,
        category: TransactionCategory,
        description: str,
        reference: Optional[str] = None,
    ) -> int:
        """Append a transaction to the log.

        Returns:
            Transaction ID

        Balance adjustments carry the resulting balance, which may be negative;
        every other category carries a non-negative amount.

        Raises:
            ValidationError: If the amount is negative or the description empty
            UnknownAccountError: If an account identifier is unknown
        """
        category = TransactionCategory(category)
        if amount < 0 and category != TransactionCategory.BALANCE_ADJUSTMENT:
            raise ValidationError("Transaction amount cannot be negative")
        if not description:
            raise ValidationError("Transaction description is required")
        return self.db.create_internal_transaction(
            date=on,
            from_account=coerce_account_id(from_account),
            to_account=coerce_account_id(to_account),
            amount=amount,
            category=category,
            description=description,
            reference=reference,
        )

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account: Optional[AccountId | str] = None,
        category: Optional[TransactionCategory] = None,
    ) -> list[InternalTransaction]:
        """List transactions with optional filters, oldest first."""
        account_id = coerce_account_id(account) if account is not None else None
        return self.db.list_internal_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            category=category,
        )

    def statement(
        self,
        account: AccountId | str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[StatementLine]:
        """Rebuild an account statement from the transaction log.

        Lines follow posting order, and the running balance is computed over
        the whole history so lines keep their true balance even when a date
        range is given. Over the full history the last balance equals the
        account balance.
        """
        account_id = coerce_account_id(account)
        history = self.db.list_internal_transactions(account_id=account_id)

        lines: list[StatementLine] = []
        balance = Decimal("0.00")
        for txn in history:
            effect = signed_effect(txn, account_id)
            if effect is None:
                amount = txn.amount - balance
                balance = txn.amount
            else:
                amount = effect
                balance += effect
            if start_date is not None and txn.date < start_date:
                continue
            if end_date is not None and txn.date > end_date:
                continue
            lines.append(
                StatementLine(
                    transaction_id=txn.id,
                    date=txn.date,
                    category=txn.category,
                    description=txn.description,
                    amount=amount,
                    balance=balance,
                )
            )
        return lines
