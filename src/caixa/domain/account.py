"""Account ledger domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from caixa.database.base import Database
from caixa.domain.entities import Account as AccountEntity, AccountId, TransactionCategory
from caixa.domain.errors import UnknownAccountError, ValidationError, unknown_account
from caixa.utils.amount_parser import format_brl, to_cents
from caixa.utils.dates import Clock, today

logger = structlog.get_logger()


def coerce_account_id(account_id: AccountId | str) -> AccountId:
    """Return the AccountId for an identifier, or raise UnknownAccountError."""
    try:
        return AccountId(account_id)
    except ValueError:
        raise UnknownAccountError(unknown_account(account_id)) from None


class AccountService:
    """Service for reading and moving account balances.

    The ledger applies signed deltas without overdraft checks; callers decide
    how much may move.
    """

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize account service.

        Args:
            db: Database instance
            clock: Callable returning today's date (defaults to local today)
        """
        self.db = db
        self.clock = clock or today

    def get_account(self, account_id: AccountId | str) -> AccountEntity:
        """Get an account.

        Raises:
            UnknownAccountError: If the identifier is not one of the five accounts
        """
        account_id = coerce_account_id(account_id)
        account = self.db.get_account(account_id)
        if account is None:
            raise UnknownAccountError(unknown_account(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts in their fixed order."""
        return self.db.list_accounts()

    def get_balance(self, account_id: AccountId | str) -> Decimal:
        """Return the current balance of an account."""
        return self.get_account(account_id).balance

    def total_balance(self) -> Decimal:
        """Return the sum of all account balances."""
        return sum((acc.balance for acc in self.list_accounts()), Decimal("0.00"))

    def apply_delta(self, account_id: AccountId | str, delta: Decimal) -> None:
        """Add a signed delta to an account balance.

        Raises:
            UnknownAccountError: If the identifier is not one of the five accounts
        """
        account_id = coerce_account_id(account_id)
        self.db.apply_balance_delta(account_id, to_cents(delta))

    def set_balance(
        self, account_id: AccountId | str, value: Decimal, on: Optional[date] = None
    ) -> None:
        """Overwrite an account balance and record the adjustment.

        The adjustment transaction carries the new balance as its amount, so
        statements can be rebuilt from the transaction log alone.

        Raises:
            UnknownAccountError: If the identifier is not one of the five accounts
            ValidationError: If the value is negative
        """
        account_id = coerce_account_id(account_id)
        value = to_cents(value)
        if value < 0:
            raise ValidationError(f"Balance cannot be negative (got {format_brl(value)})")

        with self.db.transaction():
            previous = self.get_balance(account_id)
            self.db.set_balance(account_id, value)
            self.db.create_internal_transaction(
                date=on or self.clock(),
                from_account=account_id,
                to_account=account_id,
                amount=value,
                category=TransactionCategory.BALANCE_ADJUSTMENT,
                description=f"Ajuste de saldo: {format_brl(previous)} -> {format_brl(value)}",
            )
        logger.info(
            "balance_set", account=account_id.value, previous=str(previous), balance=str(value)
        )

    def transfer(
        self,
        from_account: AccountId | str,
        to_account: AccountId | str,
        amount: Decimal,
        category: TransactionCategory,
        description: str,
        on: date,
        reference: Optional[str] = None,
    ) -> None:
        """Move money between two accounts and record one transaction.

        Raises:
            UnknownAccountError: If either identifier is unknown
            ValidationError: If the amount is not positive
        """
        from_account = coerce_account_id(from_account)
        to_account = coerce_account_id(to_account)
        amount = to_cents(amount)
        if amount <= 0:
            raise ValidationError(f"Transfer amount must be positive (got {format_brl(amount)})")

        with self.db.transaction():
            self.db.apply_balance_delta(from_account, -amount)
            self.db.apply_balance_delta(to_account, amount)
            self.db.create_internal_transaction(
                date=on,
                from_account=from_account,
                to_account=to_account,
                amount=amount,
                category=category,
                description=description,
                reference=reference,
            )
        logger.info(
            "transfer_recorded",
            source=from_account.value,
            destination=to_account.value,
            amount=str(amount),
            category=category.value,
        )
