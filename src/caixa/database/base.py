"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from caixa.domain.entities import (
    Account,
    AccountId,
    Bill,
    BillStatus,
    BillType,
    CardBrand,
    CardLiquidation,
    DayClosing,
    Expense,
    Holiday,
    InternalTransaction,
    PaymentMethod,
    Pending,
    PendingType,
    Sale,
    TransactionCategory,
)


class Database(ABC):
    """Abstract database interface for caixa.

    Balance changes must go through ``apply_balance_delta``, which the
    implementation performs as a single atomic increment. Multi-step domain
    operations wrap their writes in ``transaction()``; the unit of work is
    re-entrant and commits only when the outermost block exits cleanly.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema and seed the fixed accounts."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Return a unit of work: commit on success, roll back on any error."""
        pass

    # Account operations
    @abstractmethod
    def get_account(self, account_id: AccountId) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts in their fixed order."""
        pass

    @abstractmethod
    def apply_balance_delta(self, account_id: AccountId, delta: Decimal) -> None:
        """Atomically add ``delta`` to an account balance."""
        pass

    @abstractmethod
    def set_balance(self, account_id: AccountId, value: Decimal) -> None:
        """Overwrite an account balance."""
        pass

    # Sale operations
    @abstractmethod
    def create_sale(
        self,
        date: date,
        amount: Decimal,
        payment_method: PaymentMethod,
        card_brand: Optional[CardBrand] = None,
        description: Optional[str] = None,
        sale_type: Optional[str] = None,
    ) -> int:
        """Create a sale. Returns sale ID."""
        pass

    @abstractmethod
    def get_sale(self, sale_id: int) -> Optional[Sale]:
        """Get sale by ID."""
        pass

    @abstractmethod
    def list_sales(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> list[Sale]:
        """List sales with optional date range and payment method filters."""
        pass

    @abstractmethod
    def update_sale_net_amount(self, sale_id: int, net_amount: Decimal) -> None:
        """Store the fee-deducted amount of a card sale."""
        pass

    @abstractmethod
    def mark_sale_liquidated(self, sale_id: int, liquidation_date: date) -> None:
        """Flag a card sale as settled on the given date."""
        pass

    @abstractmethod
    def delete_sale(self, sale_id: int) -> None:
        """Delete a sale."""
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        date: date,
        amount: Decimal,
        category: str,
        account_id: AccountId,
        description: str,
    ) -> int:
        """Create an expense. Returns expense ID."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[AccountId] = None,
    ) -> list[Expense]:
        """List expenses with optional filters."""
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense."""
        pass

    # Bill operations
    @abstractmethod
    def create_bill(
        self,
        bill_type: BillType,
        amount: Decimal,
        description: str,
        due_date: date,
        category: Optional[str] = None,
        counterparty: Optional[str] = None,
    ) -> int:
        """Create a bill. Returns bill ID."""
        pass

    @abstractmethod
    def get_bill(self, bill_id: int) -> Optional[Bill]:
        """Get bill by ID."""
        pass

    @abstractmethod
    def list_bills(
        self,
        bill_type: Optional[BillType] = None,
        status: Optional[BillStatus] = None,
        due_start: Optional[date] = None,
        due_end: Optional[date] = None,
    ) -> list[Bill]:
        """List bills ordered by due date, with optional filters."""
        pass

    @abstractmethod
    def update_bill_payment(
        self,
        bill_id: int,
        amount: Decimal,
        paid_amount: Decimal,
        status: BillStatus,
        paid_date: date,
        paid_account: AccountId,
    ) -> None:
        """Record the outcome of a (partial) payment on a bill."""
        pass

    @abstractmethod
    def delete_bill(self, bill_id: int) -> None:
        """Delete a bill."""
        pass

    # Card liquidation operations
    @abstractmethod
    def create_card_liquidation(
        self,
        sale_id: int,
        sale_date: date,
        sale_amount: Decimal,
        card_brand: CardBrand,
        payment_method: PaymentMethod,
        fee_rate: Decimal,
        fee_amount: Decimal,
        net_amount: Decimal,
        settlement_date: date,
    ) -> int:
        """Create a card liquidation. Returns liquidation ID."""
        pass

    @abstractmethod
    def get_card_liquidation(self, liquidation_id: int) -> Optional[CardLiquidation]:
        """Get card liquidation by ID."""
        pass

    @abstractmethod
    def get_card_liquidation_for_sale(self, sale_id: int) -> Optional[CardLiquidation]:
        """Get the card liquidation created for a sale."""
        pass

    @abstractmethod
    def list_card_liquidations(
        self,
        settlement_date: Optional[date] = None,
        settlement_until: Optional[date] = None,
        sale_date: Optional[date] = None,
        liquidated: Optional[bool] = None,
    ) -> list[CardLiquidation]:
        """List card liquidations ordered by settlement date.

        Args:
            settlement_date: Only liquidations settling exactly on this date
            settlement_until: Only liquidations settling on or before this date
            sale_date: Only liquidations for sales made on this date
            liquidated: Filter on the liquidated flag
        """
        pass

    @abstractmethod
    def mark_card_liquidation_liquidated(self, liquidation_id: int, liquidated_on: date) -> None:
        """Flag a card liquidation as processed."""
        pass

    @abstractmethod
    def delete_card_liquidation(self, liquidation_id: int) -> None:
        """Delete a card liquidation."""
        pass

    # Internal transaction operations
    @abstractmethod
    def create_internal_transaction(
        self,
        date: date,
        from_account: AccountId,
        to_account: AccountId,
        amount: Decimal,
        category: TransactionCategory,
        description: str,
        reference: Optional[str] = None,
    ) -> int:
        """Append an audit transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def list_internal_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[AccountId] = None,
        category: Optional[TransactionCategory] = None,
    ) -> list[InternalTransaction]:
        """List transactions in insertion order.

        Args:
            account_id: Transactions where the account is source or destination
        """
        pass

    # Pending operations
    @abstractmethod
    def create_pending(
        self, pending_type: PendingType, amount: Decimal, date: date, description: str
    ) -> int:
        """Create a pending. Returns pending ID."""
        pass

    @abstractmethod
    def list_pendings(self) -> list[Pending]:
        """List all outstanding pendings."""
        pass

    @abstractmethod
    def delete_pending(self, pending_id: int) -> None:
        """Delete a retired pending."""
        pass

    # Holiday operations
    @abstractmethod
    def create_holiday(self, date: date, name: str) -> int:
        """Create a holiday. Returns holiday ID."""
        pass

    @abstractmethod
    def get_holiday(self, date: date) -> Optional[Holiday]:
        """Get the holiday registered on a date."""
        pass

    @abstractmethod
    def list_holidays(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[Holiday]:
        """List holidays ordered by date."""
        pass

    @abstractmethod
    def delete_holiday(self, holiday_id: int) -> None:
        """Delete a holiday."""
        pass

    # Day closing operations
    @abstractmethod
    def create_day_closing(self, date: date, total_revenue: Decimal) -> int:
        """Record that end of day ran for a date. Returns closing ID."""
        pass

    @abstractmethod
    def get_day_closing(self, date: date) -> Optional[DayClosing]:
        """Get the closing marker for a date."""
        pass

    @abstractmethod
    def list_day_closings(self) -> list[DayClosing]:
        """List closing markers ordered by date."""
        pass
