"""Domain model entities for caixa.

These are pure data classes representing business concepts, independent of
database schema. Enumerations are closed sets; persisted values are their
string values.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountId(str, Enum):
    """The five fixed ledger accounts."""

    CASH = "cash"
    PIX = "pix"
    INVESTMENT = "investment"
    DEBT_PAYOFF = "debt_payoff"
    PAYROLL_RESERVE = "payroll_reserve"


ACCOUNT_NAMES = {
    AccountId.CASH: "Caixa Dinheiro",
    AccountId.PIX: "Caixa PIX",
    AccountId.INVESTMENT: "Investimento (20%)",
    AccountId.DEBT_PAYOFF: "Quitação de Dívidas (10%)",
    AccountId.PAYROLL_RESERVE: "Reserva de Folha",
}


class PaymentMethod(str, Enum):
    CASH = "cash"
    PIX = "pix"
    CREDIT = "credit"
    DEBIT = "debit"

    @property
    def is_card(self) -> bool:
        return self in (PaymentMethod.CREDIT, PaymentMethod.DEBIT)


class CardBrand(str, Enum):
    VISA_MASTER = "visa_master"
    ELO_AMEX = "elo_amex"


class TransactionCategory(str, Enum):
    ALLOCATION_20 = "allocation_20"
    ALLOCATION_10 = "allocation_10"
    PAYROLL_RESERVE = "payroll_reserve"
    CARD_SETTLEMENT = "card_settlement"
    EXPENSE = "expense"
    SALE = "sale"
    BALANCE_ADJUSTMENT = "balance_adjustment"


class PendingType(str, Enum):
    """Allocation kinds that can fall short, in compensation priority order."""

    ALLOCATION_20 = "allocation_20"
    ALLOCATION_10 = "allocation_10"
    PAYROLL_RESERVE = "payroll_reserve"

    @property
    def priority(self) -> int:
        return list(PendingType).index(self)


class BillType(str, Enum):
    PAYABLE = "payable"
    RECEIVABLE = "receivable"


class BillStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    # Display only; never persisted
    OVERDUE = "overdue"


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: AccountId
    name: str
    balance: Decimal


@dataclass(frozen=True)
class Sale:
    """Sale domain entity."""

    id: int
    date: date
    amount: Decimal
    payment_method: PaymentMethod
    card_brand: Optional[CardBrand]
    description: Optional[str]
    sale_type: Optional[str]
    net_amount: Optional[Decimal]
    liquidated: bool
    liquidation_date: Optional[date]
    created_at: datetime


@dataclass(frozen=True)
class Expense:
    """Expense domain entity."""

    id: int
    date: date
    amount: Decimal
    category: str
    account: AccountId
    description: str
    created_at: datetime

    @property
    def payment_method(self) -> PaymentMethod:
        """How the expense was paid: cash from the drawer, PIX from any other account."""
        return PaymentMethod.CASH if self.account == AccountId.CASH else PaymentMethod.PIX


@dataclass(frozen=True)
class Bill:
    """Bill (payable or receivable) domain entity.

    ``amount`` is what is still owed; ``paid_amount`` accumulates partial
    payments so that ``amount + paid_amount == original_amount``.
    """

    id: int
    bill_type: BillType
    amount: Decimal
    original_amount: Decimal
    description: str
    due_date: date
    status: BillStatus
    category: Optional[str]
    counterparty: Optional[str]
    paid_date: Optional[date]
    paid_account: Optional[AccountId]
    paid_amount: Decimal


@dataclass(frozen=True)
class CardLiquidation:
    """Deferred settlement of one card sale."""

    id: int
    sale_id: int
    sale_date: date
    sale_amount: Decimal
    card_brand: CardBrand
    payment_method: PaymentMethod
    fee_rate: Decimal
    fee_amount: Decimal
    net_amount: Decimal
    settlement_date: date
    liquidated: bool
    liquidated_on: Optional[date]

    @property
    def gross_amount(self) -> Decimal:
        return self.net_amount + self.fee_amount


@dataclass(frozen=True)
class InternalTransaction:
    """Append-only audit record of a money movement."""

    id: int
    date: date
    from_account: AccountId
    to_account: AccountId
    amount: Decimal
    category: TransactionCategory
    description: str
    reference: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Pending:
    """Allocation shortfall waiting to be compensated."""

    id: int
    pending_type: PendingType
    amount: Decimal
    date: date
    description: str


@dataclass(frozen=True)
class Holiday:
    """Non-business day on which card settlements do not happen."""

    id: int
    date: date
    name: str


@dataclass(frozen=True)
class DayClosing:
    """Completion marker written when end of day runs for a date."""

    id: int
    date: date
    total_revenue: Decimal
    closed_at: datetime


@dataclass(frozen=True)
class PeriodSummary:
    """Sales, expenses and open bills for a reporting period.

    Bill totals are what is still owed on pending bills, whatever their due
    date; they are not limited to the period.
    """

    start_date: date
    end_date: date
    sales_by_method: dict[PaymentMethod, Decimal]
    expenses_by_method: dict[PaymentMethod, Decimal]
    expenses_by_category: dict[str, Decimal]
    open_payables: Decimal
    open_receivables: Decimal

    @property
    def total_sales(self) -> Decimal:
        return sum(self.sales_by_method.values(), Decimal("0.00"))

    @property
    def total_expenses(self) -> Decimal:
        return sum(self.expenses_by_method.values(), Decimal("0.00"))

    @property
    def net_result(self) -> Decimal:
        """Sales minus expenses, card fees included once liquidated."""
        return self.total_sales - self.total_expenses
