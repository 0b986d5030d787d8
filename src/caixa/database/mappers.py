"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: the ORM stores enumerations as
plain strings, the domain works with the closed Enum types.
"""

from decimal import Decimal

from caixa.domain import entities as domain
from caixa.database.models import (
    Account as ORMAccount,
    Sale as ORMSale,
    Expense as ORMExpense,
    Bill as ORMBill,
    CardLiquidation as ORMCardLiquidation,
    InternalTransaction as ORMInternalTransaction,
    Pending as ORMPending,
    Holiday as ORMHoliday,
    DayClosing as ORMDayClosing,
)


def _money(value) -> Decimal:
    return Decimal(value if value is not None else 0).quantize(Decimal("0.01"))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=domain.AccountId(orm_account.id),
        name=orm_account.name,
        balance=_money(orm_account.balance),
    )


def sale_to_domain(orm_sale: ORMSale) -> domain.Sale:
    """Convert SQLAlchemy Sale model to domain Sale entity."""
    return domain.Sale(
        id=orm_sale.id,
        date=orm_sale.date,
        amount=_money(orm_sale.amount),
        payment_method=domain.PaymentMethod(orm_sale.payment_method),
        card_brand=domain.CardBrand(orm_sale.card_brand) if orm_sale.card_brand else None,
        description=orm_sale.description,
        sale_type=orm_sale.sale_type,
        net_amount=_money(orm_sale.net_amount) if orm_sale.net_amount is not None else None,
        liquidated=orm_sale.liquidated,
        liquidation_date=orm_sale.liquidation_date,
        created_at=orm_sale.created_at,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        date=orm_expense.date,
        amount=_money(orm_expense.amount),
        category=orm_expense.category,
        account=domain.AccountId(orm_expense.account_id),
        description=orm_expense.description,
        created_at=orm_expense.created_at,
    )


def bill_to_domain(orm_bill: ORMBill) -> domain.Bill:
    """Convert SQLAlchemy Bill model to domain Bill entity."""
    return domain.Bill(
        id=orm_bill.id,
        bill_type=domain.BillType(orm_bill.bill_type),
        amount=_money(orm_bill.amount),
        original_amount=_money(orm_bill.original_amount),
        description=orm_bill.description,
        due_date=orm_bill.due_date,
        status=domain.BillStatus(orm_bill.status),
        category=orm_bill.category,
        counterparty=orm_bill.counterparty,
        paid_date=orm_bill.paid_date,
        paid_account=domain.AccountId(orm_bill.paid_account_id) if orm_bill.paid_account_id else None,
        paid_amount=_money(orm_bill.paid_amount),
    )


def card_liquidation_to_domain(orm_liquidation: ORMCardLiquidation) -> domain.CardLiquidation:
    """Convert SQLAlchemy CardLiquidation model to domain CardLiquidation entity."""
    return domain.CardLiquidation(
        id=orm_liquidation.id,
        sale_id=orm_liquidation.sale_id,
        sale_date=orm_liquidation.sale_date,
        sale_amount=_money(orm_liquidation.sale_amount),
        card_brand=domain.CardBrand(orm_liquidation.card_brand),
        payment_method=domain.PaymentMethod(orm_liquidation.payment_method),
        fee_rate=Decimal(orm_liquidation.fee_rate).quantize(Decimal("0.0001")),
        fee_amount=_money(orm_liquidation.fee_amount),
        net_amount=_money(orm_liquidation.net_amount),
        settlement_date=orm_liquidation.settlement_date,
        liquidated=orm_liquidation.liquidated,
        liquidated_on=orm_liquidation.liquidated_on,
    )


def transaction_to_domain(orm_transaction: ORMInternalTransaction) -> domain.InternalTransaction:
    """Convert SQLAlchemy InternalTransaction model to domain entity."""
    return domain.InternalTransaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        from_account=domain.AccountId(orm_transaction.from_account_id),
        to_account=domain.AccountId(orm_transaction.to_account_id),
        amount=_money(orm_transaction.amount),
        category=domain.TransactionCategory(orm_transaction.category),
        description=orm_transaction.description,
        reference=orm_transaction.reference,
        created_at=orm_transaction.created_at,
    )


def pending_to_domain(orm_pending: ORMPending) -> domain.Pending:
    """Convert SQLAlchemy Pending model to domain Pending entity."""
    return domain.Pending(
        id=orm_pending.id,
        pending_type=domain.PendingType(orm_pending.pending_type),
        amount=_money(orm_pending.amount),
        date=orm_pending.date,
        description=orm_pending.description,
    )


def holiday_to_domain(orm_holiday: ORMHoliday) -> domain.Holiday:
    """Convert SQLAlchemy Holiday model to domain Holiday entity."""
    return domain.Holiday(id=orm_holiday.id, date=orm_holiday.date, name=orm_holiday.name)


def day_closing_to_domain(orm_closing: ORMDayClosing) -> domain.DayClosing:
    """Convert SQLAlchemy DayClosing model to domain DayClosing entity."""
    return domain.DayClosing(
        id=orm_closing.id,
        date=orm_closing.date,
        total_revenue=_money(orm_closing.total_revenue),
        closed_at=orm_closing.closed_at,
    )
