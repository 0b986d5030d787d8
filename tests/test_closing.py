"""Tests for end-of-day allocation."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from caixa.domain.closing import EndOfDayService
from caixa.domain.entities import PendingType, TransactionCategory
from caixa.domain.errors import ConflictError, StorageFailure, ValidationError
from caixa.config import LedgerSettings

DAY = date(2025, 11, 5)


def test_revenue_sums_sales_of_the_day(end_of_day_service, sale_service):
    """Test revenue counts every sale made on the day, cards included."""
    sale_service.add_sale(date=DAY, amount=Decimal("100"), payment_method="cash")
    sale_service.add_sale(date=DAY, amount=Decimal("50"), payment_method="pix")
    sale_service.add_sale(date=DAY, amount=Decimal("30"), payment_method="debit", card_brand="visa_master")
    sale_service.add_sale(date=date(2025, 11, 4), amount=Decimal("999"), payment_method="cash")

    revenue = end_of_day_service.get_revenue(DAY)
    assert revenue.sales == Decimal("180.00")
    assert revenue.receivables == Decimal("0.00")
    assert revenue.card_settlements == Decimal("0.00")


def test_revenue_includes_settlements_and_receivables(end_of_day_service, sale_service, bill_service):
    """Test revenue adds yesterday's card sales settling today and paid receivables due today."""
    sale_service.add_sale(
        date=date(2025, 11, 4), amount=Decimal("100"), payment_method="credit", card_brand="visa_master"
    )
    bill_id = bill_service.add_bill(
        bill_type="receivable", amount=Decimal("200"), description="Evento", due_date=DAY
    )
    bill_service.pay_bill(bill_id, account="pix", paid_date=DAY)
    # Still pending, not counted
    bill_service.add_bill(bill_type="receivable", amount=Decimal("70"), description="Fiado", due_date=DAY)

    revenue = end_of_day_service.get_revenue(DAY)
    assert revenue.card_settlements == Decimal("96.85")
    assert revenue.receivables == Decimal("200.00")
    assert revenue.total == Decimal("296.85")


def test_full_allocation(end_of_day_service, sale_service, balances, transaction_service):
    """Test every target is met when accounts have funds."""
    sale_service.add_sale(date=DAY, amount=Decimal("1000"), payment_method="pix")
    sale_service.add_sale(date=DAY, amount=Decimal("200"), payment_method="cash")

    report = end_of_day_service.execute_end_of_day(DAY)

    assert report.closed
    assert report.revenue.total == Decimal("1200.00")
    assert [o.target for o in report.outcomes] == [
        Decimal("240.00"),
        Decimal("120.00"),
        Decimal("130.00"),
    ]
    assert all(o.fully_funded for o in report.outcomes)
    assert report.total_pending == Decimal("0.00")

    assert balances() == {
        "cash": Decimal("70.00"),
        "pix": Decimal("640.00"),
        "investment": Decimal("240.00"),
        "debt_payoff": Decimal("120.00"),
        "payroll_reserve": Decimal("130.00"),
    }
    categories = [t.category for t in transaction_service.list_transactions(start_date=DAY)][-3:]
    assert categories == [
        TransactionCategory.ALLOCATION_20,
        TransactionCategory.ALLOCATION_10,
        TransactionCategory.PAYROLL_RESERVE,
    ]


def test_partial_allocation_creates_pendings(
    end_of_day_service, sale_service, account_service, pending_service, balances
):
    """Test R$1000 of revenue against R$150 in PIX."""
    sale_service.add_sale(date=DAY, amount=Decimal("1000"), payment_method="cash")
    account_service.set_balance("pix", Decimal("150.00"), on=DAY)

    report = end_of_day_service.execute_end_of_day(DAY)

    inv, debt, payroll = report.outcomes
    assert (inv.target, inv.transferred, inv.shortfall) == (
        Decimal("200.00"),
        Decimal("150.00"),
        Decimal("50.00"),
    )
    assert (debt.target, debt.transferred, debt.shortfall) == (
        Decimal("100.00"),
        Decimal("0.00"),
        Decimal("100.00"),
    )
    assert payroll.fully_funded

    assert balances() == {
        "cash": Decimal("870.00"),
        "pix": Decimal("0.00"),
        "investment": Decimal("150.00"),
        "debt_payoff": Decimal("0.00"),
        "payroll_reserve": Decimal("130.00"),
    }
    pendings = pending_service.list_pendings()
    assert [(p.pending_type, p.amount) for p in pendings] == [
        (PendingType.ALLOCATION_20, Decimal("50.00")),
        (PendingType.ALLOCATION_10, Decimal("100.00")),
    ]
    assert all(p.date == DAY for p in pendings)


def test_allocations_run_in_order(end_of_day_service, sale_service, account_service):
    """Test the 20% step drains PIX before the 10% step reads it."""
    sale_service.add_sale(date=DAY, amount=Decimal("1000"), payment_method="cash")
    account_service.set_balance("pix", Decimal("250.00"), on=DAY)

    inv, debt, _ = end_of_day_service.execute_end_of_day(DAY).outcomes
    assert inv.transferred == Decimal("200.00")
    assert debt.transferred == Decimal("50.00")
    assert debt.shortfall == Decimal("50.00")


def test_empty_cash_drawer_pends_payroll(end_of_day_service, sale_service, pending_service):
    """Test the payroll reserve is pending when cash is empty."""
    sale_service.add_sale(date=DAY, amount=Decimal("500"), payment_method="pix")

    report = end_of_day_service.execute_end_of_day(DAY)
    assert report.outcomes[2].shortfall == Decimal("130.00")
    assert [p.pending_type for p in pending_service.list_pendings()] == [PendingType.PAYROLL_RESERVE]


def test_zero_revenue_is_noop(end_of_day_service, account_service, balances, transaction_service):
    """Test a day without revenue moves nothing and stays open."""
    account_service.set_balance("cash", Decimal("500"), on=date(2025, 11, 1))

    report = end_of_day_service.execute_end_of_day(DAY)

    assert not report.closed
    assert report.outcomes == []
    assert balances()["cash"] == Decimal("500.00")
    assert not end_of_day_service.is_closed(DAY)
    assert len(transaction_service.list_transactions()) == 1


def test_closing_twice_conflicts(end_of_day_service, sale_service, balances):
    """Test a day can only be closed once."""
    sale_service.add_sale(date=DAY, amount=Decimal("1000"), payment_method="pix")
    end_of_day_service.execute_end_of_day(DAY)
    after_first = balances()

    with pytest.raises(ConflictError, match="already closed"):
        end_of_day_service.execute_end_of_day(DAY)
    assert balances() == after_first
    assert [c.date for c in end_of_day_service.list_closings()] == [DAY]
    assert end_of_day_service.list_closings()[0].total_revenue == Decimal("1000.00")


def test_invalid_closing_date(end_of_day_service):
    """Test a non-date is rejected."""
    with pytest.raises(ValidationError):
        end_of_day_service.execute_end_of_day("2025-11-05")
    with pytest.raises(ValidationError):
        end_of_day_service.execute_end_of_day(datetime(2025, 11, 5, 22, 0))
    assert not end_of_day_service.is_closed(date(2025, 11, 5))


def test_failed_closing_rolls_back(temp_db, end_of_day_service, sale_service, balances, monkeypatch):
    """Test a storage failure part way through leaves no partial allocation."""
    sale_service.add_sale(date=DAY, amount=Decimal("1000"), payment_method="pix")
    before = balances()

    def fail(*args, **kwargs):
        raise StorageFailure("disk full")

    monkeypatch.setattr(temp_db, "create_day_closing", fail)
    with pytest.raises(StorageFailure):
        end_of_day_service.execute_end_of_day(DAY)

    assert balances() == before
    assert temp_db.list_pendings() == []
    monkeypatch.undo()
    assert not end_of_day_service.is_closed(DAY)


def test_custom_policy(temp_db, sale_service, balances):
    """Test allocation rates and payroll amount come from settings."""
    settings = LedgerSettings(
        _env_file=None,
        investment_rate=Decimal("0.05"),
        debt_payoff_rate=Decimal("0"),
        payroll_reserve_amount=Decimal("50.00"),
    )
    sale_service.add_sale(date=DAY, amount=Decimal("400"), payment_method="pix")
    sale_service.add_sale(date=DAY, amount=Decimal("100"), payment_method="cash")

    report = EndOfDayService(temp_db, settings).execute_end_of_day(DAY)

    assert [o.target for o in report.outcomes] == [Decimal("25.00"), Decimal("0.00"), Decimal("50.00")]
    assert balances()["investment"] == Decimal("25.00")
    assert balances()["debt_payoff"] == Decimal("0.00")
    assert balances()["payroll_reserve"] == Decimal("50.00")
