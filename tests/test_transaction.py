"""Tests for the transaction log and account statements."""

import pytest
from datetime import date
from decimal import Decimal

from caixa.domain.entities import AccountId, TransactionCategory
from caixa.domain.errors import UnknownAccountError, ValidationError
from caixa.domain.transaction import signed_effect


def test_record_rejects_negative_amount(transaction_service):
    """Test ordinary transactions cannot carry negative amounts."""
    with pytest.raises(ValidationError):
        transaction_service.record(
            date(2025, 11, 5), "cash", "cash", Decimal("-1"), TransactionCategory.SALE, "x"
        )


def test_record_allows_negative_adjustment(transaction_service):
    """Test an adjustment may carry a negative resulting balance."""
    txn_id = transaction_service.record(
        date(2025, 11, 5),
        "cash",
        "cash",
        Decimal("-20.00"),
        TransactionCategory.BALANCE_ADJUSTMENT,
        "Estorno",
    )
    assert transaction_service.list_transactions()[0].id == txn_id


def test_record_requires_description(transaction_service):
    """Test an empty description is rejected."""
    with pytest.raises(ValidationError):
        transaction_service.record(
            date(2025, 11, 5), "cash", "cash", Decimal("1"), TransactionCategory.SALE, ""
        )


def test_record_unknown_account(transaction_service):
    """Test unknown accounts are rejected."""
    with pytest.raises(UnknownAccountError):
        transaction_service.record(
            date(2025, 11, 5), "cash", "safe", Decimal("1"), TransactionCategory.SALE, "x"
        )


def test_list_filters(transaction_service, sale_service, expense_service):
    """Test filtering by account, category and date."""
    sale_service.add_sale(date=date(2025, 11, 4), amount=Decimal("10"), payment_method="cash")
    sale_service.add_sale(date=date(2025, 11, 5), amount=Decimal("20"), payment_method="pix")
    expense_service.add_expense(date=date(2025, 11, 5), amount=Decimal("5"), account="cash", description="x")

    assert len(transaction_service.list_transactions()) == 3
    assert len(transaction_service.list_transactions(account="cash")) == 2
    assert len(transaction_service.list_transactions(category=TransactionCategory.SALE)) == 2
    assert len(transaction_service.list_transactions(start_date=date(2025, 11, 5))) == 2


def test_signed_effect_directions(transaction_service, account_service):
    """Test how each kind of entry moves an account."""
    account_service.transfer(
        "pix", "investment", Decimal("10"), TransactionCategory.ALLOCATION_20, "t", on=date(2025, 11, 5)
    )
    transfer = transaction_service.list_transactions()[0]
    assert signed_effect(transfer, AccountId.PIX) == Decimal("-10.00")
    assert signed_effect(transfer, AccountId.INVESTMENT) == Decimal("10.00")
    assert signed_effect(transfer, AccountId.CASH) == Decimal("0.00")

    account_service.set_balance("cash", Decimal("5"))
    adjustment = transaction_service.list_transactions()[-1]
    assert signed_effect(adjustment, AccountId.CASH) is None
    assert signed_effect(adjustment, AccountId.PIX) == Decimal("0.00")


def test_statement_matches_balance(
    transaction_service,
    account_service,
    sale_service,
    expense_service,
    end_of_day_service,
    liquidation_service,
    pending_service,
):
    """Test replaying the log reproduces every account balance."""
    account_service.set_balance("pix", Decimal("150"), on=date(2025, 11, 3))
    sale_service.add_sale(date=date(2025, 11, 4), amount=Decimal("800"), payment_method="cash")
    sale_service.add_sale(
        date=date(2025, 11, 4), amount=Decimal("300"), payment_method="credit", card_brand="elo_amex"
    )
    expense_service.add_expense(
        date=date(2025, 11, 4), amount=Decimal("45"), account="pix", description="Verduras"
    )
    end_of_day_service.execute_end_of_day(date(2025, 11, 4))
    liquidation_service.process_liquidations(date(2025, 11, 5))
    removable = sale_service.add_sale(date=date(2025, 11, 5), amount=Decimal("12"), payment_method="cash")
    sale_service.delete_sale(removable)

    for account in account_service.list_accounts():
        lines = transaction_service.statement(account.id)
        final = lines[-1].balance if lines else Decimal("0.00")
        assert final == account.balance, account.id


def test_statement_running_balance(transaction_service, account_service, sale_service, expense_service):
    """Test a statement shows amounts and running balances in posting order."""
    account_service.set_balance("cash", Decimal("100"), on=date(2025, 11, 3))
    sale_service.add_sale(date=date(2025, 11, 4), amount=Decimal("50"), payment_method="cash")
    expense_service.add_expense(
        date=date(2025, 11, 4), amount=Decimal("30"), account="cash", description="Gás"
    )

    lines = transaction_service.statement("cash")

    assert [line.amount for line in lines] == [Decimal("100.00"), Decimal("50.00"), Decimal("-30.00")]
    assert [line.balance for line in lines] == [Decimal("100.00"), Decimal("150.00"), Decimal("120.00")]
    assert lines[0].is_adjustment


def test_statement_range_keeps_true_balance(transaction_service, account_service, sale_service):
    """Test a date range hides lines without resetting the running balance."""
    account_service.set_balance("pix", Decimal("100"), on=date(2025, 11, 1))
    sale_service.add_sale(date=date(2025, 11, 4), amount=Decimal("25"), payment_method="pix")

    lines = transaction_service.statement("pix", start_date=date(2025, 11, 2))

    assert len(lines) == 1
    assert lines[0].amount == Decimal("25.00")
    assert lines[0].balance == Decimal("125.00")
