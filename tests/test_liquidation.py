"""Tests for card liquidation processing."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from caixa.domain.entities import AccountId, PendingType, TransactionCategory
from caixa.domain.errors import StorageFailure, ValidationError
from caixa.domain.liquidation import LiquidationService
from caixa.config import LedgerSettings


def _card_sale(sale_service, day, amount="100", method="credit", brand="visa_master"):
    return sale_service.add_sale(
        date=day, amount=Decimal(amount), payment_method=method, card_brand=brand
    )


def test_liquidation_credits_net_to_pix(
    liquidation_service, sale_service, expense_service, transaction_service, balances
):
    """Test a matured card sale lands in PIX as gross credit plus fee expense."""
    sale_id = _card_sale(sale_service, date(2025, 11, 4))

    run = liquidation_service.process_liquidations(date(2025, 11, 5))

    assert len(run.processed) == 1
    assert run.failed == {}
    assert run.gross_total == Decimal("100.00")
    assert run.fee_total == Decimal("3.15")
    assert run.net_total == Decimal("96.85")
    assert balances()["pix"] == Decimal("96.85")

    settlement = transaction_service.list_transactions(category=TransactionCategory.CARD_SETTLEMENT)
    assert len(settlement) == 1
    assert settlement[0].amount == Decimal("100.00")
    assert settlement[0].to_account == AccountId.PIX
    assert settlement[0].reference == f"sale:{sale_id}"

    fees = expense_service.list_expenses()
    assert len(fees) == 1
    assert fees[0].amount == Decimal("3.15")
    assert fees[0].category == "card_settlement"
    assert fees[0].account == AccountId.PIX

    sale = sale_service.get_sale(sale_id)
    assert sale.liquidated
    assert sale.liquidation_date == date(2025, 11, 5)


def test_nothing_due_before_settlement_date(liquidation_service, sale_service, balances):
    """Test a sale is not liquidated on its own day."""
    _card_sale(sale_service, date(2025, 11, 5))

    run = liquidation_service.process_liquidations(date(2025, 11, 5))

    assert run.processed == []
    assert balances()["pix"] == Decimal("0.00")


def test_processing_twice_is_idempotent(liquidation_service, sale_service, balances):
    """Test a liquidation is booked only once."""
    _card_sale(sale_service, date(2025, 11, 4))
    liquidation_service.process_liquidations(date(2025, 11, 5))

    run = liquidation_service.process_liquidations(date(2025, 11, 5))

    assert run.processed == []
    assert balances()["pix"] == Decimal("96.85")


def test_catch_up_picks_up_missed_days(liquidation_service, sale_service, balances):
    """Test older settlements are liquidated when a run was skipped."""
    _card_sale(sale_service, date(2025, 11, 3))  # settles Tuesday 4th
    _card_sale(sale_service, date(2025, 11, 4), amount="200", method="debit")  # settles 5th

    run = liquidation_service.process_liquidations(date(2025, 11, 5))

    assert len(run.processed) == 2
    assert balances()["pix"] == Decimal("96.85") + Decimal("197.26")


def test_weekend_sale_settles_monday(liquidation_service, sale_service):
    """Test a Friday sale is liquidated by Monday's run."""
    _card_sale(sale_service, date(2025, 11, 7))
    assert liquidation_service.process_liquidations(date(2025, 11, 9)).processed == []
    assert len(liquidation_service.process_liquidations(date(2025, 11, 10)).processed) == 1


def test_strict_window_only_matches_yesterdays_sales(temp_db, sale_service, clock):
    """Test strict mode only liquidates sales made the day before the run."""
    strict = LiquidationService(
        temp_db, LedgerSettings(_env_file=None, strict_liquidation_window=True), clock=clock
    )
    _card_sale(sale_service, date(2025, 11, 3))
    _card_sale(sale_service, date(2025, 11, 4))
    friday = _card_sale(sale_service, date(2025, 11, 7))

    run = strict.process_liquidations(date(2025, 11, 5))
    assert [liq.sale_date for liq in run.processed] == [date(2025, 11, 4)]

    # Friday's sale settles Monday but was not made on Sunday
    assert strict.process_liquidations(date(2025, 11, 10)).processed == []
    assert not sale_service.get_sale(friday).liquidated


def test_failure_does_not_stop_other_liquidations(
    temp_db, liquidation_service, sale_service, balances, monkeypatch
):
    """Test one failing liquidation is rolled back and the rest still run."""
    broken = _card_sale(sale_service, date(2025, 11, 4))
    _card_sale(sale_service, date(2025, 11, 4), amount="50", method="debit")

    original = temp_db.mark_sale_liquidated

    def mark(sale_id, liquidation_date):
        if sale_id == broken:
            raise StorageFailure("locked")
        original(sale_id, liquidation_date)

    monkeypatch.setattr(temp_db, "mark_sale_liquidated", mark)

    run = liquidation_service.process_liquidations(date(2025, 11, 5))

    assert len(run.processed) == 1
    assert list(run.failed) == [temp_db.get_card_liquidation_for_sale(broken).id]
    assert "locked" in next(iter(run.failed.values()))
    # Only the debit sale (50 - 0.69) reached PIX
    assert balances()["pix"] == Decimal("49.31")
    assert not temp_db.get_card_liquidation_for_sale(broken).liquidated


def test_compensation_runs_after_liquidation(
    liquidation_service, sale_service, temp_db, pending_service, balances
):
    """Test pendings are compensated once liquidations fund PIX."""
    temp_db.create_pending(PendingType.ALLOCATION_20, Decimal("50.00"), date(2025, 11, 4), "Pendência")
    _card_sale(sale_service, date(2025, 11, 4))

    run = liquidation_service.process_liquidations(date(2025, 11, 5))

    assert [p.amount for p in run.compensated] == [Decimal("50.00")]
    assert pending_service.list_pendings() == []
    assert balances()["investment"] == Decimal("50.00")
    assert balances()["pix"] == Decimal("46.85")


def test_compensation_can_be_skipped(liquidation_service, sale_service, temp_db):
    """Test compensate=False leaves pendings alone."""
    temp_db.create_pending(PendingType.ALLOCATION_20, Decimal("50.00"), date(2025, 11, 4), "Pendência")
    _card_sale(sale_service, date(2025, 11, 4))

    run = liquidation_service.process_liquidations(date(2025, 11, 5), compensate=False)

    assert run.compensated == []
    assert len(temp_db.list_pendings()) == 1


def test_invalid_run_date(liquidation_service):
    """Test a non-date is rejected."""
    with pytest.raises(ValidationError):
        liquidation_service.process_liquidations("2025-11-05")
    with pytest.raises(ValidationError):
        liquidation_service.process_liquidations(datetime(2025, 11, 5, 8, 0))


def test_list_liquidations(liquidation_service, sale_service):
    """Test listing pending and processed liquidations."""
    _card_sale(sale_service, date(2025, 11, 4))
    _card_sale(sale_service, date(2025, 11, 5))
    liquidation_service.process_liquidations(date(2025, 11, 5))

    assert len(liquidation_service.list_liquidations()) == 2
    pending = liquidation_service.list_liquidations(liquidated=False)
    assert [liq.settlement_date for liq in pending] == [date(2025, 11, 6)]
