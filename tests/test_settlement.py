"""Tests for card fees and settlement dates."""

import pytest
from datetime import date
from decimal import Decimal

from caixa.domain.entities import CardBrand, PaymentMethod
from caixa.domain.errors import SettlementDateUnresolvedError, ValidationError
from caixa.domain.settlement import (
    SettlementScheduler,
    compute_fee,
    fee_rate,
    settlement_date,
)
from caixa.utils.dates import add_days, next_business_day


@pytest.mark.parametrize(
    "method, brand, rate",
    [
        (PaymentMethod.CREDIT, CardBrand.VISA_MASTER, Decimal("0.0315")),
        (PaymentMethod.CREDIT, CardBrand.ELO_AMEX, Decimal("0.0491")),
        (PaymentMethod.DEBIT, CardBrand.VISA_MASTER, Decimal("0.0137")),
        (PaymentMethod.DEBIT, CardBrand.ELO_AMEX, Decimal("0.0258")),
    ],
)
def test_fee_table(method, brand, rate):
    """Test the fee rate for each method and brand."""
    assert fee_rate(method, brand) == rate
    assert fee_rate(method.value, brand.value) == rate


def test_fee_rate_rejects_non_card_method():
    """Test cash has no card fee."""
    with pytest.raises(ValidationError):
        fee_rate(PaymentMethod.CASH, CardBrand.VISA_MASTER)


def test_compute_fee_rounds_and_sums_to_gross():
    """Test fee rounding keeps fee + net equal to the gross amount."""
    fee, net = compute_fee(Decimal("150.00"), Decimal("0.0315"))
    assert fee == Decimal("4.73")
    assert net == Decimal("145.27")

    fee, net = compute_fee(Decimal("33.33"), Decimal("0.0491"))
    assert fee + net == Decimal("33.33")


def test_settlement_midweek():
    """Test a Wednesday sale settles on Thursday."""
    assert settlement_date(date(2025, 11, 5)) == date(2025, 11, 6)


def test_settlement_friday_goes_to_monday():
    """Test weekends are skipped."""
    assert settlement_date(date(2025, 11, 7)) == date(2025, 11, 10)
    assert settlement_date(date(2025, 11, 8)) == date(2025, 11, 10)


def test_settlement_skips_holiday():
    """Test a holiday the day after the sale pushes settlement forward."""
    holidays = {date(2025, 11, 20)}
    # Wednesday sale, Thursday holiday
    assert settlement_date(date(2025, 11, 19), holidays.__contains__) == date(2025, 11, 21)


def test_settlement_holiday_before_weekend():
    """Test a Friday holiday pushes a Thursday sale to Monday."""
    holidays = {date(2025, 11, 21)}
    assert settlement_date(date(2025, 11, 20), holidays.__contains__) == date(2025, 11, 24)


def test_settlement_unresolved():
    """Test an all-holiday calendar gives up after the attempt limit."""
    with pytest.raises(SettlementDateUnresolvedError):
        settlement_date(date(2025, 11, 5), lambda day: True, max_attempts=30)


def test_settlement_attempt_limit_is_configurable():
    """Test a short limit fails where the default would succeed."""
    holidays = {date(2025, 11, 6), date(2025, 11, 7)}
    with pytest.raises(SettlementDateUnresolvedError):
        settlement_date(date(2025, 11, 5), holidays.__contains__, max_attempts=2)
    assert settlement_date(date(2025, 11, 5), holidays.__contains__) == date(2025, 11, 10)


def test_settlement_without_holidays_is_next_business_day():
    """Test that with no holidays the settlement day is the next weekday."""
    day = date(2025, 10, 27)
    while day <= date(2025, 12, 7):
        assert settlement_date(day) == next_business_day(day)
        day = add_days(day, 1)


def test_settlement_with_no_extra_attempts():
    """Test max_attempts=0 only accepts the day right after the sale."""
    assert settlement_date(date(2025, 11, 5), max_attempts=0) == date(2025, 11, 6)
    with pytest.raises(SettlementDateUnresolvedError):
        settlement_date(date(2025, 11, 7), max_attempts=0)


def test_scheduler_builds_plan():
    """Test the scheduler combines fee and settlement date."""
    plan = SettlementScheduler().schedule(
        date(2025, 11, 7), Decimal("200.00"), PaymentMethod.DEBIT, CardBrand.ELO_AMEX
    )
    assert plan.fee_rate == Decimal("0.0258")
    assert plan.fee_amount == Decimal("5.16")
    assert plan.net_amount == Decimal("194.84")
    assert plan.settlement_date == date(2025, 11, 10)
    assert plan.sale_amount == Decimal("200.00")
