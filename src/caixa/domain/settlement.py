"""Card settlement scheduling.

Card sales are paid out on the next business day: the day after the sale,
pushed forward past weekends and holidays. The acquirer keeps a fee that
depends on the payment method and the card brand.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable

from caixa.domain.entities import CardBrand, PaymentMethod
from caixa.domain.errors import (
    SettlementDateUnresolvedError,
    ValidationError,
    settlement_unresolved,
)
from caixa.utils.amount_parser import to_cents
from caixa.utils.dates import add_days, next_business_day

HolidayPredicate = Callable[[date], bool]

CARD_FEE_RATES: dict[PaymentMethod, dict[CardBrand, Decimal]] = {
    PaymentMethod.CREDIT: {
        CardBrand.VISA_MASTER: Decimal("0.0315"),
        CardBrand.ELO_AMEX: Decimal("0.0491"),
    },
    PaymentMethod.DEBIT: {
        CardBrand.VISA_MASTER: Decimal("0.0137"),
        CardBrand.ELO_AMEX: Decimal("0.0258"),
    },
}

DEFAULT_MAX_ATTEMPTS = 30


def no_holidays(day: date) -> bool:
    return False


def fee_rate(method: PaymentMethod, brand: CardBrand) -> Decimal:
    """Look up the fee rate for a card payment.

    Raises:
        ValidationError: If the method is not a card method
    """
    try:
        return CARD_FEE_RATES[PaymentMethod(method)][CardBrand(brand)]
    except (KeyError, ValueError):
        raise ValidationError(
            f"No card fee for payment method '{method}' and brand '{brand}'"
        ) from None


def compute_fee(amount: Decimal, rate: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(fee, net)`` for a gross amount.

    The fee is rounded to centavos and the net is derived from it, so
    ``fee + net == amount`` holds exactly.
    """
    amount = to_cents(amount)
    fee = to_cents(amount * rate)
    return fee, amount - fee


def settlement_date(
    sale_date: date,
    is_holiday: HolidayPredicate = no_holidays,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> date:
    """Return the first business day strictly after ``sale_date``.

    Raises:
        SettlementDateUnresolvedError: If every candidate within ``max_attempts``
            advances is a weekend or holiday
    """
    # The day after the sale plus at most max_attempts further days
    limit = add_days(sale_date, max_attempts + 1)
    candidate = next_business_day(sale_date)
    while candidate <= limit and is_holiday(candidate):
        candidate = next_business_day(candidate)
    if candidate > limit:
        raise SettlementDateUnresolvedError(settlement_unresolved(sale_date, max_attempts))
    return candidate


@dataclass(frozen=True)
class LiquidationPlan:
    """Everything needed to persist the settlement of one card sale."""

    sale_date: date
    sale_amount: Decimal
    payment_method: PaymentMethod
    card_brand: CardBrand
    fee_rate: Decimal
    fee_amount: Decimal
    net_amount: Decimal
    settlement_date: date


class SettlementScheduler:
    """Computes fee, net amount and settlement date for card sales.

    The plan is computed once when the sale is recorded; later changes to the
    holiday calendar do not move settlements that are already scheduled.
    """

    def __init__(
        self,
        is_holiday: HolidayPredicate = no_holidays,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.is_holiday = is_holiday
        self.max_attempts = max_attempts

    def schedule(
        self, sale_date: date, amount: Decimal, method: PaymentMethod, brand: CardBrand
    ) -> LiquidationPlan:
        """Build the liquidation plan for a card sale."""
        method = PaymentMethod(method)
        brand = CardBrand(brand)
        rate = fee_rate(method, brand)
        fee, net = compute_fee(amount, rate)
        return LiquidationPlan(
            sale_date=sale_date,
            sale_amount=to_cents(amount),
            payment_method=method,
            card_brand=brand,
            fee_rate=rate,
            fee_amount=fee,
            net_amount=net,
            settlement_date=settlement_date(sale_date, self.is_holiday, self.max_attempts),
        )
