"""End-of-day allocation domain service.

At close of day a share of the day's revenue is moved out of the PIX account
into the investment and debt payoff accounts, and a fixed amount is moved out
of the cash drawer into the payroll reserve. When a source account cannot
cover its target, whatever is available moves and the shortfall is recorded
as a pending, to be compensated later (see PendingService).

The steps run in a fixed order and each one reads the balance left by the
previous one: the 20% allocation drains PIX before the 10% allocation looks
at it.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from caixa.config import LedgerSettings
from caixa.database.base import Database
from caixa.domain.account import AccountService
from caixa.domain.entities import (
    AccountId,
    BillStatus,
    BillType,
    DayClosing,
    PendingType,
    TransactionCategory,
)
from caixa.domain.errors import ConflictError, ValidationError, day_already_closed
from caixa.utils.amount_parser import format_brl, to_cents
from caixa.utils.dates import add_days, is_calendar_day

logger = structlog.get_logger()

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class AllocationRule:
    """One end-of-day allocation step."""

    pending_type: PendingType
    category: TransactionCategory
    source: AccountId
    destination: AccountId
    label: str


@dataclass(frozen=True)
class RevenueBreakdown:
    """Revenue the allocations are computed on."""

    sales: Decimal
    receivables: Decimal
    card_settlements: Decimal

    @property
    def total(self) -> Decimal:
        return self.sales + self.receivables + self.card_settlements


@dataclass(frozen=True)
class AllocationOutcome:
    """What one allocation step moved and what it left pending."""

    pending_type: PendingType
    target: Decimal
    transferred: Decimal
    shortfall: Decimal

    @property
    def fully_funded(self) -> bool:
        return self.shortfall == 0


@dataclass(frozen=True)
class ClosingReport:
    date: date
    revenue: RevenueBreakdown
    outcomes: list[AllocationOutcome] = field(default_factory=list)

    @property
    def closed(self) -> bool:
        return bool(self.outcomes)

    @property
    def total_pending(self) -> Decimal:
        return sum((o.shortfall for o in self.outcomes), ZERO)


class EndOfDayService:
    """Service that closes a business day."""

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        """Initialize end-of-day service.

        Args:
            db: Database instance
            settings: Allocation policy; defaults to LedgerSettings()
        """
        self.db = db
        self.settings = settings or LedgerSettings()
        self.accounts = AccountService(db)

    def rules(self) -> list[tuple[AllocationRule, Decimal]]:
        """Allocation rules in execution order, with their rate or fixed amount."""
        inv_pct = self.settings.investment_rate * 100
        debt_pct = self.settings.debt_payoff_rate * 100
        return [
            (
                AllocationRule(
                    PendingType.ALLOCATION_20,
                    TransactionCategory.ALLOCATION_20,
                    AccountId.PIX,
                    AccountId.INVESTMENT,
                    f"alocação {inv_pct.normalize():f}% investimento",
                ),
                self.settings.investment_rate,
            ),
            (
                AllocationRule(
                    PendingType.ALLOCATION_10,
                    TransactionCategory.ALLOCATION_10,
                    AccountId.PIX,
                    AccountId.DEBT_PAYOFF,
                    f"alocação {debt_pct.normalize():f}% quitação de dívidas",
                ),
                self.settings.debt_payoff_rate,
            ),
            (
                AllocationRule(
                    PendingType.PAYROLL_RESERVE,
                    TransactionCategory.PAYROLL_RESERVE,
                    AccountId.CASH,
                    AccountId.PAYROLL_RESERVE,
                    "reserva diária da folha",
                ),
                self.settings.payroll_reserve_amount,
            ),
        ]

    def get_revenue(self, day: date) -> RevenueBreakdown:
        """Compute the revenue base for a day.

        Sales made on the day, receivable bills due on the day and already
        paid, and card settlements of yesterday's sales maturing today that
        have not been liquidated yet.
        """
        sales = sum(
            (s.amount for s in self.db.list_sales(start_date=day, end_date=day)), ZERO
        )
        receivables = sum(
            (
                b.paid_amount
                for b in self.db.list_bills(
                    bill_type=BillType.RECEIVABLE,
                    status=BillStatus.PAID,
                    due_start=day,
                    due_end=day,
                )
            ),
            ZERO,
        )
        card_settlements = sum(
            (
                liq.net_amount
                for liq in self.db.list_card_liquidations(
                    settlement_date=day, sale_date=add_days(day, -1), liquidated=False
                )
            ),
            ZERO,
        )
        return RevenueBreakdown(sales=sales, receivables=receivables, card_settlements=card_settlements)

    def targets(self, revenue: Decimal) -> list[tuple[AllocationRule, Decimal]]:
        """Target amount of each allocation step for a revenue total."""
        result = []
        for rule, value in self.rules():
            if rule.pending_type == PendingType.PAYROLL_RESERVE:
                target = to_cents(value)
            else:
                target = to_cents(revenue * value)
            result.append((rule, target))
        return result

    def is_closed(self, day: date) -> bool:
        return self.db.get_day_closing(day) is not None

    def list_closings(self) -> list[DayClosing]:
        return self.db.list_day_closings()

    def execute_end_of_day(self, day: date) -> ClosingReport:
        """Allocate a day's revenue into the reserve accounts.

        A day with no revenue is left untouched. Otherwise every step and the
        closing marker are written in one unit of work.

        Raises:
            ValidationError: If ``day`` is not a date
            ConflictError: If the day was already closed
        """
        if not is_calendar_day(day):
            raise ValidationError(f"Invalid closing date '{day}'")
        if self.is_closed(day):
            raise ConflictError(day_already_closed(day))

        revenue = self.get_revenue(day)
        if revenue.total == 0:
            logger.info("end_of_day_skipped", date=day.isoformat(), reason="no revenue")
            return ClosingReport(date=day, revenue=revenue)

        outcomes = []
        with self.db.transaction():
            for rule, target in self.targets(revenue.total):
                outcomes.append(self._allocate(day, rule, target, revenue.total))
            self.db.create_day_closing(day, revenue.total)

        report = ClosingReport(date=day, revenue=revenue, outcomes=outcomes)
        logger.info(
            "end_of_day_executed",
            date=day.isoformat(),
            revenue=str(revenue.total),
            pending=str(report.total_pending),
        )
        return report

    def _allocate(
        self, day: date, rule: AllocationRule, target: Decimal, revenue: Decimal
    ) -> AllocationOutcome:
        if target <= 0:
            return AllocationOutcome(rule.pending_type, target, ZERO, ZERO)

        available = self.accounts.get_balance(rule.source)
        if available >= target:
            transferred = target
            description = f"{rule.label.capitalize()} sobre base de {format_brl(revenue)}"
        elif available > 0:
            transferred = available
            description = (
                f"{rule.label.capitalize()} parcial "
                f"(pendência: {format_brl(target - available)})"
            )
        else:
            transferred = ZERO
            description = ""

        if transferred > 0:
            self.accounts.transfer(
                rule.source,
                rule.destination,
                transferred,
                rule.category,
                description,
                on=day,
            )

        shortfall = target - transferred
        if shortfall > 0:
            self.db.create_pending(
                pending_type=rule.pending_type,
                amount=shortfall,
                date=day,
                description=f"Pendência {rule.label}",
            )
            logger.warning(
                "allocation_shortfall",
                date=day.isoformat(),
                allocation=rule.pending_type.value,
                target=str(target),
                transferred=str(transferred),
                shortfall=str(shortfall),
            )
        return AllocationOutcome(rule.pending_type, target, transferred, shortfall)
