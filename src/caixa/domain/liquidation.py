"""Card liquidation processing domain service."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from caixa.config import LedgerSettings
from caixa.database.base import Database
from caixa.domain.entities import AccountId, CardLiquidation, Pending, TransactionCategory
from caixa.domain.errors import DomainError, ValidationError
from caixa.domain.expense import ExpenseService
from caixa.domain.pending import PendingService
from caixa.domain.transaction import TransactionService
from caixa.utils.amount_parser import format_brl
from caixa.utils.dates import Clock, add_days, is_calendar_day, today

logger = structlog.get_logger()

SETTLEMENT_ACCOUNT = AccountId.PIX
FEE_EXPENSE_CATEGORY = TransactionCategory.CARD_SETTLEMENT.value


@dataclass
class LiquidationRun:
    """Outcome of one process_liquidations call."""

    date: date
    processed: list[CardLiquidation] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)
    compensated: list[Pending] = field(default_factory=list)

    @property
    def gross_total(self) -> Decimal:
        return sum((liq.gross_amount for liq in self.processed), Decimal("0.00"))

    @property
    def fee_total(self) -> Decimal:
        return sum((liq.fee_amount for liq in self.processed), Decimal("0.00"))

    @property
    def net_total(self) -> Decimal:
        return sum((liq.net_amount for liq in self.processed), Decimal("0.00"))


class LiquidationService:
    """Service that credits matured card sales to the PIX account.

    Each liquidation is booked as a gross credit plus a fee expense, so the
    account moves by the net amount while both legs stay visible in the
    transaction log.
    """

    def __init__(
        self,
        db: Database,
        settings: Optional[LedgerSettings] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize liquidation service.

        Args:
            db: Database instance
            settings: Ledger settings; ``strict_liquidation_window`` selects
                the matching rule
            clock: Callable returning today's date (defaults to local today)
        """
        self.db = db
        self.settings = settings or LedgerSettings()
        self.clock = clock or today
        self.expenses = ExpenseService(db)
        self.transactions = TransactionService(db)
        self.pendings = PendingService(db, clock=self.clock)

    def list_liquidations(
        self,
        liquidated: Optional[bool] = None,
        settlement_until: Optional[date] = None,
    ) -> list[CardLiquidation]:
        """List card liquidations ordered by settlement date."""
        return self.db.list_card_liquidations(
            settlement_until=settlement_until, liquidated=liquidated
        )

    def due_liquidations(self, day: date) -> list[CardLiquidation]:
        """Unliquidated card liquidations to process on ``day``.

        Strict mode matches only yesterday's sales settling today. Otherwise
        anything settling on or before ``day`` is picked up, so a skipped day
        does not strand older settlements.
        """
        if self.settings.strict_liquidation_window:
            return self.db.list_card_liquidations(
                settlement_date=day, sale_date=add_days(day, -1), liquidated=False
            )
        return self.db.list_card_liquidations(settlement_until=day, liquidated=False)

    def process_liquidations(self, day: date, compensate: bool = True) -> LiquidationRun:
        """Liquidate the card sales maturing on ``day``.

        Each liquidation is its own unit of work; a failure is logged and
        recorded in the result, and the remaining liquidations still run.
        Pendings are compensated afterwards unless ``compensate`` is False.

        Raises:
            ValidationError: If ``day`` is not a date
        """
        if not is_calendar_day(day):
            raise ValidationError(f"Invalid liquidation date '{day}'")

        run = LiquidationRun(date=day)
        for liquidation in self.due_liquidations(day):
            try:
                self._liquidate(liquidation, day)
            except DomainError as exc:
                run.failed[liquidation.id] = str(exc)
                logger.error(
                    "liquidation_failed",
                    liquidation_id=liquidation.id,
                    sale_id=liquidation.sale_id,
                    error=str(exc),
                )
                continue
            run.processed.append(liquidation)

        if compensate:
            run.compensated = self.pendings.compensate_pendings(on=day)

        logger.info(
            "liquidations_processed",
            date=day.isoformat(),
            processed=len(run.processed),
            failed=len(run.failed),
            gross=str(run.gross_total),
            net=str(run.net_total),
        )
        return run

    def _liquidate(self, liquidation: CardLiquidation, day: date) -> None:
        with self.db.transaction():
            gross = liquidation.gross_amount
            self.db.apply_balance_delta(SETTLEMENT_ACCOUNT, gross)
            self.transactions.record(
                on=day,
                from_account=SETTLEMENT_ACCOUNT,
                to_account=SETTLEMENT_ACCOUNT,
                amount=gross,
                category=TransactionCategory.CARD_SETTLEMENT,
                description=(
                    f"Liquidação cartão - venda de {liquidation.sale_date.isoformat()} "
                    f"(taxa: {format_brl(liquidation.fee_amount)})"
                ),
                reference=f"sale:{liquidation.sale_id}",
            )
            if liquidation.fee_amount > 0:
                self.expenses.add_expense(
                    date=day,
                    amount=liquidation.fee_amount,
                    account=SETTLEMENT_ACCOUNT,
                    description=(
                        f"Taxa de cartão {liquidation.payment_method.value}/"
                        f"{liquidation.card_brand.value} - venda {liquidation.sale_id}"
                    ),
                    category=FEE_EXPENSE_CATEGORY,
                )
            self.db.mark_sale_liquidated(liquidation.sale_id, day)
            self.db.mark_card_liquidation_liquidated(liquidation.id, day)
        logger.info(
            "liquidation_booked",
            liquidation_id=liquidation.id,
            sale_id=liquidation.sale_id,
            gross=str(liquidation.gross_amount),
            fee=str(liquidation.fee_amount),
        )
