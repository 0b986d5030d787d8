"""Sale domain service (revenue intake)."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from caixa.database.base import Database
from caixa.domain.entities import (
    AccountId,
    CardBrand,
    PaymentMethod,
    Sale as SaleEntity,
    TransactionCategory,
)
from caixa.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    non_positive_amount,
    sale_not_found,
)
from caixa.domain.holiday import HolidayService
from caixa.domain.settlement import HolidayPredicate, SettlementScheduler
from caixa.domain.transaction import TransactionService
from caixa.utils.amount_parser import format_brl, to_cents
from caixa.utils.dates import is_calendar_day

logger = structlog.get_logger()

# Accounts credited immediately, by payment method
IMMEDIATE_ACCOUNTS = {
    PaymentMethod.CASH: AccountId.CASH,
    PaymentMethod.PIX: AccountId.PIX,
}


def _coerce_method(payment_method: PaymentMethod | str) -> PaymentMethod:
    try:
        return PaymentMethod(payment_method)
    except ValueError:
        raise ValidationError(f"Unknown payment method '{payment_method}'") from None


def _coerce_brand(card_brand: CardBrand | str | None) -> Optional[CardBrand]:
    if card_brand is None:
        return None
    try:
        return CardBrand(card_brand)
    except ValueError:
        raise ValidationError(f"Unknown card brand '{card_brand}'") from None


class SaleService:
    """Service for recording sales.

    Cash and PIX sales credit their account at once. Card sales are credited
    later, when their liquidation matures (see LiquidationService).
    """

    def __init__(
        self,
        db: Database,
        scheduler: Optional[SettlementScheduler] = None,
        is_holiday: Optional[HolidayPredicate] = None,
    ):
        """Initialize sale service.

        Args:
            db: Database instance
            scheduler: Settlement scheduler for card sales. Defaults to one
                backed by the database holiday calendar.
            is_holiday: Holiday predicate for the default scheduler
        """
        self.db = db
        if scheduler is None:
            if is_holiday is None:
                is_holiday = HolidayService(db).is_holiday
            scheduler = SettlementScheduler(is_holiday)
        self.scheduler = scheduler
        self.transactions = TransactionService(db)

    def add_sale(
        self,
        date: date,
        amount: Decimal,
        payment_method: PaymentMethod | str,
        card_brand: CardBrand | str | None = None,
        description: Optional[str] = None,
        sale_type: Optional[str] = None,
    ) -> int:
        """Record a sale.

        Args:
            date: Sale date
            amount: Gross sale amount
            payment_method: cash, pix, credit or debit
            card_brand: Card brand, required for credit and debit only
            description: Optional description
            sale_type: Optional sale type tag

        Returns:
            Sale ID

        Raises:
            ValidationError: If the sale is malformed (nothing is written)
            SettlementDateUnresolvedError: If no settlement day can be found
                for a card sale (nothing is written)
        """
        method = _coerce_method(payment_method)
        brand = _coerce_brand(card_brand)
        amount = self._validate(date, amount, method, brand)

        # Computed before any write so a failure leaves no trace
        plan = self.scheduler.schedule(date, amount, method, brand) if method.is_card else None

        with self.db.transaction():
            sale_id = self.db.create_sale(
                date=date,
                amount=amount,
                payment_method=method,
                card_brand=brand,
                description=description,
                sale_type=sale_type,
            )
            if plan is None:
                account_id = IMMEDIATE_ACCOUNTS[method]
                self.db.apply_balance_delta(account_id, amount)
                self.transactions.record(
                    on=date,
                    from_account=account_id,
                    to_account=account_id,
                    amount=amount,
                    category=TransactionCategory.SALE,
                    description=f"Venda ({method.value}): {description or sale_type or 'sem descrição'}",
                    reference=f"sale:{sale_id}",
                )
            else:
                self.db.create_card_liquidation(
                    sale_id=sale_id,
                    sale_date=plan.sale_date,
                    sale_amount=plan.sale_amount,
                    card_brand=plan.card_brand,
                    payment_method=plan.payment_method,
                    fee_rate=plan.fee_rate,
                    fee_amount=plan.fee_amount,
                    net_amount=plan.net_amount,
                    settlement_date=plan.settlement_date,
                )
                self.db.update_sale_net_amount(sale_id, plan.net_amount)

        logger.info(
            "sale_recorded",
            sale_id=sale_id,
            date=date.isoformat(),
            amount=str(amount),
            method=method.value,
            settlement_date=plan.settlement_date.isoformat() if plan else None,
        )
        return sale_id

    def _validate(
        self,
        sale_date: date,
        amount: Decimal,
        method: PaymentMethod,
        brand: Optional[CardBrand],
    ) -> Decimal:
        if not is_calendar_day(sale_date):
            raise ValidationError(f"Invalid sale date '{sale_date}'")
        if amount is None:
            raise ValidationError("Sale amount is required")
        amount = to_cents(amount)
        if amount <= 0:
            raise ValidationError(non_positive_amount(amount))
        if method.is_card and brand is None:
            raise ValidationError(f"Card brand is required for {method.value} sales")
        if not method.is_card and brand is not None:
            raise ValidationError(f"Card brand is only allowed for card sales, not {method.value}")
        return amount

    def get_sale(self, sale_id: int) -> SaleEntity:
        """Get a sale.

        Raises:
            NotFoundError: If the sale does not exist
        """
        sale = self.db.get_sale(sale_id)
        if sale is None:
            raise NotFoundError(sale_not_found(sale_id))
        return sale

    def list_sales(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_method: PaymentMethod | str | None = None,
    ) -> list[SaleEntity]:
        """List sales with optional filters."""
        method = _coerce_method(payment_method) if payment_method is not None else None
        return self.db.list_sales(start_date=start_date, end_date=end_date, payment_method=method)

    def delete_sale(self, sale_id: int, on: Optional[date] = None) -> None:
        """Delete a sale and reverse its effect.

        Cash and PIX sales take their amount back out of the account and
        record a balance adjustment carrying the resulting balance. Card
        sales drop their pending liquidation.

        Raises:
            NotFoundError: If the sale does not exist
            ConflictError: If the card sale has already been liquidated
        """
        sale = self.get_sale(sale_id)
        if sale.liquidated:
            raise ConflictError(
                f"Sale {sale_id} was already liquidated on "
                f"{sale.liquidation_date.isoformat() if sale.liquidation_date else 'an earlier date'}"
                " and cannot be deleted"
            )

        with self.db.transaction():
            if sale.payment_method.is_card:
                liquidation = self.db.get_card_liquidation_for_sale(sale_id)
                if liquidation is not None:
                    self.db.delete_card_liquidation(liquidation.id)
            else:
                account_id = IMMEDIATE_ACCOUNTS[sale.payment_method]
                self.db.apply_balance_delta(account_id, -sale.amount)
                account = self.db.get_account(account_id)
                self.transactions.record(
                    on=on or sale.date,
                    from_account=account_id,
                    to_account=account_id,
                    amount=account.balance,
                    category=TransactionCategory.BALANCE_ADJUSTMENT,
                    description=f"Estorno da venda {sale_id} ({format_brl(sale.amount)})",
                    reference=f"sale:{sale_id}",
                )
            self.db.delete_sale(sale_id)

        logger.info("sale_deleted", sale_id=sale_id, amount=str(sale.amount))
