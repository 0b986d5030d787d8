"""Bills payable/receivable domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from caixa.database.base import Database
from caixa.domain.account import coerce_account_id
from caixa.domain.entities import (
    AccountId,
    Bill as BillEntity,
    BillStatus,
    BillType,
    TransactionCategory,
)
from caixa.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bill_already_paid,
    bill_not_found,
    bill_overpayment,
    non_positive_amount,
)
from caixa.domain.transaction import TransactionService
from caixa.utils.amount_parser import format_brl, to_cents
from caixa.utils.dates import Clock, add_days, is_calendar_day, today

logger = structlog.get_logger()

DEFAULT_REMINDER_DAYS = 3


def effective_status(bill: BillEntity, on: date) -> BillStatus:
    """Return the status to display: pending bills past their due date are overdue."""
    if bill.status == BillStatus.PENDING and bill.due_date < on:
        return BillStatus.OVERDUE
    return bill.status


class BillService:
    """Service for accounts payable and receivable.

    Payments may be partial: each one lowers the remaining ``amount`` and
    adds to ``paid_amount``; the bill becomes paid when nothing remains.
    """

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize bill service.

        Args:
            db: Database instance
            clock: Callable returning today's date (defaults to local today)
        """
        self.db = db
        self.clock = clock or today
        self.transactions = TransactionService(db)

    def add_bill(
        self,
        bill_type: BillType | str,
        amount: Decimal,
        description: str,
        due_date: date,
        category: Optional[str] = None,
        counterparty: Optional[str] = None,
    ) -> int:
        """Create a bill.

        Returns:
            Bill ID

        Raises:
            ValidationError: If type, amount, description or due date is invalid
        """
        try:
            bill_type = BillType(bill_type)
        except ValueError:
            raise ValidationError(f"Unknown bill type '{bill_type}'") from None
        if amount is None:
            raise ValidationError("Bill amount is required")
        amount = to_cents(amount)
        if amount <= 0:
            raise ValidationError(non_positive_amount(amount))
        if not description or not description.strip():
            raise ValidationError("Bill description is required")
        if not is_calendar_day(due_date):
            raise ValidationError(f"Invalid due date '{due_date}'")

        bill_id = self.db.create_bill(
            bill_type=bill_type,
            amount=amount,
            description=description.strip(),
            due_date=due_date,
            category=category,
            counterparty=counterparty,
        )
        logger.info(
            "bill_added",
            bill_id=bill_id,
            bill_type=bill_type.value,
            amount=str(amount),
            due_date=due_date.isoformat(),
        )
        return bill_id

    def get_bill(self, bill_id: int) -> BillEntity:
        """Get a bill.

        Raises:
            NotFoundError: If the bill does not exist
        """
        bill = self.db.get_bill(bill_id)
        if bill is None:
            raise NotFoundError(bill_not_found(bill_id))
        return bill

    def list_bills(
        self,
        bill_type: BillType | str | None = None,
        status: BillStatus | str | None = None,
    ) -> list[BillEntity]:
        """List bills by due date.

        ``status`` may be ``overdue``, which is derived from the clock.
        """
        bill_type = BillType(bill_type) if bill_type is not None else None
        status = BillStatus(status) if status is not None else None
        if status == BillStatus.OVERDUE:
            bills = self.db.list_bills(bill_type=bill_type, status=BillStatus.PENDING)
            current = self.clock()
            return [b for b in bills if effective_status(b, current) == BillStatus.OVERDUE]
        return self.db.list_bills(bill_type=bill_type, status=status)

    def effective_status(self, bill: BillEntity) -> BillStatus:
        """Status of a bill as of today."""
        return effective_status(bill, self.clock())

    def upcoming_bills(self, within_days: int = DEFAULT_REMINDER_DAYS) -> list[BillEntity]:
        """Pending bills due within ``within_days`` days, overdue ones included."""
        horizon = add_days(self.clock(), within_days)
        return self.db.list_bills(status=BillStatus.PENDING, due_end=horizon)

    def pay_bill(
        self,
        bill_id: int,
        account: AccountId | str,
        amount: Optional[Decimal] = None,
        paid_date: Optional[date] = None,
    ) -> BillEntity:
        """Settle a bill fully or partially.

        Payables debit the account, receivables credit it; each payment
        records one transaction.

        Args:
            bill_id: Bill ID
            account: Account the money leaves (payable) or enters (receivable)
            amount: Amount paid now; defaults to the remaining amount
            paid_date: Payment date; defaults to today

        Returns:
            The updated bill

        Raises:
            NotFoundError: If the bill does not exist
            ConflictError: If the bill is already paid
            ValidationError: If the amount is not positive or exceeds what remains
        """
        bill = self.get_bill(bill_id)
        account_id = coerce_account_id(account)
        if bill.status == BillStatus.PAID or bill.amount <= 0:
            raise ConflictError(bill_already_paid(bill_id))

        payment = bill.amount if amount is None else to_cents(amount)
        if payment <= 0:
            raise ValidationError(non_positive_amount(payment))
        if payment > bill.amount:
            raise ValidationError(bill_overpayment(bill_id, payment, bill.amount))

        on = paid_date or self.clock()
        remaining = bill.amount - payment
        paid_total = bill.paid_amount + payment
        status = BillStatus.PAID if remaining == 0 else BillStatus.PENDING

        if bill.bill_type == BillType.PAYABLE:
            delta = -payment
            category = TransactionCategory.EXPENSE
            label = "Pagamento"
        else:
            delta = payment
            category = TransactionCategory.SALE
            label = "Recebimento"

        with self.db.transaction():
            self.db.update_bill_payment(
                bill_id=bill_id,
                amount=remaining,
                paid_amount=paid_total,
                status=status,
                paid_date=on,
                paid_account=account_id,
            )
            self.db.apply_balance_delta(account_id, delta)
            self.transactions.record(
                on=on,
                from_account=account_id,
                to_account=account_id,
                amount=payment,
                category=category,
                description=(
                    f"{label} de conta: {bill.description} "
                    f"({format_brl(payment)}, restante {format_brl(remaining)})"
                ),
                reference=f"bill:{bill_id}",
            )

        logger.info(
            "bill_payment_recorded",
            bill_id=bill_id,
            bill_type=bill.bill_type.value,
            paid=str(payment),
            remaining=str(remaining),
            status=status.value,
        )
        return self.get_bill(bill_id)

    def delete_bill(self, bill_id: int) -> None:
        """Delete a bill that has no payment recorded.

        Raises:
            NotFoundError: If the bill does not exist
            ConflictError: If any payment was already made
        """
        bill = self.get_bill(bill_id)
        if bill.paid_amount > 0:
            raise ConflictError(
                f"Bill {bill_id} already has {format_brl(bill.paid_amount)} paid and cannot be deleted"
            )
        self.db.delete_bill(bill_id)
        logger.info("bill_deleted", bill_id=bill_id)
