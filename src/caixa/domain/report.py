"""Period summary domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from caixa.database.base import Database
from caixa.domain.entities import BillStatus, BillType, PaymentMethod, PeriodSummary
from caixa.domain.errors import ValidationError
from caixa.utils.dates import Clock, get_date_range, today


class ReportService:
    """Service for building the monthly overview of the ledger."""

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize report service.

        Args:
            db: Database instance
            clock: Callable returning today's date (defaults to local today)
        """
        self.db = db
        self.clock = clock or today

    def period_summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> PeriodSummary:
        """Summarize sales and expenses between two days, inclusive.

        Missing bounds default to the current month up to today.

        Raises:
            ValidationError: If ``start_date`` is after ``end_date``
        """
        month_start, month_end = get_date_range("this-month", clock=self.clock)
        start_date = start_date or month_start
        end_date = end_date or month_end
        if start_date > end_date:
            raise ValidationError(
                f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
            )

        sales_by_method = {method: Decimal("0.00") for method in PaymentMethod}
        for sale in self.db.list_sales(start_date=start_date, end_date=end_date):
            sales_by_method[sale.payment_method] += sale.amount

        expenses_by_method = {PaymentMethod.CASH: Decimal("0.00"), PaymentMethod.PIX: Decimal("0.00")}
        expenses_by_category: dict[str, Decimal] = {}
        for expense in self.db.list_expenses(start_date=start_date, end_date=end_date):
            expenses_by_method[expense.payment_method] += expense.amount
            expenses_by_category[expense.category] = (
                expenses_by_category.get(expense.category, Decimal("0.00")) + expense.amount
            )

        return PeriodSummary(
            start_date=start_date,
            end_date=end_date,
            sales_by_method=sales_by_method,
            expenses_by_method=expenses_by_method,
            expenses_by_category=expenses_by_category,
            open_payables=self._open_total(BillType.PAYABLE),
            open_receivables=self._open_total(BillType.RECEIVABLE),
        )

    def _open_total(self, bill_type: BillType) -> Decimal:
        bills = self.db.list_bills(bill_type=bill_type, status=BillStatus.PENDING)
        return sum((bill.amount for bill in bills), Decimal("0.00"))
