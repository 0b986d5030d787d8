"""Pending compensation domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from caixa.database.base import Database
from caixa.domain.account import AccountService
from caixa.domain.entities import AccountId, Pending, PendingType, TransactionCategory
from caixa.utils.dates import Clock, today

logger = structlog.get_logger()

# pending type -> (source, destination, category)
COMPENSATION_ROUTES = {
    PendingType.ALLOCATION_20: (
        AccountId.PIX,
        AccountId.INVESTMENT,
        TransactionCategory.ALLOCATION_20,
    ),
    PendingType.ALLOCATION_10: (
        AccountId.PIX,
        AccountId.DEBT_PAYOFF,
        TransactionCategory.ALLOCATION_10,
    ),
    PendingType.PAYROLL_RESERVE: (
        AccountId.CASH,
        AccountId.PAYROLL_RESERVE,
        TransactionCategory.PAYROLL_RESERVE,
    ),
}


def priority_key(pending: Pending) -> tuple[int, date, int]:
    """Sort key: 20% allocations first, then 10%, then payroll reserve."""
    return (pending.pending_type.priority, pending.date, pending.id)


class PendingService:
    """Service that retires allocation shortfalls when funds become available.

    A pending is retired whole or not at all, even when part of its amount
    could be covered.
    """

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize pending service.

        Args:
            db: Database instance
            clock: Callable returning today's date (defaults to local today)
        """
        self.db = db
        self.clock = clock or today
        self.accounts = AccountService(db, clock=self.clock)

    def list_pendings(self) -> list[Pending]:
        """Outstanding pendings in compensation order."""
        return sorted(self.db.list_pendings(), key=priority_key)

    def total_outstanding(self) -> Decimal:
        return sum((p.amount for p in self.db.list_pendings()), Decimal("0.00"))

    def compensate_pendings(self, on: Optional[date] = None) -> list[Pending]:
        """Retire every pending whose source account can cover it in full.

        Args:
            on: Date of the compensation transactions; defaults to today

        Returns:
            The pendings retired, in the order they were processed
        """
        on = on or self.clock()
        retired = []
        for pending in self.list_pendings():
            source, destination, category = COMPENSATION_ROUTES[pending.pending_type]
            if self.accounts.get_balance(source) < pending.amount:
                logger.debug(
                    "pending_not_covered",
                    pending_id=pending.id,
                    pending_type=pending.pending_type.value,
                    amount=str(pending.amount),
                )
                continue

            with self.db.transaction():
                self.accounts.transfer(
                    source,
                    destination,
                    pending.amount,
                    category,
                    f"Compensação de pendência - {pending.description}",
                    on=on,
                    reference=f"pending:{pending.id}",
                )
                self.db.delete_pending(pending.id)
            retired.append(pending)
            logger.info(
                "pending_compensated",
                pending_id=pending.id,
                pending_type=pending.pending_type.value,
                amount=str(pending.amount),
            )
        return retired
