"""Domain layer for caixa application."""

# Services are imported lazily: the database layer imports domain entities,
# and the services import the database layer.
_SERVICES = {
    "AccountService": "caixa.domain.account",
    "BillService": "caixa.domain.bill",
    "EndOfDayService": "caixa.domain.closing",
    "ExpenseService": "caixa.domain.expense",
    "HolidayService": "caixa.domain.holiday",
    "LiquidationService": "caixa.domain.liquidation",
    "PendingService": "caixa.domain.pending",
    "SaleService": "caixa.domain.sale",
    "SettlementScheduler": "caixa.domain.settlement",
    "TransactionService": "caixa.domain.transaction",
}

__all__ = sorted(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
