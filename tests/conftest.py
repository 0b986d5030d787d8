"""Shared pytest fixtures for caixa tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest
import structlog

from caixa.config import LedgerSettings
from caixa.database.factories import create_sqlite_database
from caixa.domain.account import AccountService
from caixa.domain.bill import BillService
from caixa.domain.closing import EndOfDayService
from caixa.domain.expense import ExpenseService
from caixa.domain.holiday import HolidayService
from caixa.domain.liquidation import LiquidationService
from caixa.domain.pending import PendingService
from caixa.domain.report import ReportService
from caixa.domain.sale import SaleService
from caixa.domain.transaction import TransactionService

# A Wednesday
TODAY = date(2025, 11, 5)


@pytest.fixture(autouse=True)
def reset_logging():
    """Keep structlog configuration from leaking between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Fixed clock returning TODAY."""
    return lambda: TODAY


@pytest.fixture
def settings():
    """Default allocation policy, independent of the environment."""
    return LedgerSettings(
        _env_file=None,
        investment_rate=Decimal("0.20"),
        debt_payoff_rate=Decimal("0.10"),
        payroll_reserve_amount=Decimal("130.00"),
        strict_liquidation_window=False,
    )


@pytest.fixture
def account_service(temp_db, clock):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, clock=clock)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def holiday_service(temp_db):
    """Create a HolidayService with a temporary database."""
    return HolidayService(temp_db)


@pytest.fixture
def sale_service(temp_db):
    """Create a SaleService backed by the database holiday calendar."""
    return SaleService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def bill_service(temp_db, clock):
    """Create a BillService with a temporary database."""
    return BillService(temp_db, clock=clock)


@pytest.fixture
def end_of_day_service(temp_db, settings):
    """Create an EndOfDayService with the default policy."""
    return EndOfDayService(temp_db, settings)


@pytest.fixture
def pending_service(temp_db, clock):
    """Create a PendingService with a temporary database."""
    return PendingService(temp_db, clock=clock)


@pytest.fixture
def liquidation_service(temp_db, settings, clock):
    """Create a LiquidationService in catch-up mode."""
    return LiquidationService(temp_db, settings, clock=clock)


@pytest.fixture
def report_service(temp_db, clock):
    """Create a ReportService on the fixed clock."""
    return ReportService(temp_db, clock=clock)


@pytest.fixture
def balances(account_service):
    """Return a callable giving {account id value: balance}."""

    def _balances():
        return {acc.id.value: acc.balance for acc in account_service.list_accounts()}

    return _balances


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
