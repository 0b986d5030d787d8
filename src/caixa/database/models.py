"""SQLAlchemy models for caixa database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2)


class Account(Base):
    """Ledger account model. Rows are seeded once and never deleted."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    balance = Column(MONEY, default=Decimal("0.00"), nullable=False)


class Sale(Base):
    """Sale model."""

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    payment_method = Column(String, nullable=False)
    card_brand = Column(String, nullable=True)
    description = Column(String, nullable=True)
    sale_type = Column(String, nullable=True)
    net_amount = Column(MONEY, nullable=True)
    liquidated = Column(Boolean, default=False, nullable=False)
    liquidation_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    liquidation = relationship(
        "CardLiquidation", back_populates="sale", uselist=False, cascade="all, delete-orphan"
    )


class Expense(Base):
    """Expense model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    category = Column(String, nullable=False)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=False)
    description = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Bill(Base):
    """Accounts payable/receivable model."""

    __tablename__ = "bills"

    id = Column(Integer, primary_key=True)
    bill_type = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    original_amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    status = Column(String, default="pending", nullable=False)
    category = Column(String, nullable=True)
    counterparty = Column(String, nullable=True)
    paid_date = Column(Date, nullable=True)
    paid_account_id = Column(String, ForeignKey("accounts.id"), nullable=True)
    paid_amount = Column(MONEY, default=Decimal("0.00"), nullable=False)


class CardLiquidation(Base):
    """Card settlement schedule model, one per card sale."""

    __tablename__ = "card_liquidations"

    id = Column(Integer, primary_key=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, unique=True)
    sale_date = Column(Date, nullable=False)
    sale_amount = Column(MONEY, nullable=False)
    card_brand = Column(String, nullable=False)
    payment_method = Column(String, nullable=False)
    fee_rate = Column(Numeric(8, 4), nullable=False)
    fee_amount = Column(MONEY, nullable=False)
    net_amount = Column(MONEY, nullable=False)
    settlement_date = Column(Date, nullable=False, index=True)
    liquidated = Column(Boolean, default=False, nullable=False)
    liquidated_on = Column(Date, nullable=True)

    # Relationships
    sale = relationship("Sale", back_populates="liquidation")


class InternalTransaction(Base):
    """Append-only audit log of money movements."""

    __tablename__ = "internal_transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    from_account_id = Column(String, ForeignKey("accounts.id"), nullable=False)
    to_account_id = Column(String, ForeignKey("accounts.id"), nullable=False)
    amount = Column(MONEY, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False)
    reference = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Pending(Base):
    """Allocation shortfall model."""

    __tablename__ = "pendings"

    id = Column(Integer, primary_key=True)
    pending_type = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)


class Holiday(Base):
    """Holiday calendar model."""

    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, unique=True)
    name = Column(String, nullable=False)


class DayClosing(Base):
    """End-of-day completion marker."""

    __tablename__ = "day_closings"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, unique=True)
    total_revenue = Column(MONEY, nullable=False)
    closed_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
