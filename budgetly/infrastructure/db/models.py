"""
SQLAlchemy ORM models - one table per ledger collection

Table and column names match the record keys used by LedgerStore, so a row
maps to a record dict one-to-one.
"""
from decimal import Decimal
from datetime import datetime
from sqlalchemy import String, Text, TIMESTAMP, Boolean, Numeric, UniqueConstraint, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from budgetly.infrastructure.db.session import Base


class UserMarkerModel(Base):
    """
    User marker: id comes from the authentication provider
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, server_default="")
    current_month: Mapped[str] = mapped_column(String(7), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class MonthlyIncomeModel(Base):
    """
    Monthly income: at most one row per (user_id, month)
    """
    __tablename__ = "monthly_income"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False, server_default="0")
    locked_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "month", name="uq_monthly_income_user_month"),
    )


class MandatoryRuleModel(Base):
    """
    Recurring fixed deduction (not month-scoped)
    """
    __tablename__ = "mandatory_rules"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class CategoryModel(Base):
    """
    Per-month spending envelope. `spent` is only changed by relative increments.
    """
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    budgeted: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False, server_default="0")
    spent: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        Index("ix_categories_user_month", "user_id", "month"),
    )


class ExpenseModel(Base):
    """
    Single spend record
    """
    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    # No FK: expenses may outlive their category (accepted orphan limitation)
    category_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        Index("ix_expenses_user_month", "user_id", "month"),
    )


class SavingsEntryModel(Base):
    """
    Append-only savings ledger
    """
    __tablename__ = "savings"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    source: Mapped[str] = mapped_column(String(16), nullable=False)  # mandatory, leftover
    idempotency_key: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        Index("ix_savings_user_month", "user_id", "month"),
    )
