# models.py
# Role: SQLAlchemy ORM models for the finance tracker domain.
#       Transactions and budget allocations are owned by one user each;
#       profiles hold display data for the externally authenticated user.

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Text
from db import Base


# Allowed values for Transaction.type
TRANSACTION_TYPES = ("income", "expense")


class Transaction(Base):
    """
    ORM model representing a single income or expense entry.

    Rows are immutable once created: the app only inserts and deletes them.
    Amounts are always non-negative; the direction comes from `type`.
    """

    __tablename__ = "transactions"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # "income" or "expense"
    type = Column(String(10), nullable=False)

    # Free-text category, matched by exact string against allocations
    category = Column(String, nullable=False)

    # Non-negative amount
    amount = Column(Numeric(14, 2), nullable=False)

    # Optional free-text description
    description = Column(Text, nullable=True)

    # Calendar date the transaction happened on
    transaction_date = Column(Date, nullable=False, index=True)

    # Owner (identifier issued by the external auth provider)
    user_id = Column(String, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class Allocation(Base):
    """
    A named percentage share of monthly income earmarked for a category.

    The per-user sum of percentages is kept at or below 100 by the
    add-allocation path only; there is no table constraint for it.
    """

    __tablename__ = "allocations"

    id = Column(Integer, primary_key=True, index=True)

    # Category name (unique per user by convention only)
    category = Column(String, nullable=False)

    # Share of monthly income, in (0, 100]
    percentage = Column(Numeric(5, 2), nullable=False)

    user_id = Column(String, nullable=False, index=True)


class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(String, primary_key=True)
    full_name = Column(String, nullable=True)
