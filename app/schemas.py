# app/schemas.py
"""Response schemas for the JSON API."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    category: str
    amount: Decimal
    description: Optional[str] = None
    transaction_date: date
    created_at: Optional[datetime] = None


class AllocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    percentage: Decimal


class CategorySpendOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    category: str
    percentage: Decimal
    spent: Decimal
    allocated: Decimal
    remaining: Decimal
    percentage_used: Decimal
    is_over_budget: bool


class DashboardOut(BaseModel):
    month: int  # 1-12
    year: int
    starting_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    cumulative_balance: Decimal
    has_over_budget: bool
    allocated_percentage: Decimal
    spending_by_category: List[CategorySpendOut]
    transactions: List[TransactionOut]


class MonthBucketOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    label: str
    income: Decimal
    expense: Decimal
    balance: Decimal


class CategoryTotalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: Decimal


class ReportOut(BaseModel):
    year: int
    months: List[MonthBucketOut]
    top_categories: List[CategoryTotalOut]
    total_income: Decimal
    total_expense: Decimal
    total_balance: Decimal
