# app/services/aggregation.py
#
# Period Aggregation
# Computes the dashboard and report figures from the full, in-memory lists of a
# user's transactions and allocations: monthly totals, starting and cumulative
# balances, per-category budget usage, and the yearly month-by-month report.
#
# Everything here is a pure function of its inputs and is recomputed on every
# request; nothing is cached or stored.

from __future__ import annotations

import calendar
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Number of categories shown in the yearly expense breakdown
TOP_CATEGORIES = 10

# Selectable years; the month before January of MIN_YEAR must still be a valid date
MIN_YEAR = date.min.year + 1
MAX_YEAR = date.max.year


# ---- Result types ----

@dataclass
class CategorySpend:
    """Budget usage of one allocation within the selected month."""

    id: Optional[int]
    category: str
    percentage: Decimal
    spent: Decimal
    allocated: Decimal
    remaining: Decimal
    percentage_used: Decimal
    is_over_budget: bool


@dataclass
class MonthlySummary:
    month: int
    year: int
    starting_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    cumulative_balance: Decimal
    transactions: list = field(default_factory=list)
    spending_by_category: List[CategorySpend] = field(default_factory=list)

    @property
    def has_over_budget(self) -> bool:
        return any(c.is_over_budget for c in self.spending_by_category)


@dataclass
class MonthBucket:
    month: int
    income: Decimal
    expense: Decimal
    balance: Decimal

    @property
    def label(self) -> str:
        return calendar.month_abbr[self.month]


@dataclass
class CategoryTotal:
    name: str
    value: Decimal


@dataclass
class YearlyReport:
    year: int
    months: List[MonthBucket]
    top_categories: List[CategoryTotal]
    total_income: Decimal
    total_expense: Decimal

    @property
    def total_balance(self) -> Decimal:
        return self.total_income - self.total_expense


# ---- Field access ----

def _to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from turning into long binary expansions
    return Decimal(str(value))


def tx_date(tx) -> date:
    """
    Calendar date of a transaction.

    Accepts ORM rows or plain objects whose `transaction_date` is a date,
    a datetime, or an ISO 'YYYY-MM-DD' string.
    """
    value = tx.transaction_date
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


# ---- Calendar helpers ----

def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def previous_month(month: int, year: int) -> Tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year


def next_month(month: int, year: int) -> Tuple[int, int]:
    if month == 12:
        return 1, year + 1
    return month + 1, year


def is_current_month(month: int, year: int, today: Optional[date] = None) -> bool:
    today = today or date.today()
    return month == today.month and year == today.year


# ---- Filters & sums ----

def in_month(tx, month: int, year: int) -> bool:
    d = tx_date(tx)
    return d.month == month and d.year == year


def filter_month(transactions: Iterable, month: int, year: int) -> list:
    return [t for t in transactions if in_month(t, month, year)]


def filter_year(transactions: Iterable, year: int) -> list:
    return [t for t in transactions if tx_date(t).year == year]


def sum_type(transactions: Iterable, tx_type: str) -> Decimal:
    return sum((_to_decimal(t.amount) for t in transactions if t.type == tx_type), ZERO)


def net(transactions: Sequence) -> Decimal:
    return sum_type(transactions, "income") - sum_type(transactions, "expense")


def balance_through(transactions: Iterable, end: date) -> Decimal:
    """Income minus expense over every transaction dated on or before `end`."""
    return net([t for t in transactions if tx_date(t) <= end])


def cumulative_balance(transactions: Iterable, month: int, year: int) -> Decimal:
    return balance_through(transactions, last_day_of_month(year, month))


def starting_balance(transactions: Iterable, month: int, year: int) -> Decimal:
    prev_month, prev_year = previous_month(month, year)
    if prev_year < date.min.year:
        return ZERO
    return balance_through(transactions, last_day_of_month(prev_year, prev_month))


# ---- Budget usage ----

def category_spend(allocation, monthly_transactions: Sequence, total_income: Decimal) -> CategorySpend:
    percentage = _to_decimal(allocation.percentage)
    spent = sum(
        (
            _to_decimal(t.amount)
            for t in monthly_transactions
            if t.type == "expense" and t.category == allocation.category
        ),
        ZERO,
    )
    allocated = total_income * percentage / HUNDRED
    percentage_used = spent / allocated * HUNDRED if allocated > 0 else ZERO

    return CategorySpend(
        id=getattr(allocation, "id", None),
        category=allocation.category,
        percentage=percentage,
        spent=spent,
        allocated=allocated,
        remaining=allocated - spent,
        percentage_used=percentage_used,
        is_over_budget=spent > allocated,
    )


def spending_by_category(allocations: Iterable, monthly_transactions: Sequence, total_income: Decimal) -> List[CategorySpend]:
    """One CategorySpend per allocation, in allocation order."""
    return [category_spend(a, monthly_transactions, total_income) for a in allocations]


def total_percentage(allocations: Iterable) -> Decimal:
    return sum((_to_decimal(a.percentage) for a in allocations), ZERO)


def remaining_percentage(allocations: Iterable) -> Decimal:
    return HUNDRED - total_percentage(allocations)


# ---- Dashboard ----

def summarize_month(transactions: Sequence, allocations: Sequence, month: int, year: int) -> MonthlySummary:
    """
    Everything the dashboard shows for one (month, year).

    Both balances are full-history scans; the month's own figures come from
    the transactions whose date falls in the selected calendar month.
    """
    monthly = filter_month(transactions, month, year)
    total_income = sum_type(monthly, "income")
    total_expense = sum_type(monthly, "expense")

    return MonthlySummary(
        month=month,
        year=year,
        starting_balance=starting_balance(transactions, month, year),
        total_income=total_income,
        total_expense=total_expense,
        cumulative_balance=cumulative_balance(transactions, month, year),
        transactions=monthly,
        spending_by_category=spending_by_category(allocations, monthly, total_income),
    )


# ---- Yearly report ----

def monthly_buckets(year_transactions: Sequence) -> List[MonthBucket]:
    buckets = []
    for month in range(1, 13):
        in_bucket = [t for t in year_transactions if tx_date(t).month == month]
        income = sum_type(in_bucket, "income")
        expense = sum_type(in_bucket, "expense")
        buckets.append(MonthBucket(month=month, income=income, expense=expense, balance=income - expense))
    return buckets


def top_expense_categories(year_transactions: Iterable, limit: int = TOP_CATEGORIES) -> List[CategoryTotal]:
    totals: "OrderedDict[str, Decimal]" = OrderedDict()
    for t in year_transactions:
        if t.type != "expense":
            continue
        totals[t.category] = totals.get(t.category, ZERO) + _to_decimal(t.amount)

    # sorted() is stable, so equal amounts keep first-appearance order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(name=name, value=value) for name, value in ranked[:limit]]


def yearly_report(transactions: Sequence, year: int) -> YearlyReport:
    year_transactions = filter_year(transactions, year)
    return YearlyReport(
        year=year,
        months=monthly_buckets(year_transactions),
        top_categories=top_expense_categories(year_transactions),
        total_income=sum_type(year_transactions, "income"),
        total_expense=sum_type(year_transactions, "expense"),
    )


# ---- Year selector options ----

def _first_year(transactions: Sequence) -> Optional[int]:
    if not transactions:
        return None
    return min(tx_date(t).year for t in transactions)


def dashboard_years(transactions: Sequence, today: Optional[date] = None) -> List[int]:
    """From the earliest recorded year (or this year) up to next year."""
    current = (today or date.today()).year
    first = _first_year(transactions)
    start = current if first is None else min(first, current)
    return list(range(start, current + 2))


def report_years(transactions: Sequence, today: Optional[date] = None) -> List[int]:
    """From the earliest recorded year up to this year."""
    current = (today or date.today()).year
    first = _first_year(transactions)
    if first is None:
        return [current]
    return list(range(first, current + 1)) or [current]
