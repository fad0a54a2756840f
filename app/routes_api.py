# routes_api.py
"""
JSON API over the same store calls and aggregations as the HTML pages.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.deps import get_db, get_current_user_id
from app.routes_dashboard import parse_period
from app.routes_report import parse_year
from app.schemas import (
    AllocationOut,
    CategorySpendOut,
    CategoryTotalOut,
    DashboardOut,
    MonthBucketOut,
    ReportOut,
    TransactionOut,
)
from app.services import aggregation
from app.services.store import StoreError, list_allocations, list_transactions

router = APIRouter(prefix="/api")


def _unavailable(exc: StoreError) -> HTTPException:
    return HTTPException(status_code=503, detail=str(exc))


@router.get("/transactions", response_model=List[TransactionOut])
def api_transactions(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """All of the user's transactions, newest first."""
    try:
        transactions = list_transactions(db, user_id)
    except StoreError as exc:
        raise _unavailable(exc)
    return [TransactionOut.model_validate(t) for t in transactions]


@router.get("/allocations", response_model=List[AllocationOut])
def api_allocations(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        allocations = list_allocations(db, user_id)
    except StoreError as exc:
        raise _unavailable(exc)
    return [AllocationOut.model_validate(a) for a in allocations]


@router.get("/dashboard", response_model=DashboardOut)
def api_dashboard(
    month: str | None = Query(None),
    year: str | None = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    month, year = parse_period(month, year)
    try:
        transactions = list_transactions(db, user_id)
        allocations = list_allocations(db, user_id)
    except StoreError as exc:
        raise _unavailable(exc)

    summary = aggregation.summarize_month(transactions, allocations, month, year)
    return DashboardOut(
        month=summary.month,
        year=summary.year,
        starting_balance=summary.starting_balance,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        cumulative_balance=summary.cumulative_balance,
        has_over_budget=summary.has_over_budget,
        allocated_percentage=aggregation.total_percentage(allocations),
        spending_by_category=[CategorySpendOut.model_validate(c) for c in summary.spending_by_category],
        transactions=[TransactionOut.model_validate(t) for t in summary.transactions],
    )


@router.get("/report", response_model=ReportOut)
def api_report(
    year: str | None = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    year = parse_year(year)
    try:
        transactions = list_transactions(db, user_id, ascending=True)
    except StoreError as exc:
        raise _unavailable(exc)

    report = aggregation.yearly_report(transactions, year)
    return ReportOut(
        year=report.year,
        months=[MonthBucketOut.model_validate(m) for m in report.months],
        top_categories=[CategoryTotalOut.model_validate(c) for c in report.top_categories],
        total_income=report.total_income,
        total_expense=report.total_expense,
        total_balance=report.total_balance,
    )
