# app/routes_dashboard.py
"""
Dashboard: the selected month's balances, budget usage, and transactions.
"""

import calendar
from datetime import date
from typing import Tuple

from fastapi import APIRouter, Request, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from .deps import templates, get_db, get_current_user_id
from app.services import aggregation
from app.services.aggregation import MIN_YEAR, MAX_YEAR
from app.services.store import StoreError, list_transactions, list_allocations, get_profile

router = APIRouter()


def parse_period(month: str | None, year: str | None, today: date | None = None) -> Tuple[int, int]:
    """
    Turn the month (1-12) / year query strings into ints.
    Missing or invalid values fall back to today's month / year.
    """
    today = today or date.today()

    try:
        month_val = int(month) if month else today.month
        if not (1 <= month_val <= 12):
            raise ValueError
    except ValueError:
        month_val = today.month

    try:
        year_val = int(year) if year else today.year
        if not (MIN_YEAR <= year_val <= MAX_YEAR):
            raise ValueError
    except ValueError:
        year_val = today.year

    return month_val, year_val


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    month: str | None = Query(None),
    year: str | None = Query(None),
    notice: str | None = Query(None),
    level: str = Query("success"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    month, year = parse_period(month, year)
    errors = []

    # A failed load leaves that list empty; the page still renders
    try:
        transactions = list_transactions(db, user_id)
    except StoreError as exc:
        transactions = []
        errors.append(str(exc))

    try:
        allocations = list_allocations(db, user_id)
    except StoreError as exc:
        allocations = []
        errors.append(str(exc))

    try:
        profile = get_profile(db, user_id)
    except StoreError:
        profile = None

    summary = aggregation.summarize_month(transactions, allocations, month, year)
    prev_month, prev_year = aggregation.previous_month(month, year)
    next_month, next_year = aggregation.next_month(month, year)
    today = date.today()

    allocated_total = aggregation.total_percentage(allocations)

    return templates.TemplateResponse(
        "dashboard.html",
        {
            "request": request,
            "profile": profile,
            "notice": notice,
            "level": level,
            "errors": errors,
            "summary": summary,
            "month": month,
            "year": year,
            "month_label": f"{calendar.month_name[month]} {year}",
            "month_names": list(calendar.month_name)[1:],
            "years": aggregation.dashboard_years(transactions, today),
            "prev_month": prev_month,
            "prev_year": prev_year,
            "next_month": next_month,
            "next_year": next_year,
            "is_current_month": aggregation.is_current_month(month, year, today),
            "current_month": today.month,
            "current_year": today.year,
            "today_iso": today.isoformat(),
            "allocations": allocations,
            "allocated_total": allocated_total,
            "remaining_percentage": aggregation.remaining_percentage(allocations),
        },
    )
