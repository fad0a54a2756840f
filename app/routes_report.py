# routes_report.py
"""
Yearly report: month-by-month income/expense/balance, top expense
categories, and year totals.
"""

from datetime import date

from fastapi import APIRouter, Request, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.deps import templates, get_db, get_current_user_id
from app.services import aggregation
from app.services.aggregation import MIN_YEAR, MAX_YEAR
from app.services.store import StoreError, list_transactions, get_profile

router = APIRouter()


def parse_year(year: str | None, today: date | None = None) -> int:
    today = today or date.today()
    try:
        value = int(year) if year else today.year
    except ValueError:
        return today.year
    return value if MIN_YEAR <= value <= MAX_YEAR else today.year


@router.get("/report", response_class=HTMLResponse)
def report_page(
    request: Request,
    year: str | None = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    year = parse_year(year)
    errors = []

    try:
        transactions = list_transactions(db, user_id, ascending=True)
    except StoreError as exc:
        transactions = []
        errors.append(str(exc))

    try:
        profile = get_profile(db, user_id)
    except StoreError:
        profile = None

    return templates.TemplateResponse(
        "report.html",
        {
            "request": request,
            "profile": profile,
            "errors": errors,
            "year": year,
            "years": aggregation.report_years(transactions),
            "report": aggregation.yearly_report(transactions, year),
        },
    )
