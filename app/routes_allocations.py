# routes_allocations.py
"""
Budget allocation settings: add and delete percentage shares.
"""

import logging

from fastapi import APIRouter, Depends, Form
from sqlalchemy.orm import Session

from app.deps import get_db, get_current_user_id, redirect_with_notice
from app.services import store
from app.services.aggregation import total_percentage
from app.services.validation import ValidationError, parse_allocation_form

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/allocations")
def add_allocation(
    category: str = Form(""),
    percentage: str = Form(""),
    month: str | None = Form(None),
    year: str | None = Form(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    # Re-read the stored total now, not whatever the page showed
    try:
        current_total = total_percentage(store.list_allocations(db, user_id))
    except store.StoreError as exc:
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    try:
        fields = parse_allocation_form(category, percentage, current_total)
    except ValidationError as exc:
        logger.info("Rejected allocation for user %s: %s", user_id, exc)
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    try:
        store.add_allocation(db, user_id, fields)
    except store.StoreError as exc:
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    return redirect_with_notice("/dashboard", "Allocation added.", month=month, year=year)


@router.post("/allocations/{allocation_id}/delete")
def delete_allocation(
    allocation_id: int,
    month: str | None = Form(None),
    year: str | None = Form(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        deleted = store.delete_allocation(db, user_id, allocation_id)
    except store.StoreError as exc:
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    if not deleted:
        return redirect_with_notice("/dashboard", "Allocation not found.", "error", month=month, year=year)

    return redirect_with_notice("/dashboard", "Allocation deleted.", month=month, year=year)
