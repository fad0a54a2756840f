# routes_transactions.py
"""
Routes that change or move transactions: add, delete, CSV import and export.

Every mutation redirects back to the dashboard for the period the form was
submitted from, and the dashboard reloads the full list.
"""

import logging

from fastapi import APIRouter, Depends, Form, UploadFile, File
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.deps import get_db, get_current_user_id, redirect_with_notice
from app.services import store
from app.services.csv_import import export_transactions_csv, parse_transactions_csv
from app.services.validation import ValidationError, parse_transaction_form

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/transactions")
def add_transaction(
    type: str = Form("income"),
    category: str = Form(""),
    amount: str = Form(""),
    transaction_date: str = Form(""),
    description: str = Form(""),
    month: str | None = Form(None),
    year: str | None = Form(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        fields = parse_transaction_form(type, category, amount, transaction_date, description)
    except ValidationError as exc:
        logger.info("Rejected transaction for user %s: %s", user_id, exc)
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    try:
        store.add_transaction(db, user_id, fields)
    except store.StoreError as exc:
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    return redirect_with_notice("/dashboard", "Transaction added.", month=month, year=year)


@router.post("/transactions/{tx_id}/delete")
def delete_transaction(
    tx_id: int,
    month: str | None = Form(None),
    year: str | None = Form(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        deleted = store.delete_transaction(db, user_id, tx_id)
    except store.StoreError as exc:
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    if not deleted:
        return redirect_with_notice("/dashboard", "Transaction not found.", "error", month=month, year=year)

    return redirect_with_notice("/dashboard", "Transaction deleted.", month=month, year=year)


@router.get("/transactions/export.csv")
def export_csv(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        transactions = store.list_transactions(db, user_id)
    except store.StoreError as exc:
        return redirect_with_notice("/dashboard", str(exc), "error")

    return Response(
        content=export_transactions_csv(transactions),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=transactions.csv"},
    )


@router.post("/transactions/import")
async def import_csv(
    csv_file: UploadFile = File(...),
    month: str | None = Form(None),
    year: str | None = Form(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Import transactions from an uploaded CSV.

    Rows that fail validation are skipped and counted; the rest are inserted
    in one commit.
    """
    content = await csv_file.read()

    try:
        rows, skipped = parse_transactions_csv(content)
    except ValidationError as exc:
        logger.info("Rejected CSV upload %r for user %s: %s", csv_file.filename, user_id, exc)
        return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    if rows:
        try:
            store.add_transactions(db, user_id, rows)
        except store.StoreError as exc:
            return redirect_with_notice("/dashboard", str(exc), "error", month=month, year=year)

    notice = f"Imported {len(rows)} transactions."
    if skipped:
        notice += f" Skipped {skipped} invalid rows."
    return redirect_with_notice(
        "/dashboard", notice, "success" if rows else "error", month=month, year=year
    )
