# csv_import.py
#
# CSV import / export of a user's transactions.
# One flat format both ways:
#     transaction_date,type,category,amount,description

import io
import logging
from typing import Any, Dict, Iterable, List, Tuple

import numpy as np
import pandas as pd

from app.services.validation import ValidationError, parse_transaction_form

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["transaction_date", "type", "category", "amount", "description"]

# Accepted alternative headers -> normalized column name
HEADER_ALIASES = {
    "date": "transaction_date",
    "ttype": "type",
    "note": "description",
    "notes": "description",
}


def export_transactions_csv(transactions: Iterable) -> str:
    """
    Render transactions as CSV text, in the order given.
    """
    rows = [
        {
            "transaction_date": t.transaction_date.isoformat(),
            "type": t.type,
            "category": t.category,
            "amount": str(t.amount),
            "description": t.description or "",
        }
        for t in transactions
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False)


def read_transactions_csv(content: bytes) -> List[Dict[str, Any]]:
    """
    Parse uploaded CSV bytes into raw row dicts with normalized headers.

    Raises ValidationError when the file cannot be read or a required
    column is missing.
    """
    try:
        # Everything as text; amounts and dates are validated row by row
        df = pd.read_csv(io.BytesIO(content), dtype=str, encoding="utf-8-sig")
    except (ValueError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise ValidationError(f"Could not read CSV file: {exc}") from exc

    # normalize headers
    df.columns = df.columns.str.strip().str.lower()
    df = df.rename(columns=HEADER_ALIASES)

    missing = [c for c in CSV_COLUMNS if c != "description" and c not in df.columns]
    if missing:
        raise ValidationError("CSV is missing columns: " + ", ".join(missing))

    if "description" not in df.columns:
        df["description"] = None

    df = df[CSV_COLUMNS].replace({np.nan: None})
    return df.to_dict(orient="records")


def parse_transactions_csv(content: bytes) -> Tuple[List[Dict[str, Any]], int]:
    """
    Validate every CSV row as a transaction submission.

    Returns (valid_rows, skipped_count). Invalid rows are skipped, not fatal.
    """
    valid: List[Dict[str, Any]] = []
    skipped = 0

    for index, row in enumerate(read_transactions_csv(content), start=2):
        try:
            valid.append(
                parse_transaction_form(
                    type=row["type"],
                    category=row["category"],
                    amount=row["amount"],
                    transaction_date=row["transaction_date"],
                    description=row["description"],
                )
            )
        except ValidationError as exc:
            skipped += 1
            logger.info("Skipping CSV line %d: %s", index, exc)

    return valid, skipped
