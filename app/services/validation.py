# app/services/validation.py
#
# Form Validation
# Checks raw form values for transactions and allocations before anything is
# sent to the store. A rejected submission raises ValidationError carrying the
# message shown to the user; nothing is written in that case.

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from models import TRANSACTION_TYPES

MAX_PERCENTAGE = Decimal("100")

# Amounts and percentages are stored as Numeric(.., 2)
CENT = Decimal("0.01")

# Largest magnitude a Numeric(14, 2) amount column holds
MAX_AMOUNT = Decimal("999999999999.99")


class ValidationError(ValueError):
    """Raised when submitted form data is rejected."""


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def parse_decimal(value: Any, field_name: str, limit: Decimal = MAX_AMOUNT) -> Decimal:
    """
    Parse a number with at most two decimal places and |value| <= limit.
    Values the store would round or overflow are rejected, not adjusted.
    """
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number.") from None
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number.")
    if abs(number) > limit:
        raise ValidationError(f"{field_name} is too large.")
    if number != number.quantize(CENT):
        raise ValidationError(f"{field_name} can have at most 2 decimal places.")
    return number.quantize(CENT)


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Date must be in YYYY-MM-DD format.") from None


def parse_transaction_form(
    type: Any,
    category: Any,
    amount: Any,
    transaction_date: Any,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Validate one transaction submission.

    Returns the cleaned field dict ready for the store:
        {type, category, amount, description, transaction_date}
    """
    if _blank(category) or _blank(amount) or _blank(transaction_date):
        raise ValidationError("Please fill in all required fields.")

    tx_type = str(type or "").strip().lower()
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError("Type must be income or expense.")

    value = parse_decimal(amount, "Amount")
    if value < 0:
        raise ValidationError("Amount cannot be negative.")

    return {
        "type": tx_type,
        "category": str(category).strip(),
        "amount": value,
        "description": None if _blank(description) else str(description).strip(),
        "transaction_date": parse_date(transaction_date),
    }


def parse_allocation_form(
    category: Any,
    percentage: Any,
    current_total: Decimal,
) -> Dict[str, Any]:
    """
    Validate one allocation submission against the user's current total.

    `current_total` must be the sum of the stored percentages read at
    submission time; the new share may not push it over 100.
    """
    if _blank(category) or _blank(percentage):
        raise ValidationError("Please fill in all fields.")

    value = parse_decimal(percentage, "Percentage")
    if value <= 0 or value > MAX_PERCENTAGE:
        raise ValidationError("Percentage must be between 0 and 100.")

    if current_total + value > MAX_PERCENTAGE:
        raise ValidationError(
            f"Total percentage would exceed 100% (currently: {current_total.normalize():f}%)."
        )

    return {
        "category": str(category).strip(),
        "percentage": value,
    }
