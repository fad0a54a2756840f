# app/deps.py
# Role: Shared application-level dependencies and globals.
#       Provides the Jinja2 templates loader (with money/percent filters), the
#       standard SQLAlchemy database session dependency, the current-user
#       dependency, and the redirect helper used to carry one-shot notices.

"""
Shared dependencies and globals for the finance tracker app.
"""

import os
from decimal import Decimal, ROUND_HALF_UP
from typing import Generator, Optional
from urllib.parse import urlencode

from dotenv import load_dotenv
from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from db import SessionLocal

load_dotenv()

APP_DIR = os.path.dirname(os.path.abspath(__file__))

# -------------------------------------------------------------------
# Configuration
# -------------------------------------------------------------------

# Header set by the upstream auth proxy with the authenticated user's id
USER_ID_HEADER = os.getenv("USER_ID_HEADER", "X-User-Id")

# Used when the header is absent (single-user local setup)
DEFAULT_USER_ID = os.getenv("DEFAULT_USER_ID", "local")

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------


def format_money(value) -> str:
    """
    Format an amount the way the UI shows it: 'Rp 1.234.567,5'.
    Dots group thousands, a comma separates at most two decimals.
    """
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, _, frac = f"{abs(amount):f}".partition(".")
    whole = f"{int(whole):,}".replace(",", ".")
    frac = frac.rstrip("0")
    return f"Rp {sign}{whole}" + (f",{frac}" if frac else "")


def format_percent(value) -> str:
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{amount.normalize():f}%"


# Jinja2 templates loader (used by all HTML-rendering routes)
templates = Jinja2Templates(directory=os.path.join(APP_DIR, "templates"))
templates.env.filters["money"] = format_money
templates.env.filters["percent"] = format_percent

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# -------------------------------------------------------------------
# Current user
# -------------------------------------------------------------------

def get_current_user_id(request: Request) -> str:
    """
    Id of the authenticated user, as forwarded by the auth proxy.
    Every store call is scoped to this id.
    """
    user_id = request.headers.get(USER_ID_HEADER, "").strip()
    return user_id or DEFAULT_USER_ID


# -------------------------------------------------------------------
# Notices
# -------------------------------------------------------------------

def redirect_with_notice(
    path: str,
    notice: Optional[str] = None,
    level: str = "success",
    **params,
) -> RedirectResponse:
    """
    Redirect (303, so the browser follows with GET) and carry a one-shot
    notice in the query string. None-valued params are dropped.
    """
    items = [(k, v) for k, v in params.items() if v is not None]
    if notice:
        items.append(("notice", notice))
        items.append(("level", level))
    url = path + ("?" + urlencode(items) if items else "")
    return RedirectResponse(url=url, status_code=303)
