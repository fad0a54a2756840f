# routes_root.py
"""
Root / landing endpoint.
"""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/")
def read_root():
    """The dashboard is the landing page."""
    return RedirectResponse(url="/dashboard", status_code=302)
