# main.py
# Role: Application entry point for the finance tracker.
#       Configures logging, initializes the FastAPI app, creates database
#       tables, mounts static assets, and registers all route modules.

"""
Main FastAPI app for the personal finance tracker.

Here we only:
- configure logging
- create the FastAPI app
- set up static files
- create DB tables
- include route modules
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from db import Base, engine
from app.routes_root import router as root_router
from app.routes_dashboard import router as dashboard_router
from app.routes_transactions import router as transactions_router
from app.routes_allocations import router as allocations_router
from app.routes_report import router as report_router
from app.routes_api import router as api_router

load_dotenv()

# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

# Create database tables (only if they don't exist yet).
# This is safe to run on startup for SQLite and development usage.
Base.metadata.create_all(bind=engine)

# FastAPI application instance
app = FastAPI(title="Finance Tracker")

# Serve static files (CSS) from /static
STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app", "static")
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / landing routes
app.include_router(root_router)

# Dashboard (selected month: balances, budget usage, transactions)
app.include_router(dashboard_router)

# Add / delete transactions, CSV import and export
app.include_router(transactions_router)

# Budget allocation settings
app.include_router(allocations_router)

# Yearly report
app.include_router(report_router)

# JSON API under /api
app.include_router(api_router)
