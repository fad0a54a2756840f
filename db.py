# db.py
# Role: Database bootstrap for the FastAPI finance tracker.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.
#       Reads DATABASE_URL from the environment (.env supported) and falls back
#       to a local SQLite file, creating its directory if missing.

"""
Database setup for the finance tracker.

- Uses DATABASE_URL when set (any SQLAlchemy URL).
- Otherwise uses SQLite database at: <project_root>/database/finance.db
"""

import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Folder for the default SQLite DB
DB_DIR = os.path.join(BASE_DIR, "database")

# Full path to the default SQLite database file
DB_PATH = os.path.join(DB_DIR, "finance.db")

# SQLAlchemy connection URL
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH}")

if DATABASE_URL == f"sqlite:///{DB_PATH}":
    os.makedirs(DB_DIR, exist_ok=True)  # ensure folder exists

# For SQLite, we need check_same_thread=False for FastAPI (threaded request handling)
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
