# app/services/store.py
#
# Row Store Access
# The only queries the app runs: select-all-by-owner, insert-one, and
# delete-by-id for transactions and allocations, plus a profile lookup.
# Every call is scoped to the owning user; filtering by period or category
# happens afterwards in app/services/aggregation.py.

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Allocation, Profile, Transaction

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A store call failed (connection, constraint, or query error)."""


def _fail(db: Session, action: str) -> StoreError:
    db.rollback()
    logger.exception("Store call failed: %s", action)
    return StoreError(f"Could not {action}.")


# ---- Transactions ----

def list_transactions(db: Session, user_id: str, ascending: bool = False) -> List[Transaction]:
    order = Transaction.transaction_date.asc() if ascending else Transaction.transaction_date.desc()
    try:
        return (
            db.query(Transaction)
            .filter(Transaction.user_id == user_id)
            .order_by(order, Transaction.id.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise _fail(db, "load transactions") from exc


def add_transaction(db: Session, user_id: str, fields: Dict[str, Any]) -> Transaction:
    tx = Transaction(user_id=user_id, **fields)
    try:
        db.add(tx)
        db.commit()
        db.refresh(tx)
    except SQLAlchemyError as exc:
        raise _fail(db, "save the transaction") from exc

    logger.info("Added %s transaction %s for user %s", tx.type, tx.id, user_id)
    return tx


def add_transactions(db: Session, user_id: str, rows: List[Dict[str, Any]]) -> int:
    """Insert several transactions in one commit. Returns the number inserted."""
    try:
        db.add_all([Transaction(user_id=user_id, **fields) for fields in rows])
        db.commit()
    except SQLAlchemyError as exc:
        raise _fail(db, "save the imported transactions") from exc

    logger.info("Imported %d transactions for user %s", len(rows), user_id)
    return len(rows)


def delete_transaction(db: Session, user_id: str, tx_id: int) -> bool:
    """
    Delete one of the user's transactions.
    Returns False when no such row exists for this user.
    """
    try:
        deleted = (
            db.query(Transaction)
            .filter(Transaction.id == tx_id, Transaction.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        raise _fail(db, "delete the transaction") from exc

    if deleted:
        logger.info("Deleted transaction %s for user %s", tx_id, user_id)
    return bool(deleted)


# ---- Allocations ----

def list_allocations(db: Session, user_id: str) -> List[Allocation]:
    try:
        return (
            db.query(Allocation)
            .filter(Allocation.user_id == user_id)
            .order_by(Allocation.id.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise _fail(db, "load allocations") from exc


def add_allocation(db: Session, user_id: str, fields: Dict[str, Any]) -> Allocation:
    allocation = Allocation(user_id=user_id, **fields)
    try:
        db.add(allocation)
        db.commit()
        db.refresh(allocation)
    except SQLAlchemyError as exc:
        raise _fail(db, "save the allocation") from exc

    logger.info("Added allocation %s (%s%%) for user %s", allocation.category, allocation.percentage, user_id)
    return allocation


def delete_allocation(db: Session, user_id: str, allocation_id: int) -> bool:
    try:
        deleted = (
            db.query(Allocation)
            .filter(Allocation.id == allocation_id, Allocation.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        raise _fail(db, "delete the allocation") from exc

    if deleted:
        logger.info("Deleted allocation %s for user %s", allocation_id, user_id)
    return bool(deleted)


# ---- Profiles ----

def get_profile(db: Session, user_id: str) -> Optional[Profile]:
    try:
        return db.query(Profile).filter(Profile.user_id == user_id).first()
    except SQLAlchemyError as exc:
        raise _fail(db, "load the profile") from exc
