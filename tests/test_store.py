from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.services import store
from models import Profile


def _tx(category="Food", amount="100", on=date(2024, 1, 10), type="expense"):
    return {
        "type": type,
        "category": category,
        "amount": Decimal(amount),
        "description": None,
        "transaction_date": on,
    }


def test_transactions_are_scoped_to_owner(db_session):
    store.add_transaction(db_session, "alice", _tx(on=date(2024, 1, 1)))
    store.add_transaction(db_session, "alice", _tx(on=date(2024, 3, 1)))
    store.add_transaction(db_session, "bob", _tx())

    alice = store.list_transactions(db_session, "alice")
    assert [t.transaction_date for t in alice] == [date(2024, 3, 1), date(2024, 1, 1)]
    assert all(t.user_id == "alice" for t in alice)

    oldest_first = store.list_transactions(db_session, "alice", ascending=True)
    assert [t.transaction_date for t in oldest_first] == [date(2024, 1, 1), date(2024, 3, 1)]


def test_add_transaction_sets_created_at(db_session):
    tx = store.add_transaction(db_session, "alice", _tx())
    assert tx.id is not None
    assert tx.created_at is not None
    assert tx.amount == Decimal("100")


def test_delete_transaction_only_for_owner(db_session):
    tx = store.add_transaction(db_session, "alice", _tx())

    assert store.delete_transaction(db_session, "bob", tx.id) is False
    assert len(store.list_transactions(db_session, "alice")) == 1

    assert store.delete_transaction(db_session, "alice", tx.id) is True
    assert store.list_transactions(db_session, "alice") == []
    assert store.delete_transaction(db_session, "alice", tx.id) is False


def test_bulk_insert(db_session):
    assert store.add_transactions(db_session, "alice", [_tx(), _tx(category="Rent")]) == 2
    assert {t.category for t in store.list_transactions(db_session, "alice")} == {"Food", "Rent"}


def test_allocations_roundtrip(db_session):
    first = store.add_allocation(db_session, "alice", {"category": "Food", "percentage": Decimal("30")})
    store.add_allocation(db_session, "alice", {"category": "Savings", "percentage": Decimal("20")})
    store.add_allocation(db_session, "bob", {"category": "Fun", "percentage": Decimal("50")})

    assert [a.category for a in store.list_allocations(db_session, "alice")] == ["Food", "Savings"]

    assert store.delete_allocation(db_session, "bob", first.id) is False
    assert store.delete_allocation(db_session, "alice", first.id) is True
    assert [a.category for a in store.list_allocations(db_session, "alice")] == ["Savings"]


def test_get_profile(db_session):
    db_session.add(Profile(user_id="alice", full_name="Alice Doe"))
    db_session.commit()

    assert store.get_profile(db_session, "alice").full_name == "Alice Doe"
    assert store.get_profile(db_session, "bob") is None


def test_query_failure_becomes_store_error(db_session, monkeypatch, caplog):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "query", broken_query)

    with pytest.raises(store.StoreError, match="Could not load transactions"):
        store.list_transactions(db_session, "alice")
    assert "Store call failed: load transactions" in caplog.text


def test_commit_failure_becomes_store_error(db_session, monkeypatch):
    def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", broken_commit)

    with pytest.raises(store.StoreError, match="Could not save the allocation"):
        store.add_allocation(db_session, "alice", {"category": "Food", "percentage": Decimal("10")})

