"""Tests for the in-memory ledger store."""

import pytest
from datetime import datetime
from decimal import Decimal

from money_manager.ledger import LedgerStore, new_transaction_id
from money_manager.models.ledger import (
    Division,
    ExpenseTransaction,
    IncomeTransaction,
    TransactionPatch,
)
from money_manager.services.storage import DuplicateError, NotFoundError
from money_manager.validation import ValidationError


def _expense(amount="10", tx_id=None, category="Food"):
    return ExpenseTransaction(
        id=tx_id,
        amount=Decimal(amount),
        category=category,
        division=Division.PERSONAL,
        occurred_at=datetime(2026, 10, 19, 9, 0),
        account_id="acc-1",
    )


class TestLedgerStore:
    """Tests for LedgerStore."""

    def test_append_assigns_id(self):
        store = LedgerStore()
        stored = store.append(_expense())
        assert stored.id
        assert stored.id.startswith("tx-")
        assert stored.id in store

    def test_append_keeps_existing_id(self):
        store = LedgerStore()
        assert store.append(_expense(tx_id="remote-42")).id == "remote-42"

    def test_append_inserts_at_head(self):
        store = LedgerStore()
        first = store.append(_expense("1"))
        second = store.append(_expense("2"))
        third = store.append(_expense("3"))
        assert [tx.id for tx in store.list()] == [third.id, second.id, first.id]

    def test_append_duplicate_id_rejected(self):
        store = LedgerStore()
        store.append(_expense(tx_id="tx-1"))
        with pytest.raises(DuplicateError):
            store.append(_expense(tx_id="tx-1"))
        assert len(store) == 1

    def test_generated_ids_are_unique(self):
        assert len({new_transaction_id() for _ in range(100)}) == 100

    def test_update_merges_and_keeps_position(self):
        store = LedgerStore()
        a = store.append(_expense("1"))
        b = store.append(_expense("2"))
        updated = store.update(a.id, {"amount": Decimal("99"), "description": "Fixed"})
        assert updated.amount == Decimal("99")
        assert updated.category == "Food"
        assert updated.description == "Fixed"
        assert [tx.id for tx in store.list()] == [b.id, a.id]
        assert store.get(a.id) == updated

    def test_update_accepts_patch_model(self):
        store = LedgerStore()
        a = store.append(_expense("1"))
        updated = store.update(a.id, TransactionPatch(category="Travel"))
        assert updated.category == "Travel"

    def test_update_cannot_change_id(self):
        store = LedgerStore()
        a = store.append(_expense("1"))
        updated = store.update(a.id, {"id": "hijack", "amount": Decimal("2")})
        assert updated.id == a.id
        assert "hijack" not in store

    def test_update_missing_id(self):
        store = LedgerStore()
        with pytest.raises(NotFoundError):
            store.update("nope", {"amount": Decimal("1")})

    def test_update_invalid_merge_leaves_record(self):
        store = LedgerStore()
        a = store.append(_expense("5"))
        with pytest.raises(ValidationError):
            store.update(a.id, {"amount": Decimal("-1")})
        assert store.get(a.id).amount == Decimal("5")

    def test_list_returns_copy(self):
        store = LedgerStore()
        store.append(_expense())
        snapshot = store.list()
        snapshot.clear()
        assert len(store) == 1

    def test_replace_all_keeps_order_and_fills_ids(self):
        income = IncomeTransaction(
            amount=Decimal("100"),
            category="Salary",
            division=Division.OFFICE,
            account_id="acc-2",
        )
        store = LedgerStore([_expense(tx_id="tx-a"), income])
        ids = [tx.id for tx in store.list()]
        assert ids[0] == "tx-a"
        assert ids[1] is not None

    def test_get_missing(self):
        with pytest.raises(NotFoundError):
            LedgerStore().get("missing")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
