"""
Tests for Money Manager models

Test strategy:
1. Unit tests for individual components (models, engines, validators)
2. Integration tests for the sync coordinator (with fake remote APIs)
3. No real API calls in tests (in-process fakes and test servers only)
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from money_manager.models.ledger import (
    Account,
    Division,
    ExpenseTransaction,
    IncomeTransaction,
    SyncMode,
    SyncStatus,
    TransactionPatch,
    TransactionType,
    TransferTransaction,
    dump_transaction,
    parse_transaction,
)


class TestAccountModel:
    """Tests for the Account model."""

    def test_account_from_wire(self):
        """Test the remote `balance` field maps to starting_balance."""
        account = Account.model_validate({"id": "acc-1", "name": "Cash Wallet", "balance": 8200})
        assert account.starting_balance == Decimal("8200")

    def test_account_missing_balance_defaults_to_zero(self):
        account = Account.model_validate({"id": "acc-9", "name": "New", "balance": None})
        assert account.starting_balance == Decimal("0")

    def test_account_strips_whitespace(self):
        account = Account(id="acc-1", name="  Savings Bank  ")
        assert account.name == "Savings Bank"

    def test_account_allows_negative_starting_balance(self):
        account = Account(id="acc-3", name="Credit Card", starting_balance=Decimal("-6200"))
        assert account.starting_balance == Decimal("-6200")


class TestTransactionModels:
    """Tests for the transaction variants."""

    def test_income_from_wire(self):
        """Test wire-shaped income parses into IncomeTransaction."""
        tx = parse_transaction({
            "id": "tx-1",
            "type": "income",
            "amount": 45000,
            "category": "Salary",
            "division": "Office",
            "date": "2026-10-01T09:30:00",
            "accountId": "acc-2",
        })
        assert isinstance(tx, IncomeTransaction)
        assert tx.account_id == "acc-2"
        assert tx.amount == Decimal("45000")
        assert tx.division == Division.OFFICE
        assert tx.occurred_at == datetime(2026, 10, 1, 9, 30)

    def test_occurred_at_alias_accepted(self):
        tx = parse_transaction({
            "type": "expense",
            "amount": "12.50",
            "category": "Food",
            "division": "Personal",
            "occurredAt": "2026-10-02T12:00:00",
            "accountId": "acc-1",
        })
        assert isinstance(tx, ExpenseTransaction)
        assert tx.occurred_at == datetime(2026, 10, 2, 12, 0)

    def test_aware_timestamp_normalised_to_local_naive(self):
        """Test UTC timestamps from the API become naive local time."""
        tx = parse_transaction({
            "type": "expense",
            "amount": 100,
            "category": "Fuel",
            "division": "Personal",
            "date": "2026-10-02T12:00:00Z",
            "accountId": "acc-1",
        })
        expected = datetime(2026, 10, 2, 12, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert tx.occurred_at.tzinfo is None
        assert tx.occurred_at == expected

    def test_transfer_has_no_single_account_reference(self):
        """Test the transfer shape is structural, not by convention."""
        tx = TransferTransaction(
            amount=Decimal("200"),
            division=Division.PERSONAL,
            from_account_id="acc-1",
            to_account_id="acc-2",
        )
        assert tx.type == TransactionType.TRANSFER
        assert not hasattr(tx, "account_id")
        assert tx.category == "Transfer"

    def test_transfer_null_category_defaults(self):
        tx = parse_transaction({
            "type": "transfer",
            "amount": 50,
            "category": None,
            "division": "Personal",
            "fromAccountId": "acc-1",
            "toAccountId": "acc-2",
        })
        assert tx.category == "Transfer"

    def test_transfer_same_account_rejected(self):
        with pytest.raises(ValueError, match="must differ"):
            TransferTransaction(
                amount=Decimal("200"),
                division=Division.PERSONAL,
                from_account_id="acc-1",
                to_account_id="acc-1",
            )

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10")])
    def test_non_positive_amount_rejected(self, amount):
        with pytest.raises(ValueError):
            IncomeTransaction(
                amount=amount,
                category="Salary",
                division=Division.OFFICE,
                account_id="acc-1",
            )

    def test_income_requires_category(self):
        with pytest.raises(ValueError):
            IncomeTransaction(
                amount=Decimal("10"),
                category="   ",
                division=Division.OFFICE,
                account_id="acc-1",
            )

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            parse_transaction({
                "type": "refund",
                "amount": 10,
                "category": "Food",
                "division": "Personal",
                "accountId": "acc-1",
            })

    def test_blank_description_is_none(self):
        tx = ExpenseTransaction(
            amount=Decimal("10"),
            category="Food",
            division=Division.PERSONAL,
            description="  ",
            account_id="acc-1",
        )
        assert tx.description is None

    def test_dump_uses_wire_names(self):
        """Test serialization matches the remote API shape."""
        tx = ExpenseTransaction(
            id="tx-9",
            amount=Decimal("1200"),
            category="Fuel",
            division=Division.PERSONAL,
            occurred_at=datetime(2026, 10, 2, 19, 15),
            account_id="acc-1",
        )
        wire = dump_transaction(tx)
        assert wire["accountId"] == "acc-1"
        assert wire["type"] == "expense"
        assert wire["amount"] == 1200.0
        assert wire["division"] == "Personal"
        assert "date" in wire
        assert "description" not in wire

        assert "id" not in dump_transaction(tx, include_id=False)

    def test_dump_then_parse_preserves_transaction(self):
        tx = TransferTransaction(
            id="tx-7",
            amount=Decimal("6000"),
            division=Division.PERSONAL,
            description="Move to savings",
            occurred_at=datetime(2026, 10, 11, 12, 10),
            from_account_id="acc-1",
            to_account_id="acc-2",
        )
        assert parse_transaction(dump_transaction(tx)) == tx


class TestTransactionPatch:
    """Tests for partial updates."""

    def test_changes_only_include_set_fields(self):
        patch = TransactionPatch.model_validate({"amount": 75, "description": "Dinner"})
        assert patch.changes() == {"amount": Decimal("75"), "description": "Dinner"}

    def test_wire_uses_aliases(self):
        patch = TransactionPatch.model_validate({"account_id": "acc-3", "amount": "20"})
        assert patch.to_wire() == {"accountId": "acc-3", "amount": 20.0}

    def test_id_is_ignored(self):
        patch = TransactionPatch.model_validate({"id": "tx-other", "category": "Food"})
        assert patch.changes() == {"category": "Food"}

    def test_patch_rejects_non_positive_amount(self):
        with pytest.raises(ValueError):
            TransactionPatch.model_validate({"amount": 0})


class TestSyncStatus:
    """Tests for the SyncStatus model."""

    def test_default_status_is_uninitialized(self):
        status = SyncStatus()
        assert status.mode == SyncMode.UNINITIALIZED
        assert status.is_connected is False

    def test_connected_status(self):
        assert SyncStatus(mode=SyncMode.CONNECTED, message="Connected to API").is_connected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
