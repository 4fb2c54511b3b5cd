"""
Tests for the derived ledger views: balances, period totals, category
summaries and filters.
"""

import itertools

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from money_manager.models.ledger import (
    Account,
    Division,
    ExpenseTransaction,
    IncomeTransaction,
    Period,
    TransactionType,
    TransferTransaction,
)
from money_manager.queries import (
    TransactionFilter,
    apply_filters,
    category_summary,
    compute_balances,
    net_worth,
    period_range,
    period_totals,
    transaction_deltas,
)


def income(amount, account_id="acc-a", when=None, category="Salary", division=Division.OFFICE, tx_id=None):
    return IncomeTransaction(
        id=tx_id,
        amount=Decimal(amount),
        category=category,
        division=division,
        occurred_at=when or datetime(2026, 10, 5, 10, 0),
        account_id=account_id,
    )


def expense(amount, account_id="acc-a", when=None, category="Food", division=Division.PERSONAL, tx_id=None):
    return ExpenseTransaction(
        id=tx_id,
        amount=Decimal(amount),
        category=category,
        division=division,
        occurred_at=when or datetime(2026, 10, 5, 10, 0),
        account_id=account_id,
    )


def transfer(amount, from_id="acc-a", to_id="acc-b", when=None, tx_id=None):
    return TransferTransaction(
        id=tx_id,
        amount=Decimal(amount),
        division=Division.PERSONAL,
        occurred_at=when or datetime(2026, 10, 5, 10, 0),
        from_account_id=from_id,
        to_account_id=to_id,
    )


@pytest.fixture
def accounts():
    return [
        Account(id="acc-a", name="A", starting_balance=Decimal("1000")),
        Account(id="acc-b", name="B", starting_balance=Decimal("500")),
    ]


class TestBalanceEngine:
    """Tests for compute_balances and transaction_deltas."""

    def test_transfer_scenario(self, accounts):
        """A(1000), B(500), transfer 200 A→B gives A=800, B=700."""
        balances = compute_balances(accounts, [transfer("200")])
        assert balances == {"acc-a": Decimal("800"), "acc-b": Decimal("700")}

    def test_no_transactions_gives_starting_balances(self, accounts):
        assert compute_balances(accounts, []) == {
            "acc-a": Decimal("1000"),
            "acc-b": Decimal("500"),
        }

    def test_income_and_expense(self, accounts):
        balances = compute_balances(accounts, [
            income("250", "acc-b"),
            expense("75.50", "acc-a"),
        ])
        assert balances["acc-a"] == Decimal("924.50")
        assert balances["acc-b"] == Decimal("750")

    def test_unknown_account_references_are_ignored(self, accounts):
        """Unknown accounts contribute nothing and are not created."""
        balances = compute_balances(accounts, [
            income("100", "acc-ghost"),
            transfer("40", "acc-a", "acc-ghost"),
        ])
        assert "acc-ghost" not in balances
        assert balances["acc-a"] == Decimal("960")
        assert balances["acc-b"] == Decimal("500")

    def test_order_independent(self, accounts):
        """Permuting the ledger never changes derived balances."""
        ledger = [
            income("300", "acc-a"),
            expense("120", "acc-b"),
            transfer("50", "acc-b", "acc-a"),
            transfer("75", "acc-a", "acc-b"),
        ]
        expected = compute_balances(accounts, ledger)
        for permutation in itertools.permutations(ledger):
            assert compute_balances(accounts, permutation) == expected

    def test_transfer_deltas_sum_to_zero(self):
        transfers = [
            transfer("200"),
            transfer("0.01", "acc-b", "acc-a"),
            transfer("99999.99", "acc-a", "acc-c"),
        ]
        total = sum(
            (delta for tx in transfers for _, delta in transaction_deltas(tx)),
            Decimal("0"),
        )
        assert total == Decimal("0")

    def test_income_and_expense_deltas(self):
        assert transaction_deltas(income("10", "acc-a")) == [("acc-a", Decimal("10"))]
        assert transaction_deltas(expense("10", "acc-a")) == [("acc-a", Decimal("-10"))]

    def test_net_worth(self, accounts):
        balances = compute_balances(accounts, [expense("100", "acc-a")])
        assert net_worth(balances) == Decimal("1400")


class TestPeriodRange:
    """Tests for calendar period boundaries."""

    def test_week_from_sunday_starts_six_days_prior(self):
        start, end = period_range(Period.WEEK, datetime(2026, 10, 18, 15, 0))  # Sunday
        assert start == datetime(2026, 10, 12, 0, 0)
        assert end == datetime(2026, 10, 18, 23, 59, 59, 999999)

    def test_week_from_monday(self):
        start, end = period_range("week", datetime(2026, 10, 19, 0, 0))  # Monday
        assert start == datetime(2026, 10, 19)
        assert end == datetime(2026, 10, 25, 23, 59, 59, 999999)

    def test_month_range(self):
        start, end = period_range(Period.MONTH, datetime(2028, 2, 10, 8, 0))
        assert start == datetime(2028, 2, 1)
        assert end == datetime(2028, 2, 29, 23, 59, 59, 999999)

    def test_year_range(self):
        start, end = period_range(Period.YEAR, datetime(2026, 6, 30))
        assert start == datetime(2026, 1, 1)
        assert end == datetime(2026, 12, 31, 23, 59, 59, 999999)

    def test_unknown_period_rejected(self):
        with pytest.raises(ValueError):
            period_range("fortnight", datetime(2026, 6, 30))


class TestPeriodTotals:
    """Tests for period_totals."""

    def test_month_includes_first_middle_and_last_day(self):
        """1st, 15th and last of the month count; the 1st of next month does not."""
        ledger = [
            income("100", when=datetime(2026, 2, 1, 0, 0)),
            income("200", when=datetime(2026, 2, 15, 12, 0)),
            income("300", when=datetime(2026, 2, 28, 23, 59, 59, 999000)),
            income("400", when=datetime(2026, 3, 1, 0, 0)),
        ]
        totals = period_totals(ledger, Period.MONTH, now=datetime(2026, 2, 10))
        assert totals.income == Decimal("600")
        assert totals.expense == Decimal("0")

    def test_transfers_excluded(self):
        ledger = [
            income("1000"),
            expense("250"),
            transfer("500"),
        ]
        totals = period_totals(ledger, Period.MONTH, now=datetime(2026, 10, 19))
        assert totals.income == Decimal("1000")
        assert totals.expense == Decimal("250")
        assert totals.net == Decimal("750")

    def test_no_matches_gives_zero(self):
        totals = period_totals([income("1000")], Period.WEEK, now=datetime(2025, 1, 1))
        assert totals.income == Decimal("0")
        assert totals.expense == Decimal("0")
        assert totals.period == Period.WEEK

    def test_empty_ledger(self):
        totals = period_totals([], "year", now=datetime(2026, 10, 19))
        assert totals.income == Decimal("0")
        assert totals.start == datetime(2026, 1, 1)


class TestCategorySummary:
    """Tests for category_summary."""

    def test_groups_by_type_and_category(self):
        ledger = [
            income("1000", category="Salary"),
            income("500", category="Salary"),
            expense("40", category="Food"),
            expense("60", category="Food"),
            expense("30", category="Salary"),
            transfer("999"),
        ]
        summary = category_summary(ledger)
        assert summary == {
            (TransactionType.INCOME, "Salary"): Decimal("1500"),
            (TransactionType.EXPENSE, "Food"): Decimal("100"),
            (TransactionType.EXPENSE, "Salary"): Decimal("30"),
        }

    def test_empty(self):
        assert category_summary([]) == {}


class TestFilterEngine:
    """Tests for TransactionFilter and apply_filters."""

    @pytest.fixture
    def ledger(self):
        return [
            income("1000", when=datetime(2026, 10, 1, 9, 0), category="Salary", division=Division.OFFICE),
            expense("50", when=datetime(2026, 10, 3, 0, 0), category="Food"),
            expense("20", when=datetime(2026, 10, 5, 23, 59, 59, 999000), category="Fuel"),
            expense("70", when=datetime(2026, 10, 6, 0, 0), category="Food"),
        ]

    def test_wildcards_keep_everything(self, ledger):
        filters = TransactionFilter(division="All", category="All", start_date="", end_date=None)
        assert filters.is_wildcard
        assert apply_filters(ledger, filters) == ledger
        assert apply_filters(ledger) == ledger

    def test_division_and_category(self, ledger):
        result = apply_filters(ledger, TransactionFilter(division="Personal", category="Food"))
        assert [tx.amount for tx in result] == [Decimal("50"), Decimal("70")]

    def test_start_date_is_inclusive_from_midnight(self, ledger):
        result = apply_filters(ledger, TransactionFilter(start_date=date(2026, 10, 3)))
        assert [tx.amount for tx in result] == [Decimal("50"), Decimal("20"), Decimal("70")]

    def test_end_date_is_inclusive_to_end_of_day(self, ledger):
        result = apply_filters(ledger, TransactionFilter(end_date=date(2026, 10, 5)))
        assert [tx.amount for tx in result] == [Decimal("1000"), Decimal("50"), Decimal("20")]

    def test_date_range(self, ledger):
        filters = TransactionFilter(start_date="2026-10-02", end_date="2026-10-05")
        result = apply_filters(ledger, filters)
        assert [tx.category for tx in result] == ["Food", "Fuel"]

    def test_filtering_is_idempotent(self, ledger):
        filters = TransactionFilter(division=Division.PERSONAL, start_date=date(2026, 10, 2))
        once = apply_filters(ledger, filters)
        assert apply_filters(once, filters) == once

    def test_no_matches(self, ledger):
        assert apply_filters(ledger, TransactionFilter(category="Rent")) == []

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError, match="End date cannot be before start date"):
            TransactionFilter(start_date=date(2026, 10, 5), end_date=date(2026, 10, 1))

    def test_transfers_match_transfer_category(self):
        ledger = [transfer("10"), expense("5")]
        result = apply_filters(ledger, TransactionFilter(category="Transfer"))
        assert len(result) == 1
        assert result[0].type == TransactionType.TRANSFER

    def test_filter_then_summary(self, ledger):
        filtered = apply_filters(ledger, TransactionFilter(category="Food"))
        assert category_summary(filtered) == {(TransactionType.EXPENSE, "Food"): Decimal("120")}

    def test_end_of_window_instant(self):
        late = expense("1", when=datetime(2026, 10, 5) + timedelta(days=1) - timedelta(microseconds=1))
        assert apply_filters([late], TransactionFilter(end_date=date(2026, 10, 5))) == [late]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
