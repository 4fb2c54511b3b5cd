"""
Demo data for a fresh ledger.

Used when the local slot is empty (and seeding is enabled), for the
offline account list, and by reset_demo().
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from money_manager.models.ledger import (
    Account,
    Division,
    ExpenseTransaction,
    IncomeTransaction,
    Transaction,
    TransferTransaction,
)


DEFAULT_ACCOUNTS = (
    Account(id="acc-1", name="Cash Wallet", starting_balance=Decimal("8200")),
    Account(id="acc-2", name="Savings Bank", starting_balance=Decimal("48000")),
    Account(id="acc-3", name="Credit Card", starting_balance=Decimal("-6200")),
)


def default_accounts() -> list[Account]:
    return list(DEFAULT_ACCOUNTS)


def demo_transactions(now: Optional[datetime] = None) -> list[Transaction]:
    """A month of sample activity, dated within the month containing `now`."""
    now = now or datetime.now()

    def day(d: int, hour: int, minute: int) -> datetime:
        return datetime(now.year, now.month, d, hour, minute)

    transactions = [
        IncomeTransaction(
            id="tx-1",
            amount=Decimal("45000"),
            category="Salary",
            division=Division.OFFICE,
            description="Monthly payout",
            occurred_at=day(1, 9, 30),
            account_id="acc-2",
        ),
        ExpenseTransaction(
            id="tx-2",
            amount=Decimal("1200"),
            category="Fuel",
            division=Division.PERSONAL,
            description="Commute top-up",
            occurred_at=day(2, 19, 15),
            account_id="acc-1",
        ),
        ExpenseTransaction(
            id="tx-3",
            amount=Decimal("4200"),
            category="Groceries",
            division=Division.PERSONAL,
            description="Weekly essentials",
            occurred_at=day(4, 18, 45),
            account_id="acc-1",
        ),
        IncomeTransaction(
            id="tx-4",
            amount=Decimal("18000"),
            category="Freelance",
            division=Division.PERSONAL,
            description="Design project",
            occurred_at=day(7, 14, 5),
            account_id="acc-2",
        ),
        ExpenseTransaction(
            id="tx-5",
            amount=Decimal("2800"),
            category="Medical",
            division=Division.PERSONAL,
            description="Pharmacy",
            occurred_at=day(9, 10, 0),
            account_id="acc-1",
        ),
        TransferTransaction(
            id="tx-6",
            amount=Decimal("6000"),
            division=Division.PERSONAL,
            description="Move to savings",
            occurred_at=day(11, 12, 10),
            from_account_id="acc-1",
            to_account_id="acc-2",
        ),
    ]
    return transactions
