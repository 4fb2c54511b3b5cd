"""
Balance Engine

DESIGN DECISION: Balances are never stored. Every call replays the full
ledger on top of the accounts' starting balances. The fold is
commutative, so the order of the ledger does not matter.

References to accounts that are not in the account list are ignored.
They contribute no delta and do not create phantom accounts.
"""

from collections.abc import Iterable
from decimal import Decimal

from money_manager.models.ledger import Account, Transaction, TransactionType


def transaction_deltas(tx: Transaction) -> list[tuple[str, Decimal]]:
    """
    Signed balance changes a single transaction causes.

    A transfer yields two deltas that sum to zero.
    """
    if tx.type == TransactionType.INCOME:
        return [(tx.account_id, tx.amount)]
    if tx.type == TransactionType.EXPENSE:
        return [(tx.account_id, -tx.amount)]
    return [
        (tx.from_account_id, -tx.amount),
        (tx.to_account_id, tx.amount),
    ]


def compute_balances(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """Derive the current balance of every known account."""
    balances = {account.id: account.starting_balance for account in accounts}

    for tx in transactions:
        for account_id, delta in transaction_deltas(tx):
            if account_id in balances:
                balances[account_id] += delta

    return balances


def net_worth(balances: dict[str, Decimal]) -> Decimal:
    return sum(balances.values(), Decimal("0"))
