"""
Edit window policy.

A transaction may be edited for a limited time after it occurred.
Transfers are never editable. Evaluate at decision time; the answer
changes as the clock moves.
"""

from datetime import datetime, timedelta
from typing import Optional

from money_manager.models.ledger import Transaction, TransactionType, to_local_naive


DEFAULT_EDIT_WINDOW = timedelta(hours=12)


def is_editable(
    tx: Transaction,
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_EDIT_WINDOW,
) -> bool:
    """Return True if `tx` may still be mutated at `now`."""
    if tx.type == TransactionType.TRANSFER:
        return False
    now = to_local_naive(now) if now is not None else datetime.now()
    return now - tx.occurred_at <= window
