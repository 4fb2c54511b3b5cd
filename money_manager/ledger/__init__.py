"""Ledger store package."""

from money_manager.ledger.store import LedgerStore, new_transaction_id

__all__ = ["LedgerStore", "new_transaction_id"]
