"""In-memory ledger slot, used when local persistence is disabled and in tests."""

from typing import Optional

from money_manager.models.ledger import Transaction
from money_manager.services.storage.interface import LocalLedgerStorageInterface


class InMemoryLedgerStorage(LocalLedgerStorageInterface):
    """Non-durable ledger slot. Counts writes so callers can check persistence."""

    def __init__(self, transactions: Optional[list[Transaction]] = None):
        self._transactions = list(transactions) if transactions else None
        self.save_count = 0

    def load_transactions(self) -> Optional[list[Transaction]]:
        if not self._transactions:
            return None
        return list(self._transactions)

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self._transactions = list(transactions)
        self.save_count += 1

    def clear(self) -> None:
        self._transactions = None
