"""
Ledger Store

The in-memory system of record for transactions. Newest insertions sit
at the head; everything else keeps insertion order.

The store does no I/O and holds no derived state. Balances, totals and
filtered views are computed from `list()` by the query modules.
"""

from typing import Optional, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from money_manager.models.ledger import Transaction, TransactionPatch, parse_transaction
from money_manager.services.storage.interface import DuplicateError, NotFoundError
from money_manager.validation.validator import ValidationError, issues_from_pydantic


def new_transaction_id() -> str:
    """Create a locally-unique transaction id."""
    return f"tx-{uuid4().hex}"


class LedgerStore:
    """Ordered collection of transactions, most recent insertion first."""

    def __init__(self, transactions: Optional[list[Transaction]] = None):
        self._transactions: list[Transaction] = []
        if transactions:
            self.replace_all(transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, tx_id: object) -> bool:
        return any(tx.id == tx_id for tx in self._transactions)

    def _index_of(self, tx_id: str) -> int:
        for idx, tx in enumerate(self._transactions):
            if tx.id == tx_id:
                return idx
        raise NotFoundError(f"Transaction not found: {tx_id}")

    def append(self, tx: Transaction) -> Transaction:
        """
        Insert a transaction at the head of the ledger.

        Assigns a fresh id when the transaction has none.

        Raises:
            DuplicateError: If the id is already in the ledger
        """
        if not tx.id:
            tx = tx.model_copy(update={"id": new_transaction_id()})
        elif tx.id in self:
            raise DuplicateError(f"Transaction already exists: {tx.id}")
        self._transactions.insert(0, tx)
        return tx

    def update(self, tx_id: str, patch: Union[dict, TransactionPatch]) -> Transaction:
        """
        Merge `patch` onto an existing transaction, keeping its position.

        Raises:
            NotFoundError: If no transaction has this id
            ValidationError: If the merged record is not a valid transaction
        """
        idx = self._index_of(tx_id)
        changes = patch.changes() if isinstance(patch, TransactionPatch) else dict(patch)
        changes.pop("id", None)

        merged = {**self._transactions[idx].model_dump(), **changes}
        try:
            updated = parse_transaction(merged)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid update for {tx_id}", issues_from_pydantic(e))

        self._transactions[idx] = updated
        return updated

    def get(self, tx_id: str) -> Transaction:
        """
        Raises:
            NotFoundError: If no transaction has this id
        """
        return self._transactions[self._index_of(tx_id)]

    def replace_all(self, transactions: list[Transaction]) -> None:
        """
        Replace the whole ledger, keeping the given order.

        Transactions without an id get one.
        """
        self._transactions = [
            tx if tx.id else tx.model_copy(update={"id": new_transaction_id()})
            for tx in transactions
        ]

    # Defined last: the method name shadows the builtin in the class body
    def list(self) -> list[Transaction]:
        """All transactions, most recent insertion first."""
        return list(self._transactions)
