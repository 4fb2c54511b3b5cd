"""
Abstract Storage Interfaces

DESIGN DECISION: The ledger talks to two kinds of storage:
1. A remote ledger API, authoritative while it is reachable
2. A local durable slot, authoritative while offline

Both are hidden behind abstract interfaces so that:
1. The sync coordinator holds the only fallback logic
2. Tests can use in-memory fakes
3. The local medium (JSON file today) can be swapped out

The interfaces are intentionally small - only the operations the
coordinator needs.
"""

from abc import ABC, abstractmethod
from typing import Optional

from money_manager.models.ledger import Account, Transaction, TransactionPatch


class RemoteLedgerInterface(ABC):
    """
    Abstract interface for the remote ledger API.

    Implementations must translate every transport or payload problem
    into RemoteUnavailableError or MalformedResponseError, so callers
    only ever deal with the StorageError family.
    """

    @abstractmethod
    async def fetch_accounts(self) -> list[Account]:
        """
        Load all accounts.

        Raises:
            RemoteUnavailableError: Network error, timeout or non-2xx status
            MalformedResponseError: Payload is not a list of accounts
        """
        pass

    @abstractmethod
    async def fetch_transactions(self) -> list[Transaction]:
        """
        Load the full ledger, newest-created first.

        Raises:
            RemoteUnavailableError: Network error, timeout or non-2xx status
            MalformedResponseError: Payload is not a list of transactions
        """
        pass

    @abstractmethod
    async def create_transaction(self, tx: Transaction) -> Transaction:
        """
        Create a transaction remotely.

        Args:
            tx: The transaction to create (any id is ignored)

        Returns:
            The created transaction, carrying the remote-assigned id

        Raises:
            RemoteUnavailableError: Network error, timeout or non-2xx status
            MalformedResponseError: Response is not a transaction with an id
        """
        pass

    @abstractmethod
    async def update_transaction(
        self,
        tx_id: str,
        patch: TransactionPatch,
    ) -> Transaction:
        """
        Apply a partial update remotely.

        Returns:
            The updated transaction as stored remotely

        Raises:
            NotFoundError: The remote has no transaction with this id
            RemoteUnavailableError: Network error, timeout or other non-2xx status
            MalformedResponseError: Response is not a transaction
        """
        pass


class LocalLedgerStorageInterface(ABC):
    """
    Abstract interface for the local durable medium.

    Holds a single named slot with the serialized ledger. Reads happen
    at startup, writes after every mutation.
    """

    @abstractmethod
    def load_transactions(self) -> Optional[list[Transaction]]:
        """
        Read the ledger from the slot.

        Returns:
            The stored ledger, or None if the slot is empty or unreadable
        """
        pass

    @abstractmethod
    def save_transactions(self, transactions: list[Transaction]) -> None:
        """
        Overwrite the slot with the given ledger.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the slot."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class RemoteUnavailableError(StorageError):
    """Remote API unreachable, timed out or answered with a failure status."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class MalformedResponseError(StorageError):
    """Remote API answered with a payload of the wrong shape."""
    pass
