"""
Storage Services Package

Provides abstract interfaces and concrete implementations for ledger storage:
a remote HTTP API and a local durable slot.
"""

from money_manager.services.storage.interface import (
    DuplicateError,
    LocalLedgerStorageInterface,
    MalformedResponseError,
    NotFoundError,
    RemoteLedgerInterface,
    RemoteUnavailableError,
    StorageError,
)
from money_manager.services.storage.http_api import HttpLedgerClient
from money_manager.services.storage.json_file import JsonFileLedgerStorage
from money_manager.services.storage.memory import InMemoryLedgerStorage

__all__ = [
    # Interfaces
    "LocalLedgerStorageInterface",
    "RemoteLedgerInterface",
    # Exceptions
    "DuplicateError",
    "MalformedResponseError",
    "NotFoundError",
    "RemoteUnavailableError",
    "StorageError",
    # Implementations
    "HttpLedgerClient",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
