"""Services package."""

from money_manager.services.storage import (
    DuplicateError,
    HttpLedgerClient,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LocalLedgerStorageInterface,
    MalformedResponseError,
    NotFoundError,
    RemoteLedgerInterface,
    RemoteUnavailableError,
    StorageError,
)

__all__ = [
    "DuplicateError",
    "HttpLedgerClient",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LocalLedgerStorageInterface",
    "MalformedResponseError",
    "NotFoundError",
    "RemoteLedgerInterface",
    "RemoteUnavailableError",
    "StorageError",
]
