"""
JSON File Storage Implementation

The local durable medium: a single JSON document on disk that maps slot
names to serialized values, much like a browser's localStorage. The
ledger lives in one slot.

TRADEOFFS:
- The whole ledger is rewritten on every mutation (fine at personal scale)
- Writes go through a temp file and os.replace, so a crash mid-write
  leaves the previous ledger intact
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from money_manager.models.ledger import Transaction, dump_transaction, parse_transaction
from money_manager.services.storage.interface import (
    LocalLedgerStorageInterface,
    StorageError,
)


DEFAULT_SLOT_NAME = "moneyManager:transactions"

logger = structlog.get_logger(__name__)


class JsonFileLedgerStorage(LocalLedgerStorageInterface):
    """
    Ledger slot stored in a JSON file.

    Other slots in the same file are preserved on write.
    """

    def __init__(self, path: Path | str, slot_name: str = DEFAULT_SLOT_NAME):
        self._path = Path(path).expanduser()
        self._slot_name = slot_name

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict:
        """Read the whole slot document; a missing file is an empty document."""
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
        if not isinstance(document, dict):
            raise ValueError("slot document is not a JSON object")
        return document

    def _write_document(self, document: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load_transactions(self) -> Optional[list[Transaction]]:
        """Read the ledger slot; unreadable contents count as empty."""
        try:
            raw = self._read_document().get(self._slot_name)
        except (OSError, ValueError) as e:
            logger.warning(
                "local_slot_unreadable",
                path=str(self._path),
                slot=self._slot_name,
                error=str(e),
            )
            return None

        if not isinstance(raw, list) or not raw:
            return None

        # One bad record must not cost the rest of the ledger
        transactions = []
        skipped = []
        for record in raw:
            try:
                transactions.append(parse_transaction(record))
            except PydanticValidationError:
                skipped.append(record.get("id") if isinstance(record, dict) else None)

        if skipped:
            logger.warning(
                "local_slot_malformed",
                path=str(self._path),
                slot=self._slot_name,
                skipped_ids=skipped,
                kept_count=len(transactions),
            )
        return transactions or None

    def save_transactions(self, transactions: list[Transaction]) -> None:
        """Rewrite the ledger slot."""
        try:
            try:
                document = self._read_document()
            except ValueError:
                # Corrupt file: the ledger slot is rewritten from scratch
                document = {}
            document[self._slot_name] = [dump_transaction(tx) for tx in transactions]
            self._write_document(document)
        except OSError as e:
            raise StorageError(f"Failed to write ledger to {self._path}: {e}")

    def clear(self) -> None:
        """Drop the ledger slot, keeping any other slots."""
        try:
            try:
                document = self._read_document()
            except ValueError:
                document = {}
            if self._slot_name in document:
                del document[self._slot_name]
                self._write_document(document)
        except OSError as e:
            raise StorageError(f"Failed to clear ledger slot in {self._path}: {e}")
