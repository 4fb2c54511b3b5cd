"""
Sync Coordinator for the Money Manager Ledger

This module owns the ledger and routes every mutation and read to the
remote ledger API or the local store.

Modes:
    UNINITIALIZED --load()--> CONNECTED   remote API is authoritative
    UNINITIALIZED --load()--> OFFLINE     local slot is authoritative

There is no way back to CONNECTED during the lifetime of a coordinator;
reconnection happens on the next startup.

DESIGN DECISION: The coordinator is the only place that knows about
both persistence paths. The fallback order is fixed:
1. Validate (nothing is touched if this fails)
2. Try the remote API when connected
3. On a remote failure apply the change locally, so a write is never dropped
4. Mirror the ledger to the local slot

Remote calls are the only awaited operations. The ledger is mutated
after the await returns, so reads never see a half-applied change.
"""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from money_manager.audit import LedgerEventLogger, configure_logging
from money_manager.config import Settings, get_settings
from money_manager.ledger import LedgerStore
from money_manager.models.ledger import (
    TRANSFER_CATEGORY,
    Account,
    Division,
    Period,
    PeriodTotals,
    SyncMode,
    SyncStatus,
    Transaction,
    TransactionPatch,
    TransactionType,
    ValidationIssue,
)
from money_manager.queries import (
    TransactionFilter,
    apply_filters,
    category_summary,
    compute_balances,
    net_worth,
    period_totals,
)
from money_manager.seed import default_accounts, demo_transactions
from money_manager.services.storage import (
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
from money_manager.validation import (
    EditWindowClosedError,
    TransactionValidator,
    ValidationError,
    is_editable,
)
from money_manager.validation.validator import issues_from_pydantic


_REMOTE_FAILURES = (RemoteUnavailableError, MalformedResponseError)


class SyncStateError(Exception):
    """Operation attempted before the coordinator was loaded."""
    pass


class SyncCoordinator:
    """
    Owns the ledger and keeps it in step with remote and local storage.

    Flow:
    1. load() → restore local slot, then try the remote API
    2. create()/update() → validate → remote (if connected) → ledger → local slot
    3. Reads → recomputed from the current ledger on every call
    """

    def __init__(
        self,
        local_storage: LocalLedgerStorageInterface,
        remote: Optional[RemoteLedgerInterface] = None,
        validator: Optional[TransactionValidator] = None,
        event_logger: Optional[LedgerEventLogger] = None,
        edit_window: Optional[timedelta] = None,
        seed_demo_data: Optional[bool] = None,
    ):
        if edit_window is None or seed_demo_data is None:
            ledger_settings = get_settings().ledger
            if edit_window is None:
                edit_window = timedelta(hours=ledger_settings.edit_window_hours)
            if seed_demo_data is None:
                seed_demo_data = ledger_settings.seed_demo_data

        self._local = local_storage
        self._remote = remote
        self._validator = validator or TransactionValidator()
        self._events = event_logger or LedgerEventLogger()
        self._edit_window = edit_window
        self._seed_demo_data = seed_demo_data

        self._ledger = LedgerStore()
        self._accounts: list[Account] = default_accounts()
        self._status = SyncStatus()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def mode(self) -> SyncMode:
        return self._status.mode

    @property
    def status_message(self) -> str:
        return self._status.message

    @property
    def is_connected(self) -> bool:
        return self._status.is_connected

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    @property
    def edit_window(self) -> timedelta:
        return self._edit_window

    def _set_status(self, mode: SyncMode, message: str) -> None:
        self._status = SyncStatus(mode=mode, message=message)

    def _require_loaded(self) -> None:
        if self._status.mode == SyncMode.UNINITIALIZED:
            raise SyncStateError("Call load() before changing the ledger")

    def _persist(self) -> None:
        """Mirror the ledger to the local slot. A failed write is logged, not raised."""
        try:
            self._local.save_transactions(self._ledger.list())
        except StorageError as e:
            self._events.persistence_failed(e)
            self._status = SyncStatus(
                mode=self._status.mode,
                message=f"{self._status.message} (local save failed: {e})",
            )

    def _restore_local(self) -> None:
        stored = self._local.load_transactions()
        if stored:
            self._ledger.replace_all(stored)
        elif self._seed_demo_data:
            self._ledger.replace_all(demo_transactions())
        else:
            self._ledger.replace_all([])

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    async def load(self) -> SyncStatus:
        """
        Load accounts and transactions and choose the mode.

        Any remote failure degrades to offline mode; nothing here raises.
        Calling load() again after the first time is a no-op.
        """
        if self._status.mode != SyncMode.UNINITIALIZED:
            return self._status

        self._restore_local()

        if self._remote is None:
            self._set_status(SyncMode.OFFLINE, "Offline mode (no remote API configured)")
            self._events.mode_selected(
                SyncMode.OFFLINE.value,
                self._status.message,
                transaction_count=len(self._ledger),
            )
            return self._status

        fetches = [
            asyncio.ensure_future(self._remote.fetch_accounts()),
            asyncio.ensure_future(self._remote.fetch_transactions()),
        ]
        try:
            accounts, transactions = await asyncio.gather(*fetches)
        except _REMOTE_FAILURES as e:
            # Stop the sibling fetch (and its retries) before returning
            for task in fetches:
                task.cancel()
            await asyncio.gather(*fetches, return_exceptions=True)
            self._set_status(SyncMode.OFFLINE, "Offline mode (local data)")
            self._events.mode_selected(
                SyncMode.OFFLINE.value,
                self._status.message,
                error_type=type(e).__name__,
                error=str(e),
                transaction_count=len(self._ledger),
            )
            return self._status

        # An empty remote keeps the default accounts and the local ledger
        if accounts:
            self._accounts = accounts
        if transactions:
            self._ledger.replace_all(transactions)
        self._set_status(SyncMode.CONNECTED, "Connected to API")
        self._events.mode_selected(
            SyncMode.CONNECTED.value,
            self._status.message,
            account_count=len(accounts),
            transaction_count=len(transactions),
        )
        return self._status

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _validate_new(self, payload: Union[dict, Transaction]) -> Transaction:
        try:
            tx = self._validator.validate_new(payload)
        except ValidationError as e:
            self._events.validation_failed("create", [i.model_dump() for i in e.issues])
            raise
        # Ids are always assigned by the remote API or the ledger store
        return tx.model_copy(update={"id": None})

    async def create(self, payload: Union[dict, Transaction]) -> Transaction:
        """
        Record a new transaction.

        Returns:
            The stored transaction with its assigned id

        Raises:
            ValidationError: Payload rejected; nothing was changed
            SyncStateError: load() has not run
        """
        self._require_loaded()
        tx = self._validate_new(payload)

        if self.is_connected:
            try:
                created = await self._remote.create_transaction(tx)
            except _REMOTE_FAILURES as e:
                self._events.remote_fallback("create", e)
            else:
                stored = self._ledger.append(created)
                self._persist()
                self._events.transaction_created(
                    stored.id, stored.type, str(stored.amount), source="remote"
                )
                return stored

        stored = self._ledger.append(tx)
        self._persist()
        self._events.transaction_created(
            stored.id, stored.type, str(stored.amount), source="local"
        )
        return stored

    async def create_transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Union[Decimal, int, str],
        division: Union[Division, str] = Division.PERSONAL,
        description: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> Transaction:
        """Record a transfer between two accounts."""
        payload = {
            "type": TransactionType.TRANSFER.value,
            "amount": amount,
            "category": TRANSFER_CATEGORY,
            "division": division,
            "description": description or "Account transfer",
            "from_account_id": from_account_id,
            "to_account_id": to_account_id,
        }
        if occurred_at is not None:
            payload["occurred_at"] = occurred_at
        return await self.create(payload)

    async def update(
        self,
        tx_id: str,
        patch: Union[dict, TransactionPatch],
        now: Optional[datetime] = None,
    ) -> Transaction:
        """
        Apply a partial update to an existing transaction.

        Raises:
            NotFoundError: Unknown id, locally or remotely; nothing was changed
            EditWindowClosedError: Too old to edit, or a transfer
            ValidationError: The updated record would be invalid
            SyncStateError: load() has not run
        """
        self._require_loaded()
        existing = self._ledger.get(tx_id)

        if not is_editable(existing, now=now, window=self._edit_window):
            error = EditWindowClosedError(
                f"Transaction {tx_id} can no longer be edited",
                [ValidationIssue(
                    field="occurred_at" if existing.type != TransactionType.TRANSFER else "type",
                    issue_type="edit_window",
                    message=(
                        "Transfers cannot be edited"
                        if existing.type == TransactionType.TRANSFER
                        else "Editing is only available shortly after a transaction occurs"
                    ),
                )],
            )
            self._events.update_rejected(tx_id, "edit_window", error)
            raise error

        try:
            patch = self._validator.validate_patch(patch)
            if patch.type is not None and patch.type != existing.type:
                raise ValidationError(
                    "Transaction type cannot be changed",
                    [ValidationIssue(
                        field="type",
                        issue_type="invalid_value",
                        message="Transaction type cannot be changed",
                    )],
                )
            self._validator.validate_update(existing, patch)
        except ValidationError as e:
            self._events.validation_failed("update", [i.model_dump() for i in e.issues])
            raise

        if self.is_connected:
            try:
                remote_tx = await self._remote.update_transaction(tx_id, patch)
            except NotFoundError as e:
                self._events.update_rejected(tx_id, "not_found_remotely", e)
                raise
            except _REMOTE_FAILURES as e:
                self._events.remote_fallback("update", e, tx_id=tx_id)
            else:
                updated = self._ledger.update(tx_id, remote_tx.model_dump(exclude={"id"}))
                self._persist()
                self._events.transaction_updated(
                    tx_id, sorted(patch.changes()), source="remote"
                )
                return updated

        updated = self._ledger.update(tx_id, patch)
        self._persist()
        self._events.transaction_updated(tx_id, sorted(patch.changes()), source="local")
        return updated

    def reset_demo(self) -> None:
        """Discard local changes and restore the demo ledger and default accounts."""
        try:
            self._local.clear()
        except StorageError as e:
            self._events.persistence_failed(e)
        self._ledger.replace_all(demo_transactions())
        self._accounts = default_accounts()
        self._persist()
        self._events.ledger_reset(len(self._ledger))

    # -------------------------------------------------------------------------
    # Reads (always recomputed from the current ledger)
    # -------------------------------------------------------------------------

    def get(self, tx_id: str) -> Transaction:
        return self._ledger.get(tx_id)

    def balances(self) -> dict[str, Decimal]:
        return compute_balances(self._accounts, self._ledger.list())

    def net_worth(self) -> Decimal:
        return net_worth(self.balances())

    def period_totals(
        self,
        period: Union[Period, str] = Period.MONTH,
        now: Optional[datetime] = None,
    ) -> PeriodTotals:
        return period_totals(self._ledger.list(), period, now)

    def filter(
        self,
        filters: Union[TransactionFilter, dict, None] = None,
    ) -> list[Transaction]:
        if isinstance(filters, dict):
            try:
                filters = TransactionFilter.model_validate(filters)
            except PydanticValidationError as e:
                issues = issues_from_pydantic(e)
                raise ValidationError(
                    "Invalid filter: " + "; ".join(i.message for i in issues),
                    issues,
                )
        return apply_filters(self._ledger.list(), filters)

    def category_summary(
        self,
        filters: Union[TransactionFilter, dict, None] = None,
    ) -> dict[tuple[TransactionType, str], Decimal]:
        return category_summary(self.filter(filters))

    def can_edit(self, tx_id: str, now: Optional[datetime] = None) -> bool:
        return is_editable(self._ledger.get(tx_id), now=now, window=self._edit_window)

    # Defined last: the method name shadows the builtin in the class body
    def list(self) -> list[Transaction]:
        """All transactions, most recent insertion first."""
        return self._ledger.list()


def create_coordinator(
    settings: Optional[Settings] = None,
) -> SyncCoordinator:
    """
    Factory function to build a coordinator from settings.

    Without a remote base URL the coordinator runs offline. Without
    local persistence the ledger lives in memory only.

    Call `await coordinator.load()` before use.
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    remote_settings = settings.remote_api
    remote = HttpLedgerClient(remote_settings) if remote_settings.is_configured else None

    local_settings = settings.local_store
    if local_settings.enabled:
        local = JsonFileLedgerStorage(local_settings.path, local_settings.slot_name)
    else:
        local = InMemoryLedgerStorage()

    ledger_settings = settings.ledger
    return SyncCoordinator(
        local_storage=local,
        remote=remote,
        edit_window=timedelta(hours=ledger_settings.edit_window_hours),
        seed_demo_data=ledger_settings.seed_demo_data,
    )
