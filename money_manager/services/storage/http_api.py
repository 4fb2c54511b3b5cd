"""
Remote Ledger API Client

Talks JSON over HTTP to the ledger API:

    GET    {base}/accounts
    GET    {base}/transactions
    POST   {base}/transactions
    PATCH  {base}/transactions/{id}

DESIGN DECISION: Every failure leaves this module as a StorageError
subclass. The sync coordinator decides what a failure means (offline
mode, local fallback, or an error for the caller); this client only
reports what happened.

Transport failures (connection refused, timeouts) are retried with
exponential backoff. HTTP status failures are answers, not glitches,
and are never retried.
"""

import asyncio
from typing import Any, Optional

import aiohttp
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from money_manager.config import RemoteApiSettings, get_settings
from money_manager.models.ledger import (
    Account,
    Transaction,
    TransactionPatch,
    dump_transaction,
    parse_transaction,
    parse_transactions,
)
from money_manager.services.storage.interface import (
    MalformedResponseError,
    NotFoundError,
    RemoteLedgerInterface,
    RemoteUnavailableError,
)


_TRANSIENT_ERRORS = (aiohttp.ClientConnectionError, asyncio.TimeoutError)

_account_list_adapter = TypeAdapter(list[Account])


class HttpLedgerClient(RemoteLedgerInterface):
    """
    aiohttp implementation of the remote ledger API.

    A short-lived ClientSession is opened per request; the ledger makes
    a handful of calls per user action, so there is no pool to manage.
    """

    def __init__(
        self,
        settings: Optional[RemoteApiSettings] = None,
        base_url: Optional[str] = None,
    ):
        self._settings = settings or get_settings().remote_api
        base = base_url or self._settings.base_url
        if not base:
            raise ValueError("Remote ledger API base URL is not configured")
        self._base_url = base.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=self._settings.timeout_seconds)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._settings.retry_attempts),
            wait=wait_exponential(
                multiplier=self._settings.retry_min_wait,
                min=self._settings.retry_min_wait,
                max=self._settings.retry_max_wait,
            ),
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            reraise=True,
        )

    async def _send(self, method: str, url: str, payload: Optional[dict]) -> Any:
        async with aiohttp.ClientSession(timeout=self._timeout) as session:
            async with session.request(method, url, json=payload) as response:
                if not 200 <= response.status < 300:
                    # Error bodies are only for the message; they may not be UTF-8
                    message = await response.text(errors="replace")
                    raise RemoteUnavailableError(
                        message or f"Request failed with {response.status}",
                        status=response.status,
                    )
                try:
                    return await response.json(content_type=None)
                except (UnicodeDecodeError, ValueError) as e:
                    raise MalformedResponseError(f"{method} {url} returned invalid JSON: {e}")

    async def _request_json(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
    ) -> Any:
        """Send one request (with transport retries) and decode the JSON body."""
        url = f"{self._base_url}{path}"
        try:
            async for attempt in self._retrying():
                with attempt:
                    return await self._send(method, url, payload)
        except _TRANSIENT_ERRORS as e:
            raise RemoteUnavailableError(f"{method} {url} failed: {e!r}")
        except aiohttp.ClientError as e:
            raise RemoteUnavailableError(f"{method} {url} failed: {e!r}")

    async def fetch_accounts(self) -> list[Account]:
        data = await self._request_json("GET", "/accounts")
        if not isinstance(data, list):
            raise MalformedResponseError("Expected a list of accounts")
        try:
            return _account_list_adapter.validate_python(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(f"Invalid account payload: {e}")

    async def fetch_transactions(self) -> list[Transaction]:
        data = await self._request_json("GET", "/transactions")
        if not isinstance(data, list):
            raise MalformedResponseError("Expected a list of transactions")
        try:
            return parse_transactions(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(f"Invalid transaction payload: {e}")

    async def create_transaction(self, tx: Transaction) -> Transaction:
        data = await self._request_json(
            "POST",
            "/transactions",
            dump_transaction(tx, include_id=False),
        )
        created = self._parse_single(data)
        if not created.id:
            raise MalformedResponseError("Created transaction has no id")
        return created

    async def update_transaction(
        self,
        tx_id: str,
        patch: TransactionPatch,
    ) -> Transaction:
        try:
            data = await self._request_json(
                "PATCH",
                f"/transactions/{tx_id}",
                patch.to_wire(),
            )
        except RemoteUnavailableError as e:
            if e.status == 404:
                raise NotFoundError(f"Transaction not found remotely: {tx_id}")
            raise
        return self._parse_single(data)

    @staticmethod
    def _parse_single(data: Any) -> Transaction:
        if not isinstance(data, dict):
            raise MalformedResponseError("Expected a transaction object")
        try:
            return parse_transaction(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(f"Invalid transaction payload: {e}")
