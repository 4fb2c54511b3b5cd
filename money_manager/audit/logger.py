"""
Ledger Event Logger

DESIGN DECISION: Every decision the sync coordinator makes is logged as
a structured event: which mode it chose, where each write went, and
why a fallback happened. When local and remote disagree, these lines
are the only record of how the ledger got into its state.

Events go to the structured local log only. They are not persisted
anywhere; the ledger itself is the system of record.
"""

import logging
from typing import Optional

import structlog


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class LedgerEventLogger:
    """Structured log of sync coordinator decisions."""

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("money_manager.sync")

    def mode_selected(self, mode: str, message: str, **details) -> None:
        if mode == "offline":
            self._logger.warning("sync_mode_selected", mode=mode, message=message, **details)
        else:
            self._logger.info("sync_mode_selected", mode=mode, message=message, **details)

    def transaction_created(self, tx_id: str, tx_type: str, amount: str, source: str) -> None:
        """`source` is "remote" or "local"."""
        self._logger.info(
            "transaction_created",
            tx_id=tx_id,
            tx_type=tx_type,
            amount=amount,
            source=source,
        )

    def transaction_updated(self, tx_id: str, fields: list[str], source: str) -> None:
        self._logger.info(
            "transaction_updated",
            tx_id=tx_id,
            fields=fields,
            source=source,
        )

    def remote_fallback(self, operation: str, error: Exception, tx_id: Optional[str] = None) -> None:
        self._logger.warning(
            "remote_fallback",
            operation=operation,
            tx_id=tx_id,
            error_type=type(error).__name__,
            error=str(error),
        )

    def update_rejected(self, tx_id: str, reason: str, error: Exception) -> None:
        self._logger.warning(
            "update_rejected",
            tx_id=tx_id,
            reason=reason,
            error=str(error),
        )

    def validation_failed(self, operation: str, issues: list[dict]) -> None:
        self._logger.info("validation_failed", operation=operation, issues=issues)

    def persistence_failed(self, error: Exception) -> None:
        self._logger.error(
            "local_persistence_failed",
            error_type=type(error).__name__,
            error=str(error),
        )

    def ledger_reset(self, transaction_count: int) -> None:
        self._logger.info("ledger_reset", transaction_count=transaction_count)
