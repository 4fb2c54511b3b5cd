"""Structured event logging package."""

from money_manager.audit.logger import LedgerEventLogger, configure_logging

__all__ = ["LedgerEventLogger", "configure_logging"]
