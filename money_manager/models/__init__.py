"""
Data Models Package

This package contains all Pydantic models used by the ledger core.
All data flowing through the system must conform to these schemas.
"""

from money_manager.models.ledger import (
    DEFAULT_CATEGORIES,
    TRANSFER_CATEGORY,
    Account,
    Division,
    ExpenseTransaction,
    IncomeTransaction,
    Period,
    PeriodTotals,
    SyncMode,
    SyncStatus,
    Transaction,
    TransactionPatch,
    TransactionType,
    TransferTransaction,
    ValidationIssue,
    dump_transaction,
    parse_transaction,
    parse_transactions,
    to_local_naive,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "TRANSFER_CATEGORY",
    "Account",
    "Division",
    "ExpenseTransaction",
    "IncomeTransaction",
    "Period",
    "PeriodTotals",
    "SyncMode",
    "SyncStatus",
    "Transaction",
    "TransactionPatch",
    "TransactionType",
    "TransferTransaction",
    "ValidationIssue",
    "dump_transaction",
    "parse_transaction",
    "parse_transactions",
    "to_local_naive",
]
