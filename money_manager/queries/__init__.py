"""Derived views over the ledger: balances, aggregates and filters."""

from money_manager.queries.aggregates import (
    category_summary,
    period_range,
    period_totals,
)
from money_manager.queries.balances import (
    compute_balances,
    net_worth,
    transaction_deltas,
)
from money_manager.queries.filters import TransactionFilter, apply_filters

__all__ = [
    "TransactionFilter",
    "apply_filters",
    "category_summary",
    "compute_balances",
    "net_worth",
    "period_range",
    "period_totals",
    "transaction_deltas",
]
