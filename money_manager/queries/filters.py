"""
Filter Engine

Display predicates over the ledger. Every predicate is either a wildcard
or a concrete value; a transaction is kept only if it matches all
concrete predicates.

Filtering is pure and idempotent. Nothing is cached; callers filter the
current ledger snapshot whenever the ledger or the predicates change.
"""

from collections.abc import Iterable
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from money_manager.models.ledger import Division, Transaction
from money_manager.queries.aggregates import END_OF_DAY


WILDCARD = "All"


class TransactionFilter(BaseModel):
    """
    Predicate set for the transaction list.

    `None`, an empty string and "All" all mean "match anything".
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    division: Optional[Division] = None
    category: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator('division', 'category', 'start_date', 'end_date', mode='before')
    @classmethod
    def wildcard_to_none(cls, v):
        if isinstance(v, str) and v.strip() in ("", WILDCARD):
            return None
        return v

    @model_validator(mode='after')
    def validate_date_order(self) -> 'TransactionFilter':
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    @property
    def is_wildcard(self) -> bool:
        return all(
            value is None
            for value in (self.division, self.category, self.start_date, self.end_date)
        )

    def matches(self, tx: Transaction) -> bool:
        if self.division is not None and tx.division != self.division:
            return False
        if self.category is not None and tx.category != self.category:
            return False
        if self.start_date is not None:
            if tx.occurred_at < datetime.combine(self.start_date, time.min):
                return False
        if self.end_date is not None:
            if tx.occurred_at > datetime.combine(self.end_date, END_OF_DAY):
                return False
        return True


def apply_filters(
    transactions: Iterable[Transaction],
    filters: Optional[TransactionFilter] = None,
) -> list[Transaction]:
    """Transactions matching `filters`, in their original order."""
    if filters is None or filters.is_wildcard:
        return list(transactions)
    return [tx for tx in transactions if filters.matches(tx)]
