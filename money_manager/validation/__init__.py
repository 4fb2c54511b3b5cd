"""Validation package."""

from money_manager.validation.edit_window import DEFAULT_EDIT_WINDOW, is_editable
from money_manager.validation.validator import (
    EditWindowClosedError,
    TransactionValidator,
    ValidationError,
    issues_from_pydantic,
)

__all__ = [
    "DEFAULT_EDIT_WINDOW",
    "EditWindowClosedError",
    "TransactionValidator",
    "ValidationError",
    "is_editable",
    "issues_from_pydantic",
]
