"""
Transaction Validation

DESIGN DECISION: Validation is an explicit step that runs before any
store mutation, independent of the persistence backend. A payload that
fails validation never reaches the ledger, the local slot or the remote
API.

Validation happens in two steps:

STEP 1 - PRESENCE CHECKS:
- `type` must be present and known
- `amount` must be present
These give the clearest messages for the most common mistakes.

STEP 2 - SCHEMA VALIDATION:
- The payload is parsed into its transaction variant
- Positive amount, required category, account references,
  transfer accounts must differ

IMPORTANT: Validation NEVER silently fixes issues. It reports them.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from money_manager.models.ledger import (
    Transaction,
    TransactionPatch,
    TransactionType,
    ValidationIssue,
    parse_transaction,
)


class ValidationError(Exception):
    """A payload was rejected before touching any store."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        self.issues = issues or []
        super().__init__(message)


class EditWindowClosedError(ValidationError):
    """The transaction can no longer be edited (too old, or a transfer)."""
    pass


_FRIENDLY_MESSAGES = {
    ("amount", "greater_than"): "Amount must be greater than zero",
    ("category", "string_too_short"): "Category is required",
    ("category", "missing"): "Category is required",
    ("division", "enum"): "Division must be Personal or Office",
}

_TYPE_TAGS = {t.value for t in TransactionType}


def issues_from_pydantic(error: PydanticValidationError) -> list[ValidationIssue]:
    """Convert a pydantic error into ValidationIssue entries."""
    issues = []
    for err in error.errors():
        # Discriminated unions prefix the location with the variant tag
        loc = [str(part) for part in err["loc"] if str(part) not in _TYPE_TAGS]
        field = ".".join(loc) or "transaction"
        issue_type = "missing" if err["type"] == "missing" else "invalid_value"
        message = _FRIENDLY_MESSAGES.get((field, err["type"]), err["msg"])
        issues.append(ValidationIssue(
            field=field,
            issue_type=issue_type,
            message=message,
        ))
    return issues


def _summary(issues: list[ValidationIssue]) -> str:
    return "; ".join(f"{issue.field}: {issue.message}" for issue in issues)


def _as_dict(payload: Union[Mapping, BaseModel]) -> dict:
    if isinstance(payload, BaseModel):
        data = payload.model_dump()
    else:
        data = dict(payload)
    tx_type = data.get("type")
    if isinstance(tx_type, Enum):
        data["type"] = tx_type.value
    return data


class TransactionValidator:
    """Validates new transactions and partial updates."""

    def _check_presence(self, data: dict) -> list[ValidationIssue]:
        issues = []

        tx_type = data.get("type")
        if not tx_type:
            issues.append(ValidationIssue(
                field="type",
                issue_type="missing",
                message="Transaction type is required",
            ))
        elif tx_type not in _TYPE_TAGS:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Unknown transaction type: {tx_type}",
            ))

        if data.get("amount") in (None, ""):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            ))

        return issues

    def _parse(self, data: dict) -> Transaction:
        try:
            return parse_transaction(data)
        except PydanticValidationError as e:
            issues = issues_from_pydantic(e)
            raise ValidationError(f"Invalid transaction: {_summary(issues)}", issues)

    def validate_new(self, payload: Union[Mapping, BaseModel]) -> Transaction:
        """
        Validate a payload for a new transaction.

        Args:
            payload: Wire-shaped or snake_case mapping, or a transaction model

        Returns:
            The parsed transaction variant

        Raises:
            ValidationError: With one issue per problem found
        """
        data = _as_dict(payload)
        issues = self._check_presence(data)
        if issues:
            raise ValidationError(f"Invalid transaction: {_summary(issues)}", issues)
        return self._parse(data)

    def validate_patch(self, patch: Union[Mapping, TransactionPatch]) -> TransactionPatch:
        """Parse a partial update. An `id` key is ignored."""
        if isinstance(patch, TransactionPatch):
            return patch
        try:
            return TransactionPatch.model_validate(_as_dict(patch))
        except PydanticValidationError as e:
            issues = issues_from_pydantic(e)
            raise ValidationError(f"Invalid update: {_summary(issues)}", issues)

    def validate_update(
        self,
        existing: Transaction,
        patch: TransactionPatch,
    ) -> Transaction:
        """
        Validate the record that applying `patch` to `existing` would produce.

        The merged record must be a complete, valid transaction on its own;
        e.g. switching an expense to a transfer requires both transfer
        account ids in the patch.
        """
        merged = {**existing.model_dump(), **patch.changes()}
        return self._parse(merged)
