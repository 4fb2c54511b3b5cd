"""
Core Data Models for the Money Manager Ledger

These models define the strict schemas for all data flowing through the ledger.
They are designed to:
1. Make invalid transaction shapes unrepresentable
2. Provide clear validation error messages
3. Round-trip through the remote API and the local slot unchanged

DESIGN DECISION: A transaction is a tagged union over `type`.
Income and expense carry one `account_id`; a transfer carries
`from_account_id` and `to_account_id`. There is no "optional field that
depends on type" anywhere in the ledger.

Wire names follow the remote API (camelCase, `date` for the timestamp).
Python code always uses the snake_case attribute names.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    TypeAdapter,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Kinds of ledger entries."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class Division(str, Enum):
    """Which side of life a transaction belongs to."""
    PERSONAL = "Personal"
    OFFICE = "Office"


class Period(str, Enum):
    """Calendar windows for aggregate reporting."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class SyncMode(str, Enum):
    """
    Persistence mode of the sync coordinator.

    UNINITIALIZED only exists until the first load; after that the mode
    is fixed for the lifetime of the process.
    """
    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    OFFLINE = "offline"


# Suggested categories. Categories are free text; this is not a closed set.
DEFAULT_CATEGORIES = (
    "Fuel",
    "Food",
    "Movie",
    "Loan",
    "Medical",
    "Travel",
    "Groceries",
    "Rent",
    "Salary",
    "Freelance",
)

TRANSFER_CATEGORY = "Transfer"


# =============================================================================
# FIELD TYPES
# =============================================================================

def to_local_naive(value: datetime) -> datetime:
    """Normalise a timestamp to naive local wall-clock time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _iso_with_offset(value: datetime) -> str:
    return value.astimezone().isoformat()


# Amounts stay Decimal in Python and go out as JSON numbers
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]

LocalDateTime = Annotated[
    datetime,
    AfterValidator(to_local_naive),
    PlainSerializer(_iso_with_offset, return_type=str, when_used="json"),
]

_OCCURRED_AT_ALIASES = AliasChoices("date", "occurredAt", "occurred_at")


# =============================================================================
# ACCOUNTS
# =============================================================================

class Account(BaseModel):
    """
    A money account.

    Only the starting balance is stored. The current balance is always
    derived from the ledger (see money_manager.queries.balances).
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Stable opaque account identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    starting_balance: Money = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("balance", "startingBalance", "starting_balance"),
        serialization_alias="balance",
        description="Balance before any ledger entry (signed)"
    )

    @field_validator('starting_balance', mode='before')
    @classmethod
    def default_missing_balance(cls, v):
        return Decimal("0") if v is None else v


# =============================================================================
# TRANSACTIONS
# =============================================================================

class _TransactionBase(BaseModel):
    """Fields shared by every transaction variant."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    id: Optional[str] = Field(
        default=None,
        description="Assigned by the ledger store or the remote API"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Always positive; the type decides the sign"
    )
    division: Division
    description: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    occurred_at: LocalDateTime = Field(
        default_factory=datetime.now,
        validation_alias=_OCCURRED_AT_ALIASES,
        serialization_alias="date",
        description="When the money moved (local time)"
    )

    @field_validator('description')
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class _SingleAccountTransaction(_TransactionBase):
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    account_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("accountId", "account_id"),
        serialization_alias="accountId",
    )


class IncomeTransaction(_SingleAccountTransaction):
    """Money coming into one account."""
    type: Literal["income"] = "income"


class ExpenseTransaction(_SingleAccountTransaction):
    """Money leaving one account."""
    type: Literal["expense"] = "expense"


class TransferTransaction(_TransactionBase):
    """
    Money moving between two accounts.

    The two balance deltas always cancel out, so transfers never count
    as income or expense.
    """
    type: Literal["transfer"] = "transfer"
    category: str = Field(
        default=TRANSFER_CATEGORY,
        min_length=1,
        max_length=100,
    )
    from_account_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("fromAccountId", "from_account_id"),
        serialization_alias="fromAccountId",
    )
    to_account_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("toAccountId", "to_account_id"),
        serialization_alias="toAccountId",
    )

    @field_validator('category', mode='before')
    @classmethod
    def default_category(cls, v):
        return v or TRANSFER_CATEGORY

    @model_validator(mode='after')
    def validate_accounts_differ(self) -> 'TransferTransaction':
        if self.from_account_id == self.to_account_id:
            raise ValueError("Transfer source and destination accounts must differ")
        return self


Transaction = Annotated[
    Union[IncomeTransaction, ExpenseTransaction, TransferTransaction],
    Field(discriminator="type"),
]

_transaction_adapter = TypeAdapter(Transaction)
_transaction_list_adapter = TypeAdapter(list[Transaction])


def parse_transaction(data: dict) -> Transaction:
    """Validate a mapping (wire or snake_case keys) into a transaction variant."""
    return _transaction_adapter.validate_python(data)


def parse_transactions(data: list) -> list[Transaction]:
    return _transaction_list_adapter.validate_python(data)


def dump_transaction(tx: Transaction, include_id: bool = True) -> dict:
    """Serialize a transaction to its JSON wire shape."""
    return tx.model_dump(
        mode="json",
        by_alias=True,
        exclude_none=True,
        exclude=None if include_id else {"id"},
    )


class TransactionPatch(BaseModel):
    """
    A partial update to a transaction.

    Only the fields the caller actually set are applied. The id can
    never be patched.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    type: Optional[TransactionType] = None
    amount: Optional[Money] = Field(default=None, gt=0)
    category: Optional[str] = Field(default=None, max_length=100)
    division: Optional[Division] = None
    description: Optional[str] = Field(default=None, max_length=500)
    occurred_at: Optional[LocalDateTime] = Field(
        default=None,
        validation_alias=_OCCURRED_AT_ALIASES,
        serialization_alias="date",
    )
    account_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("accountId", "account_id"),
        serialization_alias="accountId",
    )
    from_account_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fromAccountId", "from_account_id"),
        serialization_alias="fromAccountId",
    )
    to_account_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("toAccountId", "to_account_id"),
        serialization_alias="toAccountId",
    )

    def changes(self) -> dict:
        """Set fields keyed by attribute name."""
        return self.model_dump(exclude_unset=True)

    def to_wire(self) -> dict:
        """Set fields in the remote API's JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class PeriodTotals(BaseModel):
    """Income and expense totals over a calendar window."""

    period: Period
    start: datetime
    end: datetime
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'edit_window')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class SyncStatus(BaseModel):
    """Current persistence mode plus the last status message."""

    mode: SyncMode = SyncMode.UNINITIALIZED
    message: str = "Not loaded"
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_connected(self) -> bool:
        return self.mode == SyncMode.CONNECTED
