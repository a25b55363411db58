"""
Chart-of-accounts value objects.

Responsibility:
    Types shared by the hierarchy builder, the account index and the account
    selector: the five account categories with their normal balance side,
    the flat ``AccountRecord`` read from the category services, the tree
    ``AccountNode`` and the flattened ``AccountInfo`` index entry.

Architecture position:
    Kernel > Domain -- pure data definitions, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NormalBalance(str, Enum):
    """Normal balance side for an account."""

    DEBIT = "debit"
    CREDIT = "credit"


class AccountCategory(str, Enum):
    """
    The five chart-of-account categories.

    Each category is served by its own external service and is wrapped under
    a synthetic root whose id is the enum value and whose listid is the
    category's chart code ("1" assets through "5" expenses).
    """

    ASSETS = "assets"
    REVENUES = "revenues"
    LIABILITIES = "liabilities"
    EXPENSES = "expenses"
    EQUITIES = "equities"

    @property
    def listid(self) -> str:
        return _CATEGORY_CODES[self][0]

    @property
    def label(self) -> str:
        return _CATEGORY_CODES[self][1]

    @property
    def normal_balance(self) -> NormalBalance:
        if self in (AccountCategory.ASSETS, AccountCategory.EXPENSES):
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT


_CATEGORY_CODES: dict[AccountCategory, tuple[str, str]] = {
    AccountCategory.ASSETS: ("1", "Assets"),
    AccountCategory.LIABILITIES: ("2", "Liabilities"),
    AccountCategory.EQUITIES: ("3", "Equity"),
    AccountCategory.REVENUES: ("4", "Revenue"),
    AccountCategory.EXPENSES: ("5", "Expenses"),
}


@dataclass(frozen=True)
class AccountRecord:
    """One flat account as returned by a category service."""

    account_id: str
    listid: str = ""
    description: str = ""
    parent_account_id: str | None = None


@dataclass(eq=False)
class AccountNode:
    """
    A node of the chart-of-accounts forest.

    ``children`` is owned by this node and kept in source order.
    """

    account_id: str
    listid: str = ""
    description: str = ""
    parent_account_id: str | None = None
    children: list[AccountNode] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: AccountRecord) -> AccountNode:
        return cls(
            account_id=record.account_id,
            listid=record.listid,
            description=record.description,
            parent_account_id=record.parent_account_id,
        )

    def to_record(self) -> AccountRecord:
        return AccountRecord(
            account_id=self.account_id,
            listid=self.listid,
            description=self.description,
            parent_account_id=self.parent_account_id,
        )

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class AccountInfo:
    """
    Flattened index entry for one account.

    ``listid`` and ``description`` fall back to the account id when blank.
    """

    account_id: str
    listid: str
    description: str
    category: AccountCategory | None = None
    parent_id: str | None = None

    @property
    def normal_balance(self) -> NormalBalance:
        if self.category is None:
            return NormalBalance.DEBIT
        return self.category.normal_balance

    @property
    def is_category_root(self) -> bool:
        return self.parent_id is None and self.category is not None


def normalize_key(value: object) -> str:
    """Lowercased, trimmed matching key; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return str(value).strip().lower()
