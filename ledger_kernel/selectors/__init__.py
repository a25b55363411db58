"""Read-only selectors over the chart of accounts."""

from ledger_kernel.selectors.account_selector import (
    AccountFilter,
    AccountSelection,
    AccountSelector,
    SelectionMode,
)

__all__ = [
    "AccountFilter",
    "AccountSelection",
    "AccountSelector",
    "SelectionMode",
]
