"""
Report source protocol.

Contract:
    A ReportSource serves the raw, JSON-like page payloads of the five
    chart-of-account category services and of the voucher service.  It does
    no mapping: the payload is returned as received
    (``{"data": [...], "misc": {"totalPages": n}}``).

Architecture: ledger_ingestion/adapters. Transport only, no kernel logic.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ledger_kernel.domain.accounts import AccountCategory


@runtime_checkable
class ReportSource(Protocol):
    """Protocol for reading paged chart-of-account and voucher payloads."""

    def fetch_category(
        self, category: AccountCategory, page_index: int, page_size: int,
    ) -> Any:
        """One page of a category service. Raises CategoryFetchError."""
        ...

    def fetch_vouchers(self, page_index: int, page_size: int) -> Any:
        """One page of the voucher service. Raises VoucherPageFetchError."""
        ...
