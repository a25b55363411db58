"""
JSON snapshot source.

Serves a captured snapshot of the category and voucher services through the
same paged ``ReportSource`` protocol as the HTTP adapter.  Snapshot layout::

    {
      "accounts": {"assets": [...], "revenues": [...], ...},
      "vouchers": [...]
    }

A category missing from ``accounts`` yields an empty page.  A category whose
value is not a list is treated as a failed fetch, so offline runs can exercise
the degraded-chart path.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from ledger_kernel.domain.accounts import AccountCategory
from ledger_kernel.exceptions import CategoryFetchError, ConfigurationError


def _page(records: list[Any], page_index: int, page_size: int) -> dict[str, Any]:
    total_pages = max(1, math.ceil(len(records) / page_size))
    start = (page_index - 1) * page_size
    return {
        "data": records[start:start + page_size],
        "misc": {"totalPages": total_pages, "pageIndex": page_index},
    }


class JsonSnapshotSource:
    """ReportSource over an in-memory or on-disk JSON snapshot."""

    def __init__(self, snapshot: dict[str, Any], origin: str = "<memory>"):
        if not isinstance(snapshot, dict):
            raise ConfigurationError(origin, "snapshot must be a JSON object")
        accounts = snapshot.get("accounts") or {}
        vouchers = snapshot.get("vouchers") or []
        if not isinstance(accounts, dict):
            raise ConfigurationError(f"{origin}:accounts", "must be an object")
        if not isinstance(vouchers, list):
            raise ConfigurationError(f"{origin}:vouchers", "must be a list")
        self._accounts = {str(k).lower(): v for k, v in accounts.items()}
        self._vouchers = vouchers
        self._origin = origin

    @classmethod
    def from_file(cls, path: Path | str, encoding: str = "utf-8") -> JsonSnapshotSource:
        path = Path(path)
        with path.open("r", encoding=encoding) as f:
            data = json.load(f)
        return cls(data, origin=str(path))

    def fetch_category(
        self, category: AccountCategory, page_index: int, page_size: int,
    ) -> dict[str, Any]:
        records = self._accounts.get(category.value, [])
        if not isinstance(records, list):
            raise CategoryFetchError(
                category.value, self._origin, "snapshot entry is not a list",
            )
        return _page(records, page_index, page_size)

    def fetch_vouchers(self, page_index: int, page_size: int) -> dict[str, Any]:
        return _page(self._vouchers, page_index, page_size)
