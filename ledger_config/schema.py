"""
Engine configuration schema.

Typed, frozen view of the YAML configuration: where the chart-of-account and
voucher services live, how they are paged, and which field aliases the
adapter layer should add.  The loader parses YAML into these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ledger_kernel.domain.accounts import AccountCategory
from ledger_kernel.exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# Service endpoints
# ---------------------------------------------------------------------------

DEFAULT_CATEGORY_ENDPOINTS: dict[AccountCategory, str] = {
    AccountCategory.ASSETS: "AblAssests",
    AccountCategory.REVENUES: "AblRevenue",
    AccountCategory.LIABILITIES: "AblLiabilities",
    AccountCategory.EXPENSES: "AblExpense",
    AccountCategory.EQUITIES: "Equality",
}

DEFAULT_VOUCHER_ENDPOINT = "EntryVoucher"


@dataclass(frozen=True)
class ServiceConfig:
    """Connection and paging settings for the external read services."""

    base_url: str = ""
    token: str | None = None
    timeout_seconds: float = 30.0
    category_page_size: int = 10000
    voucher_page_size: int = 100
    category_endpoints: dict[AccountCategory, str] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_ENDPOINTS),
    )
    voucher_endpoint: str = DEFAULT_VOUCHER_ENDPOINT
    max_workers: int = 5

    def __post_init__(self):
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds", "must be positive")
        if self.category_page_size < 1:
            raise ConfigurationError("category_page_size", "must be at least 1")
        if self.voucher_page_size < 1:
            raise ConfigurationError("voucher_page_size", "must be at least 1")
        if self.max_workers < 1:
            raise ConfigurationError("max_workers", "must be at least 1")
        missing = [c.value for c in AccountCategory if c not in self.category_endpoints]
        if missing:
            raise ConfigurationError(
                "category_endpoints", f"missing categories: {', '.join(missing)}",
            )

    def url_for(self, endpoint: str) -> str:
        base = self.base_url.rstrip("/")
        return f"{base}/{endpoint.lstrip('/')}" if base else endpoint

    def category_url(self, category: AccountCategory) -> str:
        return self.url_for(self.category_endpoints[category])

    def voucher_url(self) -> str:
        return self.url_for(self.voucher_endpoint)


# ---------------------------------------------------------------------------
# Top-level engine configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineConfig:
    """Everything loaded from one configuration file."""

    service: ServiceConfig
    reporting: dict[str, Any] = field(default_factory=dict)
    field_aliases: dict[str, tuple[str, ...]] = field(default_factory=dict)
