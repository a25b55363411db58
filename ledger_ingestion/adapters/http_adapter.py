"""
HTTP report source backed by ``requests``.

Issues ``GET {base_url}/{endpoint}?PageIndex=..&PageSize=..`` with an optional
bearer token.  Transport errors, non-2xx responses and non-JSON bodies all
surface as typed ``NetworkFetchError`` subclasses; there are no retries.
"""

from __future__ import annotations

from typing import Any

import requests

from ledger_config.schema import ServiceConfig
from ledger_kernel.domain.accounts import AccountCategory
from ledger_kernel.exceptions import CategoryFetchError, VoucherPageFetchError
from ledger_kernel.logging_config import get_logger

logger = get_logger("ingestion.http")


class HttpReportSource:
    """ReportSource over the ERP REST API."""

    def __init__(
        self,
        config: ServiceConfig,
        session: requests.Session | None = None,
    ):
        self._config = config
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    def _get(self, url: str, page_index: int, page_size: int) -> Any:
        """GET one page; returns the decoded JSON or raises ``_FetchFailure``."""
        try:
            response = self._session.get(
                url,
                params={"PageIndex": page_index, "PageSize": page_size},
                headers=self._headers(),
                timeout=self._config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise _FetchFailure(f"{type(exc).__name__}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise _FetchFailure(f"HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise _FetchFailure("response body is not valid JSON") from exc

    def fetch_category(
        self, category: AccountCategory, page_index: int, page_size: int,
    ) -> Any:
        url = self._config.category_url(category)
        try:
            return self._get(url, page_index, page_size)
        except _FetchFailure as exc:
            raise CategoryFetchError(category.value, url, exc.reason) from exc

    def fetch_vouchers(self, page_index: int, page_size: int) -> Any:
        url = self._config.voucher_url()
        try:
            payload = self._get(url, page_index, page_size)
        except _FetchFailure as exc:
            raise VoucherPageFetchError(page_index, url, exc.reason) from exc
        logger.debug(
            "voucher_page_fetched",
            extra={"page_index": page_index, "page_size": page_size},
        )
        return payload


class _FetchFailure(Exception):
    """Internal carrier for the failure reason before it is typed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
