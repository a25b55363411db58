"""
Snapshot loader: fetch orchestration for one report run.

Responsibility:
    Reads the five chart-of-account categories and every voucher page from a
    ``ReportSource`` and maps them to domain objects through the
    ``FieldMapper``.

Architecture position:
    Ingestion -- the only layer that talks to a ReportSource.  The reporting
    module receives finished snapshots and never sees a raw payload.

Concurrency:
    The five category reads run on a ``ThreadPoolExecutor`` (all submitted,
    then all awaited).  A failed category degrades to an empty list and is
    recorded in ``ChartSnapshot.failures``; the other categories are
    unaffected.  Voucher pages are read sequentially because each page's
    ``misc.totalPages`` decides whether another request is issued.

Failure modes:
    - CategoryFetchError: any failure reading one category is raised as
      this error and caught per category; it never propagates.
    - VoucherPageFetchError: propagates; no partial voucher list is returned.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from ledger_config.schema import ServiceConfig
from ledger_ingestion.adapters.base import ReportSource
from ledger_ingestion.mapping.field_map import FieldMapper
from ledger_kernel.domain.accounts import AccountCategory, AccountRecord
from ledger_kernel.domain.vouchers import VoucherItem
from ledger_kernel.exceptions import CategoryFetchError
from ledger_kernel.logging_config import get_logger

logger = get_logger("ingestion.snapshot_loader")


@dataclass(frozen=True)
class ChartSnapshot:
    """Per-category account records plus the categories that failed."""

    records: dict[AccountCategory, list[AccountRecord]] = field(default_factory=dict)
    failures: tuple[CategoryFetchError, ...] = ()

    @property
    def failed_categories(self) -> tuple[AccountCategory, ...]:
        return tuple(AccountCategory(f.category) for f in self.failures)

    @property
    def account_count(self) -> int:
        return sum(len(r) for r in self.records.values())


class SnapshotLoader:
    """Loads chart-of-account and voucher snapshots from a ReportSource."""

    def __init__(
        self,
        source: ReportSource,
        service: ServiceConfig | None = None,
        mapper: FieldMapper | None = None,
    ):
        self._source = source
        self._service = service or ServiceConfig()
        self._mapper = mapper or FieldMapper()

    @property
    def mapper(self) -> FieldMapper:
        return self._mapper

    def _load_category(self, category: AccountCategory) -> list[AccountRecord]:
        try:
            payload = self._source.fetch_category(
                category, 1, self._service.category_page_size,
            )
            return [
                self._mapper.to_account_record(raw)
                for raw in self._mapper.page_records(payload)
                if isinstance(raw, dict)
            ]
        except CategoryFetchError:
            raise
        except Exception as exc:
            raise CategoryFetchError(
                category.value,
                self._service.category_url(category),
                str(exc) or type(exc).__name__,
            ) from exc

    def load_chart(self) -> ChartSnapshot:
        """Read all five categories concurrently; failures degrade to []."""
        categories = list(AccountCategory)
        records: dict[AccountCategory, list[AccountRecord]] = {}
        failures: list[CategoryFetchError] = []
        start_time = time.monotonic()

        workers = min(self._service.max_workers, len(categories))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                category: executor.submit(self._load_category, category)
                for category in categories
            }
            for category, future in futures.items():
                try:
                    records[category] = future.result()
                except CategoryFetchError as exc:
                    records[category] = []
                    failures.append(exc)
                    logger.warning(
                        "category_fetch_failed",
                        extra={
                            "category": category.value,
                            "url": exc.url,
                            "reason": exc.reason,
                        },
                    )

        snapshot = ChartSnapshot(records=records, failures=tuple(failures))
        logger.info(
            "chart_loaded",
            extra={
                "account_count": snapshot.account_count,
                "failed_categories": [c.value for c in snapshot.failed_categories],
                "duration_ms": int((time.monotonic() - start_time) * 1000),
            },
        )
        return snapshot

    def load_vouchers(self) -> list[VoucherItem]:
        """Read voucher pages 1..totalPages in order and concatenate them."""
        vouchers: list[VoucherItem] = []
        page_size = self._service.voucher_page_size
        page_index = 1
        total_pages = 1
        start_time = time.monotonic()
        while page_index <= total_pages:
            payload = self._source.fetch_vouchers(page_index, page_size)
            vouchers.extend(
                self._mapper.to_voucher(raw)
                for raw in self._mapper.page_records(payload)
                if isinstance(raw, dict)
            )
            total_pages = self._mapper.total_pages(payload)
            page_index += 1

        logger.info(
            "vouchers_loaded",
            extra={
                "voucher_count": len(vouchers),
                "pages": page_index - 1,
                "duration_ms": int((time.monotonic() - start_time) * 1000),
            },
        )
        return vouchers
