"""
Reporting Module Service (``ledger_modules.reporting.service``).

Responsibility
--------------
Orchestrates one report run -- General Ledger or Trial Balance -- by
bridging the ingestion ``SnapshotLoader`` to the pure transformation
functions in ``statements.py``, and maps failures onto user notices.  This
is a **read-only** service: nothing is written to the external services.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``ReportingService`` is the sole public
entry point for running a report against live data.  Constructor:
``loader`` + ``clock`` + ``config``.

Invariants enforced
-------------------
* Read-only -- the chart and voucher snapshots are never modified.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.
* A failed run never carries a partial report.

Failure modes
-------------
* Category fetch failure  -> one warning notice; the run continues with the
  categories that loaded.
* Voucher page fetch failure  -> failed ``ReportOutcome`` (``report=None``)
  with an error notice.  No retries.
* Unknown account ids in the filter  -> info notice; the run continues.
* Empty result  -> successful outcome, empty report, info notice.

Concurrency
-----------
Runs are independent: each call fetches fresh snapshots and returns its own
outcome.  There is no lock or cancellation between concurrent runs.
"""

from __future__ import annotations

import time
from uuid import uuid4

from ledger_ingestion.services.snapshot_loader import SnapshotLoader
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.notices import Notice
from ledger_kernel.exceptions import CategoryFetchError, VoucherPageFetchError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    GeneralLedgerReport,
    ReportFilters,
    ReportOutcome,
    ReportType,
    TrialBalanceReport,
)
from ledger_modules.reporting.statements import (
    generate_report,
    prepare_chart,
    resolve_selection,
)

logger = get_logger("modules.reporting.service")

NO_VOUCHERS_MATCHED = "NO_VOUCHERS_MATCHED"
NO_NONZERO_BALANCES = "NO_NONZERO_BALANCES"
ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"


class ReportingService:
    """
    Report run service.

    Contract
    --------
    * Every public method returns a ``ReportOutcome``; fetch failures are
      reported as notices, not raised.
    * The report inside a successful outcome is exactly what
      ``compute_report`` returns for the same snapshots.

    Guarantees
    ----------
    * Report generation delegates to pure functions in ``statements.py``;
      no ledger logic lives in this class.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT persist reports or record who ran them.
    * Does NOT retry failed fetches.
    """

    def __init__(
        self,
        loader: SnapshotLoader,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._loader = loader
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()

        logger.info(
            "reporting_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "default_branch": self._config.default_branch,
            },
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def general_ledger(self, filters: ReportFilters) -> ReportOutcome:
        """Run the General Ledger report."""
        return self.run(ReportType.GENERAL_LEDGER, filters)

    def trial_balance(self, filters: ReportFilters) -> ReportOutcome:
        """Run the Trial Balance report."""
        return self.run(ReportType.TRIAL_BALANCE, filters)

    def run(self, report_type: ReportType, filters: ReportFilters) -> ReportOutcome:
        """
        Fetch fresh snapshots and compute one report.

        Args:
            report_type: Which report to build.
            filters: Date, status, account and branch filters.

        Returns:
            ReportOutcome with the report (or ``None`` on failure) and the
            notices for the user.
        """
        branch = filters.branch or self._config.default_branch
        with LogContext.bind(
            run_id=str(uuid4()), report_type=report_type.value, branch=branch,
        ):
            logger.info(
                "report_run_started",
                extra={
                    "from_date": filters.from_date,
                    "to_date": filters.to_date,
                    "status": filters.status,
                },
            )
            start_time = time.monotonic()
            notices: list[Notice] = []

            chart = self._loader.load_chart()
            if chart.failures:
                notices.append(self._category_notice(chart.failures))

            try:
                vouchers = self._loader.load_vouchers()
            except VoucherPageFetchError as exc:
                logger.error(
                    "voucher_fetch_failed",
                    extra={
                        "page_index": exc.page_index,
                        "url": exc.url,
                        "reason": exc.reason,
                    },
                )
                notices.append(Notice.error(exc.code, "Failed to load vouchers"))
                return ReportOutcome(success=False, report=None, notices=tuple(notices))

            roots, index = prepare_chart(chart.records)
            selection = resolve_selection(roots, index, filters)
            if selection.unmatched_ids:
                notices.append(
                    Notice.info(
                        ACCOUNT_NOT_FOUND,
                        "Account not found: " + ", ".join(selection.unmatched_ids),
                    )
                )

            report = generate_report(
                roots,
                index,
                selection,
                vouchers,
                filters,
                report_type,
                self._config,
                self._clock.timestamp(),
            )

            if isinstance(report, GeneralLedgerReport) and report.is_empty:
                notices.append(Notice.info(NO_VOUCHERS_MATCHED, "No vouchers matched filters"))
            elif isinstance(report, TrialBalanceReport) and report.is_empty:
                notices.append(Notice.info(NO_NONZERO_BALANCES, "No non-zero balances found"))

            logger.info(
                "report_run_completed",
                extra={
                    "voucher_count": len(vouchers),
                    "notice_codes": [n.code for n in notices],
                    "duration_ms": int((time.monotonic() - start_time) * 1000),
                },
            )
            return ReportOutcome(success=True, report=report, notices=tuple(notices))

    # =========================================================================
    # Internal helpers
    # =========================================================================

    @staticmethod
    def _category_notice(failures: tuple[CategoryFetchError, ...]) -> Notice:
        names = ", ".join(f.category for f in failures)
        return Notice.warning(
            CategoryFetchError.code,
            f"Failed to load chart of accounts ({names})",
        )
