"""
Ledger Reporting Module (``ledger_modules.reporting``).

Responsibility
--------------
Read-only module that turns a chart-of-accounts snapshot and a voucher
snapshot into the General Ledger (per-account history with opening and
closing balances) and the Trial Balance (one Debit/Credit line per account).

Architecture position
---------------------
**Modules layer** -- all report computation is implemented as pure
functions in ``statements.py``; ``ReportingService`` only fetches snapshots
and maps failures onto notices.

Invariants enforced
-------------------
* Projected balances on voucher legs are trusted snapshots: they are
  carried and compared, never recomputed.
* Reports are computed fresh per run and never persisted.

Failure modes
-------------
* Category fetch failure -> report over the categories that loaded.
* Voucher fetch failure -> failed outcome, no partial report.
"""

from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.formatting import (
    RenderPayload,
    ReportRenderer,
    build_render_payload,
    filter_summary,
    format_amount,
    format_balance,
    format_signed_amount,
    title_line,
)
from ledger_modules.reporting.models import (
    BalanceType,
    GeneralLedgerReport,
    LedgerAccountGroup,
    LedgerRow,
    LedgerTotals,
    ReportFilters,
    ReportMetadata,
    ReportOutcome,
    ReportType,
    TrialBalanceLine,
    TrialBalanceReport,
)
from ledger_modules.reporting.service import ReportingService
from ledger_modules.reporting.statements import compute_report, render_to_dict

__all__ = [
    # Service
    "ReportingService",
    # Config
    "ReportingConfig",
    # Pure entry points
    "compute_report",
    "render_to_dict",
    # Models
    "ReportType",
    "BalanceType",
    "ReportFilters",
    "ReportMetadata",
    "LedgerRow",
    "LedgerTotals",
    "LedgerAccountGroup",
    "GeneralLedgerReport",
    "TrialBalanceLine",
    "TrialBalanceReport",
    "ReportOutcome",
    # Display contract
    "RenderPayload",
    "ReportRenderer",
    "build_render_payload",
    "filter_summary",
    "format_amount",
    "format_balance",
    "format_signed_amount",
    "title_line",
]
