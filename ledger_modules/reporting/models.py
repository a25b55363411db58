"""
Report Domain Models (``ledger_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for the two report outputs: the General
Ledger (per-account transaction history with opening and closing balances)
and the Trial Balance (one classified snapshot line per account), plus the
filters that drive a run and the outcome envelope returned to callers.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Built by the pure
functions in ``statements.py`` and returned by ``ReportingService``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Report structures are created fresh per run and never persisted.

Failure modes
-------------
* Construction with invalid enum values raises ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from ledger_kernel.domain.notices import Notice, NoticeLevel
from ledger_kernel.selectors.account_selector import AccountFilter

STATUS_ALL = "All"


# =========================================================================
# Enums
# =========================================================================


class ReportType(str, Enum):
    """Types of ledger reports."""

    GENERAL_LEDGER = "general_ledger"
    TRIAL_BALANCE = "trial_balance"


class BalanceType(str, Enum):
    """Trial balance column an account lands in."""

    DEBIT = "Debit"
    CREDIT = "Credit"


# =========================================================================
# Run inputs
# =========================================================================


@dataclass(frozen=True)
class ReportFilters:
    """
    User filter choice for one report run.

    ``status`` is compared case-insensitively; ``"All"`` (or blank) matches
    every voucher.  ``account_filter`` of ``None`` means no account filter.
    """

    from_date: date | None = None
    to_date: date | None = None
    status: str = STATUS_ALL
    account_filter: AccountFilter | None = None
    branch: str | None = None

    @property
    def matches_all_statuses(self) -> bool:
        status = (self.status or "").strip()
        return not status or status.lower() == STATUS_ALL.lower()


# =========================================================================
# Report Metadata (common to both reports)
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every report."""

    report_type: ReportType
    entity_name: str
    branch: str
    title: str
    filter_summary: str
    generated_at: str  # ISO format timestamp from injected clock
    from_date: date | None = None
    to_date: date | None = None
    status: str = STATUS_ALL


# =========================================================================
# General Ledger
# =========================================================================


@dataclass(frozen=True)
class LedgerRow:
    """One transaction row (or the synthetic opening row) of a ledger group."""

    voucher_date: datetime | None
    voucher_no: str
    cheque_no: str
    deposit_slip_no: str
    narration: str
    debit: Decimal
    credit: Decimal
    projected_balance: Decimal
    is_opening: bool = False


@dataclass(frozen=True)
class LedgerTotals:
    """Group totals: summed debits and credits, snapshot closing balance."""

    debit: Decimal
    credit: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class LedgerAccountGroup:
    """Full history of one account within the report period."""

    account_id: str
    description: str
    listid: str
    opening_balance: Decimal
    rows: tuple[LedgerRow, ...]
    totals: LedgerTotals

    @property
    def transaction_rows(self) -> tuple[LedgerRow, ...]:
        return tuple(r for r in self.rows if not r.is_opening)


@dataclass(frozen=True)
class GeneralLedgerReport:
    """Complete general ledger report."""

    metadata: ReportMetadata
    groups: tuple[LedgerAccountGroup, ...]

    @property
    def is_empty(self) -> bool:
        return not self.groups


# =========================================================================
# Trial Balance
# =========================================================================


@dataclass(frozen=True)
class TrialBalanceLine:
    """
    A single line in the trial balance.

    ``closing_balance`` is debit-positive (credit balances are negative);
    ``amount`` is its absolute value, shown in the ``balance_type`` column.
    """

    account_id: str
    description: str
    listid: str
    closing_balance: Decimal
    balance_type: BalanceType
    amount: Decimal

    @property
    def debit_amount(self) -> Decimal:
        return self.amount if self.balance_type == BalanceType.DEBIT else Decimal("0")

    @property
    def credit_amount(self) -> Decimal:
        return self.amount if self.balance_type == BalanceType.CREDIT else Decimal("0")


@dataclass(frozen=True)
class TrialBalanceReport:
    """Complete trial balance report."""

    metadata: ReportMetadata
    lines: tuple[TrialBalanceLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool  # total_debit == total_credit, computed not asserted

    @property
    def is_empty(self) -> bool:
        return not self.lines


Report = GeneralLedgerReport | TrialBalanceReport


# =========================================================================
# Run outcome
# =========================================================================


@dataclass(frozen=True)
class ReportOutcome:
    """
    Result envelope of one report run.

    A failed run carries no report (no partial data is ever shown) and at
    least one error notice.
    """

    success: bool
    report: Report | None
    notices: tuple[Notice, ...] = ()

    @property
    def errors(self) -> tuple[Notice, ...]:
        return tuple(n for n in self.notices if n.level == NoticeLevel.ERROR)

    def notice_codes(self) -> list[str]:
        return [n.code for n in self.notices]
