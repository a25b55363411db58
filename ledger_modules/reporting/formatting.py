"""
Display contract for report renderers.

Pure string formatting of report values plus the ``RenderPayload`` handed to
an external PDF/Excel/Word renderer.  ZERO I/O.

Amounts use two decimals and thousands separators.  A zero debit or credit
renders as an empty string; a zero balance still renders as ``0.00``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from ledger_kernel.domain.hierarchy import AccountIndex
from ledger_kernel.selectors.account_selector import SelectionMode
from ledger_modules.reporting.models import (
    GeneralLedgerReport,
    LedgerRow,
    ReportFilters,
    ReportType,
    TrialBalanceReport,
)

MISSING = "-"


# =========================================================================
# Scalars
# =========================================================================


def _quantize(value: Decimal, precision: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


def format_balance(value: Decimal, precision: int = 2) -> str:
    """``1234.5`` -> ``"1,234.50"``; zero -> ``"0.00"``."""
    return f"{_quantize(Decimal(value), precision):,.{precision}f}"


def format_amount(value: Decimal, precision: int = 2) -> str:
    """Like ``format_balance`` but zero -> ``""`` (debit/credit columns)."""
    if not value:
        return ""
    return format_balance(value, precision)


def format_signed_amount(value: Decimal, precision: int = 2) -> str:
    """Negative values in parentheses: ``-50`` -> ``"(50.00)"``; zero -> ``""``."""
    if not value:
        return ""
    if value < 0:
        return f"({format_balance(-value, precision)})"
    return format_balance(value, precision)


def format_date(value: date | datetime | None) -> str:
    """``DD-MM-YYYY``; missing -> ``"-"``."""
    if value is None:
        return MISSING
    return value.strftime("%d-%m-%Y")


# =========================================================================
# Headings
# =========================================================================


def title_line(
    report_type: ReportType,
    from_date: date | None,
    to_date: date | None,
) -> str:
    if report_type == ReportType.GENERAL_LEDGER:
        return f"General Ledger From {format_date(from_date)} To {format_date(to_date)}"
    if from_date is None and to_date is None:
        return "Trial Balance (All Dates)"
    start = format_date(from_date) if from_date else "..."
    end = format_date(to_date) if to_date else "..."
    return f"Trial Balance From {start} To {end}"


def _account_label(account_id: str, index: AccountIndex | None) -> str:
    if not account_id:
        return MISSING
    info = index.get(account_id) if index is not None else None
    return info.description if info is not None else account_id


def filter_summary(filters: ReportFilters, index: AccountIndex | None = None) -> str:
    """
    One-line description of the active filters, e.g.
    ``"Status: Posted, Filter: Range (Cash to Bank)"``.  Empty when no
    filter is active.
    """
    status_part = "" if filters.matches_all_statuses else f"Status: {filters.status}"

    account_part = ""
    flt = filters.account_filter
    if flt is not None:
        mode = SelectionMode.parse(flt.mode)
        if mode == SelectionMode.BY_HEAD and flt.head_account_id:
            account_part = f"Filter: By Head ({_account_label(flt.head_account_id, index)})"
        elif mode == SelectionMode.RANGE and (flt.range_from_id or flt.range_to_id):
            account_part = (
                f"Filter: Range ({_account_label(flt.range_from_id, index)}"
                f" to {_account_label(flt.range_to_id, index)})"
            )
        elif mode == SelectionMode.SPECIFIC and any(flt.specific_ids[:2]):
            first, second = (tuple(flt.specific_ids[:2]) + ("", ""))[:2]
            account_part = (
                f"Filter: Specific ({_account_label(first, index)}"
                f" & {_account_label(second, index)})"
            )

    return ", ".join(p for p in (status_part, account_part) if p)


# =========================================================================
# Renderer contract
# =========================================================================

LEDGER_COLUMNS = (
    "Date", "Voucher No", "Cheque No", "Deposit Slip", "Narration",
    "Debit", "Credit", "Balance",
)
TRIAL_BALANCE_COLUMNS = ("Code", "Account", "Debit", "Credit")


@dataclass(frozen=True)
class RenderGroup:
    """One heading with its formatted rows and totals row."""

    heading: str
    rows: tuple[tuple[str, ...], ...]
    totals: tuple[str, ...]


@dataclass(frozen=True)
class RenderPayload:
    """Everything a renderer receives: fully formatted strings only."""

    report_type: ReportType
    entity_name: str
    title: str
    branch: str
    filter_summary: str
    columns: tuple[str, ...]
    groups: tuple[RenderGroup, ...]
    grand_totals: tuple[str, ...]


class ReportRenderer(Protocol):
    """External PDF/Excel/Word/HTML renderer."""

    def render(self, payload: RenderPayload) -> bytes:
        ...


def _ledger_cells(row: LedgerRow, precision: int) -> tuple[str, ...]:
    return (
        format_date(row.voucher_date),
        row.voucher_no or MISSING,
        row.cheque_no or MISSING,
        row.deposit_slip_no or MISSING,
        row.narration or MISSING,
        format_amount(row.debit, precision),
        format_amount(row.credit, precision),
        format_balance(row.projected_balance, precision),
    )


def ledger_payload(report: GeneralLedgerReport, precision: int = 2) -> RenderPayload:
    groups = []
    total_debit = Decimal("0")
    total_credit = Decimal("0")
    for group in report.groups:
        total_debit += group.totals.debit
        total_credit += group.totals.credit
        groups.append(
            RenderGroup(
                heading=f"{group.listid} - {group.description}",
                rows=tuple(_ledger_cells(r, precision) for r in group.rows),
                totals=(
                    "TOTAL",
                    format_balance(group.totals.debit, precision),
                    format_balance(group.totals.credit, precision),
                    format_balance(group.totals.closing_balance, precision),
                ),
            )
        )
    meta = report.metadata
    return RenderPayload(
        report_type=meta.report_type,
        entity_name=meta.entity_name,
        title=meta.title,
        branch=meta.branch,
        filter_summary=meta.filter_summary,
        columns=LEDGER_COLUMNS,
        groups=tuple(groups),
        grand_totals=(
            "GRAND TOTAL",
            format_balance(total_debit, precision),
            format_balance(total_credit, precision),
        ),
    )


def trial_balance_payload(report: TrialBalanceReport, precision: int = 2) -> RenderPayload:
    rows = tuple(
        (
            line.listid,
            line.description,
            format_amount(line.debit_amount, precision),
            format_amount(line.credit_amount, precision),
        )
        for line in report.lines
    )
    meta = report.metadata
    return RenderPayload(
        report_type=meta.report_type,
        entity_name=meta.entity_name,
        title=meta.title,
        branch=meta.branch,
        filter_summary=meta.filter_summary,
        columns=TRIAL_BALANCE_COLUMNS,
        groups=(RenderGroup(heading="", rows=rows, totals=()),),
        grand_totals=(
            "TOTAL",
            format_balance(report.total_debit, precision),
            format_balance(report.total_credit, precision),
        ),
    )


def build_render_payload(
    report: GeneralLedgerReport | TrialBalanceReport, precision: int = 2,
) -> RenderPayload:
    if isinstance(report, GeneralLedgerReport):
        return ledger_payload(report, precision)
    return trial_balance_payload(report, precision)
