"""
Pure report transformation functions.

These functions turn a chart-of-accounts snapshot and a voucher snapshot
into the General Ledger and Trial Balance reports. ZERO I/O. ZERO side
effects.

All monetary values are Decimal. All outputs are frozen dataclasses.

Functions in this module follow the ledger_kernel/domain/ purity convention:
- No network access
- No clock access (the generation timestamp is passed in)
- No file I/O
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from ledger_kernel.domain.accounts import (
    AccountCategory,
    AccountNode,
    AccountRecord,
    NormalBalance,
    normalize_key,
)
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.hierarchy import AccountIndex, build_chart
from ledger_kernel.domain.vouchers import VoucherItem
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.account_selector import AccountSelection, AccountSelector
from ledger_modules.reporting.aggregation import (
    AccountActivity,
    LegEntry,
    OpeningBalance,
    VoucherAggregator,
)
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.formatting import MISSING, filter_summary, title_line
from ledger_modules.reporting.models import (
    BalanceType,
    GeneralLedgerReport,
    LedgerAccountGroup,
    LedgerRow,
    LedgerTotals,
    Report,
    ReportFilters,
    ReportMetadata,
    ReportType,
    TrialBalanceLine,
    TrialBalanceReport,
)

logger = get_logger("modules.reporting.statements")

ZERO = Decimal("0")


# =========================================================================
# Helpers
# =========================================================================

_DIGITS = re.compile(r"([0-9]+)")


def natural_sort_key(value: str) -> tuple[tuple[int, int, str], ...]:
    """
    Numeric-aware, case-insensitive sort key: ``"V2"`` before ``"V10"``.

    Digit runs compare by value and sort before text.
    """
    parts = []
    for i, chunk in enumerate(_DIGITS.split(value or "")):
        if not chunk:
            continue
        if i % 2:
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk.casefold()))
    return tuple(parts)


def _row_sort_key(row: LedgerRow) -> tuple:
    # Undated rows first.
    dated = row.voucher_date is not None
    return (dated, row.voucher_date or datetime.min, natural_sort_key(row.voucher_no))


def _group_sort_key(listid: str, description: str) -> str:
    return listid or description


def _describe(ref: str, index: AccountIndex) -> tuple[str, str]:
    """(description, listid) of a voucher reference; falls back to the ref."""
    info = index.resolve(ref)
    if info is None:
        return ref, ref
    return info.description, info.listid


def signed_balance(
    projected_balance: Decimal, normal_balance: NormalBalance,
) -> Decimal:
    """
    Convert a natural-side projected balance to a debit-positive balance.

    DEBIT-normal (assets, expenses): unchanged.
    CREDIT-normal (revenues, liabilities, equities): negated.
    """
    if normal_balance == NormalBalance.CREDIT:
        return -projected_balance
    return projected_balance


# =========================================================================
# Chart preparation
# =========================================================================


def prepare_chart(
    accounts: Mapping[AccountCategory, Sequence[AccountRecord]],
) -> tuple[list[AccountNode], AccountIndex]:
    """Build the five category forests and their index."""
    roots = build_chart(accounts)
    return roots, AccountIndex.from_roots(roots)


def resolve_selection(
    roots: Sequence[AccountNode],
    index: AccountIndex,
    filters: ReportFilters,
) -> AccountSelection:
    if filters.account_filter is None:
        return AccountSelection()
    return AccountSelector(roots, index).select(filters.account_filter)


def build_metadata(
    report_type: ReportType,
    filters: ReportFilters,
    index: AccountIndex,
    config: ReportingConfig,
    generated_at: str,
) -> ReportMetadata:
    return ReportMetadata(
        report_type=report_type,
        entity_name=config.entity_name,
        branch=filters.branch or config.default_branch,
        title=title_line(report_type, filters.from_date, filters.to_date),
        filter_summary=filter_summary(filters, index),
        generated_at=generated_at,
        from_date=filters.from_date,
        to_date=filters.to_date,
        status=filters.status,
    )


# =========================================================================
# 1. GENERAL LEDGER
# =========================================================================


def _ledger_row(entry: LegEntry) -> LedgerRow:
    voucher, row, leg = entry.voucher, entry.row, entry.leg
    return LedgerRow(
        voucher_date=voucher.voucher_date,
        voucher_no=voucher.voucher_no or MISSING,
        cheque_no=voucher.cheque_no or MISSING,
        deposit_slip_no=voucher.deposit_slip_no or MISSING,
        narration=voucher.narration or voucher.description or row.narration or MISSING,
        debit=leg.debit,
        credit=leg.credit,
        projected_balance=leg.projected_balance,
    )


def _opening_row(balance: Decimal, label: str) -> LedgerRow:
    return LedgerRow(
        voucher_date=None,
        voucher_no=MISSING,
        cheque_no=MISSING,
        deposit_slip_no=MISSING,
        narration=label,
        debit=ZERO,
        credit=ZERO,
        projected_balance=balance,
        is_opening=True,
    )


def _ledger_group(
    ref: str,
    entries: Iterable[LegEntry],
    opening: Decimal,
    index: AccountIndex,
    config: ReportingConfig,
) -> LedgerAccountGroup:
    rows = sorted((_ledger_row(e) for e in entries), key=_row_sort_key)
    rows.insert(0, _opening_row(opening, config.opening_balance_label))
    description, listid = _describe(ref, index)
    return LedgerAccountGroup(
        account_id=ref,
        description=description,
        listid=listid,
        opening_balance=opening,
        rows=tuple(rows),
        totals=LedgerTotals(
            debit=sum((r.debit for r in rows), ZERO),
            credit=sum((r.credit for r in rows), ZERO),
            closing_balance=rows[-1].projected_balance,
        ),
    )


def build_general_ledger(
    activity: Mapping[str, AccountActivity],
    openings: Mapping[str, OpeningBalance],
    index: AccountIndex,
    selection: AccountSelection,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> GeneralLedgerReport:
    """
    Group period activity into per-account ledger histories.

    Each group starts with a synthetic opening row, then its transactions
    by date and numeric-aware voucher number.  The closing balance is the
    projected balance of the last row (a snapshot, not a sum).  Accounts
    with a non-zero opening balance but no period activity get a group
    holding only the opening row.  Groups are ordered by listid (falling
    back to description) using plain string comparison.
    """
    groups: list[LedgerAccountGroup] = []
    seen: set[str] = set()

    for ref, act in activity.items():
        key = normalize_key(ref)
        seen.add(key)
        opening = openings.get(key)
        groups.append(
            _ledger_group(
                ref, act.entries, opening.balance if opening else ZERO, index, config,
            )
        )

    for key, opening in openings.items():
        if key in seen or opening.balance == ZERO:
            continue
        if not selection.matches(opening.account_ref):
            continue
        groups.append(_ledger_group(opening.account_ref, (), opening.balance, index, config))

    groups.sort(key=lambda g: _group_sort_key(g.listid, g.description))

    logger.info(
        "ledger_groups_built",
        extra={
            "group_count": len(groups),
            "row_count": sum(len(g.rows) for g in groups),
        },
    )
    return GeneralLedgerReport(metadata=metadata, groups=tuple(groups))


# =========================================================================
# 2. TRIAL BALANCE
# =========================================================================


def _account_key(ref: str, index: AccountIndex) -> str:
    """Identity of a voucher reference: the resolved account id, else its key."""
    info = index.resolve(ref)
    return info.account_id if info is not None else normalize_key(ref)


def build_trial_balance(
    legs: Iterable[LegEntry],
    openings: Mapping[str, OpeningBalance],
    index: AccountIndex,
    selection: AccountSelection,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> TrialBalanceReport:
    """
    One classified snapshot line per account.

    Legs are grouped by the account they resolve to, so a legacy voucher
    naming an account by description shares a line with one naming it by
    id.  The stored balance of an account is overwritten by each selected
    leg's projected balance in iteration (fetch) order, not date order.
    Accounts without period activity fall back to their most recent opening
    balance.  Balances within ``config.zero_tolerance`` of zero are
    excluded.  Equality of the two totals is reported in ``is_balanced``,
    never asserted.
    """
    balances: dict[str, tuple[str, Decimal]] = {}
    for entry in legs:
        ref = entry.leg.account
        balances[_account_key(ref, index)] = (ref, entry.leg.projected_balance)

    fallback: dict[str, OpeningBalance] = {}
    for opening in openings.values():
        key = _account_key(opening.account_ref, index)
        if key in balances or not selection.matches(opening.account_ref):
            continue
        previous = fallback.get(key)
        if previous is None or opening.voucher_date > previous.voucher_date:
            fallback[key] = opening
    for key, opening in fallback.items():
        balances[key] = (opening.account_ref, opening.balance)

    lines: list[TrialBalanceLine] = []
    excluded = 0
    for ref, projected in balances.values():
        info = index.resolve(ref)
        normal = info.normal_balance if info is not None else NormalBalance.DEBIT
        balance = signed_balance(projected, normal)
        if abs(balance) <= config.zero_tolerance:
            excluded += 1
            continue
        description, listid = _describe(ref, index)
        lines.append(
            TrialBalanceLine(
                account_id=info.account_id if info is not None else ref,
                description=description,
                listid=listid,
                closing_balance=balance,
                balance_type=BalanceType.DEBIT if balance > 0 else BalanceType.CREDIT,
                amount=abs(balance),
            )
        )

    lines.sort(key=lambda ln: _group_sort_key(ln.listid, ln.description))
    total_debit = sum((ln.debit_amount for ln in lines), ZERO)
    total_credit = sum((ln.credit_amount for ln in lines), ZERO)

    logger.info(
        "trial_balance_built",
        extra={
            "line_count": len(lines),
            "excluded_near_zero": excluded,
            "total_debit": str(total_debit),
            "total_credit": str(total_credit),
        },
    )
    return TrialBalanceReport(
        metadata=metadata,
        lines=tuple(lines),
        total_debit=total_debit,
        total_credit=total_credit,
        is_balanced=total_debit == total_credit,
    )


# =========================================================================
# 3. ENTRY POINTS
# =========================================================================


def generate_report(
    roots: Sequence[AccountNode],
    index: AccountIndex,
    selection: AccountSelection,
    vouchers: Sequence[VoucherItem],
    filters: ReportFilters,
    report_type: ReportType,
    config: ReportingConfig,
    generated_at: str,
) -> Report:
    """Run one report over an already prepared chart and selection."""
    aggregator = VoucherAggregator(vouchers, filters, selection)
    openings = aggregator.opening_balances()
    metadata = build_metadata(report_type, filters, index, config, generated_at)

    if report_type == ReportType.GENERAL_LEDGER:
        return build_general_ledger(
            aggregator.accumulate(), openings, index, selection, config, metadata,
        )
    return build_trial_balance(
        aggregator.selected_legs(), openings, index, selection, config, metadata,
    )


def compute_report(
    accounts: Mapping[AccountCategory, Sequence[AccountRecord]],
    vouchers: Sequence[VoucherItem],
    filters: ReportFilters,
    *,
    report_type: ReportType,
    config: ReportingConfig | None = None,
    clock: Clock | None = None,
) -> Report:
    """
    Compute a report from plain snapshots.

    ``accounts`` maps each category to its flat account records.  No hidden
    state: the same snapshots, filters and clock always give the same
    report.
    """
    config = config or ReportingConfig()
    clock = clock or SystemClock()
    roots, index = prepare_chart(accounts)
    selection = resolve_selection(roots, index, filters)
    return generate_report(
        roots, index, selection, vouchers, filters, report_type, config,
        clock.timestamp(),
    )


# =========================================================================
# 4. RENDERER (dict/JSON output)
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - date / datetime -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples, frozensets -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(render_to_dict(item) for item in obj)
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
