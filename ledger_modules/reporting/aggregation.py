"""
Voucher aggregation: filtering, opening balances and per-account activity.

Pure functions over an in-memory voucher snapshot. ZERO I/O. ZERO side
effects.  Both report groupers in ``statements.py`` are fed from here.

Filtering:
    A voucher passes when its date lies in [from_date, to_date] (``to_date``
    covers the whole day up to 23:59:59.999; undated vouchers pass) and its
    status equals the filter status case-insensitively, or the filter is
    ``"All"``.

Opening balances:
    Only computed when ``from_date`` is set.  For every dated voucher strictly
    before ``from_date`` (status filter honored, account selection ignored),
    each leg's projected balance is tracked per normalized account key.  The
    latest voucher date wins; on an exact date tie the first leg seen is kept
    (strict ``>`` comparison).

Activity:
    Every leg of every filtered voucher whose account reference is non-blank
    and passes the selection is recorded under its raw account reference.
    Both legs are evaluated independently.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal

from ledger_kernel.domain.accounts import normalize_key
from ledger_kernel.domain.vouchers import VoucherDetailRow, VoucherItem, VoucherLeg
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.account_selector import AccountSelection
from ledger_modules.reporting.models import ReportFilters

logger = get_logger("modules.reporting.aggregation")

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class OpeningBalance:
    """Most recent projected balance of an account before the period."""

    account_ref: str  # raw reference of the winning leg
    voucher_date: datetime
    balance: Decimal


@dataclass(frozen=True)
class LegEntry:
    """A selected leg together with the voucher and row it came from."""

    voucher: VoucherItem
    row: VoucherDetailRow
    leg: VoucherLeg


@dataclass
class AccountActivity:
    """Accumulated period activity of one account reference."""

    account_ref: str
    entries: list[LegEntry] = field(default_factory=list)
    debit_total: Decimal = Decimal("0")
    credit_total: Decimal = Decimal("0")

    def add(self, entry: LegEntry) -> None:
        self.entries.append(entry)
        self.debit_total += entry.leg.debit
        self.credit_total += entry.leg.credit


class VoucherAggregator:
    """
    Applies report filters and account selection to a voucher snapshot.

    Contract:
        The snapshot is read, never modified.  Iteration order is the order
        of ``vouchers`` (fetch order), then detail-row order, then leg1 before
        leg2.
    """

    def __init__(
        self,
        vouchers: Sequence[VoucherItem],
        filters: ReportFilters,
        selection: AccountSelection | None = None,
    ):
        self._vouchers = list(vouchers)
        self._filters = filters
        self._selection = selection or AccountSelection()

        self._start = (
            datetime.combine(filters.from_date, time.min)
            if filters.from_date is not None else None
        )
        self._end = (
            datetime.combine(filters.to_date, END_OF_DAY)
            if filters.to_date is not None else None
        )
        self._status = (filters.status or "").strip().lower()

    @property
    def selection(self) -> AccountSelection:
        return self._selection

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def in_date_range(self, voucher: VoucherItem) -> bool:
        when = voucher.voucher_date
        if when is None:
            return True
        if self._start is not None and when < self._start:
            return False
        if self._end is not None and when > self._end:
            return False
        return True

    def matches_status(self, voucher: VoucherItem) -> bool:
        if self._filters.matches_all_statuses:
            return True
        return voucher.status.strip().lower() == self._status

    def filtered_vouchers(self) -> list[VoucherItem]:
        return [
            v for v in self._vouchers
            if self.in_date_range(v) and self.matches_status(v)
        ]

    # ------------------------------------------------------------------
    # Opening balances
    # ------------------------------------------------------------------

    def opening_balances(self) -> dict[str, OpeningBalance]:
        """Opening balance per normalized account key (empty without from_date)."""
        if self._start is None:
            return {}

        openings: dict[str, OpeningBalance] = {}
        for voucher in self._vouchers:
            when = voucher.voucher_date
            if when is None or when >= self._start:
                continue
            if not self.matches_status(voucher):
                continue
            for row in voucher.details:
                for leg in row.legs:
                    key = normalize_key(leg.account)
                    if not key:
                        continue
                    previous = openings.get(key)
                    if previous is None or when > previous.voucher_date:
                        openings[key] = OpeningBalance(
                            account_ref=leg.account,
                            voucher_date=when,
                            balance=leg.projected_balance,
                        )

        logger.debug(
            "opening_balances_computed",
            extra={"account_count": len(openings)},
        )
        return openings

    # ------------------------------------------------------------------
    # Period activity
    # ------------------------------------------------------------------

    def selected_legs(self) -> Iterator[LegEntry]:
        """Selected, non-blank legs of the filtered vouchers, in fetch order."""
        for voucher in self.filtered_vouchers():
            for row in voucher.details:
                for leg in row.legs:
                    if not leg.account.strip():
                        continue
                    if self._selection.matches(leg.account):
                        yield LegEntry(voucher=voucher, row=row, leg=leg)

    def accumulate(self) -> dict[str, AccountActivity]:
        """Period activity per raw account reference, in first-seen order."""
        activity: dict[str, AccountActivity] = {}
        for entry in self.selected_legs():
            ref = entry.leg.account
            if ref not in activity:
                activity[ref] = AccountActivity(account_ref=ref)
            activity[ref].add(entry)

        logger.debug(
            "voucher_activity_accumulated",
            extra={
                "account_count": len(activity),
                "leg_count": sum(len(a.entries) for a in activity.values()),
            },
        )
        return activity
