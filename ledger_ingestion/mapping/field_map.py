"""
Field-mapping table: raw service payloads -> typed domain objects.

The chart-of-account and voucher services are not consistent about field
casing (``voucherNo`` / ``VoucherNo`` / ``voucher_no``).  Every such
fallback lives here, as data, so the computation core only ever sees
``AccountRecord`` and ``VoucherItem``.  ZERO I/O.

Parsing is tolerant by contract: an unparseable amount becomes
``Decimal("0")`` and an unparseable date becomes ``None``; nothing raises.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from ledger_kernel.domain.accounts import AccountRecord
from ledger_kernel.domain.vouchers import VoucherDetailRow, VoucherItem, VoucherLeg

# -----------------------------------------------------------------------------
# Alias table
# -----------------------------------------------------------------------------

DEFAULT_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    # Page envelope
    "page.data": ("data", "Data", "items", "Items"),
    "page.misc": ("misc", "Misc"),
    "page.total_pages": ("totalPages", "TotalPages", "total_pages"),
    # Account
    "account.id": ("id", "Id", "ID", "accountId", "account_id"),
    "account.listid": ("listid", "listId", "ListId", "list_id"),
    "account.description": ("description", "Description", "name", "Name"),
    "account.parent_account_id": (
        "parentAccountId", "ParentAccountId", "parent_account_id", "parentId",
    ),
    # Voucher header
    "voucher.id": ("id", "Id", "ID"),
    "voucher.voucher_no": ("voucherNo", "VoucherNo", "voucher_no"),
    "voucher.voucher_date": ("voucherDate", "VoucherDate", "voucher_date"),
    "voucher.status": ("status", "Status"),
    "voucher.narration": ("narration", "Narration"),
    "voucher.description": ("description", "Description"),
    "voucher.cheque_no": ("chequeNo", "ChequeNo", "cheque_no"),
    "voucher.deposit_slip_no": ("depositSlipNo", "DepositSlipNo", "deposit_slip_no"),
    "voucher.details": ("voucherDetails", "VoucherDetails", "voucher_details", "details"),
    # Detail row
    "row.narration": ("narration", "Narration"),
    "row.leg1.account": ("account1", "Account1", "account_1"),
    "row.leg1.debit": ("debit1", "Debit1", "debit_1"),
    "row.leg1.credit": ("credit1", "Credit1", "credit_1"),
    "row.leg1.projected_balance": (
        "projectedBalance1", "ProjectedBalance1", "projected_balance_1",
    ),
    "row.leg2.account": ("account2", "Account2", "account_2"),
    "row.leg2.debit": ("debit2", "Debit2", "debit_2"),
    "row.leg2.credit": ("credit2", "Credit2", "credit_2"),
    "row.leg2.projected_balance": (
        "projectedBalance2", "ProjectedBalance2", "projected_balance_2",
    ),
}


# -----------------------------------------------------------------------------
# Tolerant value parsers (pure)
# -----------------------------------------------------------------------------


def parse_decimal(value: Any) -> Decimal:
    """Parse an amount; anything non-numeric (or NaN/infinite) is zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        s = str(value).strip()
        if not s:
            return Decimal("0")
        try:
            result = Decimal(s)
        except (InvalidOperation, ValueError):
            return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return result


_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%d/%m/%Y", "%d-%m-%Y")


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse a voucher date to a naive ``datetime``.

    Aware values are converted to UTC first.  Returns ``None`` for missing or
    unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        s = str(value).strip()
        if not s:
            return None
        try:
            result = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _DATE_FORMATS:
                try:
                    return datetime.strptime(s, fmt)
                except ValueError:
                    continue
            return None
    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result


def parse_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


# -----------------------------------------------------------------------------
# Mapper
# -----------------------------------------------------------------------------


class FieldMapper:
    """
    Applies the alias table to raw records.

    Contract:
        ``pick`` returns the value of the first alias present with a non-None
        value; aliases are tried in table order.
    """

    def __init__(self, aliases: Mapping[str, tuple[str, ...]] | None = None):
        self._aliases: dict[str, tuple[str, ...]] = dict(DEFAULT_FIELD_ALIASES)
        if aliases:
            self._aliases.update({k: tuple(v) for k, v in aliases.items()})

    @property
    def aliases(self) -> dict[str, tuple[str, ...]]:
        return dict(self._aliases)

    def pick(self, raw: Any, field: str, default: Any = None) -> Any:
        if not isinstance(raw, Mapping):
            return default
        for name in self._aliases.get(field, ()):
            value = raw.get(name)
            if value is not None:
                return value
        return default

    # -- page envelope ------------------------------------------------------

    def page_records(self, payload: Any) -> list[Any]:
        """Records of one page; a bare list payload is accepted as-is."""
        if isinstance(payload, list):
            return payload
        data = self.pick(payload, "page.data", [])
        return data if isinstance(data, list) else []

    def total_pages(self, payload: Any) -> int:
        """``misc.totalPages`` of a page; missing or invalid means 1."""
        misc = self.pick(payload, "page.misc", {})
        raw = self.pick(misc, "page.total_pages")
        try:
            pages = int(raw)
        except (TypeError, ValueError):
            return 1
        return pages if pages > 0 else 1

    # -- domain objects -----------------------------------------------------

    def to_account_record(self, raw: Mapping[str, Any]) -> AccountRecord:
        parent = self.pick(raw, "account.parent_account_id")
        return AccountRecord(
            account_id=parse_text(self.pick(raw, "account.id")),
            listid=parse_text(self.pick(raw, "account.listid")),
            description=parse_text(self.pick(raw, "account.description")),
            parent_account_id=None if parent is None else str(parent),
        )

    def to_leg(self, raw: Mapping[str, Any], leg: str) -> VoucherLeg:
        return VoucherLeg(
            account=parse_text(self.pick(raw, f"row.{leg}.account")),
            debit=parse_decimal(self.pick(raw, f"row.{leg}.debit")),
            credit=parse_decimal(self.pick(raw, f"row.{leg}.credit")),
            projected_balance=parse_decimal(
                self.pick(raw, f"row.{leg}.projected_balance")
            ),
        )

    def to_detail_row(self, raw: Mapping[str, Any]) -> VoucherDetailRow:
        return VoucherDetailRow(
            leg1=self.to_leg(raw, "leg1"),
            leg2=self.to_leg(raw, "leg2"),
            narration=parse_text(self.pick(raw, "row.narration")),
        )

    def to_voucher(self, raw: Mapping[str, Any]) -> VoucherItem:
        details = self.pick(raw, "voucher.details", [])
        if not isinstance(details, list):
            details = []
        return VoucherItem(
            voucher_id=parse_text(self.pick(raw, "voucher.id")),
            voucher_no=parse_text(self.pick(raw, "voucher.voucher_no")),
            voucher_date=parse_datetime(self.pick(raw, "voucher.voucher_date")),
            status=parse_text(self.pick(raw, "voucher.status")),
            narration=parse_text(self.pick(raw, "voucher.narration")),
            description=parse_text(self.pick(raw, "voucher.description")),
            cheque_no=parse_text(self.pick(raw, "voucher.cheque_no")),
            deposit_slip_no=parse_text(self.pick(raw, "voucher.deposit_slip_no")),
            details=tuple(
                self.to_detail_row(row) for row in details if isinstance(row, Mapping)
            ),
        )
