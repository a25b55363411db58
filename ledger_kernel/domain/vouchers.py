"""
Voucher value objects.

A voucher is read-only input to the report engine.  Each detail row holds two
independent legs (one account each) and a shared narration.  The projected
balance on a leg is a trusted running-balance snapshot computed by the voucher
service at creation time; the engine reads and carries it, never recomputes it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class VoucherLeg:
    """One side of a double-entry detail row."""

    account: str = ""
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    projected_balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class VoucherDetailRow:
    """A leg pair plus the shared row narration."""

    leg1: VoucherLeg = VoucherLeg()
    leg2: VoucherLeg = VoucherLeg()
    narration: str = ""

    @property
    def legs(self) -> tuple[VoucherLeg, VoucherLeg]:
        return (self.leg1, self.leg2)


@dataclass(frozen=True)
class VoucherItem:
    """A voucher header with its ordered detail rows."""

    voucher_no: str = ""
    voucher_date: datetime | None = None
    status: str = ""
    narration: str = ""
    description: str = ""
    details: tuple[VoucherDetailRow, ...] = ()
    voucher_id: str = ""
    cheque_no: str = ""
    deposit_slip_no: str = ""
