"""
Pytest fixtures for the ledger engine test suite.

Provides:
- Structured logging setup and a ``captured_logs`` fixture
- A deterministic clock
- A small chart of accounts covering all five categories
- Voucher builders (``make_leg``, ``make_row``, ``make_voucher``) and raw
  payload builders for the ingestion tests

No network, no database: every test runs on synthetic in-memory data.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from io import StringIO

import pytest

from ledger_kernel.domain.accounts import AccountCategory, AccountRecord
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.vouchers import VoucherDetailRow, VoucherItem, VoucherLeg
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

FIXED_NOW = datetime(2024, 3, 1, 9, 30, 0)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            service.trial_balance(filters)
            logs = captured_logs()
            assert any(r["message"] == "trial_balance_built" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(FIXED_NOW)


# =============================================================================
# Chart of accounts
# =============================================================================


def make_account(
    account_id: str,
    listid: str = "",
    description: str = "",
    parent: str | None = None,
) -> AccountRecord:
    return AccountRecord(
        account_id=account_id,
        listid=listid,
        description=description,
        parent_account_id=parent,
    )


def standard_chart() -> dict[AccountCategory, list[AccountRecord]]:
    """
    Small chart used across the reporting tests::

        assets       1      Current Assets
                     1-01   Cash
                     1-02   Bank
        revenues     4      Revenue
        liabilities  2      Accounts Payable
        expenses     5      Expense
        equities     3      Capital
    """
    return {
        AccountCategory.ASSETS: [
            make_account("CA", "1", "Current Assets"),
            make_account("CASH", "1-01", "Cash", parent="CA"),
            make_account("BANK", "1-02", "Bank", parent="CA"),
        ],
        AccountCategory.REVENUES: [make_account("REV", "4", "Revenue")],
        AccountCategory.LIABILITIES: [make_account("AP", "2", "Accounts Payable")],
        AccountCategory.EXPENSES: [make_account("EXP", "5", "Expense")],
        AccountCategory.EQUITIES: [make_account("CAP", "3", "Capital")],
    }


@pytest.fixture
def chart() -> dict[AccountCategory, list[AccountRecord]]:
    return standard_chart()


# =============================================================================
# Voucher builders
# =============================================================================


def make_leg(
    account: str = "",
    debit: str | int = 0,
    credit: str | int = 0,
    pb: str | int = 0,
) -> VoucherLeg:
    return VoucherLeg(
        account=account,
        debit=Decimal(str(debit)),
        credit=Decimal(str(credit)),
        projected_balance=Decimal(str(pb)),
    )


def make_row(
    leg1: VoucherLeg | None = None,
    leg2: VoucherLeg | None = None,
    narration: str = "",
) -> VoucherDetailRow:
    return VoucherDetailRow(
        leg1=leg1 or VoucherLeg(),
        leg2=leg2 or VoucherLeg(),
        narration=narration,
    )


def make_voucher(
    voucher_no: str,
    when: str | None,
    *rows: VoucherDetailRow,
    status: str = "Posted",
    narration: str = "",
    **extra,
) -> VoucherItem:
    return VoucherItem(
        voucher_no=voucher_no,
        voucher_date=datetime.fromisoformat(when) if when else None,
        status=status,
        narration=narration,
        details=tuple(rows),
        **extra,
    )


def scenario_vouchers() -> list[VoucherItem]:
    """
    The two-voucher end-to-end scenario::

        V1 2024-01-10  Cash  Dr 500 (pb 500)   Revenue  Cr 500 (pb 500)
        V2 2024-01-15  Cash  Cr 200 (pb 300)   Expense  Dr 200 (pb 200)
    """
    return [
        make_voucher(
            "V1", "2024-01-10",
            make_row(make_leg("CASH", debit=500, pb=500), make_leg("REV", credit=500, pb=500)),
        ),
        make_voucher(
            "V2", "2024-01-15",
            make_row(make_leg("CASH", credit=200, pb=300), make_leg("EXP", debit=200, pb=200)),
        ),
    ]


@pytest.fixture
def vouchers() -> list[VoucherItem]:
    return scenario_vouchers()


# =============================================================================
# Raw payload builders (service wire shape)
# =============================================================================


def raw_account(account_id, listid="", description="", parent=None) -> dict:
    return {
        "id": account_id,
        "listid": listid,
        "description": description,
        "parentAccountId": parent,
    }


def raw_voucher(voucher_no: str, date: str, *details: dict, status: str = "Posted") -> dict:
    return {
        "id": f"id-{voucher_no}",
        "voucherNo": voucher_no,
        "voucherDate": date,
        "status": status,
        "voucherDetails": list(details),
    }


def raw_detail(account1, debit1, credit1, pb1, account2, debit2, credit2, pb2) -> dict:
    return {
        "account1": account1,
        "debit1": debit1,
        "credit1": credit1,
        "projectedBalance1": pb1,
        "account2": account2,
        "debit2": debit2,
        "credit2": credit2,
        "projectedBalance2": pb2,
    }


def raw_snapshot() -> dict:
    """The end-to-end scenario in the service wire shape."""
    return {
        "accounts": {
            "assets": [
                raw_account("CA", "1", "Current Assets"),
                raw_account("CASH", "1-01", "Cash", "CA"),
                raw_account("BANK", "1-02", "Bank", "CA"),
            ],
            "revenues": [raw_account("REV", "4", "Revenue")],
            "liabilities": [raw_account("AP", "2", "Accounts Payable")],
            "expenses": [raw_account("EXP", "5", "Expense")],
            "equities": [raw_account("CAP", "3", "Capital")],
        },
        "vouchers": [
            raw_voucher("V1", "2024-01-10", raw_detail("CASH", 500, 0, 500, "REV", 0, 500, 500)),
            raw_voucher("V2", "2024-01-15", raw_detail("CASH", 0, 200, 300, "EXP", 200, 0, 200)),
        ],
    }
