"""
Trial Balance report tests.

Classification of natural-side projected balances, near-zero exclusion,
fetch-order overwrite, opening fallback and the balance law.
NO network.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.accounts import NormalBalance
from ledger_kernel.selectors import AccountFilter
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import BalanceType, ReportFilters, ReportType, TrialBalanceReport
from ledger_modules.reporting.statements import compute_report, signed_balance
from tests.conftest import make_leg, make_row, make_voucher, standard_chart


def _tb(vouchers, filters=None, config=None) -> TrialBalanceReport:
    return compute_report(
        standard_chart(),
        vouchers,
        filters or ReportFilters(),
        report_type=ReportType.TRIAL_BALANCE,
        config=config,
    )


def _line(report: TrialBalanceReport, account_id: str):
    return next(ln for ln in report.lines if ln.account_id == account_id)


class TestEndToEnd:

    def test_lines(self, vouchers):
        report = _tb(vouchers)

        assert [ln.account_id for ln in report.lines] == ["CASH", "REV", "EXP"]
        cash, revenue, expense = report.lines
        assert (cash.balance_type, cash.amount) == (BalanceType.DEBIT, Decimal("300"))
        assert (revenue.balance_type, revenue.amount) == (BalanceType.CREDIT, Decimal("500"))
        assert (expense.balance_type, expense.amount) == (BalanceType.DEBIT, Decimal("200"))
        assert revenue.closing_balance == Decimal("-500")

    def test_totals_balance(self, vouchers):
        report = _tb(vouchers)
        assert report.total_debit == Decimal("500")
        assert report.total_credit == Decimal("500")
        assert report.is_balanced

    def test_title_all_dates(self, vouchers):
        assert _tb(vouchers).metadata.title == "Trial Balance (All Dates)"

    def test_title_open_ended(self, vouchers):
        report = _tb(vouchers, ReportFilters(to_date=date(2024, 1, 31)))
        assert report.metadata.title == "Trial Balance From ... To 31-01-2024"


class TestSignedBalance:

    @pytest.mark.parametrize(
        "pb, normal, expected",
        [
            (Decimal("100"), NormalBalance.DEBIT, Decimal("100")),
            (Decimal("-40"), NormalBalance.DEBIT, Decimal("-40")),
            (Decimal("100"), NormalBalance.CREDIT, Decimal("-100")),
            (Decimal("-40"), NormalBalance.CREDIT, Decimal("40")),
        ],
    )
    def test_signed(self, pb, normal, expected):
        assert signed_balance(pb, normal) == expected

    def test_overdrawn_asset_lands_in_credit_column(self):
        items = [make_voucher("V1", "2024-01-01", make_row(make_leg("BANK", credit=50, pb=-50)))]
        line = _line(_tb(items), "BANK")
        assert line.balance_type == BalanceType.CREDIT
        assert line.credit_amount == Decimal("50")
        assert line.debit_amount == Decimal("0")

    def test_unresolved_reference_is_debit_normal(self):
        items = [make_voucher("V1", "2024-01-01", make_row(make_leg("Suspense", debit=7, pb=7)))]
        line = _line(_tb(items), "Suspense")
        assert line.balance_type == BalanceType.DEBIT
        assert line.description == "Suspense"


class TestExclusion:
    """Balances within the zero tolerance are dropped."""

    def test_near_zero_excluded(self):
        items = [
            make_voucher("V1", "2024-01-01", make_row(make_leg("CASH", pb="0.0000005"))),
            make_voucher("V2", "2024-01-01", make_row(make_leg("BANK", pb="0.01"))),
        ]
        report = _tb(items)
        assert [ln.account_id for ln in report.lines] == ["BANK"]

    def test_tolerance_is_configurable(self):
        items = [make_voucher("V1", "2024-01-01", make_row(make_leg("BANK", pb="0.01")))]
        assert _tb(items, config=ReportingConfig(zero_tolerance=Decimal("0.05"))).is_empty

    def test_all_zero_is_empty(self):
        items = [make_voucher("V1", "2024-01-01", make_row(make_leg("CASH", debit=5, credit=5, pb=0)))]
        report = _tb(items)
        assert report.is_empty
        assert report.is_balanced

    def test_logs_excluded_count(self, captured_logs):
        items = [make_voucher("V1", "2024-01-01", make_row(make_leg("CASH", pb=0)))]
        _tb(items)
        record = next(r for r in captured_logs() if r["message"] == "trial_balance_built")
        assert record["excluded_near_zero"] == 1


class TestOverwriteOrder:
    """The last selected leg in fetch order wins, not the latest date."""

    def test_fetch_order_not_chronological(self):
        items = [
            make_voucher("V2", "2024-01-20", make_row(make_leg("CASH", debit=10, pb=20))),
            make_voucher("V1", "2024-01-10", make_row(make_leg("CASH", debit=10, pb=10))),
        ]
        assert _line(_tb(items), "CASH").amount == Decimal("10")

    def test_later_row_in_same_voucher_wins(self):
        items = [
            make_voucher(
                "V1", "2024-01-10",
                make_row(make_leg("CASH", debit=10, pb=10)),
                make_row(make_leg("CASH", debit=5, pb=15)),
            ),
        ]
        assert _line(_tb(items), "CASH").amount == Decimal("15")


class TestAccountIdentity:
    """Legs naming one account by id and by description share one line."""

    def test_id_and_description_references_merge(self):
        items = [
            make_voucher("V1", "2024-01-10", make_row(make_leg("CASH", debit=500, pb=500))),
            make_voucher("V2", "2024-01-15", make_row(make_leg("Cash", credit=200, pb=300))),
        ]
        report = _tb(items)
        assert [(ln.account_id, ln.description, ln.amount) for ln in report.lines] == [
            ("CASH", "Cash", Decimal("300")),
        ]
        assert report.total_debit == Decimal("300")

    def test_listid_reference_merges_with_opening(self):
        items = [
            make_voucher("V0", "2023-12-01", make_row(make_leg("1-02", debit=80, pb=80))),
            make_voucher("V1", "2023-12-05", make_row(make_leg("BANK", debit=20, pb=100))),
        ]
        report = _tb(items, ReportFilters(from_date=date(2024, 1, 1)))
        assert [(ln.account_id, ln.amount) for ln in report.lines] == [("BANK", Decimal("100"))]

    def test_unresolved_references_keep_their_own_line(self):
        items = [
            make_voucher(
                "V1", "2024-01-10",
                make_row(make_leg("Petty", debit=5, pb=5), make_leg("petty ", debit=3, pb=8)),
            ),
        ]
        report = _tb(items)
        assert [(ln.account_id, ln.amount) for ln in report.lines] == [("petty ", Decimal("8"))]


class TestOpeningFallback:
    """Accounts without period activity use their opening balance."""

    def test_opening_only_account_listed(self):
        items = [
            make_voucher("V0", "2023-12-01", make_row(make_leg("BANK", debit=80, pb=80))),
            make_voucher("V1", "2024-01-10", make_row(make_leg("CASH", debit=10, pb=10))),
        ]
        report = _tb(items, ReportFilters(from_date=date(2024, 1, 1)))
        assert _line(report, "BANK").amount == Decimal("80")
        assert _line(report, "CASH").amount == Decimal("10")

    def test_period_activity_overrides_opening(self):
        items = [
            make_voucher("V0", "2023-12-01", make_row(make_leg("CASH", debit=80, pb=80))),
            make_voucher("V1", "2024-01-10", make_row(make_leg("CASH", credit=30, pb=50))),
        ]
        report = _tb(items, ReportFilters(from_date=date(2024, 1, 1)))
        assert [ln.amount for ln in report.lines] == [Decimal("50")]

    def test_opening_fallback_respects_selection(self):
        items = [make_voucher("V0", "2023-12-01", make_row(make_leg("BANK", debit=80, pb=80)))]
        filters = ReportFilters(
            from_date=date(2024, 1, 1), account_filter=AccountFilter.specific("CASH"),
        )
        assert _tb(items, filters).is_empty


class TestSelection:

    def test_by_head_subtree(self, vouchers):
        filters = ReportFilters(account_filter=AccountFilter.by_head("CA"))
        assert [ln.account_id for ln in _tb(vouchers, filters).lines] == ["CASH"]

    def test_unknown_head_selects_everything(self, vouchers):
        filters = ReportFilters(account_filter=AccountFilter.by_head("NOPE"))
        assert len(_tb(vouchers, filters).lines) == 3


class TestBalanceLaw:
    """Totals equal the sums of the lines; is_balanced reflects equality."""

    def test_unbalanced_is_reported_not_raised(self):
        items = [make_voucher("V1", "2024-01-01", make_row(make_leg("CASH", debit=10, pb=10)))]
        report = _tb(items)
        assert report.total_debit == Decimal("10")
        assert report.total_credit == Decimal("0")
        assert not report.is_balanced

    def test_totals_match_lines(self, vouchers):
        report = _tb(vouchers)
        assert report.total_debit == sum(ln.debit_amount for ln in report.lines)
        assert report.total_credit == sum(ln.credit_amount for ln in report.lines)
        for line in report.lines:
            assert line.amount == abs(line.closing_balance)
            assert line.amount > 0
