"""
Hypothesis-based property tests for the two reports.

Properties:
1. Ledger: closing = opening + debits - credits for a debit-normal account
   whose projected balances are consistent, for any from_date.
2. Trial balance: totals equal the column sums; no line is within the
   zero tolerance; amount is |closing balance|.
3. Voucher numbers with numeric suffixes sort by value.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

try:
    from hypothesis import HealthCheck, given, settings, strategies as st

    HYPOTHESIS_AVAILABLE = True
except ImportError:
    HYPOTHESIS_AVAILABLE = False
    pytest.skip("hypothesis not installed", allow_module_level=True)

from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import ReportFilters, ReportType
from ledger_modules.reporting.statements import compute_report, natural_sort_key
from tests.conftest import make_leg, make_row, make_voucher, standard_chart

START = date(2024, 1, 1)

amounts = st.decimals(
    min_value=Decimal("0"), max_value=Decimal("100000"), places=2,
    allow_nan=False, allow_infinity=False,
)
movements = st.lists(st.tuples(amounts, amounts), min_size=1, max_size=25)


def _cash_history(moves):
    """One voucher per day; projected balance follows debit - credit."""
    balance = Decimal("0")
    items = []
    for i, (debit, credit) in enumerate(moves):
        balance += debit - credit
        items.append(
            make_voucher(
                f"V{i + 1}", (START + timedelta(days=i)).isoformat(),
                make_row(make_leg("CASH", debit=debit, credit=credit, pb=balance)),
            )
        )
    return items


class TestLedgerProperties:

    @given(moves=movements, offset=st.integers(min_value=0, max_value=30))
    @settings(max_examples=60, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_closing_equals_opening_plus_net_movement(self, moves, offset):
        report = compute_report(
            standard_chart(),
            _cash_history(moves),
            ReportFilters(from_date=START + timedelta(days=offset)),
            report_type=ReportType.GENERAL_LEDGER,
        )
        for group in report.groups:
            assert group.totals.closing_balance == (
                group.opening_balance + group.totals.debit - group.totals.credit
            )


class TestTrialBalanceProperties:

    @given(
        balances=st.lists(
            st.tuples(
                st.sampled_from(["CASH", "BANK", "REV", "AP", "EXP", "CAP", "Other"]),
                st.decimals(
                    min_value=Decimal("-5000"), max_value=Decimal("5000"), places=6,
                    allow_nan=False, allow_infinity=False,
                ),
            ),
            max_size=30,
        ),
    )
    @settings(max_examples=60, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_totals_and_exclusion(self, balances):
        items = [
            make_voucher(f"V{i}", "2024-01-10", make_row(make_leg(ref, pb=pb)))
            for i, (ref, pb) in enumerate(balances)
        ]
        config = ReportingConfig()
        report = compute_report(
            standard_chart(), items, ReportFilters(),
            report_type=ReportType.TRIAL_BALANCE, config=config,
        )

        assert report.total_debit == sum((ln.debit_amount for ln in report.lines), Decimal("0"))
        assert report.total_credit == sum((ln.credit_amount for ln in report.lines), Decimal("0"))
        assert report.is_balanced == (report.total_debit == report.total_credit)
        for line in report.lines:
            assert line.amount == abs(line.closing_balance)
            assert line.amount > config.zero_tolerance
        assert len({ln.account_id for ln in report.lines}) == len(report.lines)


class TestNaturalOrderProperties:

    @given(numbers=st.lists(st.integers(min_value=0, max_value=10**6), unique=True, min_size=1))
    @settings(max_examples=60, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_numeric_suffix_order(self, numbers):
        ordered = sorted((f"V{n}" for n in numbers), key=natural_sort_key)
        assert ordered == [f"V{n}" for n in sorted(numbers)]
