#!/usr/bin/env python3
"""
Run a General Ledger or Trial Balance report and print it to stdout.

Data comes from the ERP services named in a YAML config file, or from a
JSON snapshot file for offline runs.  Notices (failed categories, empty
results, unknown accounts) are printed after the report.

Usage:
    python3 scripts/run_report.py {ledger,trial-balance} (--config FILE | --snapshot FILE) [options]

Examples:
    # General ledger for January, one account subtree
    python3 scripts/run_report.py ledger --config ledger.yaml \\
        --from 2024-01-01 --to 2024-01-31 --mode byHead --head 1001

    # Trial balance from a captured snapshot, as JSON
    python3 scripts/run_report.py trial-balance --snapshot snapshot.json --json

    # Posted vouchers only, listid range
    python3 scripts/run_report.py ledger --snapshot snapshot.json \\
        --status Posted --mode range --range-from 1001 --range-to 1009
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 110  # total line width
AMT_W = 16  # amount column width


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute a General Ledger or Trial Balance report.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "report",
        choices=("ledger", "trial-balance"),
        help="Report to run.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML engine config (service endpoints, reporting defaults, field aliases).",
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="JSON snapshot file to read instead of the live services.",
    )
    parser.add_argument(
        "--from",
        dest="from_date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Start date (YYYY-MM-DD), inclusive.",
    )
    parser.add_argument(
        "--to",
        dest="to_date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="End date (YYYY-MM-DD), inclusive of the whole day.",
    )
    parser.add_argument(
        "--status",
        default="All",
        help="Voucher status filter, case-insensitive (default: All).",
    )
    parser.add_argument(
        "--mode",
        default="byHead",
        help="Account filter mode: byHead, range or specific (default: byHead).",
    )
    parser.add_argument("--head", default="", help="Head account id (byHead mode).")
    parser.add_argument("--range-from", default="", help="From account id (range mode).")
    parser.add_argument("--range-to", default="", help="To account id (range mode).")
    parser.add_argument(
        "--account",
        action="append",
        default=[],
        help="Account id (specific mode); give at most twice.",
    )
    parser.add_argument("--branch", default=None, help="Branch label for the heading.")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of a text table.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Emit structured JSON logs to stderr.",
    )
    args = parser.parse_args(argv)
    if args.config is None and args.snapshot is None:
        parser.error("one of --config or --snapshot is required")
    return args


# ===================================================================
# Pretty-print helpers
# ===================================================================


def _hdr(payload) -> str:
    lines = [
        "",
        "=" * W,
        payload.entity_name.center(W),
        f"Branch: {payload.branch}".center(W),
        payload.filter_summary.center(W) if payload.filter_summary else None,
        payload.title.center(W),
        "=" * W,
    ]
    return "\n".join(l for l in lines if l is not None)


def _table_line(cells: tuple[str, ...], amount_cols: int) -> str:
    text_cells = cells[: len(cells) - amount_cols]
    amounts = cells[len(cells) - amount_cols:]
    text_w = (W - 2 - AMT_W * amount_cols) // max(len(text_cells), 1)
    text = "".join(f"{c[: text_w - 1]:<{text_w}}" for c in text_cells)
    return "  " + text + "".join(f"{a:>{AMT_W}}" for a in amounts)


def print_payload(payload) -> None:
    from ledger_modules.reporting.models import ReportType

    amount_cols = 3 if payload.report_type == ReportType.GENERAL_LEDGER else 2
    print(_hdr(payload))
    for group in payload.groups:
        if group.heading:
            print()
            print(f"  {group.heading}")
        print(_table_line(payload.columns, amount_cols))
        print("  " + "-" * (W - 2))
        for row in group.rows:
            print(_table_line(row, amount_cols))
        if group.totals:
            print("  " + "-" * (W - 2))
            label, *amounts = group.totals
            print(_table_line((label,) + ("",) * (len(payload.columns) - amount_cols - 1) + tuple(amounts), amount_cols))
    print("  " + "=" * (W - 2))
    label, *amounts = payload.grand_totals
    pad = len(payload.columns) - amount_cols - 1
    print(_table_line((label,) + ("",) * pad + tuple(amounts) + ("",) * (amount_cols - len(amounts)), amount_cols))
    print()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from ledger_config import load_engine_config
    from ledger_config.schema import ServiceConfig
    from ledger_ingestion.adapters import HttpReportSource, JsonSnapshotSource
    from ledger_ingestion.mapping import FieldMapper
    from ledger_ingestion.services import SnapshotLoader
    from ledger_kernel.exceptions import LedgerEngineError
    from ledger_kernel.logging_config import configure_logging
    from ledger_kernel.selectors import AccountFilter, SelectionMode
    from ledger_modules.reporting import (
        ReportFilters,
        ReportingConfig,
        ReportingService,
        ReportType,
        build_render_payload,
        render_to_dict,
    )
    from yaml import YAMLError

    if args.verbose:
        configure_logging(level=logging.DEBUG)

    try:
        engine_config = load_engine_config(args.config) if args.config else None
        service = engine_config.service if engine_config else ServiceConfig()
        reporting = (
            ReportingConfig.from_dict(dict(engine_config.reporting))
            if engine_config and engine_config.reporting
            else ReportingConfig()
        )
        mapper = FieldMapper(engine_config.field_aliases if engine_config else None)
        if args.snapshot:
            source = JsonSnapshotSource.from_file(args.snapshot)
        else:
            source = HttpReportSource(service)
        mode = SelectionMode.parse(args.mode)
    except (OSError, ValueError, YAMLError, LedgerEngineError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    filters = ReportFilters(
        from_date=args.from_date,
        to_date=args.to_date,
        status=args.status,
        account_filter=AccountFilter(
            mode=mode,
            head_account_id=args.head,
            range_from_id=args.range_from,
            range_to_id=args.range_to,
            specific_ids=tuple(args.account),
        ),
        branch=args.branch,
    )

    svc = ReportingService(SnapshotLoader(source, service, mapper), config=reporting)
    report_type = (
        ReportType.GENERAL_LEDGER if args.report == "ledger" else ReportType.TRIAL_BALANCE
    )
    outcome = svc.run(report_type, filters)

    if outcome.report is not None:
        if args.json:
            print(json.dumps(render_to_dict(outcome.report), indent=2))
        else:
            print_payload(build_render_payload(outcome.report, reporting.display_precision))
            if report_type == ReportType.TRIAL_BALANCE:
                tag = "OK" if outcome.report.is_balanced else "FAIL"
                print(f"  [{tag}] Debits = Credits")

    for notice in outcome.notices:
        print(f"[{notice.level.value.upper()}] {notice.code}: {notice.message}", file=sys.stderr)

    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())
