"""Report source adapters: HTTP service and JSON snapshot."""

from ledger_ingestion.adapters.base import ReportSource
from ledger_ingestion.adapters.http_adapter import HttpReportSource
from ledger_ingestion.adapters.json_adapter import JsonSnapshotSource

__all__ = [
    "HttpReportSource",
    "JsonSnapshotSource",
    "ReportSource",
]
