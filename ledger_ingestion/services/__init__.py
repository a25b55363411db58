"""Ingestion services (fetch orchestration)."""

from ledger_ingestion.services.snapshot_loader import ChartSnapshot, SnapshotLoader

__all__ = [
    "ChartSnapshot",
    "SnapshotLoader",
]
