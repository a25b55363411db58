"""
ledger_ingestion -- Service-boundary adapters for the report engine.

Reads the chart-of-account categories and the voucher pages from their
external services (HTTP or a JSON snapshot file) and maps the raw payloads
onto the kernel's typed domain objects through the field-mapping table.

Architecture:
    ledger_ingestion/ is a top-level package. The kernel never imports from
    it; ledger_modules.reporting uses it only through ReportingService.
"""
