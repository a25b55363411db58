"""
ledger_modules -- Report modules built on the ledger kernel.

Each sub-package is a read-only module that turns kernel snapshots into a
report.  ``reporting`` holds the General Ledger and Trial Balance reports.
"""
