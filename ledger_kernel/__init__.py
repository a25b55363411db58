"""
Ledger Kernel

Pure computation core for the general ledger and trial balance reports:
- Chart-of-accounts hierarchy and id-keyed account index
- Account selection (by head, by listid range, specific accounts)
- Typed exceptions and structured JSON logging
"""

__version__ = "0.1.0"
