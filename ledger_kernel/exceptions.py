"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the report engine must react differently to a chart-of-accounts
fetch that failed (degrade and continue) and a voucher page that failed
(abort the run).  Parsing message strings to tell the two apart is fragile,
so every error has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, safe to show in a notice)
  3. Structured DATA as attributes (category, page index, config key)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerEngineError (base)
    |
    +-- NetworkFetchError
    |   +-- CategoryFetchError
    |   +-- VoucherPageFetchError
    |
    +-- ConfigurationError
    |
    +-- SelectionError
        +-- UnknownSelectionModeError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                     | When Raised
----------------|--------------------------|-----------------------------------
Fetch           | NETWORK_FETCH_FAILED     | Transport error, non-2xx, bad JSON
                | CATEGORY_FETCH_FAILED    | One chart-of-account category read
                | VOUCHER_FETCH_FAILED     | One voucher page read
----------------|--------------------------|-----------------------------------
Config          | INVALID_CONFIGURATION    | Missing/invalid YAML config value
----------------|--------------------------|-----------------------------------
Selection       | SELECTION_ERROR          | Account filter cannot be resolved
                | UNKNOWN_SELECTION_MODE   | Mode is not byHead/range/specific

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        records = source_loader.load_category(category)
    except CategoryFetchError as e:
        records = []                      # degrade, report run continues
        notices.append(Notice.warning(e.code, str(e)))

    try:
        vouchers = source_loader.load_vouchers()
    except VoucherPageFetchError as e:
        return ReportOutcome.failed(...)  # no partial report

Data-shape problems (unparseable dates, non-numeric amounts) are NOT
exceptions: the adapter layer parses them to ``None`` / ``Decimal("0")``.
"""


class LedgerEngineError(Exception):
    """
    Base exception for all ledger engine errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_ENGINE_ERROR"


# Fetch-related exceptions


class NetworkFetchError(LedgerEngineError):
    """A read from an external service failed."""

    code: str = "NETWORK_FETCH_FAILED"

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Fetch failed for {url}: {reason}")


class CategoryFetchError(NetworkFetchError):
    """A chart-of-account category could not be read."""

    code: str = "CATEGORY_FETCH_FAILED"

    def __init__(self, category: str, url: str, reason: str):
        self.category = category
        super().__init__(url, reason)


class VoucherPageFetchError(NetworkFetchError):
    """A voucher page could not be read. Aborts the whole report run."""

    code: str = "VOUCHER_FETCH_FAILED"

    def __init__(self, page_index: int, url: str, reason: str):
        self.page_index = page_index
        super().__init__(url, reason)


# Configuration exceptions


class ConfigurationError(LedgerEngineError):
    """Configuration value is missing or invalid."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Invalid configuration for '{key}': {message}")


# Selection exceptions


class SelectionError(LedgerEngineError):
    """Base exception for account-selection errors."""

    code: str = "SELECTION_ERROR"


class UnknownSelectionModeError(SelectionError):
    """Selection mode is not one of byHead, range, specific."""

    code: str = "UNKNOWN_SELECTION_MODE"

    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(
            f"Unknown selection mode: {mode!r} (expected byHead, range or specific)"
        )
