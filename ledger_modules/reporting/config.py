"""
Reporting Configuration Schema.

Defines the entity and branch shown on reports, the display precision, the
trial-balance zero tolerance and the label of the synthetic opening row.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Self

from ledger_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")

DEFAULT_ENTITY_NAME = "AL-NASAR BASHEER LOGISTICS"
DEFAULT_BRANCH = "Head Office Karachi"
DEFAULT_OPENING_LABEL = "Opening Balance (previous period)"


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls report headings, formatting and trial-balance classification.
    """

    # Entity name shown on reports
    entity_name: str = DEFAULT_ENTITY_NAME

    # Branch label used when a run does not name one
    default_branch: str = DEFAULT_BRANCH

    # Rounding precision for display
    display_precision: int = 2

    # Trial-balance accounts within this distance of zero are excluded
    zero_tolerance: Decimal = Decimal("0.000001")

    # Narration of the synthetic first row of every ledger group
    opening_balance_label: str = DEFAULT_OPENING_LABEL

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if not isinstance(self.zero_tolerance, Decimal):
            try:
                self.zero_tolerance = Decimal(str(self.zero_tolerance))
            except InvalidOperation:
                raise ValueError(
                    f"zero_tolerance is not a number: {self.zero_tolerance!r}"
                ) from None
        if self.zero_tolerance < 0:
            raise ValueError("zero_tolerance cannot be negative")
        if not self.opening_balance_label.strip():
            raise ValueError("opening_balance_label cannot be blank")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary."""
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
