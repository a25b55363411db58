"""
ledger_config -- YAML configuration for the report engine.

Responsibility:
    Loads the service endpoints, paging sizes, reporting defaults and
    field-alias overrides from one YAML file into frozen dataclasses.

Architecture position:
    Configuration -- sits beside ``ledger_kernel`` and below
    ``ledger_ingestion`` / ``ledger_modules``.  The kernel never imports
    from ``ledger_config``.
"""

from ledger_config.loader import load_engine_config
from ledger_config.schema import EngineConfig, ServiceConfig

__all__ = [
    "EngineConfig",
    "ServiceConfig",
    "load_engine_config",
]
