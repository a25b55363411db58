"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads the engine's YAML configuration file and parses it into the typed
``ledger_config.schema`` dataclasses.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys or invalid values  -> ``ConfigurationError``.
* Unknown or invalid ``reporting`` keys  -> ``ConfigurationError``.

Example file::

    service:
      base_url: https://erp.example.com/api
      timeout_seconds: 20
      voucher_page_size: 100
      category_endpoints:
        assets: AblAssests
    reporting:
      entity_name: AL-NASAR BASHEER LOGISTICS
      default_branch: Head Office Karachi
    field_aliases:
      voucher.voucher_no: [voucherNo, VoucherNumber]
"""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import (
    DEFAULT_CATEGORY_ENDPOINTS,
    DEFAULT_VOUCHER_ENDPOINT,
    EngineConfig,
    ServiceConfig,
)
from ledger_kernel.domain.accounts import AccountCategory
from ledger_kernel.exceptions import ConfigurationError
from ledger_kernel.logging_config import get_logger

logger = get_logger("config.loader")

TOKEN_ENV_VAR = "LEDGER_API_TOKEN"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top-level YAML document must be a mapping")
    return data


def parse_service(data: dict[str, Any]) -> ServiceConfig:
    """Parse a ``ServiceConfig`` from the ``service`` section."""
    if "base_url" not in data:
        raise ConfigurationError("service.base_url", "required")

    endpoints = dict(DEFAULT_CATEGORY_ENDPOINTS)
    for key, endpoint in (data.get("category_endpoints") or {}).items():
        try:
            endpoints[AccountCategory(str(key).lower())] = str(endpoint)
        except ValueError:
            raise ConfigurationError(
                "service.category_endpoints", f"unknown category {key!r}",
            ) from None

    try:
        return ServiceConfig(
            base_url=str(data["base_url"]),
            token=os.environ.get(TOKEN_ENV_VAR) or data.get("token"),
            timeout_seconds=float(data.get("timeout_seconds", 30.0)),
            category_page_size=int(data.get("category_page_size", 10000)),
            voucher_page_size=int(data.get("voucher_page_size", 100)),
            category_endpoints=endpoints,
            voucher_endpoint=str(data.get("voucher_endpoint", DEFAULT_VOUCHER_ENDPOINT)),
            max_workers=int(data.get("max_workers", 5)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("service", str(exc)) from exc


def parse_field_aliases(data: dict[str, Any]) -> dict[str, tuple[str, ...]]:
    """Parse ``field_aliases``: canonical field -> list of source names."""
    aliases: dict[str, tuple[str, ...]] = {}
    for key, names in data.items():
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list) or not names:
            raise ConfigurationError(
                f"field_aliases.{key}", "must be a non-empty list of field names",
            )
        aliases[str(key)] = tuple(str(n) for n in names)
    return aliases


def parse_reporting(data: dict[str, Any]) -> dict[str, Any]:
    """Check the ``reporting`` section against ``ReportingConfig``."""
    from ledger_modules.reporting.config import ReportingConfig

    known = {f.name for f in dataclasses.fields(ReportingConfig)}
    for key in data:
        if key not in known:
            raise ConfigurationError(f"reporting.{key}", "unknown key")
    try:
        ReportingConfig.from_dict(dict(data))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("reporting", str(exc)) from exc
    return dict(data)


def load_engine_config(path: Path | str) -> EngineConfig:
    """Load and parse a complete engine configuration file."""
    path = Path(path)
    data = load_yaml_file(path)
    if "service" not in data or not isinstance(data["service"], dict):
        raise ConfigurationError("service", "section is required")

    reporting = data.get("reporting") or {}
    if not isinstance(reporting, dict):
        raise ConfigurationError("reporting", "must be a mapping")

    config = EngineConfig(
        service=parse_service(data["service"]),
        reporting=parse_reporting(reporting),
        field_aliases=parse_field_aliases(data.get("field_aliases") or {}),
    )
    logger.info(
        "engine_config_loaded",
        extra={
            "path": str(path),
            "base_url": config.service.base_url,
            "alias_overrides": sorted(config.field_aliases),
        },
    )
    return config
