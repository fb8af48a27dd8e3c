"""Configuration loader mapping tax years to calculation schedules.

Year files live next to this module under ``data/`` and are declared in
``data/manifest.yaml``. Everything is loaded lazily on first use and cached for
the life of the process; the cached objects are immutable, so they can be
shared between threads and requests without locking.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from gbptax.backend.services.calculators import Schedule

from .schema import (
    BandThreshold,
    ConfigurationError,
    TaxYearManifest,
    TaxYearManifestEntry,
    TopRateConfig,
    YearConfiguration,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY_ENV = "GBPTAX_CONFIG_DIR"
CONFIG_DIRECTORY = Path(
    os.getenv(CONFIG_DIRECTORY_ENV) or Path(__file__).resolve().parent / "data"
)
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


@lru_cache(maxsize=16)
def load_year_configuration(year: int) -> YearConfiguration:
    """Load configuration for the specified tax year from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"No tax bands defined for year: {year}") from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for year {year} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("year", year)

    try:
        configuration = YearConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed for {year}: {error}") from error

    if configuration.year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {configuration.year}"
        )

    _LOGGER.debug("Loaded tax year %s from %s", year, config_file)
    return configuration


@lru_cache(maxsize=16)
def load_schedule(year: int) -> Schedule:
    """Return the calculation schedule for ``year``."""

    return load_year_configuration(year).to_schedule()


def available_years() -> Sequence[int]:
    """Return the tax years declared in the manifest."""

    return load_manifest().supported_years


def clear_caches() -> None:
    """Forget every cached manifest, configuration and schedule."""

    load_schedule.cache_clear()
    load_year_configuration.cache_clear()
    load_manifest.cache_clear()


__all__ = [
    "BandThreshold",
    "CONFIG_DIRECTORY",
    "CONFIG_DIRECTORY_ENV",
    "ConfigurationError",
    "MANIFEST_FILE",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "TopRateConfig",
    "YearConfiguration",
    "available_years",
    "clear_caches",
    "load_manifest",
    "load_schedule",
    "load_year_configuration",
]
