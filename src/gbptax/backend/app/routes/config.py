"""Expose the configured tax years and their band schedules.

Bands are reported both as published (cumulative thresholds) and as the
widths the calculator actually applies, so clients can show either form.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from gbptax.backend.app.http import ProblemResponse, problem_response
from gbptax.backend.config.year_config import (
    ConfigurationError,
    YearConfiguration,
    available_years,
    load_manifest,
    load_schedule,
    load_year_configuration,
)
from gbptax.backend.services.calculators import MAX, Band, format_percentage
from gbptax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def _load_year(year: int) -> YearConfiguration | ProblemResponse:
    try:
        return load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc))
    except ConfigurationError as exc:  # pragma: no cover - covered by validator tests
        return problem_response("configuration_error", status=500, message=str(exc))


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_band(band: Band, threshold: int | None) -> dict[str, Any]:
    open_ended = band.affected_income == MAX
    return {
        "name": band.name,
        "rate": band.rate,
        "rate_label": format_percentage(band.rate),
        "threshold": threshold,
        "width": None if open_ended else str(band.affected_income),
        "width_pence": None if open_ended else band.affected_income.total_pence,
    }


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return the tax years that can be calculated."""

    metadata = get_configuration_metadata()
    payload = {
        "years": metadata["supported_years"],
        "default_year": metadata["default_year"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>")
def get_year_configuration(year: int) -> tuple[Any, int]:
    """Describe the allowance and bands configured for ``year``."""

    configuration = _load_year(year)
    if isinstance(configuration, ProblemResponse):
        return configuration.to_response()

    schedule = load_schedule(year)
    thresholds: list[int | None] = [band.threshold for band in configuration.bands]
    thresholds.append(None)

    payload = {
        "year": configuration.year,
        "tax_year": configuration.label,
        "notes_url": load_manifest().get_entry(year).notes_url,
        "tax_free_allowance": str(schedule.tax_free_allowance),
        "bands": [
            _serialise_band(band, threshold)
            for band, threshold in zip(schedule.bands, thresholds)
        ],
        "supported_years": list(available_years()),
    }
    return jsonify(payload), 200
