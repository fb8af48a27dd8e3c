"""Orchestrate request validation, schedule lookup, and tax calculations.

The calculation service ties the request models to the year configuration so
that callers (the HTTP routes and the command line) share one
``calculate_tax`` entry point and one response shape.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from gbptax.backend.app.models import (
    CalculationRequest,
    CalculationResponse,
    format_validation_error,
)
from gbptax.backend.config.year_config import (
    YearConfiguration,
    load_schedule,
    load_year_configuration,
)

from .calculators import BandTax, TaxBreakdown, format_percentage, round_rate

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("GBPTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _validate_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    if "year" not in payload:
        raise ValueError("Payload must include a tax year")
    if "gross_income" not in payload:
        raise ValueError("Payload must include a gross income")
    try:
        return CalculationRequest.model_validate(dict(payload))
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _resolve_year(year: int) -> YearConfiguration:
    try:
        return load_year_configuration(year)
    except FileNotFoundError as exc:
        raise ValueError(f"No tax bands defined for year: {year}") from exc


def _band_entry(result: BandTax) -> dict[str, Any]:
    band = result.band
    return {
        "name": band.name,
        "rate": band.rate,
        "rate_label": format_percentage(band.rate),
        "affected_income": str(result.affected_income),
        "affected_income_pence": result.affected_income.total_pence,
        "tax": str(result.tax),
        "tax_pence": result.tax.total_pence,
    }


def build_calculation_payload(
    breakdown: TaxBreakdown, config: YearConfiguration
) -> dict[str, Any]:
    """Serialise ``breakdown`` into the JSON-ready response structure."""

    gross_pence = breakdown.gross_income.total_pence
    effective_rate = breakdown.total_tax.total_pence / gross_pence if gross_pence else 0.0

    region = config.meta.get("region") if config.meta else None
    response_model = CalculationResponse.model_validate(
        {
            "summary": {
                "gross_income": str(breakdown.gross_income),
                "tax_free_allowance": str(breakdown.tax_free_allowance),
                "taxable_income": str(breakdown.taxable_income),
                "total_tax": str(breakdown.total_tax),
                "net_income": str(breakdown.net_income),
                "total_tax_pence": breakdown.total_tax.total_pence,
                "effective_tax_rate": round_rate(effective_rate),
            },
            "bands": [_band_entry(result) for result in breakdown.bands],
            "meta": {
                "year": config.year,
                "tax_year": config.label,
                "region": str(region) if region else None,
            },
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_tax(payload: Mapping[str, Any] | CalculationRequest) -> dict[str, Any]:
    """Compute the per-band tax breakdown for the provided payload."""

    request_model = _validate_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("schedule", timings):
        config = _resolve_year(request_model.year)
        schedule = load_schedule(request_model.year)

    with _profile_section("apply", timings):
        breakdown = schedule.calculate(request_model.gross_income)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    _LOGGER.info(
        "Calculated %s tax on %s for %s",
        breakdown.total_tax,
        breakdown.gross_income,
        config.label,
    )
    return build_calculation_payload(breakdown, config)


__all__ = ["build_calculation_payload", "calculate_tax"]
