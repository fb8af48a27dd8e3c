"""Typed request/response models shared across the calculation services."""

from __future__ import annotations

from .api import (
    BandEntry,
    CalculationRequest,
    CalculationResponse,
    ResponseMeta,
    Summary,
    format_validation_error,
    parse_gross_income,
)

__all__ = [
    "BandEntry",
    "CalculationRequest",
    "CalculationResponse",
    "ResponseMeta",
    "Summary",
    "format_validation_error",
    "parse_gross_income",
]
