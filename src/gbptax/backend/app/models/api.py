"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gbptax.backend.services.calculators import Gbp
from gbptax.backend.services.calculators.money import MAX_POUNDS

__all__ = [
    "BandEntry",
    "CalculationRequest",
    "CalculationResponse",
    "ResponseMeta",
    "Summary",
    "format_validation_error",
    "parse_gross_income",
]


def parse_gross_income(value: Any) -> Gbp:
    """Coerce JSON input into an exact amount.

    Strings use the ``£1,234.56`` grammar and integers are whole pounds. Floats
    are refused because they cannot carry an exact amount of pence.
    """

    if isinstance(value, Gbp):
        return value
    if isinstance(value, bool):
        raise ValueError("gross income must be a string or a whole number of pounds")
    if isinstance(value, int):
        if value < 0:
            raise ValueError("value cannot be negative")
        if value > MAX_POUNDS:
            raise ValueError(f"gross income cannot exceed {MAX_POUNDS:,} pounds")
        return Gbp.from_pounds(value)
    if isinstance(value, str):
        return Gbp.parse(value)
    raise ValueError("gross income must be a string or a whole number of pounds")


class CalculationRequest(BaseModel):
    """Complete payload accepted by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    year: int = Field(..., ge=0)
    gross_income: Gbp

    @field_validator("gross_income", mode="before")
    @classmethod
    def _parse_gross_income(cls, value: Any) -> Gbp:
        return parse_gross_income(value)


class BandEntry(BaseModel):
    """Income and tax attributed to a single band."""

    model_config = ConfigDict(extra="forbid")

    name: str
    rate: float
    rate_label: str
    affected_income: str
    affected_income_pence: int = Field(ge=0)
    tax: str
    tax_pence: int = Field(ge=0)


class Summary(BaseModel):
    """Aggregated calculation results."""

    model_config = ConfigDict(extra="forbid")

    gross_income: str
    tax_free_allowance: str
    taxable_income: str
    total_tax: str
    net_income: str
    total_tax_pence: int = Field(ge=0)
    effective_tax_rate: float


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    tax_year: str
    region: str | None = None


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    bands: list[BandEntry]
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
