"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from gbptax.backend.services.calculators import MAX_POUNDS, Schedule, format_tax_year


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _check_rate(value: float) -> float:
    if value < 0 or value > 1:
        raise ConfigurationError("Tax rates must be between 0 and 1")
    return value


class BandThreshold(ImmutableModel):
    """A named band ending at a cumulative threshold in whole pounds."""

    name: str = Field(min_length=1)
    threshold: int = Field(le=MAX_POUNDS)
    rate: float

    @field_validator("rate")
    @classmethod
    def _validate_rate(cls, value: float) -> float:
        return _check_rate(value)

    @field_validator("threshold")
    @classmethod
    def _validate_threshold(cls, value: int) -> int:
        if value <= 0:
            raise ConfigurationError("Band thresholds must be positive values")
        return value


class TopRateConfig(ImmutableModel):
    """The open-ended band applied above the final threshold."""

    name: str = Field(min_length=1)
    rate: float

    @field_validator("rate")
    @classmethod
    def _validate_rate(cls, value: float) -> float:
        return _check_rate(value)


class YearConfiguration(ImmutableModel):
    """Tax-free allowance and bands for a single tax year."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    tax_free_allowance: int = Field(ge=0, le=MAX_POUNDS)
    top_rate: TopRateConfig
    bands: Sequence[BandThreshold] = ()

    @model_validator(mode="after")
    def _validate_thresholds(self) -> YearConfiguration:
        previous = 0
        for band in self.bands:
            if band.threshold <= previous:
                raise ConfigurationError(
                    f"Band '{band.name}' threshold {band.threshold} must exceed {previous}"
                )
            previous = band.threshold
        return self

    @computed_field
    @property
    def label(self) -> str:
        label = self.meta.get("label") if self.meta else None
        return str(label) if label else format_tax_year(self.year)

    def to_schedule(self) -> Schedule:
        """Build the calculation schedule described by this configuration."""

        return Schedule.from_thresholds(
            self.tax_free_allowance,
            (self.top_rate.name, self.top_rate.rate),
            [(band.name, band.threshold, band.rate) for band in self.bands],
        )


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BandThreshold",
    "ConfigurationError",
    "ImmutableModel",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "TopRateConfig",
    "ValidationError",
    "YearConfiguration",
]
