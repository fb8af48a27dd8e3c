"""Progressive tax bands and the schedule that applies them.

A :class:`Schedule` stores each band as the *width* of income it covers rather
than as a cumulative threshold. Applying a schedule is then a single pass over
the bands: each band takes as much of the remaining taxable income as it can
hold, taxes it at its own rate, and passes the rest on. The final band is as
wide as the largest representable amount, so nothing is left over.

This ignores the gradual withdrawal of the personal allowance for large
incomes; only a flat tax-free allowance is modelled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence

from .money import MAX, Gbp
from .utils import band_widths

_LOGGER = logging.getLogger(__name__)


class TopRate(NamedTuple):
    """Name and rate of the open-ended band above every threshold."""

    name: str
    rate: float


class Threshold(NamedTuple):
    """A named band ending at a cumulative ``threshold`` in whole pounds."""

    name: str
    threshold: int
    rate: float


def _validate_rate(rate: float) -> float:
    rate = float(rate)
    if not 0 <= rate <= 1:
        raise ValueError(f"Tax rates must be between 0 and 1, got {rate}")
    return rate


@dataclass(frozen=True)
class Band:
    """A slice of taxable income taxed at a single rate."""

    name: str
    affected_income: Gbp
    rate: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate", _validate_rate(self.rate))

    def apply(self, amount: Gbp) -> tuple[Gbp, Gbp]:
        """Return the part of ``amount`` this band covers and the tax due on it."""

        affected = min(self.affected_income, amount)
        return affected, affected * self.rate


class BandTax(NamedTuple):
    """Result of applying one band: the income it covered and the tax due."""

    band: Band
    affected_income: Gbp
    tax: Gbp


def total_tax(results: Iterable[BandTax]) -> Gbp:
    """Sum the tax due across ``results``."""

    return Gbp.sum(result.tax for result in results)


@dataclass(frozen=True)
class TaxBreakdown:
    """Full outcome of applying a schedule to one gross income."""

    gross_income: Gbp
    tax_free_allowance: Gbp
    taxable_income: Gbp
    bands: tuple[BandTax, ...]
    total_tax: Gbp

    @property
    def net_income(self) -> Gbp:
        return self.gross_income - self.total_tax


class Schedule:
    """A year's tax-free allowance and ordered tax bands.

    Schedules are read-only after construction and may be shared freely.
    """

    __slots__ = ("_tax_free_allowance", "_bands")

    def __init__(self, tax_free_allowance: Gbp, bands: Iterable[Band]) -> None:
        self._tax_free_allowance = tax_free_allowance
        self._bands = tuple(bands)
        if not self._bands:
            raise ValueError("A schedule needs at least one band")

    @classmethod
    def from_thresholds(
        cls,
        tax_free_allowance: int,
        top_rate: tuple[str, float],
        thresholds: Sequence[tuple[str, int, float]],
    ) -> Schedule:
        """Build a schedule from the way bands are usually published.

        ``thresholds`` lists ``(name, threshold, rate)`` with cumulative
        thresholds in whole pounds above the allowance. ``top_rate`` names the
        rate applied to everything beyond the last threshold.
        """

        entries = [Threshold(*entry) for entry in thresholds]
        top = TopRate(*top_rate)

        previous = 0
        for entry in entries:
            if entry.threshold <= previous:
                raise ValueError(
                    f"Band thresholds must be strictly increasing: {entry.name} at "
                    f"{entry.threshold} follows {previous}"
                )
            previous = entry.threshold

        widths = band_widths([entry.threshold for entry in entries])
        bands = [
            Band(entry.name, Gbp.from_pounds(width), entry.rate)
            for entry, width in zip(entries, widths)
        ]
        bands.append(Band(top.name, MAX, top.rate))

        return cls(Gbp.from_pounds(tax_free_allowance), bands)

    @property
    def tax_free_allowance(self) -> Gbp:
        return self._tax_free_allowance

    @property
    def bands(self) -> tuple[Band, ...]:
        return self._bands

    def taxable_income(self, gross_income: Gbp) -> Gbp:
        """Return ``gross_income`` less the allowance, never below zero."""

        if gross_income <= self._tax_free_allowance:
            return Gbp.zero()
        return gross_income - self._tax_free_allowance

    def apply(self, gross_income: Gbp) -> list[BandTax]:
        """Apply each band in turn and report the income and tax per band.

        The remaining taxable income shrinks by each band's affected income;
        after the final band it is always zero.
        """

        remaining = self.taxable_income(gross_income)
        results: list[BandTax] = []

        for band in self._bands:
            affected, tax = band.apply(remaining)
            remaining -= affected
            results.append(BandTax(band, affected, tax))

        _LOGGER.debug(
            "Applied %d bands to %s with %s left untaxed",
            len(results),
            gross_income,
            remaining,
        )
        return results

    def calculate(self, gross_income: Gbp) -> TaxBreakdown:
        """Return the complete breakdown for ``gross_income``."""

        results = self.apply(gross_income)
        return TaxBreakdown(
            gross_income=gross_income,
            tax_free_allowance=self._tax_free_allowance,
            taxable_income=self.taxable_income(gross_income),
            bands=tuple(results),
            total_tax=total_tax(results),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return (self._tax_free_allowance, self._bands) == (
            other._tax_free_allowance,
            other._bands,
        )

    def __hash__(self) -> int:
        return hash((self._tax_free_allowance, self._bands))

    def __repr__(self) -> str:
        names = ", ".join(band.name for band in self._bands)
        return f"Schedule(tax_free_allowance={self._tax_free_allowance}, bands=[{names}])"


__all__ = [
    "Band",
    "BandTax",
    "Schedule",
    "TaxBreakdown",
    "Threshold",
    "TopRate",
    "total_tax",
]
