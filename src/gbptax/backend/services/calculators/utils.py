"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Sequence


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def format_tax_year(year: int) -> str:
    """Return the ``2018-2019`` style label for the tax year starting in ``year``."""

    return f"{year}-{year + 1}"


def band_widths(thresholds: Sequence[int]) -> list[int]:
    """Convert cumulative thresholds (whole pounds) into per-band widths.

    Every band after the first is one pound narrower than the gap between its
    threshold and the previous one, so the lower bound of each later band is
    exclusive.
    """

    widths: list[int] = []
    previous = 0
    for threshold in thresholds:
        modifier = 1 if previous > 0 else 0
        widths.append(threshold - previous - modifier)
        previous = threshold
    return widths


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
