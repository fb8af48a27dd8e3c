"""Domain-specific calculation helpers."""

from .money import (
    MAX,
    MAX_POUNDS,
    CurrencyArithmeticError,
    CurrencyOverflowError,
    CurrencyUnderflowError,
    Gbp,
    GbpParseError,
    InvalidDecimal,
    InvalidNumber,
)
from .schedule import Band, BandTax, Schedule, TaxBreakdown, Threshold, TopRate, total_tax
from .utils import band_widths, format_percentage, format_tax_year, round_rate

__all__ = [
    "Band",
    "BandTax",
    "CurrencyArithmeticError",
    "CurrencyOverflowError",
    "CurrencyUnderflowError",
    "Gbp",
    "GbpParseError",
    "InvalidDecimal",
    "InvalidNumber",
    "MAX",
    "MAX_POUNDS",
    "Schedule",
    "TaxBreakdown",
    "Threshold",
    "TopRate",
    "band_widths",
    "format_percentage",
    "format_tax_year",
    "round_rate",
    "total_tax",
]
